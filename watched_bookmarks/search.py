"""Search engine module for watched bookmarks."""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence
from urllib.parse import urlsplit

from watched_bookmarks.fuzzy import FuzzyMatcher
from watched_bookmarks.grouping import BookmarkEntry, DateGroup


MAX_RESULTS = 8

TITLE_WEIGHT = 1.2
URL_WEIGHT = 0.8
PATH_WEIGHT = 0.6

PATH_SEPARATOR = " / "


def get_hostname(url: str) -> str:
    """Hostname of a URL, or an empty string if it has none."""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def get_path_label(entry: BookmarkEntry) -> str:
    return PATH_SEPARATOR.join(entry.path)


@dataclass(frozen=True)
class SearchResult:
    """A bookmark with its search score."""
    entry: BookmarkEntry
    score: float
    hostname: str
    path_label: str

    @property
    def title(self) -> str:
        return self.entry.title

    def to_dict(self) -> Dict[str, Any]:
        result = self.entry.to_dict()
        result.update({
            "score": self.score,
            "hostname": self.hostname,
            "pathLabel": self.path_label,
        })
        return result


class SearchEngine(Protocol):
    """Protocol for search engines to allow extensibility."""

    def search(self, query: str, bookmarks: Sequence[BookmarkEntry], limit: int = MAX_RESULTS) -> List[SearchResult]:
        """Search bookmarks based on query.

        Args:
            query: Search query string
            bookmarks: Bookmarks to search
            limit: Maximum number of results to return

        Returns:
            List of matching bookmarks, sorted by relevance
        """
        ...


class FuzzySearchEngine:
    """Fuzzy subsequence search over title, URL and folder path."""

    def __init__(self, matcher: Optional[FuzzyMatcher] = None):
        self.matcher = matcher or FuzzyMatcher()

    def _score_bookmark(self, query: str, bookmark: BookmarkEntry, path_label: str) -> Optional[float]:
        """Best weighted field score, or None if no field matches.

        Args:
            query: Stripped query text
            bookmark: Bookmark to score
            path_label: Precomputed folder path label

        Returns:
            Highest weighted score across fields
        """
        fields = (
            (bookmark.title, TITLE_WEIGHT),
            (bookmark.url, URL_WEIGHT),
            (path_label, PATH_WEIGHT),
        )
        best = None
        for value, weight in fields:
            if not value:
                continue
            score = self.matcher.score(value, query)
            if score is None:
                continue
            weighted = score * weight
            if best is None or weighted > best:
                best = weighted
        return best

    def search(self, query: str, bookmarks: Sequence[BookmarkEntry], limit: int = MAX_RESULTS) -> List[SearchResult]:
        """Search bookmarks using fuzzy matching.

        Args:
            query: Search query string
            bookmarks: Bookmarks to search
            limit: Maximum number of results to return

        Returns:
            Matching bookmarks by descending score, then title
        """
        query = (query or "").strip()
        if not query or not bookmarks:
            return []

        scored = []
        for bookmark in bookmarks:
            path_label = get_path_label(bookmark)
            score = self._score_bookmark(query, bookmark, path_label)
            if score is None:
                continue
            scored.append(SearchResult(
                entry=bookmark,
                score=score,
                hostname=get_hostname(bookmark.url),
                path_label=path_label,
            ))

        scored.sort(key=lambda r: (-r.score, r.title))

        return scored[:limit]


class SearchIndex:
    """Search corpus built from the groups of one response.

    Every query is ranked from scratch against the flattened entries.
    """

    def __init__(self, groups: Iterable[DateGroup], engine: Optional[SearchEngine] = None):
        self.entries: List[BookmarkEntry] = [item for group in groups for item in group.items]
        self.engine = engine or FuzzySearchEngine()

    def __len__(self) -> int:
        return len(self.entries)

    def search(self, query: str, limit: int = MAX_RESULTS) -> List[SearchResult]:
        return self.engine.search(query, self.entries, limit=limit)
