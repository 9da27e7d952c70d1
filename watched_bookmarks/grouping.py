"""Group watched-folder bookmarks by the day they were added."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from watched_bookmarks.bookmarks_reader import (
    chrome_timestamp_to_datetime,
    collect_url_entries,
    find_folder_by_name,
    load_bookmarks_file,
)
from watched_bookmarks.config import Config


UNKNOWN_DATE = "unknown"

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_instant(value: Optional[datetime]) -> Optional[str]:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if value is None:
        return None
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    """Parse an instant produced by :func:`format_instant`."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _epoch_millis(value: datetime) -> int:
    return (value - UNIX_EPOCH) // timedelta(milliseconds=1)


@dataclass(frozen=True)
class BookmarkEntry:
    """A URL bookmark found under the watched folder."""
    id: Optional[str]
    title: str
    url: str
    path: Tuple[str, ...] = ()
    date_added: Optional[datetime] = None
    date_last_used: Optional[datetime] = None
    raw_date_added: Optional[str] = None
    raw_date_last_used: Optional[str] = None
    guid: Optional[str] = None

    @classmethod
    def from_node(cls, node: Dict[str, Any], parents: Tuple[str, ...]) -> "BookmarkEntry":
        """Build an entry from a Chrome ``url`` node and its breadcrumb."""
        url = node.get("url", "")
        return cls(
            id=node.get("id"),
            title=node.get("name") or url,
            url=url,
            path=tuple(parents),
            date_added=chrome_timestamp_to_datetime(node.get("date_added")),
            date_last_used=chrome_timestamp_to_datetime(node.get("date_last_used")),
            raw_date_added=node.get("date_added"),
            raw_date_last_used=node.get("date_last_used"),
            guid=node.get("guid"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookmarkEntry":
        """Rebuild an entry from its JSON representation."""
        url = data.get("url") or ""
        return cls(
            id=data.get("id"),
            title=data.get("title") or url,
            url=url,
            path=tuple(data.get("path") or ()),
            date_added=parse_instant(data.get("dateAdded")),
            date_last_used=parse_instant(data.get("dateLastUsed")),
            raw_date_added=data.get("rawDateAdded"),
            raw_date_last_used=data.get("rawDateLastUsed"),
            guid=data.get("guid"),
        )

    @property
    def date_key(self) -> str:
        """``YYYY-MM-DD`` of the UTC added date, or ``"unknown"``."""
        if self.date_added is None:
            return UNKNOWN_DATE
        return format_instant(self.date_added)[:10]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "path": list(self.path),
            "dateAdded": format_instant(self.date_added),
            "dateLastUsed": format_instant(self.date_last_used),
            "rawDateAdded": self.raw_date_added,
            "rawDateLastUsed": self.raw_date_last_used,
            "guid": self.guid,
        }


@dataclass
class DateGroup:
    """Bookmarks sharing one added date, newest first."""
    date: str
    items: List[BookmarkEntry] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def sort_timestamp(self) -> int:
        """Milliseconds since 1970 of the newest member; 0 when undated."""
        if self.items and self.items[0].date_added is not None:
            return _epoch_millis(self.items[0].date_added)
        return 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "items": [item.to_dict() for item in self.items],
            "count": self.count,
        }


@dataclass
class WatchedResponse:
    """Payload served by the query API."""
    folder_name: str
    source_path: str
    found: bool
    updated_at: datetime
    groups: List[DateGroup] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return sum(group.count for group in self.groups)

    def entries(self) -> List[BookmarkEntry]:
        """All entries, flattened in served order."""
        return [item for group in self.groups for item in group.items]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "folderName": self.folder_name,
            "sourcePath": self.source_path,
            "found": self.found,
            "updatedAt": format_instant(self.updated_at),
            "groups": [group.to_dict() for group in self.groups],
            "totalCount": self.total_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WatchedResponse":
        """Rebuild a response from the JSON payload of the query API."""
        groups = [
            DateGroup(
                date=group.get("date") or UNKNOWN_DATE,
                items=[BookmarkEntry.from_dict(item) for item in group.get("items") or []],
            )
            for group in data.get("groups") or []
        ]
        return cls(
            folder_name=data.get("folderName", ""),
            source_path=data.get("sourcePath", ""),
            found=bool(data.get("found")),
            updated_at=parse_instant(data.get("updatedAt")) or datetime.now(timezone.utc),
            groups=groups,
        )


def sort_entries(entries: List[BookmarkEntry]) -> List[BookmarkEntry]:
    """Sort newest first; undated entries go last in encounter order."""
    return sorted(
        entries,
        key=lambda e: (0, -_epoch_millis(e.date_added)) if e.date_added is not None else (1, 0),
    )


def group_entries(entries: List[BookmarkEntry]) -> List[DateGroup]:
    """Partition entries by added date and order groups newest first.

    The ``unknown`` group sorts as if its newest entry were at the Unix
    epoch, so groups dated before 1970 land after it.
    """
    grouped: Dict[str, DateGroup] = {}
    for entry in sort_entries(entries):
        key = entry.date_key
        if key not in grouped:
            grouped[key] = DateGroup(date=key)
        grouped[key].items.append(entry)

    return sorted(grouped.values(), key=lambda g: g.sort_timestamp, reverse=True)


def build_watched_response(
    data: Any,
    folder_name: str,
    source_path: str,
) -> WatchedResponse:
    """Extract and group the watched folder of an already parsed document."""
    response = WatchedResponse(
        folder_name=folder_name,
        source_path=source_path,
        found=False,
        updated_at=datetime.now(timezone.utc),
    )

    watched_folder = find_folder_by_name(data, folder_name)
    if watched_folder is None:
        return response

    response.found = True
    entries = [
        BookmarkEntry.from_node(node, parents)
        for node, parents in collect_url_entries(watched_folder.get("children"))
    ]
    response.groups = group_entries(entries)
    return response


def load_watched_bookmarks(
    bookmarks_path: Optional[Path] = None,
    folder_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> WatchedResponse:
    """Read the bookmarks file and group the watched folder.

    The file is read on every call.

    Args:
        bookmarks_path: Bookmarks file; defaults to the configured path
        folder_name: Watched folder; defaults to the configured name
        config: Configuration; defaults to the environment

    Returns:
        WatchedResponse; ``found`` is False when the folder is absent

    Raises:
        FileNotFoundError: If bookmarks file doesn't exist
        json.JSONDecodeError: If bookmarks file is malformed
    """
    if config is None:
        config = Config.from_env()
    if bookmarks_path is None:
        bookmarks_path = config.resolve_bookmarks_path()
    if folder_name is None:
        folder_name = config.watched_folder

    data = load_bookmarks_file(bookmarks_path)
    return build_watched_response(data, folder_name, str(bookmarks_path))
