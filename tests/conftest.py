"""Shared fixtures for tests."""
import copy
import json
import pytest
from datetime import datetime, timezone

from watched_bookmarks.config import Config
from watched_bookmarks.grouping import BookmarkEntry


CHROME_EPOCH_OFFSET_US = 11644473600 * 1_000_000  # 1601-01-01 to 1970-01-01


def chrome_ts(iso: str) -> str:
    """Chrome timestamp string for an ISO instant (UTC)."""
    dt = datetime.fromisoformat(iso).replace(tzinfo=timezone.utc)
    micros = int(dt.timestamp()) * 1_000_000 + dt.microsecond
    return str(micros + CHROME_EPOCH_OFFSET_US)


SAMPLE_BOOKMARKS = {
    "checksum": "test",
    "roots": {
        "bookmark_bar": {
            "children": [
                {
                    "id": "1",
                    "name": "Python Docs",
                    "type": "url",
                    "url": "https://docs.python.org",
                    "date_added": chrome_ts("2024-01-10T09:00:00"),
                },
                {
                    "id": "2",
                    "name": "看过",
                    "type": "folder",
                    "children": [
                        {
                            "id": "3",
                            "name": "Jira Board",
                            "type": "url",
                            "url": "https://jira.example.com/board",
                            "date_added": chrome_ts("2024-01-05T08:00:00"),
                            "date_last_used": "0",
                            "guid": "guid-3",
                        },
                        {
                            "id": "4",
                            "name": "Confluence",
                            "type": "url",
                            "url": "https://confluence.example.com",
                            "date_added": chrome_ts("2024-01-10T18:30:00"),
                            "date_last_used": chrome_ts("2024-02-01T12:00:00"),
                            "guid": "guid-4",
                        },
                        {
                            "id": "5",
                            "name": "Tutorials",
                            "type": "folder",
                            "children": [
                                {
                                    "id": "6",
                                    "name": "SQLite Guide",
                                    "type": "url",
                                    "url": "https://sqlite.org/guide",
                                    "date_added": chrome_ts("2024-01-10T07:15:00"),
                                },
                                {
                                    "id": "7",
                                    "name": "Deep",
                                    "type": "folder",
                                    "children": [
                                        {
                                            "id": "8",
                                            "name": "",
                                            "type": "url",
                                            "url": "https://example.org/untitled",
                                            "date_added": chrome_ts("2024-01-01T23:59:59"),
                                        }
                                    ],
                                },
                            ],
                        },
                        {
                            "id": "9",
                            "name": "Manual Entry",
                            "type": "url",
                            "url": "https://manual.example.com",
                            "date_added": "0",
                        },
                        None,
                        {"id": "10", "name": "Empty", "type": "folder"},
                    ],
                },
            ],
            "id": "0",
            "name": "Bookmarks Bar",
            "type": "folder",
        },
        "other": {
            "children": [
                {
                    "id": "11",
                    "name": "Stack Overflow",
                    "type": "url",
                    "url": "https://stackoverflow.com",
                }
            ],
            "id": "100",
            "name": "Other Bookmarks",
            "type": "folder",
        },
        "synced": {
            "children": [],
            "id": "200",
            "name": "Mobile Bookmarks",
            "type": "folder",
        },
    },
    "version": 1,
}


@pytest.fixture
def sample_bookmarks_path(tmp_path):
    """Create a temporary bookmarks file with sample data."""
    bookmarks_file = tmp_path / "Bookmarks"
    bookmarks_file.write_text(json.dumps(SAMPLE_BOOKMARKS, indent=3, ensure_ascii=False), encoding="utf-8")
    return bookmarks_file


@pytest.fixture
def sample_config(sample_bookmarks_path):
    """Config pointing at the sample bookmarks file."""
    return Config(bookmarks_path=sample_bookmarks_path)


def make_entry(title, url=None, date_added=None, path=(), entry_id=None):
    """Build a BookmarkEntry; ``date_added`` is an ISO string in UTC."""
    added = None
    if date_added is not None:
        added = datetime.fromisoformat(date_added).replace(tzinfo=timezone.utc)
    return BookmarkEntry(
        id=entry_id,
        title=title,
        url=url or f"https://example.com/{title.lower().replace(' ', '-')}",
        path=tuple(path),
        date_added=added,
    )


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def chrome_timestamp():
    return chrome_ts


@pytest.fixture
def sample_bookmarks():
    """A fresh copy of the sample Chrome bookmarks document."""
    return copy.deepcopy(SAMPLE_BOOKMARKS)
