"""Chrome bookmarks reader module.

Locates the watched folder inside a Chrome ``Bookmarks`` document and
flattens the URL entries beneath it. Chrome stores timestamps as decimal
strings counting microseconds since 1601-01-01 UTC.
"""
import json
import math
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


CHROME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)

# Nodes nested deeper than this are skipped
MAX_TREE_DEPTH = 256


def get_chrome_bookmarks_path(profile: str = "Default") -> Path:
    """Get the path to Chrome bookmarks file.

    Args:
        profile: Chrome profile name (default: "Default")

    Returns:
        Path to the Bookmarks file
    """
    home = Path.home()
    if os.name == "nt":  # Windows
        chrome_path = home / "AppData" / "Local" / "Google" / "Chrome" / "User Data" / profile / "Bookmarks"
    elif sys.platform == "darwin":  # macOS
        chrome_path = home / "Library" / "Application Support" / "Google" / "Chrome" / profile / "Bookmarks"
    elif os.name == "posix":  # Linux
        chrome_path = home / ".config" / "google-chrome" / profile / "Bookmarks"
        # Also check for chromium
        if not chrome_path.exists():
            chrome_path = home / ".config" / "chromium" / profile / "Bookmarks"
    else:
        raise OSError(f"Unsupported operating system: {os.name}")

    return chrome_path


def load_bookmarks_file(bookmarks_path: Path) -> Any:
    """Load a Chrome bookmarks JSON file.

    Args:
        bookmarks_path: Path to the bookmarks file

    Returns:
        Parsed JSON bookmarks data

    Raises:
        FileNotFoundError: If bookmarks file doesn't exist
        json.JSONDecodeError: If bookmarks file is malformed
    """
    if not bookmarks_path.exists():
        raise FileNotFoundError(f"Bookmarks file not found at {bookmarks_path}")

    with open(bookmarks_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _to_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def chrome_timestamp_to_datetime(value: Any) -> Optional[datetime]:
    """Convert a Chrome timestamp to an aware UTC datetime.

    Args:
        value: Microseconds since 1601-01-01, usually as a decimal string

    Returns:
        The instant truncated to milliseconds, or None for missing, zero,
        negative, non-numeric or out-of-range values
    """
    if value is None or value == "0" or isinstance(value, bool):
        return None

    as_number = _to_number(value)
    if as_number is None or as_number <= 0:
        return None
    if isinstance(as_number, float) and not math.isfinite(as_number):
        return None

    # Integer division keeps 17-digit timestamps exact
    milliseconds = as_number // 1000 if isinstance(as_number, int) else math.floor(as_number / 1000)
    try:
        return CHROME_EPOCH + timedelta(milliseconds=milliseconds)
    except OverflowError:
        return None


def find_folder_by_name(node: Any, target_name: str, depth: int = 0) -> Optional[Dict[str, Any]]:
    """Depth-first search for the first folder called ``target_name``.

    Containers are a list of nodes, a node's ``children`` and the
    ``roots`` mapping of a Chrome document (any key, so non-standard roots
    are searched too). Anything else is skipped.

    Args:
        node: Document, node or list of nodes to search
        target_name: Exact folder name
        depth: Current nesting level

    Returns:
        The folder node, or None if absent
    """
    if depth > MAX_TREE_DEPTH:
        return None

    if isinstance(node, list):
        for child in node:
            found = find_folder_by_name(child, target_name, depth)
            if found is not None:
                return found
        return None

    if not isinstance(node, dict):
        return None

    if node.get("type") == "folder" and node.get("name") == target_name:
        return node

    if node.get("children"):
        return find_folder_by_name(node["children"], target_name, depth + 1)

    roots = node.get("roots")
    if isinstance(roots, dict):
        return find_folder_by_name(list(roots.values()), target_name, depth + 1)

    return None


def collect_url_entries(
    nodes: Any,
    parents: Tuple[str, ...] = (),
    bucket: Optional[List[Tuple[Dict[str, Any], Tuple[str, ...]]]] = None,
    depth: int = 0,
) -> List[Tuple[Dict[str, Any], Tuple[str, ...]]]:
    """Recursively collect URL leaves with their folder breadcrumbs.

    Args:
        nodes: Children of the watched folder (a list, or a single node)
        parents: Folder names between the watched folder and ``nodes``
        bucket: List to accumulate (node, parents) pairs
        depth: Current nesting level

    Returns:
        The bucket, in document order
    """
    if bucket is None:
        bucket = []

    if not nodes or depth > MAX_TREE_DEPTH:
        return bucket

    if not isinstance(nodes, list):
        nodes = [nodes]

    for entry in nodes:
        if not isinstance(entry, dict):
            continue

        if entry.get("type") == "url":
            if isinstance(entry.get("url"), str) and entry["url"]:
                bucket.append((entry, parents))
            continue

        if entry.get("type") == "folder" and isinstance(entry.get("children"), list):
            name = entry.get("name")
            next_parents = parents + (name,) if isinstance(name, str) and name else parents
            collect_url_entries(entry["children"], next_parents, bucket, depth + 1)

    return bucket
