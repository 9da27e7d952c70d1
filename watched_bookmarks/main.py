"""Main entry point for the watched bookmarks viewer."""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from watched_bookmarks.config import Config
from watched_bookmarks.date_calendar import parse_date
from watched_bookmarks.grouping import load_watched_bookmarks
from watched_bookmarks.server import DIRECTIONS, resolve_date
from watched_bookmarks.session import ViewerSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watched-bookmarks",
        description="Browse one Chrome bookmark folder by the day bookmarks were added.",
    )
    parser.add_argument("--bookmarks", type=Path, help="Bookmarks file (overrides BOOKMARKS_PATH)")
    parser.add_argument("--folder", help="Watched folder name (overrides BOOKMARKS_WATCHED_FOLDER)")

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Serve the HTTP query API (default)")
    serve.add_argument("--host", help="Bind address (overrides HOST)")
    serve.add_argument("--port", type=int, help="Port (overrides PORT)")

    sub.add_parser("mcp", help="Run the MCP server on stdio")

    search = sub.add_parser("search", help="Fuzzy search the watched folder")
    search.add_argument("query")

    jump = sub.add_parser("jump", help="Find the nearest bookmarked day")
    jump.add_argument("date", nargs="?", default="", help="YYYY-MM-DD")
    jump.add_argument("--direction", choices=DIRECTIONS, default="on_or_before")

    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    if args.bookmarks is not None:
        config.bookmarks_path = args.bookmarks
    if args.folder:
        config.watched_folder = args.folder
    if getattr(args, "host", None):
        config.host = args.host
    if getattr(args, "port", None):
        config.port = args.port
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = _config_from_args(args)

    if args.command in (None, "serve"):
        from watched_bookmarks.web import run
        run(config)
        return 0

    if args.command == "mcp":
        from watched_bookmarks.server import main as mcp_main
        asyncio.run(mcp_main(config))
        return 0

    try:
        session = ViewerSession(load_watched_bookmarks(config=config))
    except (OSError, ValueError) as e:
        print(f"Error loading bookmarks: {e}", file=sys.stderr)
        return 1

    if args.command == "search":
        results = session.search(args.query)
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
        return 0

    if args.direction != "today" and not args.date:
        print("Error: a date is required for this direction", file=sys.stderr)
        return 2
    if args.direction != "today" and parse_date(args.date) is None:
        print(f"Error: date must be YYYY-MM-DD, got {args.date!r}", file=sys.stderr)
        return 2
    target = resolve_date(session.calendar, args.date, args.direction)
    if target is None:
        print(f"No bookmarked date found {args.direction.replace('_', ' ')} {args.date}".rstrip(), file=sys.stderr)
        return 1
    group = session.jump_to_date(target)
    print(json.dumps(group.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
