"""MCP server exposing the watched bookmarks to agents."""
import json
import sys
from typing import Any, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from watched_bookmarks.config import Config
from watched_bookmarks.date_calendar import DateCalendar, parse_date
from watched_bookmarks.grouping import WatchedResponse, load_watched_bookmarks
from watched_bookmarks.search import SearchIndex


DIRECTIONS = (
    "on_or_before",
    "on_or_after",
    "prev_day",
    "next_day",
    "prev_week",
    "next_week",
    "today",
)

INVALID_DATE_MESSAGE = "Error: 'date' must be YYYY-MM-DD"


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def load_watched(config: Optional[Config] = None) -> Optional[WatchedResponse]:
    """Read the watched folder fresh from disk.

    Returns:
        The response, or None if the bookmarks file could not be loaded
    """
    try:
        return load_watched_bookmarks(config=config)
    except FileNotFoundError as e:
        print(f"[mcp] Could not find bookmarks file: {e}", file=sys.stderr)
    except Exception as e:
        print(f"[mcp] Error loading bookmarks: {e}", file=sys.stderr)
    return None


async def get_watched_bookmarks_tool(config: Optional[Config] = None) -> list[TextContent]:
    """Tool handler for get_watched_bookmarks."""
    response = load_watched(config)
    if response is None:
        return _text("Error: unable to load bookmarks. Check the bookmarks file path.")

    return _text(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))


async def search_watched_bookmarks_tool(query: str, config: Optional[Config] = None) -> list[TextContent]:
    """Tool handler for search_watched_bookmarks.

    Args:
        query: Fuzzy search text

    Returns:
        List of TextContent with the ranked results
    """
    response = load_watched(config)
    if response is None:
        return _text("Error: unable to load bookmarks. Check the bookmarks file path.")

    results = SearchIndex(response.groups).search(query)
    if not results:
        return _text(f"No bookmarks found matching query: {query}")

    return _text(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))


def resolve_date(calendar: DateCalendar, date: str, direction: str) -> Optional[str]:
    """Apply a navigation ``direction`` to ``date``."""
    if direction == "today":
        return calendar.today()
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction: {direction}")
    return getattr(calendar, direction)(date)


async def find_watched_date_tool(
    date: str,
    direction: str = "on_or_before",
    config: Optional[Config] = None,
) -> list[TextContent]:
    """Tool handler for find_watched_date.

    Args:
        date: Reference date, ``YYYY-MM-DD``
        direction: One of DIRECTIONS

    Returns:
        List of TextContent with the resolved date and its group
    """
    if direction != "today" and parse_date(date) is None:
        return _text(INVALID_DATE_MESSAGE)

    response = load_watched(config)
    if response is None:
        return _text("Error: unable to load bookmarks. Check the bookmarks file path.")

    groups = {group.date: group for group in response.groups}
    calendar = DateCalendar(groups)
    target = resolve_date(calendar, date, direction)
    if target is None:
        return _text(f"No bookmarked date found {direction.replace('_', ' ')} {date}".rstrip())

    return _text(json.dumps({
        "date": date,
        "direction": direction,
        "target": target,
        "group": groups[target].to_dict(),
    }, indent=2, ensure_ascii=False))


def create_server(config: Optional[Config] = None) -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured Server instance
    """
    server = Server("watched-bookmarks")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name="get_watched_bookmarks",
                description="Return the watched bookmark folder grouped by the day each bookmark was added, newest first.",
                inputSchema={"type": "object", "properties": {}},
            ),
            Tool(
                name="search_watched_bookmarks",
                description="Fuzzy search the watched folder by title, URL and folder path. Returns at most 8 bookmarks.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Characters to match in order, e.g. 'gh pr'",
                        }
                    },
                    "required": ["query"],
                },
            ),
            Tool(
                name="find_watched_date",
                description="Find the nearest day that has bookmarks relative to a date, and return that day's bookmarks.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "date": {
                            "type": "string",
                            "description": "Reference date as YYYY-MM-DD (ignored for 'today')",
                        },
                        "direction": {
                            "type": "string",
                            "enum": list(DIRECTIONS),
                            "description": "How to move from the reference date",
                        },
                    },
                    "required": ["direction"],
                },
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Any) -> list[TextContent]:
        """Handle tool calls."""
        arguments = arguments or {}
        if name == "get_watched_bookmarks":
            return await get_watched_bookmarks_tool(config)
        elif name == "search_watched_bookmarks":
            query = arguments.get("query", "")
            if not query.strip():
                return _text("Error: 'query' parameter is required")
            return await search_watched_bookmarks_tool(query, config)
        elif name == "find_watched_date":
            direction = arguments.get("direction", "on_or_before")
            date = arguments.get("date", "")
            if direction not in DIRECTIONS:
                return _text(f"Error: 'direction' must be one of {', '.join(DIRECTIONS)}")
            if direction != "today" and not date:
                return _text("Error: 'date' parameter is required")
            return await find_watched_date_tool(date, direction, config)
        else:
            raise ValueError(f"Unknown tool: {name}")

    return server


async def main(config: Optional[Config] = None):
    """Main entry point for the MCP server."""
    server = create_server(config)

    async with stdio_server() as (read_stream, write_stream):
        initialization_options = server.create_initialization_options()
        await server.run(read_stream, write_stream, initialization_options)
