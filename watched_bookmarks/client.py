"""One-shot loader for the watched bookmarks payload.

The viewer fetches ``/api/watched`` once when it starts and builds all of
its navigation and search state from that single response. There is no
retry; a failed fetch leaves the viewer in an "unable to load" state until
the user reloads.
"""
import sys
from typing import Any, Dict, Optional

import httpx

from watched_bookmarks.session import ViewerSession


WATCHED_ENDPOINT = "/api/watched"
DEFAULT_TIMEOUT = 30.0


class WatchedLoadError(Exception):
    """The watched bookmarks payload could not be fetched or parsed."""

    def __init__(self, detail: str):
        super().__init__(f"Unable to load bookmarks: {detail}")
        self.detail = detail


async def fetch_watched(
    base_url: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """Fetch the watched bookmarks payload.

    Args:
        base_url: Server root, e.g. ``http://localhost:5173``
        client: Optional client to reuse (tests pass a mock transport)

    Returns:
        The decoded JSON payload

    Raises:
        WatchedLoadError: On transport errors, non-2xx status or bad JSON
    """
    url = base_url.rstrip("/") + WATCHED_ENDPOINT
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            timeout=DEFAULT_TIMEOUT,
            headers={"User-Agent": "WatchedBookmarks/0.1 (viewer)"},
        )

    try:
        response = await client.get(url)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        print(f"[client] {url} answered {e.response.status_code}", file=sys.stderr)
        raise WatchedLoadError(f"request failed with {e.response.status_code}") from e
    except httpx.HTTPError as e:
        print(f"[client] HTTP error fetching {url}: {e}", file=sys.stderr)
        raise WatchedLoadError(str(e)) from e
    except ValueError as e:
        print(f"[client] Invalid JSON from {url}: {e}", file=sys.stderr)
        raise WatchedLoadError("invalid JSON payload") from e
    finally:
        if owns_client:
            await client.aclose()

    if not isinstance(payload, dict):
        raise WatchedLoadError("unexpected payload shape")

    return payload


async def load_session(
    base_url: str,
    client: Optional[httpx.AsyncClient] = None,
) -> ViewerSession:
    """Fetch the payload once and build a viewer session from it."""
    payload = await fetch_watched(base_url, client=client)
    return ViewerSession.from_payload(payload)
