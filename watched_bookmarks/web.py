"""HTTP query API for the watched bookmarks viewer."""
import sys
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from watched_bookmarks.config import Config
from watched_bookmarks.grouping import load_watched_bookmarks
from watched_bookmarks.search import SearchIndex


def _error_response(e: Exception) -> JSONResponse:
    print(f"[web] Request failed: {e}", file=sys.stderr)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(e) or type(e).__name__},
    )


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create the FastAPI application.

    Every request re-reads the bookmarks file; nothing is cached between
    requests.

    Args:
        config: Configuration; defaults to the environment at request time

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(title="Watched Bookmarks", description="Bookmarks from one folder, grouped by day added")

    def current_config() -> Config:
        return config if config is not None else Config.from_env()

    @app.get("/api/watched")
    def api_watched():
        """Return the watched folder grouped by added date.

        A missing folder is not an error: the payload has ``found: false``
        and no groups.
        """
        try:
            response = load_watched_bookmarks(config=current_config())
        except Exception as e:
            return _error_response(e)
        return JSONResponse(content=response.to_dict())

    @app.get("/api/search")
    def api_search(q: str = ""):
        """Fuzzy search over the watched folder, at most eight results."""
        try:
            response = load_watched_bookmarks(config=current_config())
        except Exception as e:
            return _error_response(e)
        results = SearchIndex(response.groups).search(q)
        return JSONResponse(content={
            "query": q,
            "results": [result.to_dict() for result in results],
        })

    return app


def run(config: Optional[Config] = None) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    if config is None:
        config = Config.from_env()

    print(
        f"[web] Watched bookmarks listening on http://{config.host}:{config.port} "
        f"(source: {config.resolve_bookmarks_path()})",
        file=sys.stderr,
    )
    uvicorn.run(create_app(config), host=config.host, port=config.port)
