"""Configuration for the watched bookmarks viewer."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_WATCHED_FOLDER = "看过"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5173


@dataclass
class Config:
    """Main configuration for the watched bookmarks viewer."""
    bookmarks_path: Optional[Path] = None  # None = use the Chrome profile default
    chrome_profile: str = "Default"  # Chrome profile name
    watched_folder: str = DEFAULT_WATCHED_FOLDER
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        path_str = os.environ.get("BOOKMARKS_PATH")
        bookmarks_path = Path(path_str).expanduser() if path_str else None

        return cls(
            bookmarks_path=bookmarks_path,
            chrome_profile=os.environ.get("BOOKMARKS_CHROME_PROFILE", "Default"),
            watched_folder=os.environ.get("BOOKMARKS_WATCHED_FOLDER", DEFAULT_WATCHED_FOLDER),
            host=os.environ.get("HOST", DEFAULT_HOST),
            port=int(os.environ.get("PORT", str(DEFAULT_PORT))),
        )

    def resolve_bookmarks_path(self) -> Path:
        """Return the configured bookmarks file, or the profile default."""
        if self.bookmarks_path is not None:
            return self.bookmarks_path

        from watched_bookmarks.bookmarks_reader import get_chrome_bookmarks_path
        return get_chrome_bookmarks_path(self.chrome_profile)
