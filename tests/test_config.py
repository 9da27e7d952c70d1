"""Tests for config module."""
import pytest
from pathlib import Path

from watched_bookmarks.config import Config


class TestConfig:
    def test_default_values(self):
        config = Config()
        assert config.bookmarks_path is None
        assert config.chrome_profile == "Default"
        assert config.watched_folder == "看过"
        assert config.host == "127.0.0.1"
        assert config.port == 5173

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BOOKMARKS_PATH", "/tmp/Bookmarks")
        monkeypatch.setenv("BOOKMARKS_WATCHED_FOLDER", "Read Later")
        monkeypatch.setenv("HOST", "0.0.0.0")
        monkeypatch.setenv("PORT", "8080")

        config = Config.from_env()
        assert config.bookmarks_path == Path("/tmp/Bookmarks")
        assert config.watched_folder == "Read Later"
        assert config.host == "0.0.0.0"
        assert config.port == 8080

    def test_env_defaults(self, monkeypatch):
        for name in ("BOOKMARKS_PATH", "BOOKMARKS_WATCHED_FOLDER", "BOOKMARKS_CHROME_PROFILE", "HOST", "PORT"):
            monkeypatch.delenv(name, raising=False)
        config = Config.from_env()
        assert config.bookmarks_path is None
        assert config.watched_folder == "看过"
        assert config.port == 5173

    def test_chrome_profile_from_env(self, monkeypatch):
        monkeypatch.setenv("BOOKMARKS_CHROME_PROFILE", "Profile 1")
        config = Config.from_env()
        assert config.chrome_profile == "Profile 1"

    def test_invalid_port_raises(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        with pytest.raises(ValueError):
            Config.from_env()


class TestResolvePath:
    def test_explicit_path_wins(self, tmp_path):
        config = Config(bookmarks_path=tmp_path / "Bookmarks")
        assert config.resolve_bookmarks_path() == tmp_path / "Bookmarks"

    def test_profile_default(self):
        path = Config(chrome_profile="Profile 2").resolve_bookmarks_path()
        assert path.name == "Bookmarks"
        assert path.parent.name == "Profile 2"
