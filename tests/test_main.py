"""Tests for the command-line entry point."""
import json
from unittest.mock import patch

from watched_bookmarks.main import main


class TestSearchCommand:
    def test_prints_results(self, sample_bookmarks_path, capsys):
        code = main(["--bookmarks", str(sample_bookmarks_path), "search", "confluence"])
        assert code == 0
        results = json.loads(capsys.readouterr().out)
        assert results[0]["title"] == "Confluence"

    def test_missing_file(self, tmp_path, capsys):
        code = main(["--bookmarks", str(tmp_path / "nope"), "search", "x"])
        assert code == 1
        assert "Error loading bookmarks" in capsys.readouterr().err


class TestJumpCommand:
    def test_on_or_before(self, sample_bookmarks_path, capsys):
        code = main(["--bookmarks", str(sample_bookmarks_path), "jump", "2024-01-09"])
        assert code == 0
        group = json.loads(capsys.readouterr().out)
        assert group["date"] == "2024-01-05"

    def test_next_week(self, sample_bookmarks_path, capsys):
        code = main([
            "--bookmarks", str(sample_bookmarks_path),
            "jump", "2024-01-01", "--direction", "next_week",
        ])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["date"] == "2024-01-10"

    def test_no_target(self, sample_bookmarks_path, capsys):
        code = main(["--bookmarks", str(sample_bookmarks_path), "jump", "2023-01-01"])
        assert code == 1
        assert "No bookmarked date found" in capsys.readouterr().err

    def test_date_required(self, sample_bookmarks_path):
        assert main(["--bookmarks", str(sample_bookmarks_path), "jump"]) == 2

    def test_unpadded_date_rejected(self, sample_bookmarks_path, capsys):
        code = main(["--bookmarks", str(sample_bookmarks_path), "jump", "2024-1-5"])
        assert code == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "YYYY-MM-DD" in captured.err

    def test_custom_folder(self, sample_bookmarks_path, capsys):
        code = main([
            "--bookmarks", str(sample_bookmarks_path), "--folder", "Tutorials",
            "jump", "2024-01-10",
        ])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["count"] == 1


class TestServeCommand:
    def test_serve_is_default(self, sample_bookmarks_path):
        with patch("watched_bookmarks.web.run") as run:
            assert main(["--bookmarks", str(sample_bookmarks_path)]) == 0
        config = run.call_args.args[0]
        assert config.bookmarks_path == sample_bookmarks_path

    def test_serve_overrides(self, sample_bookmarks_path):
        with patch("watched_bookmarks.web.run") as run:
            main(["--bookmarks", str(sample_bookmarks_path), "serve", "--port", "9000", "--host", "0.0.0.0"])
        config = run.call_args.args[0]
        assert config.port == 9000
        assert config.host == "0.0.0.0"
