"""Tests for candidate discovery."""

from pathlib import Path

from mediacomply.scanner.discovery import discover_candidates


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")
    return path


class TestDiscoverCandidates:
    """Tests for discover_candidates."""

    def test_recursive_by_default(self, temp_dir: Path) -> None:
        root = temp_dir / "media"
        _touch(root / "movie.mkv")
        _touch(root / "Show" / "S01" / "ep1.avi")
        _touch(root / "Show" / "notes.txt")

        files = discover_candidates(root)

        assert [f.path.name for f in files] == ["ep1.avi", "movie.mkv"]
        assert files[0].extension == "avi"
        assert files[0].title == "ep1"
        assert all(f.path.is_absolute() for f in files)

    def test_non_recursive(self, temp_dir: Path) -> None:
        root = temp_dir / "media"
        _touch(root / "movie.mkv")
        _touch(root / "Show" / "ep1.avi")

        files = discover_candidates(root, recursive=False)

        assert [f.path.name for f in files] == ["movie.mkv"]

    def test_extension_case_insensitive(self, temp_dir: Path) -> None:
        root = temp_dir / "media"
        _touch(root / "LOUD.MKV")

        files = discover_candidates(root)

        assert len(files) == 1
        assert files[0].extension == "mkv"

    def test_excludes_in_progress_outputs(self, temp_dir: Path) -> None:
        """Leftover temp files from an earlier run are never candidates."""
        root = temp_dir / "media"
        _touch(root / "Show" / "ep1.avi")
        _touch(root / "Show" / ".mediacomply-inprogress.ep1.mkv")

        files = discover_candidates(root)

        assert [f.path.name for f in files] == ["ep1.avi"]

    def test_excludes_hidden_entries(self, temp_dir: Path) -> None:
        root = temp_dir / "media"
        _touch(root / ".hidden" / "secret.mkv")
        _touch(root / ".dotfile.mkv")
        _touch(root / "visible.mkv")

        files = discover_candidates(root)

        assert [f.path.name for f in files] == ["visible.mkv"]

    def test_excludes_backup_root(self, temp_dir: Path) -> None:
        root = temp_dir / "media"
        _touch(root / "Show" / "ep1.avi")
        _touch(root / "_backup" / "Show" / "ep0.avi")

        files = discover_candidates(root, exclude_under=root / "_backup")

        assert [f.path.name for f in files] == ["ep1.avi"]

    def test_single_file_root(self, temp_dir: Path) -> None:
        path = _touch(temp_dir / "one.mp4")
        assert [f.path for f in discover_candidates(path)] == [path.resolve()]

    def test_missing_root(self, temp_dir: Path) -> None:
        assert discover_candidates(temp_dir / "nope") == []
