"""Shared test fixtures for mediacomply."""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_data_dir(temp_dir: Path):
    """Point MEDIACOMPLY_DATA_DIR at an empty temp directory.

    Keeps tests from reading the developer's ~/.mediacomply/config.toml and
    clears any MEDIACOMPLY_* overrides from the environment.
    """
    data_dir = temp_dir / ".mediacomply"
    data_dir.mkdir(parents=True, exist_ok=True)

    env = {k: v for k, v in os.environ.items() if not k.startswith("MEDIACOMPLY_")}
    env["MEDIACOMPLY_DATA_DIR"] = str(data_dir)
    with patch.dict(os.environ, env, clear=True):
        yield data_dir


@pytest.fixture
def media_root(temp_dir: Path) -> Path:
    """Media root with a single non-compliant episode at Show/ep1.avi."""
    root = temp_dir / "media"
    (root / "Show").mkdir(parents=True)
    (root / "Show" / "ep1.avi").write_bytes(b"original avi content")
    return root


@pytest.fixture
def backup_root(temp_dir: Path) -> Path:
    """Backup root (not created up front)."""
    return temp_dir / "backup"
