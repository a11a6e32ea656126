"""Shared pytest fixtures for folder-convert tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def media_dir(temp_dir: Path) -> Path:
    """Directory with one audio file, one image, one text file and a subfolder."""
    (temp_dir / "a.wav").write_bytes(b"RIFF")
    (temp_dir / "b.png").write_bytes(b"\x89PNG")
    (temp_dir / "c.txt").write_text("notes")
    (temp_dir / "d").mkdir()
    return temp_dir


@pytest.fixture
def mock_subprocess_success() -> MagicMock:
    """Mock subprocess.run for successful command execution."""
    mock = MagicMock()
    mock.returncode = 0
    mock.stdout = ""
    mock.stderr = ""
    return mock


@pytest.fixture
def mock_subprocess_failure() -> MagicMock:
    """Mock subprocess.run for failed command execution."""
    mock = MagicMock()
    mock.returncode = 1
    mock.stdout = ""
    mock.stderr = "Error: Command failed"
    return mock
