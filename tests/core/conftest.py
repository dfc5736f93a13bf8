"""
Shared fixtures for core module tests.

This module provides reusable pytest fixtures for testing selection, parsing
and loading, including batch folder builders and in-memory collaborators.
"""

from pathlib import Path

import pytest

from adapters.store import MockStore
from core.file_io import MockFileReader, MockFileRemover
from core.models import CandidateFile
from ui.progress_display import NoOpProgressDisplay


@pytest.fixture
def source_dir(tmp_path):
    """Create an empty source folder for batch files."""
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def batch_file_factory(source_dir):
    """
    Factory for creating batch files (and, by default, their markers).

    Returns the path of the data file.
    """

    def _factory(
        name: str,
        content: str = "alice|10.1.1.1|x\n",
        marker: bool = True,
        suffix: str = "OK",
        folder: Path | None = None,
    ) -> Path:
        parent = folder if folder is not None else source_dir
        parent.mkdir(parents=True, exist_ok=True)
        path = parent / name
        path.write_text(content, encoding="utf-8")
        if marker:
            base_name = name.rsplit(".", 1)[0]
            (parent / f"{base_name}{suffix}").touch()
        return path

    return _factory


@pytest.fixture
def candidate_factory():
    """Factory for creating CandidateFile instances without touching the disk."""

    def _factory(base_name: str = "batch+20240101001", folder: str = "/in"):
        path = Path(folder) / f"{base_name}.txt"
        return CandidateFile(
            path=path, base_name=base_name, marker_path=Path(folder) / f"{base_name}OK"
        )

    return _factory


@pytest.fixture
def mock_store():
    """In-memory key-value store."""
    return MockStore()


@pytest.fixture
def mock_file_remover():
    """File remover that records discard calls."""
    return MockFileRemover()


@pytest.fixture
def progress_display():
    """Progress display for testing."""
    return NoOpProgressDisplay()


@pytest.fixture
def mock_file_reader_factory():
    """Factory for creating MockFileReader instances with file content mappings."""

    def _factory(file_contents: dict[str, str]):
        """
        Args:
            file_contents: Dictionary mapping file names to their content.
        """

        def read_bytes_side_effect(path: Path) -> bytes:
            return file_contents.get(path.name, "").encode("utf-8")

        return MockFileReader(read_bytes_fn=read_bytes_side_effect)

    return _factory
