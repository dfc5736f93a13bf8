from pathlib import Path
from typing import Callable, Protocol

from core.exceptions import FileDiscardError, FileReadError


class FileReader(Protocol):
    """
    Protocol defining the interface for reading batch files.

    This protocol allows different implementations for production (filesystem)
    and testing (mocks).
    """

    def read_bytes(self, file_path: Path) -> bytes:
        """
        Read the raw content of a file.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as bytes.
        """


class FileRemover(Protocol):
    """
    Protocol defining the interface for deleting processed batch files.
    """

    def discard(self, file_path: Path) -> None:
        """
        Delete a file.

        Args:
            file_path: The path to the file to delete.
        """


class FilesystemFileReader:

    def read_bytes(self, file_path: Path) -> bytes:
        """
        Read the raw content of a file.

        The whole file is read at once; decoding is left to the parser.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as bytes.

        Raises:
            FileReadError: If the file does not exist or an I/O error occurs.
        """
        try:
            return file_path.read_bytes()
        except OSError as e:
            raise FileReadError(
                message=f"Failed to read file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e


class FilesystemFileRemover:

    def discard(self, file_path: Path) -> None:
        """
        Delete a file from disk.

        Raises:
            FileDiscardError: If the file cannot be deleted (doesn't exist, locked, etc.).
        """
        try:
            file_path.unlink()
        except FileNotFoundError as e:
            raise FileDiscardError(
                message=f"Cannot discard file since it no longer exists: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e
        except OSError as e:
            raise FileDiscardError(
                message=f"Failed to discard file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e


class MockFileReader:
    """
    Mock implementation of FileReader for testing.

    Returns configurable file contents, allowing tests to control file reading
    behavior without requiring filesystem operations or actual file I/O.
    """

    def __init__(
        self,
        return_value: bytes | None = None,
        read_bytes_fn: Callable[[Path], bytes] | None = None,
    ):
        """
        Initialize MockFileReader with configurable reading behavior.

        Args:
            return_value: If provided, always returns this value regardless of input.
                Takes precedence over read_bytes_fn if both are provided.
            read_bytes_fn: Optional callable that takes a file path and returns file content.
                If return_value is None, this will be used. If both are None,
                defaults to returning empty bytes.

        Attributes (for test inspection):
            read_bytes_calls: List of file paths passed to read_bytes()
        """
        self.return_value = return_value
        self.read_bytes_fn = read_bytes_fn

        # Track calls for test inspection
        self.read_bytes_calls: list[Path] = []

    def read_bytes(self, file_path: Path) -> bytes:
        self.read_bytes_calls.append(file_path)
        if self.return_value is not None:
            return self.return_value
        if self.read_bytes_fn is not None:
            return self.read_bytes_fn(file_path)
        return b""


class MockFileRemover:
    """
    Mock implementation of FileRemover for testing.

    Records discarded paths instead of touching the filesystem. Paths listed in
    `failing_paths` raise FileDiscardError.
    """

    def __init__(self, failing_paths: set[Path] | None = None):
        self.failing_paths = failing_paths or set()
        self.discard_calls: list[Path] = []

    def discard(self, file_path: Path) -> None:
        self.discard_calls.append(file_path)
        if file_path in self.failing_paths:
            raise FileDiscardError(
                message=f"Failed to discard file: {file_path}",
                file_path=str(file_path),
            )
