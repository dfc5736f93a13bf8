"""
Custom exception classes for the batch loader.

This module defines application-specific exceptions that are raised during
configuration validation, file selection, file I/O and store operations.
These exceptions provide structured error information and diagnostic data
to help with debugging and error reporting.

Malformed lines are not errors: the parser skips them without raising.
"""

import os
from typing import Optional


class LoaderError(Exception):
    """
    Base exception for all loader errors.

    Attributes:
        message: A human-readable error message describing what went wrong.
        original_exception: The underlying exception that caused this error, if any.
        diagnostic_info: A dictionary containing diagnostic information including
            exception type, details, and OS name.
    """

    default_message = "An error occurred while loading batch files"

    def __init__(
        self,
        message: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.original_exception = original_exception
        self.diagnostic_info = {
            "type": (
                type(original_exception).__name__ if original_exception else "Unknown"
            ),
            "details": str(original_exception) if original_exception else "No details",
            "os_name": os.name,
        }


class ConfigurationError(LoaderError):
    """Raised when run settings are invalid after flag parsing."""

    default_message = "Invalid configuration"


class SourceDirectoryError(ConfigurationError):
    """
    Raised when the source folder does not exist or is not a directory.

    Attributes:
        file_path: The offending source path.
    """

    default_message = "Source folder is not a directory"

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message=message, original_exception=original_exception)
        self.file_path = file_path


class OrderingKeyError(LoaderError):
    """
    Raised when the ordering key cannot be computed from a batch file name.

    Every eligible file must have a base name of the form
    `<anything>+<4 characters><integer>`. A single bad name aborts the run,
    since no processing order can be established without it.

    Attributes:
        file_path: The file whose name could not be parsed.
        base_name: The base name that was inspected.
    """

    default_message = "Cannot compute ordering key from file name"

    def __init__(
        self,
        message: Optional[str] = None,
        base_name: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message=message, original_exception=original_exception)
        self.base_name = base_name
        self.file_path = file_path


class FileIOError(LoaderError):
    """
    Base exception for file I/O operation errors.

    Attributes:
        file_path: The path of the file involved in the failed operation, if known.
    """

    default_message = "A file I/O error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message=message, original_exception=original_exception)
        self.file_path = file_path


class FileReadError(FileIOError):
    """Raised when a batch file cannot be read."""

    default_message = "Failed to read file"


class FileDiscardError(FileIOError):
    """Raised when a processed batch file or its marker cannot be deleted."""

    default_message = "Failed to discard file"


class StoreError(LoaderError):
    """
    Base exception for key-value store errors.

    Attributes:
        address: The `host:port` of the store, if known.
    """

    default_message = "A key-value store error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        address: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message=message, original_exception=original_exception)
        self.address = address


class StoreConnectionError(StoreError):
    """Raised when the store cannot be reached or rejects authentication."""

    default_message = "Failed to connect to the key-value store"


class StoreWriteError(StoreError):
    """Raised when a record cannot be written to the store."""

    default_message = "Failed to write record to the key-value store"
