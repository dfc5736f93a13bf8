"""
Core data models for the selection and loading pipeline.

This module defines the data structures used to represent candidate batch
files, records parsed from their lines, the settings that drive a load run,
and the results reported back to the CLI.
"""

from dataclasses import dataclass, field
from pathlib import Path

from constants import DEFAULT_FINISH_SUFFIX, NO_EXPIRY_TTL


@dataclass(frozen=True)
class ParsedRecord:
    """
    A single `account|ip` pair accepted by the line parser.

    Both fields are already trimmed and never include the separator characters.
    The record is written to the store as `ip -> account`.

    Attributes:
        account: The account name found before the first separator.
        ip: The IP-shaped field found between the first and second separator.
    """

    account: str
    ip: str


@dataclass(frozen=True)
class CandidateFile:
    """
    A batch file that passed the eligibility checks.

    Attributes:
        path: Absolute path of the data file.
        base_name: File name without its extension (e.g. "batch+20240101001").
        marker_path: Path of the completion marker that made this file eligible.
    """

    path: Path
    base_name: str
    marker_path: Path


@dataclass(frozen=True)
class StoreSettings:
    """Connection parameters for the key-value store."""

    host: str
    port: int
    password: str | None = None

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class LoadSettings:
    """
    Settings applied to every file of a load run.

    Attributes:
        ttl: Record time-to-live in seconds. Values <= 0 mean no expiry.
        delete: If True, the data file and its marker are deleted once loaded.
        finish_suffix: Suffix used to build completion marker paths.
    """

    ttl: int = NO_EXPIRY_TTL
    delete: bool = False
    finish_suffix: str = DEFAULT_FINISH_SUFFIX

    @property
    def expiry(self) -> int | None:
        """The TTL to pass to the store, or None when records never expire."""
        return self.ttl if self.ttl > 0 else None


@dataclass
class FileLoadResult:
    file: CandidateFile
    records_written: int = 0
    lines_skipped: int = 0
    deleted: bool = False


@dataclass
class LoadSummary:
    """Aggregated results of a load run, in processing order."""

    results: list[FileLoadResult] = field(default_factory=list)

    def append(self, result: FileLoadResult) -> None:
        self.results.append(result)

    @property
    def files_processed(self) -> int:
        return len(self.results)

    @property
    def records_written(self) -> int:
        return sum(r.records_written for r in self.results)

    @property
    def lines_skipped(self) -> int:
        return sum(r.lines_skipped for r in self.results)

    @property
    def files_deleted(self) -> int:
        return sum(1 for r in self.results if r.deleted)
