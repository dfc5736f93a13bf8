from pathlib import Path

from rich import print as pr

from adapters.store import KeyValueStore
from core.discovery import select_candidate_files
from core.exceptions import FileDiscardError
from core.file_io import (
    FileReader,
    FileRemover,
    FilesystemFileReader,
    FilesystemFileRemover,
)
from core.models import (
    CandidateFile,
    FileLoadResult,
    LoadSettings,
    LoadSummary,
    ParsedRecord,
)
from core.parser import iter_lines, parse_line
from ui.progress_display import ProgressDisplay, RichProgressDisplay


def write_record(store: KeyValueStore, record: ParsedRecord, ttl: int | None) -> None:
    """Write one record as `ip -> account`, overwriting any previous value."""
    store.set(record.ip, record.account, ttl if ttl is not None and ttl > 0 else None)


def load_file(
    store: KeyValueStore,
    candidate: CandidateFile,
    ttl: int | None = None,
    file_reader: FileReader | None = None,
) -> FileLoadResult:
    """
    Read one batch file and write every accepted line to the store.

    Records are written as soon as they are parsed, in file order, so a later
    line overwrites an earlier line with the same IP.

    Args:
        store: The store receiving the records.
        candidate: The file to load.
        ttl: Expiry in seconds, or None for no expiry.
        file_reader: Optional reader. Defaults to FilesystemFileReader.

    Returns:
        FileLoadResult: Counts of written records and skipped lines.

    Raises:
        FileReadError: If the file cannot be read.
        StoreWriteError: If a write fails.
    """
    reader = file_reader if file_reader is not None else FilesystemFileReader()
    data = reader.read_bytes(candidate.path)

    result = FileLoadResult(candidate)
    for line in iter_lines(data):
        record = parse_line(line)
        if record is None:
            result.lines_skipped += 1
            continue

        write_record(store, record, ttl)
        result.records_written += 1

    return result


def discard_candidate(candidate: CandidateFile, file_remover: FileRemover) -> bool:
    """
    Delete a loaded file and its completion marker.

    Both deletions are attempted. Failures are reported as warnings, since the
    records have already been written.

    Returns:
        bool: True if both files were deleted.
    """
    deleted = True
    for path in (candidate.path, candidate.marker_path):
        try:
            file_remover.discard(path)
        except FileDiscardError as e:
            pr(f"[yellow]⚠ Warning:[/yellow] {e.message}")
            deleted = False
    return deleted


def load_files(
    store: KeyValueStore,
    candidates: list[CandidateFile],
    settings: LoadSettings,
    file_reader: FileReader | None = None,
    file_remover: FileRemover | None = None,
    progress_display: ProgressDisplay | None = None,
) -> LoadSummary:
    """
    Load batch files into the store, strictly one after another.

    Each file is fully read and written before the next one is touched. When
    `settings.delete` is set, a file and its marker are deleted right after
    its records are written. The first read or store error aborts the run.

    Args:
        store: The store receiving the records.
        candidates: Files in processing order.
        settings: TTL, deletion and marker settings.
        file_reader: Optional reader. Defaults to FilesystemFileReader.
        file_remover: Optional remover. Defaults to FilesystemFileRemover.
        progress_display: Optional progress display. Defaults to RichProgressDisplay.

    Returns:
        LoadSummary: Per-file results in processing order.
    """
    reader = file_reader if file_reader is not None else FilesystemFileReader()
    remover = file_remover if file_remover is not None else FilesystemFileRemover()
    display = (
        progress_display if progress_display is not None else RichProgressDisplay()
    )

    summary = LoadSummary()
    total = len(candidates)

    with display as rpd:
        rpd.on_start(f"Loading {total} batch files...", total)

        for candidate in candidates:
            rpd.on_update(description=f"Loading {candidate.path.name}...")

            result = load_file(store, candidate, settings.expiry, reader)
            if settings.delete:
                result.deleted = discard_candidate(candidate, remover)
            summary.append(result)

            rpd.on_update(advance=1)

        rpd.on_complete(
            f"✅ Loaded {summary.records_written} records from {summary.files_processed} files.",
            summary.files_processed,
            total,
        )

    return summary


def run_load(
    store: KeyValueStore,
    source: Path,
    settings: LoadSettings,
    file_reader: FileReader | None = None,
    file_remover: FileRemover | None = None,
    progress_display: ProgressDisplay | None = None,
) -> LoadSummary:
    """
    Select, order and load every completed batch file under `source`.

    Raises:
        SourceDirectoryError: If `source` is not a directory.
        OrderingKeyError: If any eligible file name has no ordering key. Raised
            before any file is loaded.
        FileReadError: If a file cannot be read.
        StoreWriteError: If a write fails.
    """
    candidates = select_candidate_files(source, settings.finish_suffix)
    return load_files(
        store,
        candidates,
        settings,
        file_reader=file_reader,
        file_remover=file_remover,
        progress_display=progress_display,
    )
