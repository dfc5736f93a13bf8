"""
Batch file selection and ordering.

This module walks a source folder, keeps only the batch files that are
complete (a `.txt` data file with content and a sibling completion marker),
and orders them by the integer embedded in their file names.

Ordering matters for correctness: records from later files overwrite records
from earlier files that share the same key, so files must be loaded in
ascending ordering-key order.
"""

import re
from pathlib import Path
from typing import Generator

from constants import (
    DATA_FILE_EXTENSION,
    DEFAULT_FINISH_SUFFIX,
    ORDER_KEY_SEPARATOR,
    ORDER_KEY_SKIP,
)
from core.exceptions import FileReadError, OrderingKeyError, SourceDirectoryError
from core.models import CandidateFile

_ORDER_KEY_PATTERN = re.compile(r"[+-]?[0-9]+")


def split_extension(name: str) -> tuple[str, str]:
    """
    Split a file name into its base name and extension at the last ".".

    Unlike `Path.suffix`, a leading dot counts as an extension separator, so
    ".txt" splits into ("", "txt"). A name without a dot has no extension.
    """
    base, sep, extension = name.rpartition(".")
    if not sep:
        return name, ""
    return base, extension


def marker_path_for(path: Path, finish_suffix: str = DEFAULT_FINISH_SUFFIX) -> Path:
    """
    Build the completion marker path for a data file.

    The extension (including its dot) is removed and the suffix appended:
    `/in/batch+20240101001.txt` becomes `/in/batch+20240101001OK`.
    """
    base_name, _ = split_extension(path.name)
    return path.with_name(base_name + finish_suffix)


def is_eligible(path: Path, finish_suffix: str = DEFAULT_FINISH_SUFFIX) -> bool:
    """
    Check whether a file is a complete batch file.

    A file is eligible only if all of the following hold:
    1. Its extension is exactly `txt` (case-sensitive).
    2. Its size is strictly greater than zero.
    3. Its completion marker exists.

    Args:
        path: The file to check.
        finish_suffix: Suffix used to build the marker path.

    Returns:
        bool: True if the file should be loaded.

    Raises:
        FileReadError: If the file disappears or cannot be inspected.
    """
    _, extension = split_extension(path.name)
    if extension != DATA_FILE_EXTENSION:
        return False

    if not path.is_file():
        return False

    try:
        size = path.stat().st_size
    except OSError as e:
        raise FileReadError(
            message=f"Failed to read file size: {path}",
            file_path=str(path),
            original_exception=e,
        ) from e
    if size <= 0:
        return False

    return marker_path_for(path, finish_suffix).exists()


def iter_candidate_files(
    source: Path, finish_suffix: str = DEFAULT_FINISH_SUFFIX
) -> Generator[CandidateFile, None, None]:
    """
    Lazily yield every eligible batch file under `source`, in walk order.

    The whole tree below `source` is searched; directories themselves are
    never candidates.

    Args:
        source: The folder to scan.
        finish_suffix: Suffix used to build marker paths.

    Yields:
        CandidateFile: Each eligible file, with absolute paths.
    """
    root = source.resolve()
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        if not is_eligible(path, finish_suffix):
            continue

        base_name, _ = split_extension(path.name)
        yield CandidateFile(
            path=path,
            base_name=base_name,
            marker_path=marker_path_for(path, finish_suffix),
        )


def ordering_key(base_name: str, file_path: str | None = None) -> int:
    """
    Extract the ordering key from a batch file base name.

    The key is the integer that starts `ORDER_KEY_SKIP` characters after the
    last `+` and runs to the end of the name. For "batch+2024010100001" the
    four characters "2024" are skipped and the key is 10100001.

    Args:
        base_name: File name without its extension.
        file_path: Optional path, only used for error reporting.

    Returns:
        int: The ordering key.

    Raises:
        OrderingKeyError: If the name has no `+` or its tail is not an integer.
    """
    separator_index = base_name.rfind(ORDER_KEY_SEPARATOR)
    if separator_index < 0:
        raise OrderingKeyError(
            message=f"File name has no '{ORDER_KEY_SEPARATOR}' separator: {base_name}",
            base_name=base_name,
            file_path=file_path,
        )

    tail = base_name[separator_index + len(ORDER_KEY_SEPARATOR) + ORDER_KEY_SKIP :]
    if not _ORDER_KEY_PATTERN.fullmatch(tail):
        raise OrderingKeyError(
            message=f"File name does not end with an integer ordering key: {base_name}",
            base_name=base_name,
            file_path=file_path,
        )

    return int(tail)


def sort_candidates(candidates: list[CandidateFile]) -> list[CandidateFile]:
    """
    Order candidate files ascending by ordering key.

    Keys are computed for every file before anything is returned, so one bad
    file name fails the whole selection. Files with equal keys keep their
    relative input order, which for a directory walk is filesystem-dependent.

    Raises:
        OrderingKeyError: If any file name has no valid ordering key.
    """
    keyed = [
        (ordering_key(candidate.base_name, str(candidate.path)), candidate)
        for candidate in candidates
    ]
    keyed.sort(key=lambda pair: pair[0])
    return [candidate for _, candidate in keyed]


def select_candidate_files(
    source: Path, finish_suffix: str = DEFAULT_FINISH_SUFFIX
) -> list[CandidateFile]:
    """
    Select and order the batch files to load from a source folder.

    Args:
        source: The folder to scan.
        finish_suffix: Suffix used to build marker paths.

    Returns:
        list[CandidateFile]: Eligible files in processing order.

    Raises:
        SourceDirectoryError: If `source` is not an existing directory.
        OrderingKeyError: If any eligible file has a malformed name.
    """
    if not source.is_dir():
        raise SourceDirectoryError(
            message=f"Source folder does not exist or is not a directory: {source}",
            file_path=str(source),
        )

    return sort_candidates(list(iter_candidate_files(source, finish_suffix)))
