"""
Tests for the loading module.

Tests cover:
- write_record: SET vs SETEX selection
- load_file: per-file parsing and writing
- load_files: ordering, last-write-wins, deletion, abort on errors
- run_load: selection + loading against a real folder
"""

from pathlib import Path

import pytest

from adapters.store import MockStore
from core.exceptions import FileReadError, OrderingKeyError, StoreWriteError
from core.file_io import MockFileReader, MockFileRemover
from core.loading import (
    discard_candidate,
    load_file,
    load_files,
    run_load,
    write_record,
)
from core.models import LoadSettings, ParsedRecord


# ============================================================================
# Tests for write_record
# ============================================================================


@pytest.mark.unit
def test_write_record_without_ttl(mock_store):
    write_record(mock_store, ParsedRecord("alice", "192.168.001.010"), None)

    assert mock_store.set_calls == [("192.168.001.010", "alice", None)]


@pytest.mark.unit
def test_write_record_with_ttl(mock_store):
    write_record(mock_store, ParsedRecord("alice", "10.1.1.1"), 60)

    assert mock_store.set_calls == [("10.1.1.1", "alice", 60)]
    assert mock_store.ttls["10.1.1.1"] == 60


@pytest.mark.unit
@pytest.mark.parametrize("ttl", [0, -1, -100])
def test_write_record_non_positive_ttl_means_no_expiry(mock_store, ttl):
    write_record(mock_store, ParsedRecord("alice", "10.1.1.1"), ttl)

    assert mock_store.set_calls == [("10.1.1.1", "alice", None)]


# ============================================================================
# Tests for load_file
# ============================================================================


@pytest.mark.unit
@pytest.mark.mock
def test_load_file_writes_accepted_lines(mock_store, candidate_factory):
    candidate = candidate_factory()
    reader = MockFileReader(
        return_value=b"alice|10.1.1.1|x\n|10.1.1.2|x\nbob|999|x\ncarol|10.1.1.3|\n"
    )

    result = load_file(mock_store, candidate, None, reader)

    assert reader.read_bytes_calls == [candidate.path]
    assert mock_store.data == {"10.1.1.1": "alice", "10.1.1.3": "carol"}
    assert result.records_written == 2
    assert result.lines_skipped == 2
    assert result.file is candidate
    assert result.deleted is False


@pytest.mark.unit
@pytest.mark.mock
def test_load_file_later_line_overwrites_earlier(mock_store, candidate_factory):
    reader = MockFileReader(return_value=b"old|10.1.1.5|\nnew|10.1.1.5|\n")

    load_file(mock_store, candidate_factory(), None, reader)

    assert mock_store.data == {"10.1.1.5": "new"}


@pytest.mark.unit
@pytest.mark.mock
def test_load_file_read_error_propagates(mock_store, candidate_factory, mocker):
    reader = MockFileReader()
    mocker.patch.object(
        reader, "read_bytes", side_effect=FileReadError(file_path="/in/x.txt")
    )

    with pytest.raises(FileReadError):
        load_file(mock_store, candidate_factory(), None, reader)

    assert mock_store.set_calls == []


# ============================================================================
# Tests for discard_candidate
# ============================================================================


@pytest.mark.unit
@pytest.mark.mock
def test_discard_candidate_removes_file_and_marker(candidate_factory):
    candidate = candidate_factory()
    remover = MockFileRemover()

    assert discard_candidate(candidate, remover) is True
    assert remover.discard_calls == [candidate.path, candidate.marker_path]


@pytest.mark.unit
@pytest.mark.mock
def test_discard_candidate_failure_is_warning(candidate_factory, mocker):
    candidate = candidate_factory()
    remover = MockFileRemover(failing_paths={candidate.path})
    mock_pr = mocker.patch("core.loading.pr")

    assert discard_candidate(candidate, remover) is False
    # The marker is still attempted
    assert remover.discard_calls == [candidate.path, candidate.marker_path]
    mock_pr.assert_called_once()
    assert "Warning" in mock_pr.call_args[0][0]


# ============================================================================
# Tests for load_files
# ============================================================================


@pytest.mark.unit
@pytest.mark.mock
def test_load_files_last_write_wins_across_files(
    mock_store,
    candidate_factory,
    mock_file_reader_factory,
    mock_file_remover,
    progress_display,
):
    first = candidate_factory("batch+2024000001")
    second = candidate_factory("batch+2024000002")
    reader = mock_file_reader_factory(
        {
            "batch+2024000001.txt": "old|10.1.1.5|\nkeep|10.1.1.6|\n",
            "batch+2024000002.txt": "new|10.1.1.5|\n",
        }
    )

    summary = load_files(
        mock_store,
        [first, second],
        LoadSettings(),
        file_reader=reader,
        file_remover=mock_file_remover,
        progress_display=progress_display,
    )

    assert mock_store.data == {"10.1.1.5": "new", "10.1.1.6": "keep"}
    assert reader.read_bytes_calls == [first.path, second.path]
    assert summary.files_processed == 2
    assert summary.records_written == 3
    assert summary.lines_skipped == 0


@pytest.mark.unit
@pytest.mark.mock
def test_load_files_applies_ttl(
    mock_store, candidate_factory, mock_file_remover, progress_display
):
    reader = MockFileReader(return_value=b"alice|10.1.1.1|\n")

    load_files(
        mock_store,
        [candidate_factory()],
        LoadSettings(ttl=3600),
        file_reader=reader,
        file_remover=mock_file_remover,
        progress_display=progress_display,
    )

    assert mock_store.set_calls == [("10.1.1.1", "alice", 3600)]


@pytest.mark.unit
@pytest.mark.mock
def test_load_files_deletes_only_when_requested(
    mock_store, candidate_factory, mock_file_remover, progress_display
):
    candidate = candidate_factory()
    reader = MockFileReader(return_value=b"alice|10.1.1.1|\n")

    summary = load_files(
        mock_store,
        [candidate],
        LoadSettings(delete=False),
        file_reader=reader,
        file_remover=mock_file_remover,
        progress_display=progress_display,
    )

    assert mock_file_remover.discard_calls == []
    assert summary.files_deleted == 0

    summary = load_files(
        mock_store,
        [candidate],
        LoadSettings(delete=True),
        file_reader=reader,
        file_remover=mock_file_remover,
        progress_display=progress_display,
    )

    assert mock_file_remover.discard_calls == [candidate.path, candidate.marker_path]
    assert summary.files_deleted == 1


@pytest.mark.unit
@pytest.mark.mock
def test_load_files_deletes_each_file_before_next(
    candidate_factory, mock_file_reader_factory, progress_display
):
    """A file is deleted right after its own records, before the next file is read."""
    events: list[str] = []
    first = candidate_factory("batch+2024000001")
    second = candidate_factory("batch+2024000002")
    reader = mock_file_reader_factory(
        {"batch+2024000001.txt": "a|1.1.1.1|\n", "batch+2024000002.txt": "b|2.2.2.2|\n"}
    )
    original_read = reader.read_bytes

    def tracking_read(path: Path) -> bytes:
        events.append(f"read {path.name}")
        return original_read(path)

    class TrackingRemover:
        def discard(self, path: Path) -> None:
            events.append(f"discard {path.name}")

    reader.read_bytes = tracking_read

    load_files(
        MockStore(),
        [first, second],
        LoadSettings(delete=True),
        file_reader=reader,
        file_remover=TrackingRemover(),
        progress_display=progress_display,
    )

    assert events == [
        "read batch+2024000001.txt",
        "discard batch+2024000001.txt",
        "discard batch+2024000001OK",
        "read batch+2024000002.txt",
        "discard batch+2024000002.txt",
        "discard batch+2024000002OK",
    ]


@pytest.mark.unit
@pytest.mark.mock
def test_load_files_store_error_aborts_run(
    candidate_factory, mock_file_reader_factory, progress_display
):
    store = MockStore(fail_on_keys={"10.1.1.2"})
    remover = MockFileRemover()
    reader = mock_file_reader_factory(
        {
            "batch+2024000001.txt": "a|10.1.1.1|\nb|10.1.1.2|\n",
            "batch+2024000002.txt": "c|10.1.1.3|\n",
        }
    )

    with pytest.raises(StoreWriteError):
        load_files(
            store,
            [candidate_factory("batch+2024000001"), candidate_factory("batch+2024000002")],
            LoadSettings(delete=True),
            file_reader=reader,
            file_remover=remover,
            progress_display=progress_display,
        )

    # Records before the failure stay written; nothing is deleted
    assert store.data == {"10.1.1.1": "a"}
    assert remover.discard_calls == []


@pytest.mark.unit
@pytest.mark.mock
def test_load_files_reports_progress(
    mock_store, candidate_factory, mock_file_remover, mocker
):
    display = mocker.MagicMock()
    display.__enter__.return_value = display
    reader = MockFileReader(return_value=b"alice|10.1.1.1|\n")

    load_files(
        mock_store,
        [candidate_factory("a+2024000001"), candidate_factory("a+2024000002")],
        LoadSettings(),
        file_reader=reader,
        file_remover=mock_file_remover,
        progress_display=display,
    )

    display.on_start.assert_called_once_with("Loading 2 batch files...", 2)
    assert display.on_update.call_count == 4
    display.on_complete.assert_called_once()
    assert display.on_complete.call_args[0][1:] == (2, 2)


@pytest.mark.unit
def test_load_files_no_candidates(mock_store, progress_display):
    summary = load_files(
        mock_store, [], LoadSettings(), progress_display=progress_display
    )

    assert summary.files_processed == 0
    assert mock_store.set_calls == []


# ============================================================================
# Tests for run_load
# ============================================================================


@pytest.mark.unit
def test_run_load_end_to_end(source_dir, batch_file_factory, mock_store, progress_display):
    first = batch_file_factory("batch+2024000002.txt", "new|10.1.1.5|x\n")
    second = batch_file_factory(
        "batch+2024000001.txt",
        "old|10.1.1.5|x\nalice|192.168.001.010|ignored\n|10.1.1.1|x\n",
        folder=source_dir / "sub",
    )
    batch_file_factory("pending+2024000003.txt", "late|10.1.1.5|x\n", marker=False)

    summary = run_load(
        mock_store,
        source_dir,
        LoadSettings(delete=True),
        progress_display=progress_display,
    )

    assert mock_store.data == {"10.1.1.5": "new", "192.168.001.010": "alice"}
    assert summary.files_processed == 2
    assert summary.records_written == 3
    assert summary.lines_skipped == 1
    assert summary.files_deleted == 2
    assert not first.exists()
    assert not second.exists()
    assert not (source_dir / "batch+2024000002OK").exists()
    assert not (source_dir / "sub" / "batch+2024000001OK").exists()
    assert (source_dir / "pending+2024000003.txt").exists()


@pytest.mark.unit
def test_run_load_keeps_files_without_delete(
    source_dir, batch_file_factory, mock_store, progress_display
):
    path = batch_file_factory("batch+2024000001.txt")

    run_load(mock_store, source_dir, LoadSettings(), progress_display=progress_display)

    assert path.exists()
    assert (source_dir / "batch+2024000001OK").exists()


@pytest.mark.unit
def test_run_load_bad_name_writes_nothing(
    source_dir, batch_file_factory, mock_store, progress_display
):
    batch_file_factory("batch+2024000001.txt")
    batch_file_factory("broken.txt")

    with pytest.raises(OrderingKeyError):
        run_load(
            mock_store, source_dir, LoadSettings(), progress_display=progress_display
        )

    assert mock_store.set_calls == []


@pytest.mark.unit
def test_run_load_custom_suffix(source_dir, batch_file_factory, mock_store, progress_display):
    batch_file_factory("batch+2024000001.txt", suffix=".done")
    batch_file_factory("batch+2024000002.txt", "bob|10.1.1.9|\n")

    summary = run_load(
        mock_store,
        source_dir,
        LoadSettings(finish_suffix=".done"),
        progress_display=progress_display,
    )

    assert summary.files_processed == 1
    assert mock_store.data == {"10.1.1.1": "alice"}
