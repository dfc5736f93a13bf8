"""
Progress reporting protocol for decoupling the terminal UI from the loader.

The loading pipeline reports file-level progress through `ProgressDisplay`,
so tests can run it with `NoOpProgressDisplay` while the CLI renders a Rich
progress bar.
"""

from types import TracebackType
from typing import Protocol

from rich.progress import Progress, TaskID
from ui.progress import (
    ProgressState,
    create_progress,
    create_task,
    update_progress,
)


class ProgressDisplay(Protocol):
    """
    Protocol for progress reporting.

    The lifecycle is:
    1. Context manager entry (__enter__)
    2. on_start() - Called once at the beginning
    3. on_update() - Called for each file (description, then advance)
    4. on_complete() - Called once at the end
    5. Context manager exit (__exit__)
    """

    def __enter__(self) -> "ProgressDisplay":
        """Enter the progress context."""

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the progress context."""

    def on_start(self, description: str, total: int | None) -> None:
        """
        Initialize progress reporting.

        Args:
            description: Initial description text to display.
            total: Number of files to process, or None if unknown.
        """

    def on_update(
        self, *, advance: int | None = None, description: str | None = None
    ) -> None:
        """
        Advance the counter, update the description, or both.
        """

    def on_complete(
        self, description: str, completed: int, total: int | None = None
    ) -> None:
        """
        Mark the task as complete.

        Args:
            description: Final description text to display.
            completed: Number of files that were processed.
            total: Optional total count. If None, uses the existing total.
        """


class RichProgressDisplay:
    """
    Rich UI implementation of ProgressDisplay.
    """

    def __init__(self) -> None:
        """Initialize RPD. Progress instance is created lazily."""
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self) -> "RichProgressDisplay":
        self._progress = create_progress()
        self._progress.__enter__()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._progress:
            self._progress.__exit__(exc_type, exc_val, exc_tb)

    def _require_progress(self) -> Progress:
        if not self._progress:
            raise RuntimeError(
                "RichProgressDisplay must be used as a context manager. "
                "Use: with RichProgressDisplay() as rpd:"
            )
        return self._progress

    def on_start(self, description: str, total: int | None) -> None:
        """
        Creates the Rich task.

        Raises:
            RuntimeError: If not used as a context manager.
        """
        progress = self._require_progress()
        self._task = create_task(progress, description, total=total)

    def on_update(
        self, *, advance: int | None = None, description: str | None = None
    ) -> None:
        """
        Update progress by advancing the counter, updating description, or both.

        Raises:
            RuntimeError: If not used as a context manager or if on_start()
                was not called first.
            ValueError: If neither advance nor description is provided.
        """
        progress = self._require_progress()
        if self._task is None:
            raise RuntimeError("on_start() must be called before on_update()")

        if not (advance or description):
            raise ValueError(
                "At least one of 'advance' or 'description' must be provided to on_update()"
            )

        if description:
            update_progress(
                progress,
                self._task,
                ProgressState.IN_PROGRESS,
                advance=advance,
                description=description,
            )
        else:
            update_progress(progress, self._task, advance=advance)

    def on_complete(
        self, description: str, completed: int, total: int | None = None
    ) -> None:
        progress = self._require_progress()
        if self._task is None:
            raise RuntimeError("on_start() must be called before on_complete()")

        update_progress(
            progress,
            self._task,
            ProgressState.COMPLETE,
            completed=completed,
            total=total,
            description=description,
        )


class NoOpProgressDisplay:
    """
    No-op implementation of ProgressDisplay for testing.
    """

    def __enter__(self) -> "NoOpProgressDisplay":
        return self

    def __exit__(self, *args) -> None:
        """Exit the progress context (no-op)."""

    def on_start(self, description: str, total: int | None) -> None:
        """No-op: does nothing."""

    def on_update(
        self, *, advance: int | None = None, description: str | None = None
    ) -> None:
        """No-op: does nothing."""

    def on_complete(
        self, description: str, completed: int, total: int | None = None
    ) -> None:
        """No-op: does nothing."""
