"""
Progress bar creation and management module using Rich.

This module provides the progress bar shown while batch files are loaded.
Tasks are colored by state (in progress, complete) so the final line of the
bar stands out once a run finishes.
"""

from enum import StrEnum
from typing import Optional

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)


class ProgressState(StrEnum):
    """
    Progress bar states and the Rich color used to render each of them.
    """

    IN_PROGRESS = "magenta"
    COMPLETE = "green"


def create_progress() -> Progress:
    """
    Creates a Rich Progress instance with a spinner, description, bar and
    an `N/M` files counter.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
    )


def create_task(progress: Progress, description: str, total: Optional[int]) -> TaskID:
    """
    Adds a task in the IN_PROGRESS state.

    Args:
        progress (Progress): The Rich Progress instance to add the task to.
        description (str): The description text to display for this task.
        total (Optional[int]): Number of files to load, or None if unknown.

    Returns:
        TaskID: The identifier used for later updates.
    """
    return progress.add_task(f"[{ProgressState.IN_PROGRESS}]{description}", total=total)


def update_progress(
    progress: Progress,
    task: TaskID,
    progress_state: Optional[ProgressState] = None,
    total: Optional[float] = None,
    completed: Optional[float] = None,
    advance: Optional[float] = None,
    description: Optional[str] = None,
) -> None:
    """
    Updates a progress task with new state, progress, or description.

    Note: `progress_state` and `description` must be provided together so the
    description is always styled with the state color.

    Raises:
        ValueError: If only one of progress_state and description is provided.
    """
    if bool(progress_state) != bool(description):
        raise ValueError("progress_state and description must be provided together.")

    # Rich's progress.update() treats description=None as "clear", so omit it
    if description is not None:
        progress.update(
            task,
            total=total,
            completed=completed,
            advance=advance,
            description=f"[{progress_state}]{description}",
        )
    else:
        progress.update(task, total=total, completed=completed, advance=advance)
