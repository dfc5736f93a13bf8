"""
Batch Loader CLI Entry Point.

This module implements the command-line interface that loads completed batch
files into Redis. A batch file is a `.txt` file whose lines have the shape
`<account>|<ip>|<ignored>`; it is complete once a sibling marker file
(`<name><suffix>`, `OK` by default) exists next to it.

The run operates in three stages:

1.  **Configuration**: Parses and validates the flags. Nothing is touched if a
    required flag is missing or a value is invalid.
2.  **Selection**: Walks the source folder, keeps completed non-empty batch
    files and orders them by the integer embedded in their names, so that
    later files overwrite earlier ones.
3.  **Loading**: Writes each accepted line as `SET ip account` (or `SETEX` when
    a TTL is configured), optionally deleting each file and its marker once
    it has been loaded.

Usage:
    $ python main.py -s /data/batches -i 127.0.0.1 -p 6379 -t 3600 -d

Dependencies:
    - Typer: CLI argument parsing and app structure.
    - Rich: Terminal UI, colors, and progress visualization.
    - redis-py: Redis client.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich import print as pr

from adapters.store import RedisStore
from constants import DEFAULT_FINISH_SUFFIX, HELP_WIDTH, NO_EXPIRY_TTL
from core.exceptions import (
    ConfigurationError,
    FileIOError,
    OrderingKeyError,
    StoreConnectionError,
    StoreError,
)
from core.loading import run_load
from core.models import LoadSettings, LoadSummary, StoreSettings

app = typer.Typer(name="aaa-cmd", add_completion=False)


def show_help(ctx: typer.Context, value: bool) -> None:
    """Print usage and exit with a non-zero status."""
    if value:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)


@app.command(
    context_settings={"help_option_names": [], "max_content_width": HELP_WIDTH}
)
def main(
    source: Annotated[
        Path,
        typer.Option(
            "--source",
            "-s",
            exists=True,  # Typer throws error if path doesn't exist
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="define the source folder.",
        ),
    ],
    ip: Annotated[str, typer.Option("--ip", "-i", help="redis ip.")],
    port: Annotated[int, typer.Option("--port", "-p", help="redis port.")],
    auth: Annotated[
        str | None, typer.Option("--auth", "-a", help="pass word for redis.")
    ] = None,
    ttl: Annotated[
        int | None,
        typer.Option(
            "--ttl",
            "-t",
            help="define the ttl(time to live in seconds) for record.",
        ),
    ] = None,
    delete: Annotated[
        bool,
        typer.Option("--delete", "-d", help="delete source file after parse."),
    ] = False,
    finish_suffix: Annotated[
        str,
        typer.Option("--finish-suffix", "-f", help="finish file suffix."),
    ] = DEFAULT_FINISH_SUFFIX,
    help_: Annotated[
        bool,
        typer.Option(
            "--help",
            "-h",
            is_eager=True,
            expose_value=False,
            callback=show_help,
            help="display help menu.",
        ),
    ] = False,
):
    """
    Load completed batch files from a source folder into Redis.

    Args:
        source (Path): Folder scanned (recursively) for batch files.
        ip (str): Redis host.
        port (int): Redis port.
        auth (str | None): Redis password, if the server requires one.
        ttl (int | None): Record time-to-live in seconds. Absent or <= 0 means
            records never expire.
        delete (bool): Delete each batch file and its marker once loaded.
        finish_suffix (str): Suffix of completion marker files.

    Raises:
        typer.Exit: With code 1 on any configuration, file, or store error.
    """
    try:
        store_settings = build_store_settings(ip, port, auth)
        load_settings = build_load_settings(ttl, delete, finish_suffix)
    except ConfigurationError as e:
        print_configuration_err(e)
        return

    pr(f"\n[green]Scanning: {source}...[/green]")
    pr(f"[green]Loading into Redis at {store_settings.address}...[/green]\n")

    try:
        with RedisStore(store_settings) as store:
            summary = run_load(store, source, load_settings)
    except ConfigurationError as e:
        print_configuration_err(e)
    except OrderingKeyError as e:
        print_ordering_key_err(e)
    except StoreError as e:
        print_store_err(e)
    except FileIOError as e:
        print_file_io_err(e)
    except Exception as e:  # noqa: BLE001
        # Catch-all for any unexpected errors - ensures users always see
        # a friendly message instead of a raw Python stack trace
        print_unexpected_err(e)
    else:
        print_summary(summary, load_settings)


def build_store_settings(host: str, port: int, password: str | None) -> StoreSettings:
    """
    Validates store flags and builds the connection settings.

    Raises:
        ConfigurationError: If the host is blank or the port is out of range.
    """
    if not host.strip():
        raise ConfigurationError("Redis ip must not be empty")
    if not 0 < port < 65536:
        raise ConfigurationError(f"Redis port must be between 1 and 65535, got {port}")

    return StoreSettings(host=host.strip(), port=port, password=password or None)


def build_load_settings(
    ttl: int | None, delete: bool, finish_suffix: str
) -> LoadSettings:
    """
    Validates load flags and builds the run settings.

    Raises:
        ConfigurationError: If the finish suffix is empty or contains a path separator.
    """
    if not finish_suffix:
        raise ConfigurationError("Finish suffix must not be empty")
    if "/" in finish_suffix or "\\" in finish_suffix:
        raise ConfigurationError(
            f"Finish suffix must not contain a path separator: {finish_suffix}"
        )

    return LoadSettings(
        ttl=ttl if ttl is not None else NO_EXPIRY_TTL,
        delete=delete,
        finish_suffix=finish_suffix,
    )


def print_summary(summary: LoadSummary, settings: LoadSettings) -> None:
    if summary.files_processed == 0:
        pr("[yellow]No completed batch files found.[/yellow]")
        return

    expiry = f"{settings.expiry}s" if settings.expiry else "none"
    pr(
        f"\n[bold green]Done.[/bold green] {summary.files_processed} files, "
        f"{summary.records_written} records written, "
        f"{summary.lines_skipped} lines skipped (ttl: {expiry})."
    )
    if settings.delete:
        pr(f"[green]Deleted {summary.files_deleted} files with their markers.[/green]")


def print_configuration_err(e: ConfigurationError) -> None:
    """
    Displays a configuration error and exits before anything is loaded.

    Raises:
        typer.Exit: Always raises with exit code 1 to terminate the application.
    """
    pr("❌ [bold red]Configuration Error[/bold red]")
    pr(e.message)
    pr("\n[yellow]Quick Fix:[/yellow] Run with --help to see the available options.")
    raise typer.Exit(code=1) from e


def print_ordering_key_err(e: OrderingKeyError) -> None:
    """
    Displays an error for a batch file whose name has no ordering key.

    No file is loaded when this happens, since the processing order cannot be
    established.

    Raises:
        typer.Exit: Always raises with exit code 1 to terminate the application.
    """
    pr("❌ [bold red]Invalid Batch File Name[/bold red]")
    pr(e.message)
    if e.file_path:
        pr(f"File path: [yellow]{e.file_path}[/yellow]")

    pr(
        "\n[yellow]Quick Fix:[/yellow] Batch file names must look like "
        "[green]<name>+<4 characters><number>.txt[/green]. "
        "Rename or move the file and run again."
    )
    raise typer.Exit(code=1) from e


def print_store_err(e: StoreError) -> None:
    """
    Displays a user-friendly error message for Redis failures.

    Raises:
        typer.Exit: Always raises with exit code 1 to terminate the application.
    """
    pr("❌ [bold red]Redis Error[/bold red]")
    pr(e.message)

    if isinstance(e, StoreConnectionError):
        pr(
            "\n[yellow]Quick Fix:[/yellow] Check the Redis ip, port and password, "
            "and that the server is running."
        )
    else:
        pr(
            "\n[yellow]Note:[/yellow] Files loaded before the failure were kept "
            "in Redis. Running again reloads them."
        )

    if e.original_exception:
        pr(f"\nTechnical details: {e.original_exception}")

    raise typer.Exit(code=1) from e


def print_file_io_err(e: FileIOError) -> None:
    """
    Displays a user-friendly error message for file I/O operation failures.

    Raises:
        typer.Exit: Always raises with exit code 1 to terminate the application.
    """
    pr("❌ [bold red]File I/O Error[/bold red]")
    pr(f"The app encountered an error while working with files: {e.message}")
    if e.file_path:
        pr(f"File path: [yellow]{e.file_path}[/yellow]")

    pr("\n[yellow]Quick Fix:[/yellow] Check file permissions.")
    if e.original_exception:
        pr(f"\nTechnical details: {e.original_exception}")

    raise typer.Exit(code=1) from e


def print_unexpected_err(e: Exception) -> None:
    """
    Displays a user-friendly error message for unexpected errors.

    Raises:
        typer.Exit: Always raises with exit code 1 to terminate the application.
    """
    pr("❌ [bold red]Unexpected Error[/bold red]")
    pr("An unexpected error occurred while loading batch files.")
    pr(f"\n[yellow]Error Type:[/yellow] {type(e).__name__}")
    pr(f"[yellow]Error Message:[/yellow] {str(e)}")

    pr("\n--- PLEASE REPORT THIS ---")
    pr(f"Error Type: {type(e).__name__}")
    pr(f"Error Message: {e}")
    if e.__cause__:
        pr(f"Caused by: {e.__cause__}")

    raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
