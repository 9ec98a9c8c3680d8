# src/procwatch/cli.py
"""Command-line interface for procwatch."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from . import __version__
from .cancellation import CancellationToken, SignalCancellationSource
from .config import build_supervision_config, load_config
from .errors import ExitCode, ProcwatchError
from .log import setup_logging
from .supervisor import Supervisor

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="procwatch",
    help="Run an executable and restart it whenever it exits abnormally.",
    add_completion=False,
)

console = Console(stderr=True)


def version_callback(value: bool):
    """Print the version and exit."""
    if value:
        print(f"procwatch version: {__version__}")
        raise typer.Exit()


# Option parsing stops at EXECUTABLE so the child's own flags pass through.
@app.command(context_settings={"allow_interspersed_args": False})
def main(
    executable: str = typer.Argument(..., help="Executable file path."),
    args: Optional[List[str]] = typer.Argument(
        None, help="Arguments passed to the executable."
    ),
    stdin: Optional[Path] = typer.Option(
        None, "--stdin", "-i", help="Redirect the child's stdin from this file."
    ),
    stdout: Optional[Path] = typer.Option(
        None, "--stdout", "-o", help="Redirect the child's stdout to this file (truncated)."
    ),
    stderr: Optional[Path] = typer.Option(
        None, "--stderr", "-e", help="Redirect the child's stderr to this file (truncated)."
    ),
    delay: Optional[int] = typer.Option(
        None, "--delay", "-t", min=0, help="Restart delay in milliseconds. [default: 1000]"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a procwatch.yaml configuration file."
    ),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
):
    """
    Start EXECUTABLE and keep it running.

    The child is restarted after a non-zero exit. procwatch stops when the
    child exits with code 0, is killed by a signal, or procwatch itself
    receives SIGTERM or SIGINT.
    """
    try:
        file_config = load_config(config_path)
        setup_logging(file_config.logging)
        config = build_supervision_config(
            executable,
            args or [],
            file_config,
            delay_ms=delay,
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
        )
    except ProcwatchError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
        raise typer.Exit(code=e.exit_code)

    token = CancellationToken()
    with SignalCancellationSource(token):
        try:
            result = Supervisor(config, token).run()
        except ProcwatchError as e:
            # Already reported by the supervisor's error log.
            raise typer.Exit(code=e.exit_code)

    logger.debug(
        f"Supervision finished ({result.reason.value}) after {result.spawns} spawn(s), "
        f"{result.restarts} restart(s)."
    )


def run_cli():
    """Main entry point for the CLI application."""
    try:
        app()
    except typer.Exit:
        raise
    except ProcwatchError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
        sys.exit(e.exit_code)
    except Exception as e:
        console.print(f"[bold red]An unexpected error occurred:[/bold red] {e}")
        sys.exit(ExitCode.UNKNOWN_ERROR)


if __name__ == "__main__":
    run_cli()
