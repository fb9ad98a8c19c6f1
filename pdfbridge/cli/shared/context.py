"""Task context shared by the CLI commands."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console

from pdfbridge.config import PdfBridgeSettings, get_settings
from pdfbridge.exceptions import PdfBridgeError, ResourceMissingError
from pdfbridge.utils.logging import get_logger, setup_task_logging

log = get_logger(__name__)


@dataclass
class TaskContext:
    """Initialized state for one CLI task: settings, logging and output dir."""

    settings: PdfBridgeSettings
    task_id: str
    log_path: Path
    output_dir: Path
    console: Console = field(default_factory=Console)

    @classmethod
    def create(
        cls,
        command_prefix: str,
        output: Path | None = None,
        verbose: bool = False,
        console: Console | None = None,
    ) -> "TaskContext":
        """Load settings, set up task logging and resolve the output directory.

        Args:
            command_prefix: Prefix for log files (e.g., "convert", "batch")
            output: Output directory from the command line
            verbose: Show debug logs on the console
            console: Optional Rich console instance
        """
        settings = get_settings()
        console = console or Console()

        task_id, log_path = setup_task_logging(
            log_dir=settings.log_dir,
            prefix=command_prefix,
            verbose=verbose,
        )
        if verbose:
            log.info("Logs will be saved to", log_file=str(log_path))
        log.info("Task Configuration", task_id=task_id, config=settings.model_dump())

        output_dir = output or settings.get_output_dir()
        output_dir.mkdir(parents=True, exist_ok=True)

        return cls(
            settings=settings,
            task_id=task_id,
            log_path=log_path,
            output_dir=output_dir,
            console=console,
        )

    def fail(self, error: PdfBridgeError) -> NoReturn:
        """Print a pdfbridge error and exit with status 1."""
        log.error("Task Failed", code=error.code, error=error.message)
        print_error(self.console, error)
        raise typer.Exit(1) from error


def print_error(console: Console, error: PdfBridgeError) -> None:
    """Render an error with its code; missing fonts are listed one per line."""
    console.print(f"[bold red]Error [{error.code}]:[/bold red]", end=" ")
    console.print(error.message, markup=False, highlight=False)
    if isinstance(error, ResourceMissingError) and error.resource_names:
        console.print("[yellow]Missing fonts:[/yellow]")
        for name in error.resource_names:
            console.print(f"  - {name}", markup=False)
