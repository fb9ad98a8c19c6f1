"""Compare command for PDF comparison through Acrobat."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from pdfbridge.cli.shared.context import TaskContext
from pdfbridge.exceptions import PdfBridgeError
from pdfbridge.services.acrobat import AcrobatComparer
from pdfbridge.utils.logging import get_logger

console = Console()
log = get_logger(__name__)

_PDF_ARGUMENT = {
    "exists": True,
    "file_okay": True,
    "dir_okay": False,
    "readable": True,
    "resolve_path": True,
}


def compare(
    file_a: Annotated[
        Path,
        typer.Argument(help="Original (old) PDF.", **_PDF_ARGUMENT),
    ],
    file_b: Annotated[
        Path,
        typer.Argument(help="Revised (new) PDF.", **_PDF_ARGUMENT),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory for the comparison report.",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    timeout: Annotated[
        int | None,
        typer.Option(
            "--timeout",
            help="Acrobat timeout in seconds.",
            min=1,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """Compare two PDFs with Adobe Acrobat (macOS only).

    Examples:
        pdfbridge compare v1.pdf v2.pdf
        pdfbridge compare v1.pdf v2.pdf -o ./reports
    """
    ctx = TaskContext.create("compare", output=output, verbose=verbose, console=console)
    comparer = AcrobatComparer(settings=ctx.settings, timeout=timeout)

    log.info(
        "Starting comparison",
        file_a=str(file_a),
        file_b=str(file_b),
        output_dir=str(ctx.output_dir),
    )

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=ctx.console,
            transient=True,
            disable=verbose,
        ) as progress:
            progress.add_task("Comparing in Acrobat...", total=None)
            report_path = asyncio.run(comparer.compare(file_a, file_b, ctx.output_dir))
    except PdfBridgeError as e:
        ctx.fail(e)

    log.info("Task Completed Successfully", output_path=str(report_path))
    ctx.console.print("[bold green]Comparison completed![/bold green]")
    ctx.console.print(f"  Report: {report_path}")
