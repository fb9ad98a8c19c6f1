"""Convert command for single document conversion."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from pdfbridge.cli.shared.context import TaskContext
from pdfbridge.exceptions import PdfBridgeError
from pdfbridge.services.indesign import InDesignConverter
from pdfbridge.utils.logging import get_logger

console = Console()
log = get_logger(__name__)


def convert(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="InDesign document (.indd or .idml) to convert.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory for the PDF.",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    hint: Annotated[
        list[str] | None,
        typer.Option(
            "--hint",
            help="Font name known to be available (repeatable).",
        ),
    ] = None,
    no_remediate: Annotated[
        bool,
        typer.Option(
            "--no-remediate",
            help="Do not download and install missing fonts.",
        ),
    ] = False,
    timeout: Annotated[
        int | None,
        typer.Option(
            "--timeout",
            help="InDesign timeout in seconds.",
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
    """Convert an InDesign document to PDF.

    Examples:
        pdfbridge convert brochure.indd
        pdfbridge convert brochure.indd -o ./pdf --hint "Solway-Bold"
    """
    ctx = TaskContext.create("convert", output=output, verbose=verbose, console=console)

    converter = InDesignConverter(
        settings=ctx.settings,
        auto_remediate=False if no_remediate else None,
        timeout=timeout,
    )

    log.info(
        "Starting conversion",
        input_file=str(input_file),
        output_dir=str(ctx.output_dir),
        hints=hint or [],
    )

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=ctx.console,
            transient=True,
            disable=verbose,
        ) as progress:
            progress.add_task(f"Converting {input_file.name}...", total=None)
            pdf_path = asyncio.run(converter.convert(input_file, ctx.output_dir, hint or ()))
    except PdfBridgeError as e:
        ctx.fail(e)

    log.info("Task Completed Successfully", output_path=str(pdf_path))
    ctx.console.print("[bold green]Conversion completed![/bold green]")
    ctx.console.print(f"  Output: {pdf_path}")
