"""Batch command for converting every InDesign document in a directory."""

import asyncio
import json
import shutil
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from pdfbridge.cli.shared.context import TaskContext
from pdfbridge.exceptions import PdfBridgeError
from pdfbridge.services.indesign import InDesignConverter
from pdfbridge.utils.fs import discover_files, get_unique_path, temporary_directory
from pdfbridge.utils.logging import get_console, get_logger

console = get_console()
log = get_logger(__name__)

DEFAULT_REPORT_NAME = "batch-errors.json"


@dataclass
class BatchFailure:
    """One document that could not be converted."""

    file: str
    code: str
    message: str


@dataclass
class BatchResult:
    """Outcome of a batch run."""

    total: int = 0
    converted: list[Path] = field(default_factory=list)
    failures: list[BatchFailure] = field(default_factory=list)


async def convert_documents(
    converter: InDesignConverter,
    documents: list[Path],
    output_dir: Path,
    progress: Progress | None = None,
) -> BatchResult:
    """Convert documents one at a time and copy each PDF to ``output_dir/<stem>.pdf``.

    A failing document is recorded and the batch moves on.
    """
    result = BatchResult(total=len(documents))
    task_id = progress.add_task("Converting...", total=len(documents)) if progress else None

    for index, document in enumerate(documents, 1):
        log.info("Processing document", index=index, total=len(documents), file=document.name)
        if progress is not None and task_id is not None:
            progress.update(task_id, description=f"Converting {document.name}")

        with temporary_directory(prefix="pdfbridge_batch_") as work_dir:
            try:
                pdf_path = await converter.convert(document, work_dir)
            except PdfBridgeError as e:
                log.warning("Document failed", file=document.name, code=e.code, error=e.message)
                result.failures.append(BatchFailure(document.name, e.code, e.message))
            else:
                destination = get_unique_path(output_dir / f"{document.stem}.pdf")
                shutil.copyfile(pdf_path, destination)
                log.info("PDF saved", file=document.name, output=str(destination))
                result.converted.append(destination)

        if progress is not None and task_id is not None:
            progress.advance(task_id)

    return result


def write_error_report(report_path: Path, source_dir: Path, result: BatchResult) -> Path:
    """Write the failures of a batch as JSON."""
    report = {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "source": str(source_dir),
        "total": result.total,
        "failed": len(result.failures),
        "errors": [asdict(failure) for failure in result.failures],
    }
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    return report_path


def batch(
    source_dir: Annotated[
        Path,
        typer.Argument(
            help="Directory containing InDesign documents.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory for the PDFs.",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    report: Annotated[
        Path | None,
        typer.Option(
            "--report",
            help=f"Error report path (default: <output>/{DEFAULT_REPORT_NAME}).",
            dir_okay=False,
            resolve_path=True,
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
    """Convert every .indd/.idml document under a directory to PDF.

    Documents are converted one after another; InDesign runs a single job at
    a time.

    Examples:
        pdfbridge batch ./packages -o ./pdf
    """
    ctx = TaskContext.create("batch", output=output, verbose=verbose, console=console)

    documents = discover_files(source_dir, recursive=True)
    if not documents:
        ctx.console.print(f"[yellow]No InDesign documents found in {source_dir}[/yellow]")
        return

    log.info("Starting batch conversion", source=str(source_dir), files=len(documents))
    ctx.console.print(f"Found [bold]{len(documents)}[/bold] document(s) to convert")

    converter = InDesignConverter(settings=ctx.settings)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=ctx.console,
        transient=True,
        disable=verbose,
    ) as progress:
        result = asyncio.run(convert_documents(converter, documents, ctx.output_dir, progress))

    _display_summary(result)

    if result.failures:
        report_path = report or get_unique_path(ctx.output_dir / DEFAULT_REPORT_NAME)
        write_error_report(report_path, source_dir, result)
        log.info("Error report written", path=str(report_path), errors=len(result.failures))
        ctx.console.print(f"[yellow]Error report saved:[/yellow] {report_path}")
        raise typer.Exit(1)

    ctx.console.print("[bold green]All documents converted successfully![/bold green]")


def _display_summary(result: BatchResult) -> None:
    console.print()

    table = Table(title="Batch Summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Total Files", str(result.total))
    table.add_row("Converted", f"[green]{len(result.converted)}[/green]")
    table.add_row("Failed", f"[red]{len(result.failures)}[/red]")
    if result.total:
        table.add_row("Success Rate", f"{len(result.converted) / result.total * 100:.1f}%")

    console.print(table)

    if result.failures:
        console.print()
        console.print("[bold red]Failed Files:[/bold red]")
        for failure in result.failures[:10]:
            first_line = failure.message.splitlines()[0] if failure.message else ""
            console.print(f"  - {failure.file} [{failure.code}]: {first_line}", markup=False)
        if len(result.failures) > 10:
            console.print(f"  ... and {len(result.failures) - 10} more")
