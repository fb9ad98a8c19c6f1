"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from pdfbridge import __version__
from pdfbridge.cli.commands.batch import batch
from pdfbridge.cli.commands.check import check
from pdfbridge.cli.commands.compare import compare
from pdfbridge.cli.commands.config import config_app
from pdfbridge.cli.commands.convert import convert

# Load environment variables from .env file
load_dotenv()

# Create main Typer app
app = typer.Typer(
    name="pdfbridge",
    help="Convert InDesign documents to PDF and compare PDFs with desktop Adobe apps.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Console for output
console = Console()

# Register commands
app.command(name="convert", help="Convert an InDesign document to PDF.")(convert)
app.command(name="compare", help="Compare two PDFs with Adobe Acrobat.")(compare)
app.command(name="batch", help="Convert all InDesign documents in a directory.")(batch)
app.command(name="check", help="Check that InDesign and Acrobat are installed.")(check)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]pdfbridge[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """pdfbridge - drive Adobe InDesign and Acrobat from the command line.

    Converts .indd/.idml documents to PDF (installing missing fonts and
    retrying once when needed) and compares PDFs with Acrobat's Compare Files.
    """
    pass


if __name__ == "__main__":
    app()
