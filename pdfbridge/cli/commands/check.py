"""Check command for Adobe application availability."""

import sys

from rich.console import Console
from rich.table import Table

from pdfbridge.config import get_settings
from pdfbridge.services.acrobat import AcrobatComparer
from pdfbridge.services.indesign import InDesignConverter

console = Console()


def check() -> None:
    """Report whether InDesign and Acrobat are installed."""
    settings = get_settings()
    services = [
        ("Adobe InDesign", InDesignConverter(settings=settings)),
        ("Adobe Acrobat", AcrobatComparer(settings=settings)),
    ]

    table = Table(title="Adobe Applications", show_header=True, header_style="bold")
    table.add_column("Application", style="cyan")
    table.add_column("Path")
    table.add_column("Status")

    for label, service in services:
        installed = service.check_installation()
        status = "[green]installed[/green]" if installed else "[red]not found[/red]"
        table.add_row(label, service.app_path() or "(unsupported platform)", status)

    console.print(table)
    if sys.platform != "darwin":
        console.print("[dim]PDF comparison requires macOS.[/dim]")
