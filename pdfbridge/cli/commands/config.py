"""Config command for configuration management."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pdfbridge.config import get_settings
from pdfbridge.config.constants import CONFIG_LOCATIONS, DEFAULT_CONFIG_FILE

# Create config sub-app
config_app = typer.Typer(help="Configuration management.")
console = Console()


@config_app.command("show")
def show() -> None:
    """Show current configuration."""
    settings = get_settings()

    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    # Global settings
    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Directory", settings.log_dir)
    table.add_row("Output Directory", settings.output.default_dir)

    # InDesign settings
    table.add_row("InDesign Path", settings.indesign.app_path or "(platform default)")
    table.add_row("InDesign App Name", settings.indesign.app_name)
    table.add_row("InDesign Timeout", f"{settings.indesign.timeout}s")
    table.add_row("Export Preset", settings.indesign.export_preset or "(InDesign default)")
    table.add_row("Collect Document Fonts", str(settings.indesign.collect_document_fonts))

    # Acrobat settings
    table.add_row("Acrobat Path", settings.acrobat.app_path or "(default)")
    table.add_row("Acrobat Timeout", f"{settings.acrobat.timeout}s")
    table.add_row("Report Settle Delay", f"{settings.acrobat.settle_delay}s")
    table.add_row("cliclick Path", settings.acrobat.cliclick_path)

    # Font remediation settings
    table.add_row("Auto Remediate Fonts", str(settings.fonts.auto_remediate))
    table.add_row("Font Install Directory", settings.fonts.install_dir or "(user font directory)")
    table.add_row("Font Download Directory", settings.fonts.download_dir)
    table.add_row("Font Cache Settle Delay", f"{settings.fonts.cache_settle_delay}s")
    if settings.fonts.extra_mappings:
        table.add_row("Extra Font Mappings", ", ".join(sorted(settings.fonts.extra_mappings)))

    # Supervisor settings
    table.add_row("Kill Grace Period", f"{settings.supervisor.kill_grace}s")

    console.print(table)
    console.print()


# Default configuration template
DEFAULT_CONFIG_TEMPLATE = """# pdfbridge configuration
# Environment variables with the PDFBRIDGE_ prefix override these values,
# e.g. PDFBRIDGE_INDESIGN__TIMEOUT=600

log_level: "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
log_dir: ".logs"

indesign:
  # app_path: "C:\\\\Program Files\\\\Adobe\\\\Adobe InDesign 2024\\\\InDesign.exe"
  app_name: "Adobe InDesign 2026"  # Application addressed on macOS
  timeout: 300  # Seconds per attempt
  # export_preset: "[High Quality Print]"
  collect_document_fonts: true  # Install fonts from the package's "Document fonts" folder

acrobat:
  # app_path: "/Applications/Adobe Acrobat DC/Adobe Acrobat.app"
  timeout: 300
  settle_delay: 10  # Seconds to wait for Acrobat to finish writing the report
  cliclick_path: "/opt/homebrew/bin/cliclick"
  report_candidates:
    - "[Compare Report] error.pdf"
    - "[Compare Report] correct.pdf"
  layout:
    launch_delay: 8
    see_all_tools_right_offset: 120
    see_all_tools_top_offset: 140
    search_box_top_offset: 150
    compare_completion_delay: 30

fonts:
  auto_remediate: true  # Download and install missing fonts, then retry once
  # install_dir: "~/Library/Fonts"
  download_dir: ".pdfbridge-fonts"
  cache_settle_delay: 5
  # extra_mappings:
  #   inter-bold:
  #     family: "Inter"
  #     variant: "700"

supervisor:
  kill_grace: 5  # Seconds between SIGTERM and SIGKILL after a timeout

output:
  default_dir: "output"
"""


@config_app.command("init")
def init(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Path to create config file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing config file.",
        ),
    ] = False,
) -> None:
    """Initialize a configuration file."""
    config_path = path or Path.cwd() / DEFAULT_CONFIG_FILE

    if config_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists at {config_path}")
        console.print("Use --force to overwrite.")
        raise typer.Exit(1)

    config_path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    console.print(f"[green]Created config file at:[/green] {config_path}")


@config_app.command("locations")
def locations() -> None:
    """Show configuration file search locations."""
    console.print("\n[bold blue]Configuration File Locations[/bold blue]\n")

    for i, loc in enumerate(CONFIG_LOCATIONS, 1):
        exists = "[green]exists[/green]" if loc.exists() else "[dim]not found[/dim]"
        console.print(f"  {i}. {loc} ({exists})")

    console.print()
    console.print("[dim]Environment variables with PDFBRIDGE_ prefix are also supported.[/dim]")
    console.print()
