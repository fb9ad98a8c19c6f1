"""Install font files for the current user and refresh the OS font cache.

Installed fonts are never removed again: once a font has been copied into the
user font directory it belongs to the host.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

import anyio

from pdfbridge.config.constants import (
    DEFAULT_FONT_CACHE_SETTLE_DELAY,
    DOCUMENT_FONTS_DIRNAME,
    FONT_EXTENSIONS,
)
from pdfbridge.utils.fs import discover_files, is_hidden
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)

# Commands that drop the OS font cache so newly copied fonts are picked up
FONT_CACHE_COMMANDS: dict[str, list[str]] = {
    "darwin": ["atsutil", "databases", "-remove"],
    "linux": ["fc-cache", "-f"],
}

_CACHE_COMMAND_TIMEOUT = 60


def default_font_dir(platform: str | None = None) -> Path:
    """Per-user font directory for a platform."""
    platform = platform or sys.platform
    if platform == "darwin":
        return Path.home() / "Library" / "Fonts"
    if platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA", str(Path.home() / "AppData" / "Local"))
        return Path(local_app_data) / "Microsoft" / "Windows" / "Fonts"
    return Path.home() / ".local" / "share" / "fonts"


@dataclass(frozen=True)
class InstalledResource:
    """A font file present in the host font directory."""

    name: str
    path: Path
    newly_installed: bool


def find_document_fonts_dir(document: Path, search_root: Path | None = None) -> Path | None:
    """Locate the ``Document fonts`` folder of an InDesign package.

    Looks beside the document, then beside its parent, then anywhere below
    ``search_root`` (skipping hidden folders and ``__MACOSX``).
    """
    for candidate in (
        document.parent / DOCUMENT_FONTS_DIRNAME,
        document.parent.parent / DOCUMENT_FONTS_DIRNAME,
    ):
        if candidate.is_dir():
            return candidate

    if search_root is None or not search_root.is_dir():
        return None

    for root, dirs, _ in os.walk(search_root):
        dirs[:] = sorted(d for d in dirs if not is_hidden(Path(d)))
        if DOCUMENT_FONTS_DIRNAME in dirs:
            return Path(root) / DOCUMENT_FONTS_DIRNAME
    return None


class FontInstaller:
    """Copies fonts into the user font directory.

    Args:
        install_dir: Target directory (default: the platform's per-user font dir)
        cache_settle_delay: Seconds to wait after a cache refresh
        platform: ``sys.platform`` value, overridable for tests
    """

    def __init__(
        self,
        install_dir: Path | str | None = None,
        cache_settle_delay: float = DEFAULT_FONT_CACHE_SETTLE_DELAY,
        platform: str | None = None,
    ) -> None:
        self.platform = platform or sys.platform
        self.install_dir = Path(install_dir) if install_dir else default_font_dir(self.platform)
        self.cache_settle_delay = cache_settle_delay

    async def install_permanently(self, paths: list[Path]) -> list[InstalledResource]:
        """Copy font files into the install dir.

        Files already present under the same name are left alone and reported
        with ``newly_installed=False``. Per-file failures are logged and skipped.
        """
        self.install_dir.mkdir(parents=True, exist_ok=True)

        installed: list[InstalledResource] = []
        for source in paths:
            dest = self.install_dir / source.name
            if dest.exists():
                log.debug("Font already installed", font=source.name)
                installed.append(InstalledResource(source.stem, dest, newly_installed=False))
                continue
            try:
                await anyio.to_thread.run_sync(shutil.copyfile, source, dest)
            except OSError as e:
                log.warning("Failed to install font", font=source.name, error=str(e))
                continue
            log.info("Font installed", font=source.name, path=str(dest))
            installed.append(InstalledResource(source.stem, dest, newly_installed=True))

        return installed

    async def invalidate_cache(self) -> None:
        """Drop the OS font cache, then wait for it to rebuild.

        The settle delay is applied even when the cache command fails.
        """
        command = FONT_CACHE_COMMANDS.get(self.platform)
        if command is not None:
            await self._run_cache_command(command)

        if self.cache_settle_delay > 0:
            log.debug("Waiting for font cache to settle", seconds=self.cache_settle_delay)
            await asyncio.sleep(self.cache_settle_delay)

    async def _run_cache_command(self, command: list[str]) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await asyncio.wait_for(process.communicate(), _CACHE_COMMAND_TIMEOUT)
        except (OSError, asyncio.TimeoutError) as e:
            log.warning(
                "Could not refresh font cache", command=command[0], error=str(e) or "timeout"
            )
            return

        if process.returncode != 0:
            log.warning(
                "Font cache refresh failed",
                command=command[0],
                exit_code=process.returncode,
                stderr=stderr.decode("utf-8", errors="replace").strip(),
            )
        else:
            log.debug("Font cache cleared", command=command[0])

    def collect_document_fonts(
        self, document: Path, search_root: Path | None = None
    ) -> list[Path]:
        """Font files from the package's ``Document fonts`` folder (recursive)."""
        fonts_dir = find_document_fonts_dir(document, search_root)
        if fonts_dir is None:
            log.debug("No Document fonts folder found", document=document.name)
            return []
        fonts = discover_files(fonts_dir, recursive=True, extensions=FONT_EXTENSIONS)
        log.debug("Document fonts found", folder=str(fonts_dir), count=len(fonts))
        return fonts

    async def prepare_document_fonts(
        self, document: Path, search_root: Path | None = None
    ) -> list[str]:
        """Install a package's bundled fonts and return their base names as hints."""
        fonts = self.collect_document_fonts(document, search_root)
        if not fonts:
            return []

        installed = await self.install_permanently(fonts)
        if any(resource.newly_installed for resource in installed):
            await self.invalidate_cache()

        names = [resource.name for resource in installed]
        log.info("Document fonts available", document=document.name, fonts=names)
        return names
