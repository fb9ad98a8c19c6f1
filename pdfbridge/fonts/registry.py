"""Host font registry.

The user font directory and the OS font cache are shared by every job on the
machine. All mutation of that state (downloads, installs, cache refreshes)
goes through one :class:`HostFontRegistry`, serialized in-process by an
asyncio lock and across processes by an OS file lock.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from pdfbridge.config.constants import FONT_LOCK_FILE
from pdfbridge.config.settings import FontConfig
from pdfbridge.fonts.downloader import FontDownloader
from pdfbridge.fonts.installer import FontInstaller, InstalledResource
from pdfbridge.utils.locks import hold_file_lock
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class RemediationReport:
    """What one remediation pass achieved.

    Attributes:
        acquired: Requested names that were downloaded
        installed: Fonts present in the host font directory afterwards
        failed: Requested names that could not be acquired or installed
    """

    acquired: list[str] = field(default_factory=list)
    installed: list[InstalledResource] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def installed_names(self) -> list[str]:
        return [resource.name for resource in self.installed]

    @property
    def any_installed(self) -> bool:
        return bool(self.installed)


class HostFontRegistry:
    """Single serialization point for host font state.

    Args:
        downloader: Font acquisition service
        installer: Font installation service
        download_dir: Where downloaded font files are kept before install
        lock_path: File lock shared with other pdfbridge processes
    """

    def __init__(
        self,
        downloader: FontDownloader,
        installer: FontInstaller,
        download_dir: Path,
        lock_path: Path | None = None,
    ) -> None:
        self.downloader = downloader
        self.installer = installer
        self.download_dir = download_dir
        self.lock_path = lock_path or FONT_LOCK_FILE
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: FontConfig) -> HostFontRegistry:
        downloader = FontDownloader(
            extra_mappings=config.extra_mappings,
            timeout=config.download_timeout,
        )
        installer = FontInstaller(
            install_dir=config.install_dir,
            cache_settle_delay=config.cache_settle_delay,
        )
        return cls(downloader, installer, Path(config.download_dir))

    async def remediate(self, names: list[str] | tuple[str, ...]) -> RemediationReport:
        """Acquire and install missing fonts.

        Each name is acquired independently; failures are logged and skipped.
        Acquired files are installed idempotently, and the OS font cache is
        refreshed when at least one font was installed.
        """
        report = RemediationReport()
        async with self._lock, hold_file_lock(self.lock_path):
            downloaded: list[tuple[str, Path]] = []
            for name in names:
                path = await self.downloader.acquire(name, self.download_dir)
                if path is None:
                    report.failed.append(name)
                    continue
                report.acquired.append(name)
                downloaded.append((name, path))

            if downloaded:
                report.installed = await self.installer.install_permanently(
                    [path for _, path in downloaded]
                )
                installed_paths = {resource.name for resource in report.installed}
                for name, path in downloaded:
                    if path.stem not in installed_paths:
                        report.failed.append(name)

            if report.any_installed:
                await self.installer.invalidate_cache()

        log.info(
            "Font remediation finished",
            requested=len(names),
            acquired=report.acquired,
            installed=report.installed_names,
            failed=report.failed,
        )
        return report

    async def install_document_fonts(
        self, document: Path, search_root: Path | None = None
    ) -> list[str]:
        """Install the fonts bundled with a package; returns their names as hints."""
        async with self._lock, hold_file_lock(self.lock_path):
            return await self.installer.prepare_document_fonts(document, search_root)


_registry: HostFontRegistry | None = None


def get_font_registry(config: FontConfig | None = None) -> HostFontRegistry:
    """Get the process-wide host font registry."""
    global _registry
    if _registry is None:
        if config is None:
            from pdfbridge.config.settings import get_settings

            config = get_settings().fonts
        _registry = HostFontRegistry.from_config(config)
    return _registry
