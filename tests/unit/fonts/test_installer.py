"""Tests for font installation and document font discovery."""

import sys
import time
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from pdfbridge.fonts.installer import (
    FONT_CACHE_COMMANDS,
    FontInstaller,
    InstalledResource,
    default_font_dir,
    find_document_fonts_dir,
)


@pytest.fixture
def font_file(tmp_path: Path) -> Path:
    source = tmp_path / "downloads" / "solway-bold.ttf"
    source.parent.mkdir()
    source.write_bytes(b"\x00\x01\x00\x00solway")
    return source


@pytest.fixture
def installer(tmp_path: Path) -> FontInstaller:
    return FontInstaller(install_dir=tmp_path / "fonts", cache_settle_delay=0, platform="win32")


class TestDefaultFontDir:
    """Tests for default_font_dir."""

    def test_macos(self):
        assert default_font_dir("darwin") == Path.home() / "Library" / "Fonts"

    def test_windows(self, monkeypatch):
        monkeypatch.setenv("LOCALAPPDATA", "/users/me/AppData/Local")
        assert default_font_dir("win32") == Path(
            "/users/me/AppData/Local/Microsoft/Windows/Fonts"
        )

    def test_linux(self):
        assert default_font_dir("linux") == Path.home() / ".local" / "share" / "fonts"


class TestInstallPermanently:
    """Tests for FontInstaller.install_permanently."""

    async def test_copies_font(self, installer, font_file, tmp_path):
        installed = await installer.install_permanently([font_file])

        dest = tmp_path / "fonts" / "solway-bold.ttf"
        assert installed == [InstalledResource("solway-bold", dest, newly_installed=True)]
        assert dest.read_bytes() == font_file.read_bytes()

    async def test_idempotent(self, installer, font_file):
        """Installing twice leaves the file alone and reports it as present."""
        await installer.install_permanently([font_file])
        installed = await installer.install_permanently([font_file])

        assert len(installed) == 1
        assert installed[0].newly_installed is False

    async def test_missing_source_is_skipped(self, installer, font_file, tmp_path):
        installed = await installer.install_permanently([tmp_path / "gone.ttf", font_file])

        assert [resource.name for resource in installed] == ["solway-bold"]


class TestInvalidateCache:
    """Tests for FontInstaller.invalidate_cache."""

    async def test_no_command_on_windows(self, installer):
        await installer.invalidate_cache()

    async def test_settle_delay_applied(self, tmp_path):
        installer = FontInstaller(tmp_path, cache_settle_delay=0.05, platform="win32")
        start = time.monotonic()

        await installer.invalidate_cache()

        assert time.monotonic() - start >= 0.05

    @pytest.mark.posix
    @pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
    @pytest.mark.parametrize(
        "command",
        [
            ["sh", "-c", "exit 0"],
            ["sh", "-c", "echo 'cache busy' >&2; exit 1"],
            ["/nonexistent/pdfbridge-test/fc-cache"],
        ],
    )
    async def test_command_failures_do_not_raise(self, tmp_path, monkeypatch, command):
        monkeypatch.setitem(FONT_CACHE_COMMANDS, "testos", command)
        installer = FontInstaller(tmp_path, cache_settle_delay=0, platform="testos")

        await installer.invalidate_cache()


class TestDocumentFonts:
    """Tests for package 'Document fonts' handling."""

    def test_folder_beside_document(self, sample_package):
        assert find_document_fonts_dir(sample_package) == sample_package.parent / "Document fonts"

    def test_folder_beside_parent(self, temp_dir):
        document = temp_dir / "package" / "Links" / "brochure.indd"
        document.parent.mkdir(parents=True)
        document.write_bytes(b"indd")
        (temp_dir / "package" / "Document fonts").mkdir()

        assert find_document_fonts_dir(document) == temp_dir / "package" / "Document fonts"

    def test_search_root_skips_hidden_folders(self, temp_dir):
        document = temp_dir / "jobs" / "a" / "b" / "brochure.indd"
        document.parent.mkdir(parents=True)
        (temp_dir / "jobs" / ".cache" / "Document fonts").mkdir(parents=True)
        (temp_dir / "jobs" / "other" / "Document fonts").mkdir(parents=True)

        found = find_document_fonts_dir(document, search_root=temp_dir / "jobs")

        assert found == temp_dir / "jobs" / "other" / "Document fonts"

    def test_no_folder(self, sample_document):
        assert find_document_fonts_dir(sample_document) is None

    def test_collect_document_fonts(self, installer, sample_package):
        fonts = installer.collect_document_fonts(sample_package)

        assert [font.name for font in fonts] == ["Poppins-Medium.otf", "Solway-Bold.ttf"]

    async def test_prepare_document_fonts(self, installer, sample_package, monkeypatch):
        invalidate = AsyncMock()
        monkeypatch.setattr(installer, "invalidate_cache", invalidate)

        names = await installer.prepare_document_fonts(sample_package)

        assert names == ["Poppins-Medium", "Solway-Bold"]
        assert (installer.install_dir / "Solway-Bold.ttf").exists()
        invalidate.assert_awaited_once()

    async def test_cache_untouched_when_fonts_already_installed(
        self, installer, sample_package, monkeypatch
    ):
        await installer.prepare_document_fonts(sample_package)
        invalidate = AsyncMock()
        monkeypatch.setattr(installer, "invalidate_cache", invalidate)

        names = await installer.prepare_document_fonts(sample_package)

        assert names == ["Poppins-Medium", "Solway-Bold"]
        invalidate.assert_not_awaited()

    async def test_prepare_without_fonts(self, installer, sample_document):
        assert await installer.prepare_document_fonts(sample_document) == []
