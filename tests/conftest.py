"""Pytest configuration and fixtures."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    """Create an output directory."""
    output = temp_dir / "output"
    output.mkdir()
    return output


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Run in an empty directory so no pdfbridge.yaml or .env is picked up."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("PDFBRIDGE_"):
            monkeypatch.delenv(key)

    from pdfbridge.config.settings import get_settings

    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def sample_document(temp_dir: Path) -> Path:
    """Create a fake InDesign document inside a package folder."""
    package = temp_dir / "Brochure Folder"
    package.mkdir()
    document = package / "brochure.indd"
    document.write_bytes(b"\x06\x06\xed\xf5\xd8\x1d\x46\xe5\xbd\x31\xef\xe7\xfe\x74\xb7\x1d")
    return document


@pytest.fixture
def sample_package(sample_document: Path) -> Path:
    """A package with a 'Document fonts' folder holding two fonts."""
    fonts_dir = sample_document.parent / "Document fonts"
    fonts_dir.mkdir()
    (fonts_dir / "Solway-Bold.ttf").write_bytes(b"\x00\x01\x00\x00solway")
    (fonts_dir / "Poppins-Medium.otf").write_bytes(b"OTTOpoppins")
    (fonts_dir / "readme.txt").write_text("not a font", encoding="utf-8")
    return sample_document


@pytest.fixture
def sample_pdfs(temp_dir: Path) -> tuple[Path, Path]:
    """Two small PDF files to compare."""
    first = temp_dir / "correct.pdf"
    second = temp_dir / "revised.pdf"
    first.write_bytes(b"%PDF-1.4 first")
    second.write_bytes(b"%PDF-1.4 second")
    return first, second


@pytest.fixture(scope="session", autouse=True)
def cleanup_after_all_tests():
    """Remove log directories created by CLI tests in the project root."""
    yield

    logs_dir = PROJECT_ROOT / ".logs"
    if logs_dir.exists():
        shutil.rmtree(logs_dir, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_lock_files(tmp_path, monkeypatch):
    """Keep host-wide lock files out of the real temp directory."""
    monkeypatch.setattr(
        "pdfbridge.automation.session.AUTOMATION_LOCK_FILE", tmp_path / "automation.lock"
    )
    monkeypatch.setattr("pdfbridge.fonts.registry.FONT_LOCK_FILE", tmp_path / "fonts.lock")
