"""Tests for batch command."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pdfbridge.cli.commands.batch import (
    BatchFailure,
    BatchResult,
    convert_documents,
    write_error_report,
)
from pdfbridge.cli.main import app
from pdfbridge.exceptions import ResourceMissingError, ValidationError


class FakeConverter:
    """Writes a PDF per document; documents named ``bad*`` fail."""

    def __init__(self, *args, **kwargs) -> None:
        self.calls: list[tuple[Path, Path]] = []

    async def convert(self, document: Path, work_dir: Path) -> Path:
        self.calls.append((document, work_dir))
        if document.stem == "bad-fonts":
            raise ResourceMissingError(document, "Missing Fonts (1)", ["Solway-Bold"])
        if document.stem.startswith("bad"):
            raise ValidationError(document, "PDF export failed: disk full\nsecond line")
        pdf = work_dir / f"{document.stem}.pdf"
        pdf.write_bytes(b"%PDF-1.7")
        return pdf


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    source = tmp_path / "packages"
    (source / "Brochure Folder").mkdir(parents=True)
    (source / "Brochure Folder" / "brochure.indd").write_bytes(b"indd")
    (source / "flyer.idml").write_bytes(b"idml")
    (source / "notes.txt").write_text("skip me")
    return source


class TestConvertDocuments:
    """Tests for convert_documents."""

    async def test_continues_after_failures(self, tmp_path):
        documents = [tmp_path / "a.indd", tmp_path / "bad.indd", tmp_path / "c.indd"]
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        converter = FakeConverter()

        result = await convert_documents(converter, documents, output_dir)

        assert result.total == 3
        assert result.converted == [output_dir / "a.pdf", output_dir / "c.pdf"]
        assert result.failures == [
            BatchFailure(
                "bad.indd", "CONVERSION_FAILED", "PDF export failed: disk full\nsecond line"
            )
        ]
        assert (output_dir / "a.pdf").read_bytes() == b"%PDF-1.7"

    async def test_work_dirs_are_temporary(self, tmp_path):
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        converter = FakeConverter()

        await convert_documents(converter, [tmp_path / "a.indd"], output_dir)

        work_dir = converter.calls[0][1]
        assert work_dir.name.startswith("pdfbridge_batch_")
        assert not work_dir.exists()

    async def test_existing_pdf_is_not_overwritten(self, tmp_path):
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        (output_dir / "a.pdf").write_bytes(b"keep")

        result = await convert_documents(
            FakeConverter(), [tmp_path / "a.indd"], output_dir
        )

        assert result.converted == [output_dir / "a_1.pdf"]
        assert (output_dir / "a.pdf").read_bytes() == b"keep"


def test_write_error_report(tmp_path):
    result = BatchResult(
        total=2,
        failures=[BatchFailure("bad.indd", "TIMEOUT", "InDesign process timed out after 300s.")],
    )

    report_path = write_error_report(tmp_path / "reports" / "errors.json", tmp_path, result)

    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["source"] == str(tmp_path)
    assert report["total"] == 2
    assert report["failed"] == 1
    assert report["errors"] == [
        {
            "file": "bad.indd",
            "code": "TIMEOUT",
            "message": "InDesign process timed out after 300s.",
        }
    ]
    assert "generated_at" in report


class TestBatchCommand:
    """Tests for the batch CLI command."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture(autouse=True)
    def fake_converter(self, isolated_settings):
        with patch("pdfbridge.cli.commands.batch.InDesignConverter", FakeConverter):
            yield

    def test_all_documents_converted(self, runner, source_dir, tmp_path):
        output_dir = tmp_path / "pdf"

        result = runner.invoke(app, ["batch", str(source_dir), "-o", str(output_dir)])

        assert result.exit_code == 0
        assert "All documents converted successfully!" in result.output
        assert (output_dir / "brochure.pdf").exists()
        assert (output_dir / "flyer.pdf").exists()
        assert not (output_dir / "batch-errors.json").exists()

    def test_failures_write_report(self, runner, source_dir, tmp_path):
        (source_dir / "bad-fonts.indd").write_bytes(b"indd")
        output_dir = tmp_path / "pdf"

        result = runner.invoke(app, ["batch", str(source_dir), "-o", str(output_dir)])

        assert result.exit_code == 1
        assert "Batch Summary" in result.output
        report = json.loads((output_dir / "batch-errors.json").read_text(encoding="utf-8"))
        assert report["total"] == 3
        assert report["errors"][0]["file"] == "bad-fonts.indd"
        assert (output_dir / "brochure.pdf").exists()

    def test_custom_report_path(self, runner, source_dir, tmp_path):
        (source_dir / "bad.indd").write_bytes(b"indd")
        report_path = tmp_path / "errors" / "run.json"

        result = runner.invoke(
            app,
            ["batch", str(source_dir), "-o", str(tmp_path / "pdf"), "--report", str(report_path)],
        )

        assert result.exit_code == 1
        assert report_path.exists()

    def test_empty_directory(self, runner, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(app, ["batch", str(empty)])

        assert result.exit_code == 0
        assert "No InDesign documents found" in result.output
