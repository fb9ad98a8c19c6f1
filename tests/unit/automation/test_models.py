"""Tests for automation data model."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from pdfbridge.automation.models import (
    AutomationJob,
    AutomationScript,
    JobMode,
    LaunchFailure,
    MissingResourceFailure,
    ProcessOutcome,
    RetryState,
    ScriptLanguage,
    Success,
    TimeoutFailure,
    ValidationFailure,
    unique_ordered,
)


class TestUniqueOrdered:
    """Tests for unique_ordered."""

    def test_keeps_first_seen_order(self):
        assert unique_ordered(["b", "a", "b", "c", "a"]) == ("b", "a", "c")

    def test_drops_blank_names(self):
        assert unique_ordered(["", "  ", "Solway-Bold"]) == ("Solway-Bold",)

    def test_strips_whitespace(self):
        assert unique_ordered([" Lato ", "Lato"]) == ("Lato",)


class TestAutomationJob:
    """Tests for AutomationJob."""

    def test_convert_defaults_output_to_stem(self, tmp_path):
        """Conversion output is <output_dir>/<stem>.pdf."""
        job = AutomationJob.convert(tmp_path / "doc.indd", tmp_path / "out")

        assert job.mode is JobMode.CONVERT
        assert job.output_path == tmp_path / "out" / "doc.pdf"
        assert job.resource_hints == ()

    def test_hints_are_deduplicated(self, tmp_path):
        job = AutomationJob.convert(
            tmp_path / "doc.indd", tmp_path, ["Poppins-Bold", "Lato", "Poppins-Bold"]
        )
        assert job.resource_hints == ("Poppins-Bold", "Lato")

    def test_with_hints_appends_new_names_only(self, tmp_path):
        """Extended hints keep the old order and skip duplicates."""
        job = AutomationJob.convert(tmp_path / "doc.indd", tmp_path, ["A", "B"])

        extended = job.with_hints(["B", "C"])

        assert extended.resource_hints == ("A", "B", "C")
        assert job.resource_hints == ("A", "B")

    def test_job_is_immutable(self, tmp_path):
        job = AutomationJob.convert(tmp_path / "doc.indd", tmp_path)
        with pytest.raises(FrozenInstanceError):
            job.resource_hints = ("X",)  # type: ignore[misc]

    def test_compare_needs_two_inputs(self, tmp_path):
        with pytest.raises(ValueError, match="2 input path"):
            AutomationJob(
                mode=JobMode.COMPARE,
                input_paths=(tmp_path / "a.pdf",),
                output_dir=tmp_path,
                output_path=tmp_path / "report.pdf",
            )

    def test_convert_needs_one_input(self, tmp_path):
        with pytest.raises(ValueError, match="1 input path"):
            AutomationJob(
                mode=JobMode.CONVERT,
                input_paths=(tmp_path / "a.indd", tmp_path / "b.indd"),
                output_dir=tmp_path,
                output_path=tmp_path / "a.pdf",
            )

    def test_label(self, tmp_path):
        job = AutomationJob.compare(
            tmp_path / "old.pdf", tmp_path / "new.pdf", tmp_path, tmp_path / "r.pdf"
        )
        assert job.label == "old.pdf vs new.pdf"


class TestAutomationScript:
    """Tests for AutomationScript."""

    def test_suffix_by_language(self):
        assert AutomationScript("x", ScriptLanguage.EXTENDSCRIPT).suffix == ".jsx"
        assert AutomationScript("x", ScriptLanguage.APPLESCRIPT).suffix == ".applescript"


class TestProcessOutcome:
    """Tests for ProcessOutcome."""

    def test_combined_joins_streams(self):
        outcome = ProcessOutcome(exit_code=1, stdout="out", stderr="err")
        assert outcome.combined == "out\nerr"

    def test_combined_without_stderr(self):
        assert ProcessOutcome(exit_code=0, stdout="out").combined == "out"


class TestClassifiedResults:
    """Tests for ClassifiedResult variants."""

    def test_only_success_is_ok(self):
        assert Success(Path("a.pdf")).ok is True
        assert MissingResourceFailure(("Lato",), "diag").ok is False
        assert ValidationFailure("diag").ok is False
        assert TimeoutFailure("late").ok is False
        assert LaunchFailure("missing").ok is False

    def test_variants_are_frozen(self):
        result = ValidationFailure("diag")
        with pytest.raises(FrozenInstanceError):
            result.raw_diagnostic = "other"  # type: ignore[misc]


class TestRetryState:
    """Tests for RetryState."""

    def test_records_one_attempt(self):
        state = RetryState(original_diagnostic="Missing Fonts")

        state.record_attempt(["Solway-Bold", "Solway-Bold", "Lato"])

        assert state.attempts_made == 1
        assert state.remediated_resources == ("Solway-Bold", "Lato")
        assert state.original_diagnostic == "Missing Fonts"

    def test_second_attempt_is_refused(self):
        state = RetryState(original_diagnostic="Missing Fonts")
        state.record_attempt([])

        with pytest.raises(RuntimeError):
            state.record_attempt([])
