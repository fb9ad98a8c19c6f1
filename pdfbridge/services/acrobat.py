"""PDF comparison service using Adobe Acrobat's Compare Files tool.

Acrobat offers no scripting hook for Compare Files, so the generated
AppleScript clicks through the UI. macOS only.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

from pdfbridge.automation.classifier import ARTIFACT_NOT_FOUND, OutcomeClassifier
from pdfbridge.automation.markers import COMPARE_ERROR_MARKERS, COMPARE_FAILURE_TIPS
from pdfbridge.automation.models import AutomationJob, ClassifiedResult, Success, ValidationFailure
from pdfbridge.automation.scripts import ScriptGenerator
from pdfbridge.automation.session import AutomationSession
from pdfbridge.automation.supervisor import LaunchCommandBuilder, ProcessSupervisor
from pdfbridge.config.constants import DEFAULT_ACROBAT_APP_PATH
from pdfbridge.config.settings import PdfBridgeSettings, get_settings
from pdfbridge.services.artifacts import discover_artifact, report_candidates
from pdfbridge.services.base import AutomationService
from pdfbridge.utils.fs import delete_paths
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)

TIMEOUT_HINT = (
    "Acrobat may be waiting for user input, or the UI layout differs from the configured one."
)


def default_report_path(output_dir: Path) -> Path:
    """``comparison-<milliseconds>.pdf`` in ``output_dir``."""
    return output_dir / f"comparison-{int(time.time() * 1000)}.pdf"


class AcrobatComparer(AutomationService):
    """Compares two PDFs and saves Acrobat's comparison report.

    Args:
        settings: Settings to use (default: the cached global settings)
        supervisor: Process supervisor (default: built from settings)
        session: Automation session (default: the process-wide session)
        timeout: Override ``acrobat.timeout`` (seconds)
    """

    name = "acrobat"
    not_generated_message = "Comparison PDF was not generated successfully"
    not_generated_code = "ARTIFACT_NOT_GENERATED"

    def __init__(
        self,
        settings: PdfBridgeSettings | None = None,
        supervisor: ProcessSupervisor | None = None,
        session: AutomationSession | None = None,
        timeout: int | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        config = self.settings.acrobat

        if supervisor is None:
            supervisor = ProcessSupervisor(
                LaunchCommandBuilder(), kill_grace=self.settings.supervisor.kill_grace
            )
        super().__init__(supervisor, session)

        self.timeout = timeout or config.timeout
        self.generator = ScriptGenerator(layout=config.layout, cliclick_path=config.cliclick_path)
        self.classifier = OutcomeClassifier(
            app_name="Acrobat",
            error_markers=COMPARE_ERROR_MARKERS,
            # AppleScript "log" statements go to stderr and are progress, not errors
            marker_streams="stdout",
            timeout_hint=TIMEOUT_HINT,
            failure_tips=COMPARE_FAILURE_TIPS,
        )

    def app_path(self) -> str | None:
        return self.settings.acrobat.app_path or DEFAULT_ACROBAT_APP_PATH

    async def compare(
        self,
        path_a: Path,
        path_b: Path,
        output_dir: Path,
        output_path: Path | None = None,
    ) -> Path:
        """Compare ``path_a`` (old) with ``path_b`` (new).

        Returns:
            Path to the comparison report (``output_path`` or
            ``<output_dir>/comparison-<timestamp>.pdf``)

        Raises:
            InputError: An input file does not exist
            ArtifactNotGeneratedError: No report was found after Acrobat finished
            ValidationError: The comparison script reported a failure
            AutomationTimeoutError: Acrobat did not finish in time
            LaunchError: osascript could not be started
        """
        path_a = self.require_file(path_a, f"First PDF file not found: {path_a}")
        path_b = self.require_file(path_b, f"Second PDF file not found: {path_b}")
        output_dir.mkdir(parents=True, exist_ok=True)
        output_dir = output_dir.resolve()
        expected = output_path or default_report_path(output_dir)
        job = AutomationJob.compare(path_a, path_b, output_dir, expected)

        log.info("Comparing PDFs", first=path_a.name, second=path_b.name, output=str(expected))
        async with self.session.acquire(job.label):
            result = await self._attempt(job)

        return self.unwrap(result, job)

    async def _attempt(self, job: AutomationJob) -> ClassifiedResult:
        first, second = job.input_paths
        candidates = report_candidates(first, second, self.settings.acrobat.report_candidates)
        # A report left by an earlier run must not pass for this one
        stale = delete_paths(
            path
            for path in (job.output_dir / name for name in candidates)
            if path not in job.input_paths
        )
        if stale:
            log.info("Removed stale comparison reports", count=stale)

        script = self.generator.generate(job)
        outcome = await self.supervisor.run(script, self.timeout)

        failure = self.classifier.failure_for(outcome)
        if failure is not None:
            return failure

        settle_delay = self.settings.acrobat.settle_delay
        if settle_delay > 0:
            log.debug("Waiting for Acrobat to finish writing the report", seconds=settle_delay)
            await asyncio.sleep(settle_delay)

        found = discover_artifact(job.output_dir, candidates, job.output_path)
        if found is None:
            return ValidationFailure(ARTIFACT_NOT_FOUND)
        return Success(found)
