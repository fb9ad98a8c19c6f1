"""InDesign to PDF conversion service.

Drives desktop Adobe InDesign with a generated ExtendScript: the script opens
the document without a window, audits fonts and links, and exports a PDF.
Missing fonts trigger one remediation retry.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path

from pdfbridge.automation.classifier import OutcomeClassifier
from pdfbridge.automation.markers import CONVERT_ERROR_MARKERS
from pdfbridge.automation.models import AutomationJob, ClassifiedResult
from pdfbridge.automation.scripts import ScriptGenerator
from pdfbridge.automation.session import AutomationSession
from pdfbridge.automation.supervisor import LaunchCommandBuilder, ProcessSupervisor
from pdfbridge.config.constants import DEFAULT_INDESIGN_PATHS
from pdfbridge.config.settings import PdfBridgeSettings, get_settings
from pdfbridge.core.remediation import RemediationRetryController
from pdfbridge.fonts.registry import HostFontRegistry, get_font_registry
from pdfbridge.services.base import AutomationService
from pdfbridge.utils.fs import delete_paths
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)

TIMEOUT_HINT = (
    "This may indicate missing fonts, missing links, or InDesign waiting for user input."
)


class InDesignConverter(AutomationService):
    """Converts ``.indd`` / ``.idml`` documents to PDF.

    Args:
        settings: Settings to use (default: the cached global settings)
        supervisor: Process supervisor (default: built from settings)
        registry: Host font registry (default: the process-wide registry)
        session: Automation session (default: the process-wide session)
        auto_remediate: Override ``fonts.auto_remediate``
        timeout: Override ``indesign.timeout`` (seconds)
    """

    name = "indesign"
    not_generated_message = "PDF was not generated successfully"

    def __init__(
        self,
        settings: PdfBridgeSettings | None = None,
        supervisor: ProcessSupervisor | None = None,
        registry: HostFontRegistry | None = None,
        session: AutomationSession | None = None,
        auto_remediate: bool | None = None,
        timeout: int | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        config = self.settings.indesign

        if supervisor is None:
            supervisor = ProcessSupervisor(
                LaunchCommandBuilder(
                    indesign_path=config.app_path, indesign_app_name=config.app_name
                ),
                kill_grace=self.settings.supervisor.kill_grace,
            )
        super().__init__(supervisor, session)

        self.registry = registry or get_font_registry(self.settings.fonts)
        self.timeout = timeout or config.timeout
        self.generator = ScriptGenerator(export_preset=config.export_preset)
        self.classifier = OutcomeClassifier(
            app_name="InDesign",
            error_markers=CONVERT_ERROR_MARKERS,
            marker_streams="all",
            timeout_hint=TIMEOUT_HINT,
        )
        enabled = self.settings.fonts.auto_remediate if auto_remediate is None else auto_remediate
        self.controller = RemediationRetryController(self.registry, enabled=enabled)

    def app_path(self) -> str | None:
        return self.settings.indesign.app_path or DEFAULT_INDESIGN_PATHS.get(sys.platform)

    async def convert(
        self,
        input_path: Path,
        output_dir: Path,
        resource_hints: Iterable[str] = (),
    ) -> Path:
        """Convert an InDesign document to ``<output_dir>/<stem>.pdf``.

        Args:
            input_path: ``.indd`` or ``.idml`` document
            output_dir: Directory for the PDF (created if needed)
            resource_hints: Font names known to be available on the host

        Returns:
            Path to the generated PDF

        Raises:
            InputError: Input file does not exist
            ResourceMissingError: Fonts are missing even after remediation
            ValidationError: The document failed its preflight audit or export
            ArtifactNotGeneratedError: InDesign finished but wrote no PDF
            AutomationTimeoutError: InDesign did not finish in time
            LaunchError: InDesign could not be started
        """
        input_path = self.require_file(input_path, f"InDesign file not found: {input_path}")
        output_dir.mkdir(parents=True, exist_ok=True)
        job = AutomationJob.convert(input_path, output_dir.resolve(), resource_hints)

        log.info("Converting InDesign document", file=input_path.name, output_dir=str(output_dir))
        async with self.session.acquire(job.label):
            if self.settings.indesign.collect_document_fonts:
                document_fonts = await self.registry.install_document_fonts(input_path)
                if document_fonts:
                    job = job.with_hints(document_fonts)
            result = await self.controller.run(job, self._attempt)

        return self.unwrap(result, job)

    async def _attempt(self, job: AutomationJob) -> ClassifiedResult:
        # A PDF left over from an earlier run must not pass for this run's output
        delete_paths([job.output_path])
        script = self.generator.generate(job)
        outcome = await self.supervisor.run(script, self.timeout)
        return self.classifier.classify(outcome, job.output_path)
