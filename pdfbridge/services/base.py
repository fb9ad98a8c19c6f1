"""Base class for the Adobe automation services."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import NoReturn

from pdfbridge.automation.classifier import (
    ARTIFACT_NOT_FOUND,
    ARTIFACT_NOT_PRODUCED,
    is_preflight_diagnostic,
)
from pdfbridge.automation.models import (
    AutomationJob,
    ClassifiedResult,
    LaunchFailure,
    MissingResourceFailure,
    Success,
    TimeoutFailure,
    ValidationFailure,
)
from pdfbridge.automation.session import AutomationSession, get_automation_session
from pdfbridge.automation.supervisor import ProcessSupervisor
from pdfbridge.exceptions import (
    ArtifactNotGeneratedError,
    AutomationTimeoutError,
    InputError,
    LaunchError,
    ResourceMissingError,
    ValidationError,
)
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)


class AutomationService(ABC):
    """Shared plumbing for services that drive an Adobe application.

    Subclasses run their jobs inside the automation session and turn the
    final :data:`ClassifiedResult` into a path or a typed exception.
    """

    name: str = "base"
    not_generated_message: str = "Output was not generated successfully"
    not_generated_code: str | None = None

    def __init__(
        self,
        supervisor: ProcessSupervisor,
        session: AutomationSession | None = None,
    ) -> None:
        self.supervisor = supervisor
        self.session = session or get_automation_session()

    @abstractmethod
    def app_path(self) -> str | None:
        """Configured or default application path for this platform."""

    def check_installation(self) -> bool:
        """Whether the application exists at its configured or default path."""
        path = self.app_path()
        installed = path is not None and Path(path).exists()
        log.debug("Installation check", app=self.name, path=path, installed=installed)
        return installed

    @staticmethod
    def require_file(path: Path, message: str) -> Path:
        """Resolve an input path, raising InputError if it is not a file."""
        if not path.is_file():
            raise InputError(path, message)
        return path.resolve()

    def unwrap(self, result: ClassifiedResult, job: AutomationJob) -> Path:
        """Return the artifact of a Success, raise the matching error otherwise."""
        if isinstance(result, Success):
            log.info(
                "Automation job succeeded",
                app=self.name,
                job=job.label,
                output=str(result.artifact_path),
            )
            return result.artifact_path
        self._raise_for_failure(result, job.input_paths[0])

    def _raise_for_failure(self, result: ClassifiedResult, file_path: Path) -> NoReturn:
        log.error(
            "Automation job failed",
            app=self.name,
            file=file_path.name,
            result=type(result).__name__,
        )

        if isinstance(result, MissingResourceFailure):
            raise ResourceMissingError(
                file_path, result.raw_diagnostic, list(result.resource_names)
            )
        if isinstance(result, ValidationFailure):
            if result.raw_diagnostic in (ARTIFACT_NOT_PRODUCED, ARTIFACT_NOT_FOUND):
                raise ArtifactNotGeneratedError(
                    file_path, self.not_generated_message, code=self.not_generated_code
                )
            raise ValidationError(
                file_path,
                result.raw_diagnostic,
                is_preflight_failure=is_preflight_diagnostic(result.raw_diagnostic),
            )
        if isinstance(result, TimeoutFailure):
            raise AutomationTimeoutError(file_path, result.message)
        if isinstance(result, LaunchFailure):
            raise LaunchError(file_path, result.message)
        raise TypeError(f"Unexpected automation result: {result!r}")
