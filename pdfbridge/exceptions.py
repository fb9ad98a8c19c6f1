"""Custom exceptions for pdfbridge."""

from pathlib import Path


class PdfBridgeError(Exception):
    """Base exception class for pdfbridge."""

    code = "UNKNOWN_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)


class InputError(PdfBridgeError):
    """Input file missing or invalid. Never retried."""

    code = "FILE_NOT_FOUND"

    def __init__(self, file_path: Path, message: str | None = None) -> None:
        self.file_path = file_path
        super().__init__(message or f"File not found: {file_path}")


class AutomationError(PdfBridgeError):
    """Error reported by an Adobe automation run."""

    code = "CONVERSION_FAILED"
    is_preflight_failure = False

    def __init__(self, file_path: Path, message: str, code: str | None = None) -> None:
        self.file_path = file_path
        super().__init__(message, code=code)


class ResourceMissingError(AutomationError):
    """Document requires fonts that are not available, even after remediation."""

    is_preflight_failure = True

    def __init__(self, file_path: Path, message: str, resource_names: list[str]) -> None:
        super().__init__(file_path, message)
        self.resource_names = resource_names


class ValidationError(AutomationError):
    """Document failed a hard check. Surfaced verbatim, never retried."""

    def __init__(
        self, file_path: Path, message: str, is_preflight_failure: bool = False
    ) -> None:
        super().__init__(file_path, message)
        self.is_preflight_failure = is_preflight_failure


class ArtifactNotGeneratedError(AutomationError):
    """Automation finished but the expected output file does not exist."""

    code = "PDF_NOT_GENERATED"


class AutomationTimeoutError(AutomationError):
    """Automation process exceeded its wall-clock budget."""

    code = "TIMEOUT"


class LaunchError(AutomationError):
    """Automation runtime could not be started."""

    code = "LAUNCH_FAILED"


class ConfigurationError(PdfBridgeError):
    """Configuration error."""

    code = "CONFIGURATION_ERROR"
