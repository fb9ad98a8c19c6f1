"""Data model shared by the automation pipeline.

A job flows through three stages, each with its own type:

    AutomationJob -> (ScriptGenerator) -> AutomationScript
                  -> (ProcessSupervisor) -> ProcessOutcome
                  -> (OutcomeClassifier) -> ClassifiedResult
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class JobMode(str, Enum):
    """Which Adobe flow a job drives."""

    CONVERT = "convert"
    COMPARE = "compare"


class ScriptLanguage(str, Enum):
    """Language of a generated automation script."""

    EXTENDSCRIPT = "extendscript"
    APPLESCRIPT = "applescript"


def unique_ordered(names: Iterable[str]) -> tuple[str, ...]:
    """Drop empty names and duplicates while keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return tuple(result)


@dataclass(frozen=True)
class AutomationJob:
    """One logical conversion or comparison request.

    Immutable once launched; a retry gets a new job via :meth:`with_hints`.
    """

    mode: JobMode
    input_paths: tuple[Path, ...]
    output_dir: Path
    output_path: Path
    resource_hints: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        expected = 1 if self.mode is JobMode.CONVERT else 2
        if len(self.input_paths) != expected:
            raise ValueError(
                f"{self.mode.value} job needs {expected} input path(s), got {len(self.input_paths)}"
            )
        object.__setattr__(self, "resource_hints", unique_ordered(self.resource_hints))

    @classmethod
    def convert(
        cls,
        input_path: Path,
        output_dir: Path,
        resource_hints: Iterable[str] = (),
        output_path: Path | None = None,
    ) -> AutomationJob:
        """Build a conversion job; the PDF is named after the document."""
        return cls(
            mode=JobMode.CONVERT,
            input_paths=(input_path,),
            output_dir=output_dir,
            output_path=output_path or output_dir / f"{input_path.stem}.pdf",
            resource_hints=tuple(resource_hints),
        )

    @classmethod
    def compare(
        cls, first: Path, second: Path, output_dir: Path, output_path: Path
    ) -> AutomationJob:
        """Build a comparison job (``first`` is the old file, ``second`` the new one)."""
        return cls(
            mode=JobMode.COMPARE,
            input_paths=(first, second),
            output_dir=output_dir,
            output_path=output_path,
        )

    @property
    def label(self) -> str:
        return " vs ".join(p.name for p in self.input_paths)

    def with_hints(self, extra: Iterable[str]) -> AutomationJob:
        """Return a copy whose hints are extended by ``extra``."""
        return replace(self, resource_hints=self.resource_hints + tuple(extra))


@dataclass(frozen=True)
class AutomationScript:
    """Generated script text plus what the supervisor needs to launch it."""

    text: str
    language: ScriptLanguage

    @property
    def suffix(self) -> str:
        return ".jsx" if self.language is ScriptLanguage.EXTENDSCRIPT else ".applescript"


@dataclass
class ProcessOutcome:
    """Raw result of one automation process invocation. Never persisted."""

    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    launch_error: str | None = None
    duration: float = 0.0

    @property
    def combined(self) -> str:
        return f"{self.stdout}\n{self.stderr}" if self.stderr else self.stdout


@dataclass(frozen=True)
class Success:
    artifact_path: Path
    ok = True


@dataclass(frozen=True)
class MissingResourceFailure:
    resource_names: tuple[str, ...]
    raw_diagnostic: str
    ok = False


@dataclass(frozen=True)
class ValidationFailure:
    raw_diagnostic: str
    ok = False


@dataclass(frozen=True)
class TimeoutFailure:
    message: str
    ok = False


@dataclass(frozen=True)
class LaunchFailure:
    message: str
    ok = False


ClassifiedResult = (
    Success | MissingResourceFailure | ValidationFailure | TimeoutFailure | LaunchFailure
)


@dataclass
class RetryState:
    """Bookkeeping for the single remediation retry of one job."""

    original_diagnostic: str
    attempts_made: int = 0
    remediated_resources: tuple[str, ...] = field(default_factory=tuple)

    def record_attempt(self, remediated: Iterable[str]) -> None:
        if self.attempts_made >= 1:
            raise RuntimeError("Remediation retry already used for this job")
        self.attempts_made = 1
        self.remediated_resources = unique_ordered(remediated)
