"""Turn raw automation process output into a typed result.

The Adobe runtimes give us nothing structured: an exit code and whatever the
script, osascript and the OS wrote to stdout/stderr. The rules below decide
which of the :data:`ClassifiedResult` variants a run produced. All marker
strings come from :mod:`pdfbridge.automation.markers`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pdfbridge.automation import markers
from pdfbridge.automation.models import (
    ClassifiedResult,
    LaunchFailure,
    MissingResourceFailure,
    ProcessOutcome,
    Success,
    TimeoutFailure,
    ValidationFailure,
    unique_ordered,
)
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)

ARTIFACT_NOT_PRODUCED = "artifact not produced"
ARTIFACT_NOT_FOUND = "output artifact not found"


def strip_noise(text: str) -> str:
    """Remove runtime noise lines (duplicate Objective-C class warnings)."""
    lines = [
        line
        for line in text.split("\n")
        if not any(noise in line for noise in markers.NOISE_SUBSTRINGS)
    ]
    return "\n".join(lines).strip()


def clean_diagnostic(text: str) -> str:
    """Strip wrapper boilerplate so no host paths or error codes reach users."""
    text = text.replace(markers.ESCAPED_NEWLINE, "\n")
    for pattern, replacement in markers.DIAGNOSTIC_CLEANUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def extract_diagnostic(text: str, exit_code: int | None = None) -> str:
    """Take the text after the first error sentinel, or all of it."""
    match = markers.ERROR_TEXT_RE.search(text)
    if match:
        raw = match.group(1)
    else:
        raw = text or f"Process exited with code {exit_code}"
    return clean_diagnostic(raw)


def _is_terminator(line: str) -> bool:
    return any(keyword.lower() in line.lower() for keyword in markers.TERMINATOR_KEYWORDS)


def _parse_listed_names(lines: list[str]) -> list[str]:
    names: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or _is_terminator(stripped):
            break
        if markers.FOLLOWING_SUBHEADER_RE.search(stripped) or markers.MORE_ENTRIES_RE.match(
            stripped
        ):
            continue
        entry = markers.BULLET_RE.sub("", stripped)
        candidate = " ".join(markers.FONT_ANNOTATION_RE.sub("", entry).split())
        if not markers.FONT_ENTRY_START_RE.match(candidate):
            continue
        if len(candidate) > 2 and not _is_terminator(candidate):
            names.append(candidate)
    return names


def _parse_loose_names(text: str) -> list[str]:
    names = []
    for match in markers.FONT_FALLBACK_RE.finditer(text):
        candidate = match.group(1)
        if candidate.split()[0] in markers.FONT_STOPLIST or candidate in markers.FONT_STOPLIST:
            continue
        names.append(candidate)
    return names


def parse_missing_resources(diagnostic: str) -> tuple[str, ...]:
    """Extract missing font names from a ``Missing Fonts`` block.

    Entries are read line by line after the header (and an optional
    "the following fonts are missing" sub-header) until a blank line or a
    terminator keyword. If that yields nothing, a looser token scan over the
    same region is used instead.

    Returns:
        Ordered, de-duplicated names; empty when there is no such block
    """
    header = markers.MISSING_FONTS_HEADER_RE.search(diagnostic)
    if header is None:
        return ()

    section = diagnostic[header.end() :]
    # The rest of the header line, e.g. " (2):", never holds list entries
    body_lines = section.split("\n")[1:]
    names = _parse_listed_names(body_lines)

    if not names:
        # Names may also sit on the header line itself
        region: list[str] = []
        for line in diagnostic[header.start() :].split("\n"):
            if region and _is_terminator(line):
                break
            region.append(line)
        names = _parse_loose_names("\n".join(region))

    return unique_ordered(names)


def is_preflight_diagnostic(diagnostic: str) -> bool:
    """Whether a diagnostic comes from the pre-export document audit."""
    return markers.PREFLIGHT_MARKER in diagnostic


class OutcomeClassifier:
    """Classifies :class:`ProcessOutcome` values for one automation flow.

    Args:
        app_name: Application name used in user-facing messages
        error_markers: Sentinels that mark a failed run
        marker_streams: Which streams are scanned for sentinels. AppleScript
            ``log`` output lands on stderr, so the compare flow only trusts stdout.
        timeout_hint: Probable causes appended to timeout messages
        failure_tips: ``(substring, tip)`` pairs appended to validation failures
    """

    def __init__(
        self,
        app_name: str,
        error_markers: tuple[str, ...] = markers.CONVERT_ERROR_MARKERS,
        marker_streams: Literal["all", "stdout"] = "all",
        timeout_hint: str = "",
        failure_tips: tuple[tuple[str, str], ...] = (),
    ) -> None:
        self.app_name = app_name
        self.error_markers = error_markers
        self.marker_streams = marker_streams
        self.timeout_hint = timeout_hint
        self.failure_tips = failure_tips

    def classify(self, outcome: ProcessOutcome, expected_artifact: Path) -> ClassifiedResult:
        """Classify a finished run; a clean exit still needs the artifact on disk."""
        failure = self.failure_for(outcome)
        if failure is not None:
            return failure

        if expected_artifact.exists():
            return Success(expected_artifact)

        log.warning(
            "Process exited cleanly but produced no artifact",
            app=self.app_name,
            expected=str(expected_artifact),
        )
        return ValidationFailure(ARTIFACT_NOT_PRODUCED)

    def failure_for(self, outcome: ProcessOutcome) -> ClassifiedResult | None:
        """Return the failure a run ended in, or None for a clean run."""
        if outcome.timed_out:
            message = f"{self.app_name} process timed out after {outcome.duration:.0f}s."
            if self.timeout_hint:
                message = f"{message} {self.timeout_hint}"
            return TimeoutFailure(message)

        if outcome.launch_error is not None:
            return LaunchFailure(f"Failed to launch {self.app_name}: {outcome.launch_error}")

        stdout = strip_noise(outcome.stdout)
        stderr = strip_noise(outcome.stderr)
        scanned = stdout if self.marker_streams == "stdout" else f"{stdout}\n{stderr}"
        has_marker = any(marker in scanned for marker in self.error_markers)

        if outcome.exit_code == 0 and not has_marker:
            return None

        # stdout last: a sentinel written by the script carries the message to the end
        combined = "\n".join(part for part in (stderr, stdout) if part)
        diagnostic = extract_diagnostic(combined, outcome.exit_code)

        names = parse_missing_resources(diagnostic)
        if names:
            log.info("Missing fonts detected", app=self.app_name, fonts=list(names))
            return MissingResourceFailure(names, diagnostic)

        tips = [tip for needle, tip in self.failure_tips if needle in combined]
        if tips:
            diagnostic = "\n".join([diagnostic, *tips])

        log.info(
            "Automation run failed",
            app=self.app_name,
            exit_code=outcome.exit_code,
            marker=has_marker,
        )
        return ValidationFailure(diagnostic)
