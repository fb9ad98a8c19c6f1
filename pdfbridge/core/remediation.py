"""Bounded remediation and retry for missing fonts.

A job that fails with :class:`MissingResourceFailure` gets exactly one more
attempt after the missing fonts have been acquired and installed. If that
attempt also fails, for any reason, the first failure is returned unchanged:
its diagnostic names what the document actually lacks, while a second-order
failure usually does not.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from pdfbridge.automation.models import (
    AutomationJob,
    ClassifiedResult,
    MissingResourceFailure,
    RetryState,
    Success,
)
from pdfbridge.fonts.registry import HostFontRegistry
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)

Attempt = Callable[[AutomationJob], Awaitable[ClassifiedResult]]


class RemediationRetryController:
    """Runs a job, remediating and retrying once on missing fonts.

    Args:
        registry: Host font registry used to acquire and install fonts
        enabled: When False the first result is always returned as is
    """

    def __init__(self, registry: HostFontRegistry | None, enabled: bool = True) -> None:
        self.registry = registry
        self.enabled = enabled and registry is not None
        self.last_retry_state: RetryState | None = None

    async def run(self, job: AutomationJob, attempt: Attempt) -> ClassifiedResult:
        """Run ``attempt(job)`` with at most one remediation retry.

        Args:
            job: The job to run
            attempt: Generate, supervise and classify one run of a job

        Returns:
            The retry's Success, or otherwise the first result
        """
        self.last_retry_state = None
        first = await attempt(job)
        registry = self.registry
        if not isinstance(first, MissingResourceFailure) or not self.enabled or registry is None:
            return first

        state = RetryState(original_diagnostic=first.raw_diagnostic)
        self.last_retry_state = state

        log.info(
            "Remediating missing fonts",
            job=job.label,
            fonts=list(first.resource_names),
        )
        report = await registry.remediate(first.resource_names)
        state.record_attempt([*report.installed_names, *report.acquired])

        # Retry regardless of how much remediation achieved
        retry_job = job.with_hints(state.remediated_resources)
        retried = await attempt(retry_job)

        if isinstance(retried, Success):
            log.info("Retry after remediation succeeded", job=job.label)
            return retried

        log.warning(
            "Retry after remediation failed, keeping original diagnostic",
            job=job.label,
            retry_result=type(retried).__name__,
        )
        return first
