"""Single-slot automation session.

InDesign and Acrobat are desktop applications with one set of windows, one
font cache and one scripting endpoint per user session. Only one automation
job may drive them at a time; every job (including its remediation retry)
runs inside :meth:`AutomationSession.acquire`. The slot is held per host:
an asyncio lock orders jobs within the process and an OS file lock keeps
other pdfbridge processes out.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from pdfbridge.config.constants import AUTOMATION_LOCK_FILE
from pdfbridge.utils.locks import hold_file_lock
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)


class AutomationSession:
    """Serializes automation jobs against the desktop."""

    def __init__(self, lock_path: Path | None = None) -> None:
        self.lock_path = lock_path or AUTOMATION_LOCK_FILE
        self._lock = asyncio.Lock()
        self._holder: str | None = None
        self._jobs_run = 0

    @asynccontextmanager
    async def acquire(self, label: str) -> AsyncGenerator[None, None]:
        """Hold the desktop for one job.

        Example:
            async with session.acquire("brochure.indd"):
                result = await controller.run(job, attempt)
        """
        requested = time.monotonic()
        if self._lock.locked():
            log.debug("Waiting for automation session", job=label, holder=self._holder)

        async with self._lock, hold_file_lock(self.lock_path):
            acquired = time.monotonic()
            self._holder = label
            log.debug(
                "Automation session acquired",
                job=label,
                waited=round(acquired - requested, 2),
            )
            try:
                yield
            finally:
                self._holder = None
                self._jobs_run += 1
                log.debug(
                    "Automation session released",
                    job=label,
                    held=round(time.monotonic() - acquired, 2),
                )

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def holder(self) -> str | None:
        """Label of the job currently holding the session."""
        return self._holder

    def get_stats(self) -> dict[str, int | bool]:
        return {"busy": self.busy, "jobs_run": self._jobs_run}


_session: AutomationSession | None = None


def get_automation_session() -> AutomationSession:
    """Get the process-wide automation session."""
    global _session
    if _session is None:
        _session = AutomationSession()
    return _session
