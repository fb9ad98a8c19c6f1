"""Host-wide locks backed by OS file locks."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from pdfbridge.config.constants import LOCK_POLL_INTERVAL
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def hold_file_lock(
    path: Path, poll_interval: float = LOCK_POLL_INTERVAL
) -> AsyncGenerator[None, None]:
    """Hold an exclusive lock on ``path`` across processes.

    Polls instead of blocking so the event loop keeps running and the wait
    can be cancelled.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(str(path), thread_local=False)
    waiting = False
    while True:
        try:
            lock.acquire(timeout=0)
            break
        except Timeout:
            if not waiting:
                log.info("Waiting for another pdfbridge process", lock=str(path))
                waiting = True
            await asyncio.sleep(poll_interval)
    try:
        yield
    finally:
        lock.release()
