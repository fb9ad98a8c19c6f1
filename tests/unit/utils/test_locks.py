"""Tests for host-wide file locks."""

import asyncio

from filelock import FileLock

from pdfbridge.utils.locks import hold_file_lock


async def test_lock_released_after_block(tmp_path):
    lock_path = tmp_path / "locks" / "job.lock"

    async with hold_file_lock(lock_path):
        assert lock_path.exists()

    other = FileLock(str(lock_path), thread_local=False)
    other.acquire(timeout=0)
    other.release()


async def test_wait_can_be_cancelled(tmp_path):
    lock_path = tmp_path / "job.lock"
    external = FileLock(str(lock_path), thread_local=False)
    external.acquire()

    async def job() -> None:
        async with hold_file_lock(lock_path, poll_interval=0.01):
            pass

    task = asyncio.create_task(job())
    await asyncio.sleep(0.05)
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    external.release()

    assert task.cancelled()
