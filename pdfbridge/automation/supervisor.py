"""Launch and supervise the Adobe automation runtime.

One call to :meth:`ProcessSupervisor.run` spawns exactly one OS process:
``osascript`` on macOS (directly for AppleScript, through a generated
AppleScript bridge for ExtendScript) or ``InDesign.exe -ScriptPath`` on
Windows. Output is drained while the process runs and mirrored to the debug
log, and a wall-clock timeout is enforced with SIGTERM followed by SIGKILL.
"""

from __future__ import annotations

import asyncio
import codecs
import os
import sys
import time
from pathlib import Path
from typing import Protocol

from pdfbridge.automation.models import AutomationScript, ProcessOutcome, ScriptLanguage
from pdfbridge.automation.scripts import build_indesign_wrapper
from pdfbridge.config.constants import (
    AUTOMATION_ENV_OVERRIDES,
    DEFAULT_INDESIGN_APP_NAME,
    DEFAULT_INDESIGN_PATHS,
    DEFAULT_KILL_GRACE,
    OSASCRIPT,
)
from pdfbridge.utils.fs import temporary_directory
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)

_READ_CHUNK = 4096


class UnsupportedPlatformError(RuntimeError):
    """The requested automation cannot run on this operating system."""


class CommandBuilder(Protocol):
    """Builds the argv (and any bridge files) that run a script file."""

    def build(
        self, script: AutomationScript, script_path: Path
    ) -> tuple[list[str], dict[Path, str]]: ...


class LaunchCommandBuilder:
    """Platform-specific launch commands for generated scripts.

    Args:
        indesign_path: InDesign executable (Windows); None uses the default install path
        indesign_app_name: Application name addressed by the macOS AppleScript bridge
        platform: ``sys.platform`` value, overridable for tests
    """

    def __init__(
        self,
        indesign_path: str | None = None,
        indesign_app_name: str = DEFAULT_INDESIGN_APP_NAME,
        platform: str | None = None,
    ) -> None:
        self.indesign_path = indesign_path
        self.indesign_app_name = indesign_app_name
        self.platform = platform or sys.platform

    def build(
        self, script: AutomationScript, script_path: Path
    ) -> tuple[list[str], dict[Path, str]]:
        """Return ``(argv, bridge_files)`` for running ``script_path``.

        Raises:
            UnsupportedPlatformError: If the script cannot be run on this platform
        """
        if script.language is ScriptLanguage.APPLESCRIPT:
            if self.platform != "darwin":
                raise UnsupportedPlatformError(
                    f"Acrobat UI automation requires macOS (platform: {self.platform})"
                )
            return [OSASCRIPT, str(script_path)], {}

        if self.platform == "darwin":
            wrapper_path = script_path.with_suffix(".scpt")
            wrapper = build_indesign_wrapper(script_path, self.indesign_app_name)
            return [OSASCRIPT, str(wrapper_path)], {wrapper_path: wrapper}

        if self.platform == "win32":
            executable = self.indesign_path or DEFAULT_INDESIGN_PATHS["win32"]
            return [executable, "-ScriptPath", str(script_path)], {}

        raise UnsupportedPlatformError(
            f"Unsupported platform for Adobe InDesign automation: {self.platform}"
        )


class ProcessSupervisor:
    """Runs one automation script as a supervised child process.

    Args:
        command_builder: Produces the argv for a written script file
        kill_grace: Seconds between SIGTERM and SIGKILL after a timeout
        env_overrides: Environment variables set on top of ``os.environ``
    """

    def __init__(
        self,
        command_builder: CommandBuilder | None = None,
        kill_grace: float = DEFAULT_KILL_GRACE,
        env_overrides: dict[str, str] | None = None,
    ) -> None:
        self.command_builder = command_builder or LaunchCommandBuilder()
        self.kill_grace = kill_grace
        self.env_overrides = (
            dict(AUTOMATION_ENV_OVERRIDES) if env_overrides is None else env_overrides
        )

    async def run(self, script: AutomationScript, timeout: float) -> ProcessOutcome:
        """Write ``script`` to a scoped temp dir, execute it and collect the outcome.

        The temp dir (script and bridge files) is removed on every exit path.

        Args:
            script: Generated automation script
            timeout: Wall-clock limit in seconds

        Returns:
            ProcessOutcome; launch problems are reported in ``launch_error``
        """
        with temporary_directory(prefix="pdfbridge_script_") as work_dir:
            script_path = work_dir / f"automation{script.suffix}"
            script_path.write_text(script.text, encoding="utf-8")

            try:
                argv, bridge_files = self.command_builder.build(script, script_path)
            except UnsupportedPlatformError as e:
                log.error("Cannot launch automation", error=str(e))
                return ProcessOutcome(launch_error=str(e))

            for path, text in bridge_files.items():
                path.write_text(text, encoding="utf-8")

            return await self._execute(argv, timeout)

    async def _execute(self, argv: list[str], timeout: float) -> ProcessOutcome:
        env = {**os.environ, **self.env_overrides}
        start = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            reason = e.strerror or str(e)
            log.error("Failed to spawn automation process", executable=argv[0], error=reason)
            return ProcessOutcome(
                launch_error=f"{reason}. Please ensure it is installed at: {argv[0]}",
                duration=time.monotonic() - start,
            )

        log.info("Automation process spawned", pid=process.pid, executable=argv[0])

        stdout_parts: list[str] = []
        stderr_parts: list[str] = []
        # Drain both pipes from the start so a chatty child never blocks on a full pipe
        readers = [
            asyncio.create_task(self._drain(process.stdout, stdout_parts, "stdout", process.pid)),
            asyncio.create_task(self._drain(process.stderr, stderr_parts, "stderr", process.pid)),
        ]

        timed_out = False
        try:
            await asyncio.wait_for(process.wait(), timeout)
        except asyncio.TimeoutError:
            timed_out = True
            await self._terminate(process)

        # Grandchildren may still hold the pipes open after a kill
        _, pending = await asyncio.wait(readers, timeout=max(self.kill_grace, 1.0))
        for task in pending:
            task.cancel()

        duration = time.monotonic() - start
        log.info(
            "Automation process finished",
            pid=process.pid,
            exit_code=process.returncode,
            timed_out=timed_out,
            duration=round(duration, 2),
        )
        return ProcessOutcome(
            exit_code=process.returncode,
            stdout="".join(stdout_parts),
            stderr="".join(stderr_parts),
            timed_out=timed_out,
            duration=duration,
        )

    async def _drain(
        self,
        stream: asyncio.StreamReader | None,
        parts: list[str],
        name: str,
        pid: int,
    ) -> None:
        if stream is None:
            return
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await stream.read(_READ_CHUNK)
            if not chunk:
                break
            text = decoder.decode(chunk)
            parts.append(text)
            if text.strip():
                log.debug("Automation output", stream=name, pid=pid, output=text.strip())
        tail = decoder.decode(b"", final=True)
        if tail:
            parts.append(tail)

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """SIGTERM, then SIGKILL after the grace window; returns once the process is gone."""
        log.warning("Automation process timed out, terminating", pid=process.pid)
        try:
            process.terminate()
        except ProcessLookupError:
            return

        try:
            await asyncio.wait_for(process.wait(), self.kill_grace)
        except asyncio.TimeoutError:
            log.warning("Automation process ignored SIGTERM, killing", pid=process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
