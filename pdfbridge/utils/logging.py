"""Logging configuration using structlog.

Every module logs through ``get_logger(__name__)`` with key/value context.
The CLI calls :func:`setup_task_logging` once per command so each run gets its
own DEBUG log file (which also records the live output of the Adobe
automation process) while the console stays quiet unless ``--verbose``.
"""

import logging
import sys
import uuid
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

import structlog
from rich.console import Console

# Third-party loggers kept at WARNING unless the root level is higher
_QUIET_LOGGERS = ("httpcore", "httpx", "asyncio", "anyio")

# Automation output ends with the error, so long values keep their tail
_MAX_VALUE_LENGTH = 2000

# Keys rendered by structlog itself rather than as context
_RESERVED_KEYS = frozenset({"event", "level", "timestamp", "_record", "_from_structlog"})

_console: Console | None = None
_log_output: TextIO = sys.stderr


class SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that replaces characters the stream cannot encode.

    Font and file names reported by InDesign can be in any script, and a
    CP1252 Windows console would raise ``UnicodeEncodeError`` on them.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record) + self.terminator
            encoding = getattr(self.stream, "encoding", None)
            if encoding:
                line = line.encode(encoding, errors="replace").decode(encoding)
            self.stream.write(line)
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def get_console() -> Console:
    """Rich console shared by progress bars and log output."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def set_log_output(output: TextIO) -> None:
    """Redirect console log output (used by tests)."""
    global _log_output
    _log_output = output


def _truncate_long_values(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    for key, value in event_dict.items():
        if key in _RESERVED_KEYS:
            continue
        if isinstance(value, (bytes, bytearray)):
            event_dict[key] = f"[BINARY DATA: {len(value)} bytes]"
        elif isinstance(value, str) and len(value) > _MAX_VALUE_LENGTH:
            event_dict[key] = f"[{len(value)} chars, tail] ..." + value[-_MAX_VALUE_LENGTH:]
    return event_dict


def _add_separator(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """Append `` |`` to the event when context keys follow it."""
    if "event" in event_dict and not _RESERVED_KEYS.issuperset(event_dict):
        event_dict["event"] = f"{event_dict['event']} |"
    return event_dict


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return getattr(logging, name.upper(), default)


def _attach(
    root: logging.Logger,
    handler: logging.Handler,
    level: int,
    pre_chain: list[structlog.types.Processor],
    json_format: bool,
    colors: bool,
) -> None:
    if json_format:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=colors,
            exception_formatter=structlog.dev.plain_traceback,
            pad_event_to=0,
            pad_level=False,
        )
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root.addHandler(handler)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_format: bool = False,
    console: Console | None = None,
    console_level: str | None = None,
    file_level: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file, rotated at midnight, 7 backups kept
        json_format: Render JSON lines instead of the console format
        console: Rich console to share with progress output
        console_level: Level for the console handler (defaults to ``level``)
        file_level: Level for the file handler (defaults to ``level``)
    """
    global _console
    if console is not None:
        _console = console

    root_level = _level(level, logging.INFO)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _truncate_long_values,
        _add_separator,
    ]

    _attach(
        root,
        SafeStreamHandler(_log_output),
        _level(console_level, root_level),
        pre_chain,
        json_format,
        colors=True,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file, when="midnight", backupCount=7, encoding="utf-8"
        )
        file_handler.suffix = "%Y-%m-%d"
        _attach(
            root,
            file_handler,
            _level(file_level, root_level),
            pre_chain,
            json_format,
            colors=False,
        )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def create_task_log_path(log_dir: str | Path, prefix: str = "task") -> tuple[str, Path]:
    """Return ``(task_id, path)`` for a new ``<prefix>_<YYYYmmdd_HHMMSS>_<id>.log``.

    The directory is created if needed.
    """
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    task_id = uuid.uuid4().hex[:8]
    return task_id, directory / f"{prefix}_{datetime.now():%Y%m%d_%H%M%S}_{task_id}.log"


def setup_task_logging(
    log_dir: str | Path,
    prefix: str = "task",
    verbose: bool = False,
) -> tuple[str, Path]:
    """Route DEBUG to a fresh task log file; WARNING (DEBUG if verbose) to the console."""
    task_id, log_path = create_task_log_path(log_dir, prefix)
    setup_logging(
        level="DEBUG",
        log_file=str(log_path),
        console_level="DEBUG" if verbose else "WARNING",
        file_level="DEBUG",
    )
    return task_id, log_path
