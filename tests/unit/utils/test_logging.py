"""Tests for logging utilities module."""

import io
import logging
import sys

from pdfbridge.utils.logging import (
    SafeStreamHandler,
    _add_separator,
    _truncate_long_values,
    create_task_log_path,
    get_console,
    get_logger,
    set_log_output,
    setup_logging,
    setup_task_logging,
)


def make_record(message: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestSafeStreamHandler:
    """Tests for SafeStreamHandler class."""

    def test_emit_normal_message(self):
        """Test emitting a normal message."""
        stream = io.StringIO()
        handler = SafeStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.emit(make_record("Font downloaded"))

        assert stream.getvalue() == "Font downloaded\n"

    def test_emit_on_narrow_encoding(self):
        """Characters the console cannot encode are replaced instead of raising."""
        buffer = io.BytesIO()
        stream = io.TextIOWrapper(buffer, encoding="cp1252")
        handler = SafeStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.emit(make_record("Missing font: 思源黑体"))
        stream.flush()

        assert buffer.getvalue().decode("cp1252") == "Missing font: ????\n"


class TestTruncateLongValues:
    """Tests for the long value processor."""

    def test_keeps_tail_of_long_strings(self):
        output = "x" * 5000 + "ERROR: boom"
        event_dict = {"event": "Automation output", "output": output}

        result = _truncate_long_values(None, "debug", event_dict)

        assert result["output"].startswith(f"[{len(output)} chars, tail] ...")
        assert result["output"].endswith("ERROR: boom")
        assert len(result["output"]) < 2100

    def test_replaces_binary_data(self):
        result = _truncate_long_values(None, "info", {"event": "e", "data": b"\x00" * 10})
        assert result["data"] == "[BINARY DATA: 10 bytes]"

    def test_short_values_untouched(self):
        event_dict = {"event": "e", "file": "brochure.indd"}
        assert _truncate_long_values(None, "info", dict(event_dict)) == event_dict


class TestAddSeparator:
    """Tests for _add_separator processor."""

    def test_adds_separator_when_context_present(self):
        result = _add_separator(None, "info", {"event": "PDF saved", "file": "a.indd"})
        assert result["event"] == "PDF saved |"

    def test_no_separator_without_context(self):
        result = _add_separator(None, "info", {"event": "PDF saved", "level": "info"})
        assert result["event"] == "PDF saved"


class TestGetConsole:
    """Tests for get_console function."""

    def test_returns_same_instance(self):
        assert get_console() is get_console()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_configures_root_logger(self):
        setup_logging(level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_file_logging(self, tmp_path):
        log_file = tmp_path / "logs" / "test.log"

        setup_logging(level="DEBUG", log_file=str(log_file))
        get_logger("test").info("Automation process spawned", pid=42)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Automation process spawned" in content
        assert "pid=42" in content

    def test_console_level_override(self):
        stream = io.StringIO()
        set_log_output(stream)
        try:
            setup_logging(level="DEBUG", console_level="WARNING")
            get_logger("test").info("hidden message")
            get_logger("test").warning("visible message")
        finally:
            set_log_output(sys.stderr)

        assert "hidden message" not in stream.getvalue()
        assert "visible message" in stream.getvalue()

    def test_suppresses_noisy_loggers(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_logger_with_methods(self):
        logger = get_logger("pdfbridge.test")
        for method in ("debug", "info", "warning", "error"):
            assert hasattr(logger, method)


class TestTaskLogging:
    """Tests for task log files."""

    def test_create_task_log_path(self, tmp_path):
        task_id, log_path = create_task_log_path(tmp_path / "logs", "convert")

        assert len(task_id) == 8
        assert log_path.parent == tmp_path / "logs"
        assert log_path.name.startswith("convert_")
        assert log_path.name.endswith(f"_{task_id}.log")
        assert (tmp_path / "logs").is_dir()

    def test_setup_task_logging_records_debug(self, tmp_path):
        _, log_path = setup_task_logging(tmp_path, "batch")
        get_logger("test").debug("Automation output", stream="stdout")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Automation output" in log_path.read_text(encoding="utf-8")
