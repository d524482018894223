"""Tests for logger.py -- setup_logging() and JsonFormatter.

Strategy: Mock logging.basicConfig to verify setup_logging passes correct args,
since pytest's log capture plugin interferes with actual basicConfig calls.
"""

import json
import logging
import sys
from unittest.mock import patch

from http_tool_sync.logger import JsonFormatter, setup_logging

# ---------------------------------------------------------------------------
# setup_logging tests
# ---------------------------------------------------------------------------


class TestSetupLogging:
    """Tests for setup_logging()."""

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_logs_to_stderr_by_default(self, mock_basic):
        setup_logging()

        mock_basic.assert_called_once()
        handlers = mock_basic.call_args[1]["handlers"]
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_log_file_adds_file_handler(self, mock_basic, tmp_path):
        log_file = tmp_path / "sync.log"
        setup_logging(log_file=str(log_file))

        handlers = mock_basic.call_args[1]["handlers"]
        assert len(handlers) == 2
        assert isinstance(handlers[1], logging.FileHandler)
        assert handlers[1].baseFilename == str(log_file)
        for handler in handlers:
            handler.close()

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_env_log_file_keeps_stderr(self, mock_basic, tmp_path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("HTTP_TOOL_SYNC_LOG_FILE", str(log_file))
        setup_logging()

        stderr_handler, file_handler = mock_basic.call_args[1]["handlers"]
        assert stderr_handler.stream is sys.stderr
        assert isinstance(file_handler, logging.FileHandler)
        assert file_handler.baseFilename == str(log_file)
        file_handler.close()

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_log_file_arg_beats_env(self, mock_basic, tmp_path, monkeypatch):
        monkeypatch.setenv("HTTP_TOOL_SYNC_LOG_FILE", str(tmp_path / "env.log"))
        setup_logging(log_file=str(tmp_path / "arg.log"))

        file_handler = mock_basic.call_args[1]["handlers"][1]
        assert file_handler.baseFilename == str(tmp_path / "arg.log")
        file_handler.close()

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_debug_overrides_level(self, mock_basic, monkeypatch):
        monkeypatch.setenv("HTTP_TOOL_SYNC_LOG_LEVEL", "ERROR")
        setup_logging(debug=True)
        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_env_log_level_honored(self, mock_basic, monkeypatch):
        monkeypatch.setenv("HTTP_TOOL_SYNC_LOG_LEVEL", "error")
        setup_logging(level="DEBUG")
        assert mock_basic.call_args[1]["level"] == logging.ERROR

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_config_level_used_without_env(self, mock_basic, monkeypatch):
        monkeypatch.delenv("HTTP_TOOL_SYNC_LOG_LEVEL", raising=False)
        setup_logging(level="WARNING")
        assert mock_basic.call_args[1]["level"] == logging.WARNING

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_invalid_level_falls_back_to_info(self, mock_basic, monkeypatch):
        monkeypatch.setenv("HTTP_TOOL_SYNC_LOG_LEVEL", "CHATTY")
        setup_logging()
        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_asyncio_silenced_unless_debug(self, mock_basic, monkeypatch):
        monkeypatch.delenv("HTTP_TOOL_SYNC_LOG_LEVEL", raising=False)
        asyncio_logger = logging.getLogger("asyncio")
        original = asyncio_logger.level
        try:
            asyncio_logger.setLevel(logging.NOTSET)
            setup_logging()
            assert asyncio_logger.level == logging.WARNING
        finally:
            asyncio_logger.setLevel(original)

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_text_format_by_default(self, mock_basic, monkeypatch):
        monkeypatch.delenv("HTTP_TOOL_SYNC_LOG_FILE", raising=False)
        setup_logging()
        (handler,) = mock_basic.call_args[1]["handlers"]
        assert not isinstance(handler.formatter, JsonFormatter)

    @patch("http_tool_sync.logger.logging.basicConfig")
    def test_json_format_applies_to_every_handler(self, mock_basic, tmp_path):
        setup_logging(log_file=str(tmp_path / "sync.log"), log_format="json")
        handlers = mock_basic.call_args[1]["handlers"]
        assert len(handlers) == 2
        assert all(isinstance(h.formatter, JsonFormatter) for h in handlers)
        handlers[1].close()


# ---------------------------------------------------------------------------
# JsonFormatter tests
# ---------------------------------------------------------------------------


class TestJsonFormatter:
    def _record(self, msg="hello %s", args=("world",), exc_info=None):
        return logging.LogRecord(
            name="http_tool_sync.sync.engine",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=msg,
            args=args,
            exc_info=exc_info,
        )

    def test_fields(self):
        entry = json.loads(JsonFormatter().format(self._record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "http_tool_sync.sync.engine"
        assert entry["msg"] == "hello world"
        assert "ts" in entry
        assert "exc" not in entry

    def test_exception_included(self):
        try:
            raise ValueError("bad url")
        except ValueError:
            exc_info = sys.exc_info()
        entry = json.loads(
            JsonFormatter().format(self._record(exc_info=exc_info))
        )
        assert "ValueError: bad url" in entry["exc"]
