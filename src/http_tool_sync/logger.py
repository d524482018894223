import json
import logging
import os
import sys


class JsonFormatter(logging.Formatter):
    """Single-line JSON formatter for structured output.

    Produces one JSON object per log record with fields: ts, level, logger, msg.
    Exception info is included as an "exc" field when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _formatter(log_format: str, with_name: bool) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    fmt = "[%(asctime)s] [%(levelname)s] "
    fmt += "%(name)s %(message)s" if with_name else "%(message)s"
    return logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    debug: bool = False,
    log_file: str | None = None,
    log_format: str = "text",
    level: str | None = None,
) -> None:
    """
    Configure logging for the command line.

    Records go to stderr (stdout carries the synchronized config) and,
    when a log file is given, also to that file.

    Args:
        debug: If True, overrides the level to DEBUG.
        log_file: Log file path (overrides HTTP_TOOL_SYNC_LOG_FILE env var).
        log_format: "text" (default) or "json" for one JSON object per line.
        level: Level name from the config file, used when the env var is unset.

    Environment variables:
        HTTP_TOOL_SYNC_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR).
                                  Default: INFO.
        HTTP_TOOL_SYNC_LOG_FILE: Extra log file when none is passed.
    """
    env_level = os.getenv("HTTP_TOOL_SYNC_LOG_LEVEL", level or "INFO").upper()

    # debug parameter overrides environment
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, env_level, logging.INFO)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_formatter(log_format, with_name=False))
    handlers: list[logging.Handler] = [stderr_handler]

    final_log_file = log_file or os.getenv("HTTP_TOOL_SYNC_LOG_FILE")
    if final_log_file:
        file_handler = logging.FileHandler(final_log_file, mode="a")
        file_handler.setFormatter(_formatter(log_format, with_name=True))
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
    )

    if log_level != logging.DEBUG:
        logging.getLogger("asyncio").setLevel(logging.WARNING)
