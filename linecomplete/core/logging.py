import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog


def _renderer(json_logs: bool) -> Any:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def build_handlers(log_file: str | Path | None = None) -> list[logging.Handler]:
    """Stderr handler, plus a file handler when a log file is configured.

    The file's parent directory is created if needed.
    """
    # stdout is reserved for CLI output
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path))

    return handlers


def configure_logging(
    level: str | None = None,
    json_logs: bool | None = None,
    log_file: str | Path | None = None,
) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        level: Log level name; falls back to LOG_LEVEL
        json_logs: Render JSON lines; falls back to JSON_LOGS
        log_file: Also write to this file; falls back to LOG_FILE (unset: stderr only)
    """
    if json_logs is None:
        json_logs = os.getenv("JSON_LOGS", "false").lower() == "true"
    if log_file is None:
        log_file = os.getenv("LOG_FILE") or None

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(json_logs),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        handlers=build_handlers(log_file),
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
    )
