"""
Formatters selected by builder.make_dict_config():

  - JsonFormatter: one JSON object per line with service/env/version/request_id
    plus any `extra={...}` fields. Used for LOG_FORMAT=json and for error sinks.
  - ColorFormatter: compact ANSI-colored lines for local terminals.
"""

import json
import logging
from logging import LogRecord
from typing import Any

from personal_library.utils.logging import DEFAULT_PROJECT_NAME, get_project_version

PROJECT_VERSION = get_project_version()

# LogRecord attributes that are not user extras
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Args:
        env: environment name ("development", "production", ...).
        service: logical service name included in every record.
        datefmt: passed through to logging.Formatter.formatTime.

    Non-serializable extras are converted with str() so formatting never raises.
    """

    def __init__(self, *, env: str | None = None, service: str = DEFAULT_PROJECT_NAME, datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in log_record or key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """Development formatter: TIMESTAMP | LEVEL | LOGGER | REQUEST_ID | MESSAGE."""

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",    # bold cyan on white
        "INFO": "\033[32m",          # green
        "WARNING": "\033[33m",       # yellow
        "ERROR": "\033[31m",         # red
        "CRITICAL": "\033[1;41m",    # bold on red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        # only the level name is colored
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'request_id', '-'):<10} | "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)
        return base
