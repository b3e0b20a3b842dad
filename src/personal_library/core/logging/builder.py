"""
Build and apply the dictConfig logging configuration from Settings.

    setup_logging(settings)

Active handlers:

| LOG_TO_STDOUT | LOG_DIR set | handlers                      |
| ------------- | ----------- | ----------------------------- |
| true          | any         | console + error_console       |
| false         | no          | console + error_console       |
| false         | yes         | console + file + error_file   |
"""

import logging
import logging.config
from pathlib import Path

from personal_library.config.settings import Settings
from personal_library.utils.logging import get_project_name
from .filters import RedactFilter, RequestIdFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)

STANDARD_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"

APP_LOGGER = "personal_library"

# Chatty third-party loggers kept at WARNING regardless of LOG_LEVEL
QUIET_LOGGERS = ("aiosqlite", "sqlalchemy.pool", "asyncio")


def _file_logging_enabled(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def _formatters(settings: Settings) -> dict:
    standard_cls = ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter
    return {
        "standard": {"()": standard_cls, "format": STANDARD_FORMAT},
        "json": {"()": JsonFormatter, "env": settings.ENV, "service": get_project_name()},
    }


def _handlers(settings: Settings) -> dict[str, dict]:
    active = {"console": get_console_handler(settings)}
    if _file_logging_enabled(settings):
        active["file"] = get_file_handler(settings)
        active["error_file"] = get_error_file_handler(settings)
    else:
        active["error_console"] = get_error_console_handler(settings)
    return active


def _loggers(settings: Settings, handler_names: list[str]) -> dict[str, dict]:
    loggers = {
        "": {"handlers": handler_names, "level": settings.LOG_LEVEL, "propagate": True},
        # records from our own modules propagate to root
        APP_LOGGER: {"level": settings.LOG_LEVEL, "propagate": True},
        "uvicorn.error": {"handlers": handler_names, "level": settings.LOG_LEVEL, "propagate": False},
        "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
        # SQL statements may carry user data; only at DEBUG when asked for
        "sqlalchemy.engine": {
            "handlers": ["console"],
            "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
            "propagate": False,
        },
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING", "propagate": True}
    return loggers


def make_dict_config(settings: Settings) -> dict:
    handlers = _handlers(settings)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _formatters(settings),
        "filters": {
            "request_id": {"()": RequestIdFilter},
            "redact": {"()": RedactFilter},
        },
        "handlers": handlers,
        "loggers": _loggers(settings, list(handlers)),
    }


def setup_logging(settings: Settings) -> None:
    """Create LOG_DIR when file logging is on, then apply the dictConfig."""
    if _file_logging_enabled(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    # keeps %(request_id)s safe for records handled outside our handlers
    root = logging.getLogger()
    if not any(isinstance(f, RequestIdFilter) for f in root.filters):
        root.addFilter(RequestIdFilter())
