"""
Logging filters.

- RequestIdFilter stamps `record.request_id` from a contextvar that
  RequestIDMiddleware sets per HTTP request. Outside a request the value is "-",
  so format strings using %(request_id)s never KeyError.
- RedactFilter masks `extra={...}` attributes whose names look like credentials.

contextvars (not threading.local) keep the id correct across awaits and
concurrent requests served by the same thread.
"""

import contextvars
import logging
from logging import LogRecord

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

REDACTED = "***REDACTED***"


def set_request_id(request_id: str | None) -> contextvars.Token:
    """Set the request id in the current context and return the token for reset_request_id()."""
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee every LogRecord has `request_id`.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar, then "-".
    Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "db_url",
        "database_url",
    }

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = REDACTED
        return True
