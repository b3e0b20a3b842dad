# src/personal_library/core/logging/
# ├─ __init__.py       # public API: setup_logging, set_request_id, RequestIDMiddleware
# ├─ builder.py        # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py     # JsonFormatter, ColorFormatter
# ├─ filters.py        # RequestIdFilter, RedactFilter (+ contextvar helpers)
# ├─ handlers.py       # handler-config factories (console, file, error sinks)
# └─ middleware.py     # Starlette middleware that sets the request id

from .builder import make_dict_config, setup_logging
from .filters import RedactFilter, RequestIdFilter, get_request_id, reset_request_id, set_request_id
from .middleware import RequestIDMiddleware

__all__ = [
    "setup_logging",
    "make_dict_config",
    "set_request_id",
    "reset_request_id",
    "get_request_id",
    "RequestIdFilter",
    "RedactFilter",
    "RequestIDMiddleware",
]
