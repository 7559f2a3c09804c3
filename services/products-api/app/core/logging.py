from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional

# Request id of the request being served ("-" outside of a request).
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] - %(message)s"


class RequestIdFilter(logging.Filter):
    """Stamps every record with the current request id so the format string can use it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Configure Python standard logging once for the whole service.

    Logs go to stdout (container-friendly). Calling it again is a no-op, so
    reloads and test clients that re-run the lifespan don't duplicate handlers.
    """
    root = logging.getLogger()
    if any(isinstance(f, RequestIdFilter) for h in root.handlers for f in h.filters):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())

    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn ya registra cada request; nuestro middleware lo hace con request id y duración.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or __name__)
