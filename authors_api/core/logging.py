import logging
import sys
from collections.abc import MutableMapping
from typing import Any, Final
from logging import LoggerAdapter, LogRecord
from typing_extensions import override
from fastapi import Request

_LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s %(name)s :: %(message)s "
    "[req=%(request_id)s user=%(user)s]"
)


def request_user(request: Request) -> str:
    """Subject of the authenticated caller, "-" for anonymous requests."""
    principal = getattr(request.state, "principal", None)
    return principal.subject if principal is not None else "-"


class RequestLogFilter(logging.Filter):
    """
    Fills request_id/user from the request attached to the record.

    The lookup happens when the record is emitted, so a logger obtained before
    authentication still reports the caller once the principal is known.
    """

    @override
    def filter(self, record: LogRecord) -> bool:
        request: Request | None = getattr(record, "request", None)
        if request is not None:
            if not hasattr(record, "request_id"):
                record.request_id = getattr(request.state, "correlation_id", "-")
            if not hasattr(record, "user"):
                record.user = request_user(request)
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        if not hasattr(record, "user"):
            record.user = "-"
        return True


class RequestLoggerAdapter(LoggerAdapter[logging.Logger]):
    """Attaches the request to every record; per-call `extra` is kept."""

    @override
    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure root/uvicorn loggers (request_id/user).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestLogFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.setLevel(level)
        lg.addHandler(handler)


def get_logger(name: str, request: Request | None = None) -> RequestLoggerAdapter:
    """Usage: logger = get_logger(__name__, request)"""
    extra: dict[str, object] = {}
    if request is not None:
        extra["request"] = request
    return RequestLoggerAdapter(logging.getLogger(name), extra)
