import json
import logging
from datetime import datetime, timezone
from typing import Optional

from salesdash.config import Settings, get_settings

# Set through ``extra=`` by log_request_failure.
REQUEST_FIELDS = ("method", "path", "status")


def _request_context(record: logging.LogRecord) -> dict:
    context = {}
    for field in REQUEST_FIELDS:
        value = getattr(record, field, None)
        if value is not None:
            context[field] = value
    return context


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_request_context(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


class RequestFormatter(logging.Formatter):
    """Plain-text lines, suffixed with ``[GET /api/... -> 500]`` for failed requests."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _request_context(record)
        if not context:
            return line
        head, sep, tail = line.partition("\n")
        suffix = " [{} {} -> {}]".format(
            context.get("method", "-"),
            context.get("path", "-"),
            context.get("status", "-"),
        )
        return head + suffix + sep + tail


def log_request_failure(logger: logging.Logger, request, exc: BaseException, status: int) -> None:
    """Log a request that ended in an error envelope.

    Client errors are logged without a traceback; server errors carry one.
    """
    extra = {"method": request.method, "path": request.url.path, "status": status}
    if status >= 500:
        logger.error("Request failed: %s", exc, exc_info=exc, extra=extra)
    else:
        logger.info("Request rejected: %s", exc, extra=extra)


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(RequestFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    # uvicorn's access log would repeat every request line next to ours.
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))


__all__ = [
    "JsonFormatter",
    "REQUEST_FIELDS",
    "RequestFormatter",
    "log_request_failure",
    "setup_logging",
]
