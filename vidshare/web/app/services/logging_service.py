"""
Structured logging for the vidshare API.

Every record can be rendered as one JSON line carrying the request id and
caller of the HTTP request it was emitted under. Engagement events (views,
likes, comments, search) are plain records with an ``event_type`` field.
"""

import json
import logging
import logging.config
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from starlette.datastructures import MutableHeaders

request_id_var: ContextVar[Optional[str]] = ContextVar("vidshare_request_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("vidshare_user_id", default=None)

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

REQUEST_ID_HEADER = "X-Request-ID"


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {key: value for key, value in vars(record).items() if key not in _STANDARD_ATTRS}


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields are nested under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        for key, var in (("request_id", request_id_var), ("user_id", user_id_var)):
            value = var.get()
            if value:
                payload[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        extras = {k: v for k, v in _record_extras(record).items() if k not in payload}
        if extras:
            payload["extra"] = extras

        return json.dumps(payload, default=str, ensure_ascii=False)


class EngagementLoggerAdapter(logging.LoggerAdapter):
    """Adds request context to every record and knows the event shapes we log."""

    def process(self, msg, kwargs):
        fields = dict(self.extra or {})
        fields.update(kwargs.get("extra") or {})
        request_id = request_id_var.get()
        if request_id:
            fields.setdefault("request_id", request_id)
        user_id = user_id_var.get()
        if user_id:
            fields.setdefault("user_id", user_id)
        kwargs["extra"] = fields
        return msg, kwargs

    def log_engagement_event(self, level: int, event_type: str, video_id: Optional[str] = None,
                             message: str = "", **fields):
        """Emit a view/like/comment/search event."""
        self.log(level, message or event_type, extra={"event_type": event_type, "video_id": video_id, **fields})

    def log_api_request(self, method: str, endpoint: str, status_code: int, duration_ms: float, **fields):
        level = logging.WARNING if status_code >= 500 else logging.INFO
        self.log(
            level,
            f"{method} {endpoint} {status_code} in {duration_ms}ms",
            extra={
                "event_type": "api_request",
                "method": method,
                "endpoint": endpoint,
                "status_code": status_code,
                "duration_ms": duration_ms,
                **fields,
            },
        )


def _rotating_file(path: Path, level: str, max_mb: int, backups: int) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "json",
        "filename": str(path),
        "maxBytes": max_mb * 1024 * 1024,
        "backupCount": backups,
    }


def build_logging_config(level: str = "INFO", json_format: bool = True, log_dir: str = "") -> Dict[str, Any]:
    """dictConfig for the API; file handlers are added only when ``log_dir`` is set."""
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "json" if json_format else "simple",
            "stream": sys.stdout,
        },
    }
    app_handlers: List[str] = ["console"]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers["file_all"] = _rotating_file(directory / "vidshare.log", "DEBUG", 100, 10)
        handlers["file_error"] = _rotating_file(directory / "vidshare-error.log", "ERROR", 50, 5)
        app_handlers += ["file_all", "file_error"]

    def quiet(logger_level: str) -> Dict[str, Any]:
        return {"level": logger_level, "handlers": ["console"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter},
            "simple": {"format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s"},
        },
        "handlers": handlers,
        "loggers": {
            "vidshare": {"level": level, "handlers": app_handlers, "propagate": False},
            "uvicorn": quiet("INFO"),
            "sqlalchemy": quiet("WARNING"),
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def setup_logging(level: str = "INFO", json_format: bool = True, log_dir: str = "") -> None:
    logging.config.dictConfig(build_logging_config(level, json_format, log_dir))


_adapters: Dict[str, EngagementLoggerAdapter] = {}


def get_logger(name: str, extra: Optional[Dict[str, Any]] = None) -> EngagementLoggerAdapter:
    """Adapter over the ``vidshare.<name>`` logger, created once per name."""
    adapter = _adapters.get(name)
    if adapter is None:
        adapter = EngagementLoggerAdapter(logging.getLogger(f"vidshare.{name}"), extra or {})
        _adapters[name] = adapter
    return adapter


def get_api_logger() -> EngagementLoggerAdapter:
    return get_logger("api")


def get_engagement_logger() -> EngagementLoggerAdapter:
    return get_logger("engagement")


class LoggingMiddleware:
    """
    Pure ASGI middleware: tags each HTTP request with an id, logs its outcome
    and returns the id in the ``X-Request-ID`` header.

    An incoming ``X-Request-ID`` is reused so ids can be traced across
    services.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_api_logger()

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        incoming = dict(scope.get("headers") or []).get(b"x-request-id")
        request_id = incoming.decode("latin-1") if incoming else uuid.uuid4().hex
        scope["request_id"] = request_id
        started = time.perf_counter()

        request_token = request_id_var.set(request_id)
        user_token = user_id_var.set(None)

        async def send_with_request_id(message):
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
                self.logger.log_api_request(
                    scope["method"],
                    scope["path"],
                    message["status"],
                    round((time.perf_counter() - started) * 1000, 2),
                )
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            request_id_var.reset(request_token)
            user_id_var.reset(user_token)
