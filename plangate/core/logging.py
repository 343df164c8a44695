"""Logging configuration with contextual dimensions.

Every log line can carry a set of *dimensions* (tenant_id, job, event id,
...) that travel with the logger instead of being interpolated into each
message. Outside local development lines are rendered as JSON so the
dimensions become queryable fields.

Usage:
    from plangate.core.logging import logger

    log = logger.with_context(tenant_id=str(tenant_id), metric="api_calls")
    log.info("Usage snapshot stored")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional

from plangate.core.config import settings

_RESERVED_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_ATTRS or key == "dimensions" or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _PlainFormatter(logging.Formatter):
    """Human-readable formatter that appends dimensions as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        dims = getattr(record, "dimensions", None)
        if dims:
            rendered = " ".join(f"{k}={v}" for k, v in dims.items())
            return f"{base} [{rendered}]"
        return base


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that attaches a dict of dimensions to every record."""

    def __init__(
        self,
        logger: logging.Logger,
        dimensions: Optional[dict[str, Any]] = None,
        prefix: str = "",
    ) -> None:
        """Wrap *logger* with the given dimensions and message prefix."""
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: dict[str, Any] = dict(dimensions or {})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping]:
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.dimensions)
        extra["dimensions"] = dict(self.dimensions)
        kwargs["extra"] = extra
        if self.prefix:
            msg = f"{self.prefix}{msg}"
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions merged in."""
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, merged, self.prefix)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a new logger whose messages start with *prefix*."""
        return ContextualLogger(self.logger, self.dimensions, prefix)


class LoggerConfigurator:
    """Build and configure contextual loggers."""

    _configured = False

    @classmethod
    def _configure_root(cls) -> None:
        if cls._configured:
            return
        handler = logging.StreamHandler(sys.stdout)
        if settings.use_json_logs:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(
                _PlainFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
        root = logging.getLogger("plangate")
        root.handlers = [handler]
        root.setLevel(settings.LOG_LEVEL.upper())
        root.propagate = False
        cls._configured = True

    @classmethod
    def configure_logger(
        cls, name: str, dimensions: Optional[dict[str, Any]] = None
    ) -> ContextualLogger:
        """Return a contextual logger for *name* carrying *dimensions*."""
        cls._configure_root()
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger("plangate")
