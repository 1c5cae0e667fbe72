"""
Structured JSON logging for the jewel kernel.

Every jewel_kernel.* logger writes one JSON object per line.  Fields bound
through LogContext (actor, import batch, supplier) are merged into each
record; ``extra=`` fields are merged as-is, with UUID, date and Decimal
values rendered as strings.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextvars import ContextVar, Token
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

_LOGGER_PREFIX = "jewel_kernel"


# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"jewel_log_{name}", default=None)
    for name in ("actor_id", "batch_id", "supplier_name")
}


class LogContext:
    """Request-scoped log fields, safe across threads and asyncio tasks."""

    @staticmethod
    def set(
        *,
        actor_id: str | None = None,
        batch_id: str | None = None,
        supplier_name: str | None = None,
    ) -> None:
        """Set fields; None leaves a field unchanged."""
        values = {"actor_id": actor_id, "batch_id": batch_id, "supplier_name": supplier_name}
        for name, value in values.items():
            if value is not None:
                _CONTEXT_VARS[name].set(str(value))

    @staticmethod
    def get_all() -> dict[str, str]:
        """Currently bound fields, without the unset ones."""
        return {
            name: value
            for name, var in _CONTEXT_VARS.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _CONTEXT_VARS.values():
            var.set(None)

    @staticmethod
    def bind(**fields: Any) -> "_BoundContext":
        """
        Bind fields for the duration of a ``with`` block.

        Unknown names and None values are ignored; previous values are
        restored on exit.
        """
        return _BoundContext(fields)


class _BoundContext:
    def __init__(self, fields: dict[str, Any]):
        self._fields = fields
        self._tokens: list[tuple[ContextVar[str | None], Token[str | None]]] = []

    def __enter__(self) -> type[LogContext]:
        for name, value in self._fields.items():
            var = _CONTEXT_VARS.get(name)
            if var is not None and value is not None:
                self._tokens.append((var, var.set(str(value))))
        return LogContext

    def __exit__(self, *exc: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else came from ``extra=``
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    return repr(value)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            code = getattr(exc, "code", None)
            if code is not None:
                payload["exc_code"] = code
            # Public attributes of JewelKernelError subclasses (item_id, ...)
            for key, value in vars(exc).items():
                if not key.startswith("_") and key != "code":
                    payload[f"exc_{key}"] = value
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger under the jewel_kernel namespace, e.g. ``get_logger("engines.pricing")``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the jewel_kernel logger.

    Only the first call has an effect; later calls return immediately.
    Without ``handler`` records go to stderr.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level)
    root.propagate = False

    target = handler if handler is not None else logging.StreamHandler(sys.stderr)
    target.setFormatter(StructuredFormatter())
    root.addHandler(target)


def reset_logging() -> None:
    """Drop handlers and the configured flag. Tests only."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
