"""
jewel_engines.tracer -- Engine invocation tracer emitting JEWEL_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps pure
    engine invocations with structured trace logging.  The trace captures
    engine_name, engine_version, input_fingerprint (deterministic SHA-256
    hash of selected inputs), and duration_ms.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Does NOT introduce I/O into engines; emits a log record only.

Invariants enforced:
    - Fingerprint computation is deterministic: _canonicalize produces
      stable string representations of values, dict keys are sorted and
      the hash is SHA-256 truncated to 16 hex chars.
    - The decorator only reads arguments and emits a log record; it does
      not mutate inputs.

Failure modes:
    - fingerprint_fields naming a parameter that was not supplied record
      the field as "null".

Usage:
    from jewel_engines.tracer import traced_engine

    @traced_engine("pricing", "1.0", fingerprint_fields=("weight",))
    def derive_pricing(self, weight, ...):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from jewel_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")


def _canonicalize(value: Any) -> str:
    """Produce a stable string representation of a value for fingerprinting.

    Decimals are normalized so that 3.62 and 3.620 fingerprint alike.
    Dataclasses are expanded field by field.  Unknown types fall back to
    ``str(value)``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _canonicalize(value.value)
    if isinstance(value, Decimal):
        return str(value.normalize()) if value.is_finite() else str(value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _canonicalize(
            {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        )
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """Compute a deterministic SHA-256 fingerprint of selected input fields.

    Only the fields listed in fingerprint_fields are included.  Missing
    fields are recorded as "null".  The result is a 16-char hex prefix.
    """
    parts: list[str] = []
    for field in fingerprint_fields:
        parts.append(f"{field}={_canonicalize(arguments.get(field))}")
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits JEWEL_ENGINE_TRACE for pure engine invocations.

    Positional and keyword arguments are bound against the wrapped
    function's signature, so a field fingerprints the same however the
    caller passed it.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = ""
            if fingerprint_fields:
                try:
                    bound = signature.bind(*args, **kwargs)
                except TypeError:
                    # Let the call itself raise the signature error
                    return func(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, dict(bound.arguments))

            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            _logger.info(
                "JEWEL_ENGINE_TRACE",
                extra={
                    "trace_type": "JEWEL_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fp,
                    "duration_ms": duration_ms,
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
