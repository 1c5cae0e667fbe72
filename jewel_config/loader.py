"""
Configuration Loader (``jewel_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into a frozen
``jewel_config.schema.EngineSettings``.  Runtime callers go through
``jewel_config.get_active_config()``; this module is the parsing step
behind it and is also used directly by tests.

Architecture position
---------------------
**Config layer**.  Depends on ``jewel_kernel.exceptions`` only; the kernel
never imports from ``jewel_config``.

Invariants enforced
-------------------
* Unknown top-level keys are rejected, so a typo never silently falls back
  to a default.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML or wrong value types  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from jewel_config.schema import EngineSettings
from jewel_kernel.exceptions import ConfigurationError

_TUPLE_FIELDS = (
    "categories",
    "colors",
    "purities",
    "payment_statuses",
    "central_branch_aliases",
    "true_values",
    "false_values",
)
_DECIMAL_FIELDS = (
    "default_profit_percentage",
    "profit_warning_min",
    "profit_warning_max",
)
_POSITIVE_INT_FIELDS = ("default_quantity", "progress_interval")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        ConfigurationError: if the file is not valid YAML or its top level
            is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(str(path), f"invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def _parse_str_tuple(source: str, key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(source, f"{key} must be a list of strings")
    return tuple(value)


def _parse_decimal(source: str, key: str, value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigurationError(source, f"{key} must be a number")
    try:
        result = Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigurationError(source, f"{key} must be a number") from e
    if not result.is_finite() or result < 0:
        raise ConfigurationError(source, f"{key} must be a finite non-negative number")
    return result


def _parse_positive_int(source: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(source, f"{key} must be a positive integer")
    return value


def _parse_header_aliases(source: str, value: Any) -> tuple[tuple[str, str], ...]:
    if not isinstance(value, dict):
        raise ConfigurationError(source, "header_aliases must be a mapping")
    pairs = []
    for header, canonical in value.items():
        if not isinstance(header, str) or not isinstance(canonical, str):
            raise ConfigurationError(source, "header_aliases keys and values must be strings")
        pairs.append((header, canonical))
    return tuple(pairs)


def parse_settings(data: dict[str, Any], source: str = "<dict>") -> EngineSettings:
    """
    Parse an ``EngineSettings`` from a dict.

    Keys absent from ``data`` keep the dataclass defaults.

    Raises:
        ConfigurationError: on unknown keys or values of the wrong type.
    """
    known = {f.name for f in fields(EngineSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(source, f"unknown keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in _TUPLE_FIELDS:
            kwargs[key] = _parse_str_tuple(source, key, value)
        elif key in _DECIMAL_FIELDS:
            kwargs[key] = _parse_decimal(source, key, value)
        elif key in _POSITIVE_INT_FIELDS:
            kwargs[key] = _parse_positive_int(source, key, value)
        elif key == "two_digit_year_pivot":
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 99:
                raise ConfigurationError(source, "two_digit_year_pivot must be an integer 0..99")
            kwargs[key] = value
        elif key == "warehouse_label":
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(source, "warehouse_label must be a non-empty string")
            kwargs[key] = value
        elif key == "header_aliases":
            kwargs[key] = _parse_header_aliases(source, value)

    settings = EngineSettings(**kwargs)
    if settings.profit_warning_min > settings.profit_warning_max:
        raise ConfigurationError(source, "profit_warning_min exceeds profit_warning_max")
    return settings


def load_settings(path: Path) -> EngineSettings:
    """Load and parse a settings file."""
    return parse_settings(load_yaml_file(path), source=str(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of a parsed settings document."""
    canonical = json.dumps(data, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
