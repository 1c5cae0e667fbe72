"""
jewel_config -- single public entrypoint for engine settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_config()``.  Engines accept an ``EngineSettings`` by
    constructor injection and fall back to this function when none is given.

Architecture position:
    Configuration.  Sits above ``jewel_kernel`` and below ``jewel_engines``,
    ``jewel_ingestion`` and ``jewel_services``.  The kernel MUST NEVER import
    from ``jewel_config``.

Failure modes:
    - ``FileNotFoundError`` -- the configured settings file does not exist.
    - ``ConfigurationError`` -- the file is malformed.

Audit relevance:
    Every load emits a ``JEWEL_CONFIG_TRACE`` log entry with the source path
    and a checksum of the parsed document.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from jewel_config.loader import compute_checksum, load_yaml_file, parse_settings
from jewel_config.schema import EngineSettings
from jewel_kernel.logging_config import get_logger

_logger = get_logger("config")

CONFIG_PATH_ENV = "JEWEL_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> EngineSettings:
    """The public settings entrypoint.

    Resolution order: explicit ``path``, then ``$JEWEL_CONFIG_PATH``, then
    the packaged ``defaults.yaml``.  Results are cached per resolved path;
    call ``clear_config_cache()`` after editing a file in place.

    Raises:
        FileNotFoundError: If the resolved file does not exist.
        ConfigurationError: If the file is malformed.
    """
    if path is None:
        path = os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
    return _load_cached(Path(path).resolve())


@lru_cache(maxsize=8)
def _load_cached(path: Path) -> EngineSettings:
    data = load_yaml_file(path)
    settings = parse_settings(data, source=str(path))
    _logger.info(
        "JEWEL_CONFIG_TRACE",
        extra={
            "trace_type": "JEWEL_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": compute_checksum(data),
            "category_count": len(settings.categories),
        },
    )
    return settings


def clear_config_cache() -> None:
    _load_cached.cache_clear()


__all__ = [
    "CONFIG_PATH_ENV",
    "DEFAULT_CONFIG_PATH",
    "EngineSettings",
    "clear_config_cache",
    "get_active_config",
]
