"""Environment helpers used by ``backend.settings``."""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Optional, Union

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def load_env_file(path: Union[str, Path]) -> bool:
    """Load ``path`` into ``os.environ`` without overriding variables already set."""

    if not Path(path).is_file():
        logger.warning("unable to read %s and relying on environment variables", path)
        return False
    return load_dotenv(path, override=False)


def env(name: str, default: Optional[str] = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


def env_or_default(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        logger.warning("invalid %s, using default value", name)
        return default
    return value


def parse_duration(raw: str) -> float:
    """Parse ``"250ms"``, ``"5s"``, ``"1m30s"`` or a bare number of seconds."""

    value = (raw or "").strip()
    if not value:
        raise ValueError("empty duration string")
    try:
        seconds = float(value)
    except ValueError:
        parts = _DURATION_PART.findall(value)
        if not parts or "".join(number + unit for number, unit in parts) != value:
            raise ValueError(f"invalid duration {raw!r}")
        seconds = sum(float(number) * _DURATION_UNITS[unit] for number, unit in parts)
    if not 0 < seconds < float("inf"):
        raise ValueError(f"duration must be positive: {raw!r}")
    return seconds


def env_duration(name: str, default: float) -> float:
    try:
        return parse_duration(os.environ.get(name, ""))
    except ValueError:
        logger.warning("invalid %s, using default value %ss", name, default)
        return default


__all__ = ["env", "env_duration", "env_or_default", "load_env_file", "parse_duration"]
