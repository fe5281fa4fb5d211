"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level defaults for the paced queue and the paced HTTP client
(PACED_INTERVAL_MS, HTTP_TIMEOUT, HTTP_VERIFY, retry limits).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Pacing
PACED_INTERVAL_MS = _env_float("PACED_INTERVAL_MS", 0.0)

# Network / HTTP
HTTP_TIMEOUT = _env_float("HTTP_TIMEOUT", 20.0)
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)

# Server throttle handling
HTTP_MAX_RETRIES = _env_int("HTTP_MAX_RETRIES", 2)
HTTP_MAX_RETRY_SLEEP = _env_float("HTTP_MAX_RETRY_SLEEP", 60.0)
