import logging
import os
from dataclasses import dataclass
from math import isfinite

from metar_fetch.stations import DEFAULT_STATION_PREFIX, STATION_ID_LEN

VERSION = "1.0.0"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 3.0
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_USER_AGENT = f"metar-fetch/{VERSION}"


@dataclass(frozen=True)
class AppSettings:
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    default_station_prefix: str = DEFAULT_STATION_PREFIX
    log_level: str = DEFAULT_LOG_LEVEL
    user_agent: str = DEFAULT_USER_AGENT


def _valid_log_level(level_name: str) -> bool:
    return isinstance(getattr(logging, str(level_name).upper(), None), int)


def validate_settings(settings: AppSettings) -> AppSettings:
    """Validate startup configuration and raise a clear error on invalid values."""
    errors = []

    try:
        timeout = float(settings.request_timeout_seconds)
    except (TypeError, ValueError):
        timeout = None
    if timeout is None or not isfinite(timeout) or timeout <= 0:
        errors.append("METAR_REQUEST_TIMEOUT_SECONDS must be a finite number > 0.")

    prefix = str(settings.default_station_prefix)
    if not (1 <= len(prefix) < STATION_ID_LEN) or not (prefix.isascii() and prefix.isalnum()):
        errors.append(
            f"METAR_DEFAULT_STATION_PREFIX must be 1 to {STATION_ID_LEN - 1} alphanumeric characters."
        )

    if not _valid_log_level(settings.log_level):
        errors.append("METAR_LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL (or equivalent).")

    if not str(settings.user_agent).strip():
        errors.append("METAR_USER_AGENT must be a non-empty string.")

    if errors:
        raise ValueError("Invalid configuration:\n- " + "\n- ".join(errors))
    return settings


def load_settings(environ=None) -> AppSettings:
    """Read METAR_* environment variables into validated settings."""
    environ = os.environ if environ is None else environ
    raw_timeout = environ.get("METAR_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError):
        timeout = raw_timeout
    settings = AppSettings(
        request_timeout_seconds=timeout,
        default_station_prefix=environ.get("METAR_DEFAULT_STATION_PREFIX", DEFAULT_STATION_PREFIX).strip().upper(),
        log_level=environ.get("METAR_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper(),
        user_agent=environ.get("METAR_USER_AGENT", DEFAULT_USER_AGENT),
    )
    return validate_settings(settings)
