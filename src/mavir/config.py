import logging
import os
from dataclasses import dataclass

_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_JOBS = 1


@dataclass(frozen=True)
class Settings:
    log_level: str
    jobs: int


def _parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level '{value}'")
    return level


def _parse_jobs(value: str) -> int:
    jobs = int(value)
    if jobs < 1:
        raise ValueError(f"MAVIR_JOBS must be at least 1. Got: {value}")
    return jobs


def get_settings() -> Settings:
    """Read settings from the environment, falling back to defaults."""
    return Settings(
        log_level=_parse_log_level(os.getenv("MAVIR_LOG_LEVEL", _DEFAULT_LOG_LEVEL)),
        jobs=_parse_jobs(os.getenv("MAVIR_JOBS", str(_DEFAULT_JOBS))),
    )
