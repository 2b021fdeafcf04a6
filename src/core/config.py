"""
Application settings, read from environment variables.

Library code only ever calls load_settings(); configure_logging() is meant for the process entrypoint.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "CHESS_CLOCK_"
DEFAULT_DATABASE_URL = "sqlite:///./chess_clock.db"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    time_limit: int = 0  # milliseconds
    increment: int = 0  # milliseconds
    log_level: str = "INFO"


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            f"{ENV_PREFIX + name} must be an integer number of milliseconds, got {raw!r}"
        ) from None
    if value < 0:
        raise ValueError(f"{ENV_PREFIX + name} must be non-negative, got {value}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the given mapping (defaults to os.environ)."""
    env = os.environ if env is None else env
    return Settings(
        database_url=env.get(ENV_PREFIX + "DATABASE_URL", DEFAULT_DATABASE_URL),
        time_limit=_read_int(env, "TIME_LIMIT_MS", 0),
        increment=_read_int(env, "INCREMENT_MS", 0),
        log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
