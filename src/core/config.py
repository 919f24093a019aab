"""Application configuration, read from the environment once."""

import os
from dataclasses import dataclass
from functools import lru_cache


def _flag(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    command_prefix: str = "c4!"
    # Both timeouts are in seconds
    challenge_timeout: float = 60.0
    move_timeout: float = 120.0
    random_colors: bool = True
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings(
        command_prefix=os.environ.get("C4_COMMAND_PREFIX", "c4!"),
        challenge_timeout=float(os.environ.get("C4_CHALLENGE_TIMEOUT", "60")),
        move_timeout=float(os.environ.get("C4_MOVE_TIMEOUT", "120")),
        random_colors=_flag(os.environ.get("C4_RANDOM_COLORS", "1")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
