from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _int_from_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


def _optional_int_from_env(key: str) -> Optional[int]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return None
    return _int_from_env(key, 0)


@dataclass(frozen=True)
class EntrantSourceSettings:
    path: str = ""
    id_key: str = "id"
    name_key: str = "name"
    phone_key: str = "phone"
    email_key: str = "email"
    date_key: str = "submission_date"


@dataclass(frozen=True)
class EngineSettings:
    spin_min_ms: int = 3000
    spin_max_ms: int = 6000
    tick_interval_ms: int = 100
    leaderboard_size: int = 12
    random_seed: Optional[int] = None
    entrants: EntrantSourceSettings = field(default_factory=EntrantSourceSettings)

    def __post_init__(self) -> None:
        if self.spin_min_ms < 0 or self.spin_max_ms < self.spin_min_ms:
            raise ValueError(
                f"Spin window must satisfy 0 <= min <= max (got {self.spin_min_ms}, {self.spin_max_ms})"
            )
        if self.tick_interval_ms <= 0:
            raise ValueError("TICK_INTERVAL_MS must be positive")
        if self.leaderboard_size < 0:
            raise ValueError("LEADERBOARD_SIZE must not be negative")

    def copy(self, **updates) -> "EngineSettings":
        return replace(self, **updates)


def load_from_environment() -> EngineSettings:
    defaults = EntrantSourceSettings()
    entrants = EntrantSourceSettings(
        path=os.getenv("ENTRANTS__PATH", ""),
        id_key=os.getenv("ENTRANTS__ID_KEY", defaults.id_key),
        name_key=os.getenv("ENTRANTS__NAME_KEY", defaults.name_key),
        phone_key=os.getenv("ENTRANTS__PHONE_KEY", defaults.phone_key),
        email_key=os.getenv("ENTRANTS__EMAIL_KEY", defaults.email_key),
        date_key=os.getenv("ENTRANTS__DATE_KEY", defaults.date_key),
    )

    return EngineSettings(
        spin_min_ms=_int_from_env("SPIN_MIN_MS", 3000),
        spin_max_ms=_int_from_env("SPIN_MAX_MS", 6000),
        tick_interval_ms=_int_from_env("TICK_INTERVAL_MS", 100),
        leaderboard_size=_int_from_env("LEADERBOARD_SIZE", 12),
        random_seed=_optional_int_from_env("RANDOM_SEED"),
        entrants=entrants,
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> EngineSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
