"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .store import DEFAULT_DATABASE_URL


def _env_bool(value: Optional[str], default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer setting: {value}") from exc


@dataclass
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "WARNING"
    log_json: bool = False
    # schedule rows shown before truncating
    max_rows: int = 120
    secret_key: str = "dev-secret-key"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            database_url=env.get("DEBT_CALC_DATABASE_URL") or DEFAULT_DATABASE_URL,
            log_level=(env.get("DEBT_CALC_LOG_LEVEL") or "WARNING").upper(),
            log_json=_env_bool(env.get("DEBT_CALC_LOG_JSON")),
            max_rows=_env_int(env.get("DEBT_CALC_MAX_ROWS"), 120),
            secret_key=env.get("FLASK_SECRET_KEY") or "dev-secret-key",
        )
