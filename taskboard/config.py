"""Settings loaded from environment variables.

TASKBOARD_DB_PATH      JSON snapshot file; unset keeps tasks in memory only
TASKBOARD_SAMPLE_DATA  seed new boards with the demo tasks (default: true)
TASKBOARD_LOG_LEVEL    console log level (default: WARNING)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "TASKBOARD"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(env: Mapping[str, str], name: str) -> Optional[Path]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


def _env_log_level(env: Mapping[str, str], name: str, default: str) -> str:
    raw = (env.get(name) or "").strip().upper()
    if isinstance(logging.getLevelName(raw), int):
        return raw
    return default


@dataclass(frozen=True)
class Settings:
    db_path: Optional[Path]
    sample_data: bool
    log_level: str


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment.

    Args:
        env: Mapping to read from. If None, uses os.environ.

    Malformed values fall back to their defaults.
    """
    if env is None:
        env = os.environ
    return Settings(
        db_path=_env_path(env, _k("DB_PATH")),
        sample_data=_env_bool(env, _k("SAMPLE_DATA"), True),
        log_level=_env_log_level(env, _k("LOG_LEVEL"), "WARNING"),
    )
