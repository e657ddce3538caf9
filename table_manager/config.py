"""Runtime settings read from the environment.

Env vars:
  TABLE_STATE_PATH=<path.json>   -> where the table snapshot is persisted
  TABLE_PAGE_SIZE=10             -> rows per page (positive integer)
  TABLE_PERSIST=1                -> write snapshots to TABLE_STATE_PATH
  TABLE_LOG_LEVEL=INFO           -> root log level
  TABLE_JSON_LOGS=0              -> emit one JSON object per log line
  TABLE_HOST / TABLE_PORT        -> bind address for `table-manager serve`
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .data_model import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = os.path.join("user_data", "table_state.json")
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    state_path: str = DEFAULT_STATE_PATH
    page_size: int = DEFAULT_PAGE_SIZE
    persist: bool = True
    log_level: str = "INFO"
    json_logs: bool = False
    host: str = "127.0.0.1"
    port: int = 8000


def _flag(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def _positive_int(name: str, value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, value)
        return default
    if parsed <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, value)
        return default
    return parsed


def settings_from_env(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    return Settings(
        state_path=env.get("TABLE_STATE_PATH") or DEFAULT_STATE_PATH,
        page_size=_positive_int("TABLE_PAGE_SIZE", env.get("TABLE_PAGE_SIZE"), DEFAULT_PAGE_SIZE),
        persist=_flag(env.get("TABLE_PERSIST"), True),
        log_level=(env.get("TABLE_LOG_LEVEL") or "INFO").upper(),
        json_logs=_flag(env.get("TABLE_JSON_LOGS"), False),
        host=env.get("TABLE_HOST") or "127.0.0.1",
        port=_positive_int("TABLE_PORT", env.get("TABLE_PORT"), 8000),
    )
