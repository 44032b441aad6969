from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from tilesync.core.board import BOARD_SIZE

# project root is one level up from this file: tilesync/settings.py
_PROJECT_ROOT = Path(__file__).resolve().parents[1]

# A bounded queue must at least hold the initial sync: every tile plus the condition.
MIN_BOUNDED_QUEUE_SIZE = BOARD_SIZE * BOARD_SIZE + 1


@dataclass(frozen=True, slots=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    # Bound on each subscriber's outbound queue; 0 means unbounded.
    subscriber_queue_size: int = 0
    static_dir: Path = _PROJECT_ROOT / "static"


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _log_level_from_env(name: str, default: str) -> str:
    level = os.environ.get(name, default).strip().upper() or default
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"{name} must be a logging level name such as INFO or DEBUG, got {level!r}")
    return level


def settings_from_env(*, dotenv_path: Path | None = None) -> Settings:
    """Build settings from TILESYNC_* environment variables.

    A `.env` file is loaded first if present; real environment variables win.
    """

    load_dotenv(dotenv_path=dotenv_path or _PROJECT_ROOT / ".env", override=False)

    queue_size = _int_from_env("TILESYNC_SUBSCRIBER_QUEUE_SIZE", 0)
    if queue_size < 0 or 0 < queue_size < MIN_BOUNDED_QUEUE_SIZE:
        raise ValueError(f"TILESYNC_SUBSCRIBER_QUEUE_SIZE must be 0 (unbounded) or at least {MIN_BOUNDED_QUEUE_SIZE}")

    static_dir = os.environ.get("TILESYNC_STATIC_DIR")

    return Settings(
        host=os.environ.get("TILESYNC_HOST", "127.0.0.1"),
        port=_int_from_env("TILESYNC_PORT", 8000),
        log_level=_log_level_from_env("TILESYNC_LOG_LEVEL", "INFO"),
        subscriber_queue_size=queue_size,
        static_dir=Path(static_dir) if static_dir else _PROJECT_ROOT / "static",
    )
