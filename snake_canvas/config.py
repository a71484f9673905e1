"""
Environment-driven settings for snake_canvas.

Values come from the process environment, optionally seeded from a ``.env``
file in the working directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from snake_canvas.domain.constants import BOARD_SIZE, CELL_SIZE, START_SNAKE, STEP_MS

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60
DEFAULT_SCORE_DB = str(Path.home() / ".snake_canvas" / "scores.db")
# Smallest board the start snake fits on
MIN_BOARD_SIZE = max(max(cell) for cell in START_SNAKE) + 1


@dataclass(frozen=True)
class Settings:
    cell_size: int = CELL_SIZE
    board_size: int = BOARD_SIZE
    step_ms: int = STEP_MS
    fps: int = DEFAULT_FPS
    score_db_path: str = DEFAULT_SCORE_DB
    storage_enabled: bool = True
    log_level: str = "INFO"

    @property
    def canvas_px(self) -> int:
        return self.board_size * self.cell_size


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r (must be positive), using %d", name, raw, default)
        return default
    return value


def _board_size() -> int:
    size = _env_int("SNAKE_BOARD_SIZE", BOARD_SIZE)
    if size < MIN_BOARD_SIZE:
        logger.warning("Ignoring SNAKE_BOARD_SIZE=%d (the start snake needs at least %d), using %d",
                       size, MIN_BOARD_SIZE, BOARD_SIZE)
        return BOARD_SIZE
    return size


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment.

    Uses environment variables:
    - SNAKE_CELL_SIZE, SNAKE_BOARD_SIZE, SNAKE_STEP_MS, SNAKE_FPS: positive integers
    - SNAKE_BOARD_SIZE must also fit the start snake (MIN_BOARD_SIZE)
    - SNAKE_SCORE_DB: sqlite file holding the best score
    - SNAKE_DISABLE_STORAGE: truthy to keep the best score in memory only
    - SNAKE_LOG_LEVEL: logging level name
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        cell_size=_env_int("SNAKE_CELL_SIZE", CELL_SIZE),
        board_size=_board_size(),
        step_ms=_env_int("SNAKE_STEP_MS", STEP_MS),
        fps=_env_int("SNAKE_FPS", DEFAULT_FPS),
        score_db_path=os.getenv("SNAKE_SCORE_DB") or DEFAULT_SCORE_DB,
        storage_enabled=not _env_flag("SNAKE_DISABLE_STORAGE"),
        log_level=(os.getenv("SNAKE_LOG_LEVEL") or "INFO").upper(),
    )
