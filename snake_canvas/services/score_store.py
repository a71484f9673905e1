"""
Best score persistence for snake_canvas.

This module provides a tiny string key-value store, backed either by a local
SQLite file or by memory, plus helpers that read and write the best score
without ever letting a storage failure reach the game loop.
"""

import logging
import math
import os
import sqlite3
from typing import Dict, Optional

from snake_canvas.domain.constants import BEST_SCORE_KEY

logger = logging.getLogger(__name__)


class ScoreStore:
    """Interface: get(key) -> Optional[str], set(key, value)."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryScoreStore(ScoreStore):
    """Process-local store; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class SqliteScoreStore(ScoreStore):
    """
    Key-value store in a single SQLite table.

    A connection is opened per call, so the store holds no open handle
    between writes.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a database connection with appropriate settings.

        Returns:
            sqlite3.Connection: Database connection with row factory enabled.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        return conn

    def init_schema(self) -> None:
        """
        Create the kv table. Safe to call multiple times (uses IF NOT EXISTS).
        """
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = self.get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        conn = self.get_connection()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self.get_connection()
        try:
            conn.execute(
                """
                INSERT INTO kv (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()


def open_score_store(settings) -> ScoreStore:
    """
    Pick the store for the given settings.

    Falls back to memory when storage is disabled or the SQLite file can't
    be prepared.
    """
    if not settings.storage_enabled:
        logger.info("Score storage disabled, best score will not persist")
        return MemoryScoreStore()

    store = SqliteScoreStore(settings.score_db_path)
    try:
        store.init_schema()
    except (sqlite3.Error, OSError) as e:
        logger.warning("Score storage unavailable at %s (%s), using memory", settings.score_db_path, e)
        return MemoryScoreStore()

    logger.info("Best score stored at %s", settings.score_db_path)
    return store


def load_best_score(store: ScoreStore, key: str = BEST_SCORE_KEY) -> int:
    """
    Read the persisted best score.

    Numbers are read the way they were written ("150" or "150.0"). Missing,
    non-numeric, non-finite or negative values and storage errors all read as 0.
    """
    try:
        raw = store.get(key)
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not read best score: %s", e)
        return 0

    if raw is None:
        return 0
    try:
        value = float(str(raw).strip() or "0")
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        logger.warning("Ignoring malformed best score %r", raw)
        return 0
    return max(int(value), 0)


def save_best_score(store: ScoreStore, value: int, key: str = BEST_SCORE_KEY) -> bool:
    """Write the best score through to the store. Returns False if the write failed."""
    try:
        store.set(key, str(value))
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not persist best score %d: %s", value, e)
        return False
    return True
