from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class StoreStatus(str, Enum):
    SUCCESS = 'success'
    NOT_FOUND = 'notFound'
    STORAGE_ERROR = 'storageError'


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        pass
    candidates = [
        os.getenv('CHAUPAR_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(db_path) or 'chaupar.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            logger.warning("database directory for %s is not writable, using %s", db_path, d)
            return os.path.join(d, base)
        except OSError:
            continue
    return base


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds').replace('+00:00', 'Z')


def _connect(db_path: str) -> sqlite3.Connection:
    resolved = _resolve_db_path(db_path)
    conn = sqlite3.connect(resolved)
    try:
        _ensure_db(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the saved_games table exists."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS saved_games (
            game_id TEXT PRIMARY KEY,
            new_game_state TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def db_create_game(db_path: str, game_id: str, state: Optional[Dict[str, Any]] = None) -> bool:
    """Registers a game. Returns False when the id is already taken."""
    conn = _connect(db_path)
    try:
        now = _now()
        cur = conn.execute(
            "INSERT OR IGNORE INTO saved_games (game_id, new_game_state, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (game_id, json.dumps(state) if state is not None else None, now, now),
        )
        conn.commit()
        return cur.rowcount == 1
    finally:
        conn.close()


def db_game_exists(db_path: str, game_id: str) -> bool:
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT 1 FROM saved_games WHERE game_id = ?", (game_id,)).fetchone()
        return row is not None
    finally:
        conn.close()


def db_fetch_previous_state(db_path: str, game_id: str) -> Optional[Dict[str, Any]]:
    """Returns the last stored state for a game, or None if there is none yet."""
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT new_game_state FROM saved_games WHERE game_id = ?", (game_id,)).fetchone()
    finally:
        conn.close()
    if not row or row[0] is None:
        return None
    try:
        state = json.loads(row[0])
    except json.JSONDecodeError:
        logger.warning("stored state for game %s is not valid JSON; ignoring it", game_id)
        return None
    return state if isinstance(state, dict) else None


def db_store_state(db_path: str, game_id: str, state: Dict[str, Any]) -> StoreStatus:
    """Replaces the stored state of an existing game."""
    try:
        conn = _connect(db_path)
        try:
            cur = conn.execute(
                "UPDATE saved_games SET new_game_state = ?, updated_at = ? WHERE game_id = ?",
                (json.dumps(state), _now(), game_id),
            )
            conn.commit()
        finally:
            conn.close()
    except (sqlite3.Error, OSError):
        logger.exception("failed to store state for game %s", game_id)
        return StoreStatus.STORAGE_ERROR
    if cur.rowcount == 0:
        return StoreStatus.NOT_FOUND
    return StoreStatus.SUCCESS
