from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .db import StoreStatus, db_fetch_previous_state, db_game_exists, db_store_state
from .diff import LogOrder, TurnDelta, delta_to_json, diff_states
from .narrate import narrate
from .state import GameSnapshot, SnapshotError, snapshot_from_json
from .topology import BoardTopology
from .validate import ValidationOutcome, validate_moves

logger = logging.getLogger(__name__)

# Machine-readable error codes returned to callers.
INVALID_GAME_ID = 'INVALID_GAME_ID'
INVALID_GAME_STATE = 'INVALID_GAME_STATE'
INVALID_JSON = 'INVALID_JSON'
RECORD_NOT_FOUND = 'RECORD_NOT_FOUND'
STORAGE_ERROR = 'STORAGE_ERROR'
STORAGE_NOT_CONFIGURED = 'STORAGE_NOT_CONFIGURED'


@dataclass(frozen=True)
class TurnAnalysis:
    delta: TurnDelta
    validation: ValidationOutcome
    report: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "differences": delta_to_json(self.delta),
            "validationResult": self.validation.to_json(),
            "moveReport": self.report,
        }


@dataclass(frozen=True)
class TurnResult:
    success: bool
    message: str
    error: Optional[str] = None
    updated_id: Optional[str] = None
    move_report: Optional[str] = None
    validation: Optional[ValidationOutcome] = None

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.error is not None:
            out["error"] = self.error
        if self.success:
            out["updatedId"] = self.updated_id
            out["moveReport"] = self.move_report
            out["validationResult"] = self.validation.to_json() if self.validation else None
        return out


def analyze_turn(
    previous: Optional[GameSnapshot],
    current: GameSnapshot,
    topology: BoardTopology,
    log_order: LogOrder = LogOrder.NEWEST_FIRST,
) -> TurnAnalysis:
    """Diff -> validate -> narrate. No I/O."""
    delta = diff_states(previous, current, log_order)
    validation = validate_moves(topology, delta.movements, delta.dice)
    report = narrate(topology, delta, current, validation.errors)
    return TurnAnalysis(delta=delta, validation=validation, report=report)


def _fail(code: str, message: str) -> TurnResult:
    return TurnResult(success=False, message=message, error=code)


def _previous_snapshot(game_id: str, raw: Optional[Dict[str, Any]]) -> Optional[GameSnapshot]:
    if raw is None:
        return None
    try:
        return snapshot_from_json(raw)
    except SnapshotError as e:
        logger.warning("stored state for game %s does not parse (%s); treating turn as first", game_id, e)
        return None


def update_game_state(
    game_id: Any,
    payload: Any,
    db_path: Optional[str],
    topology: BoardTopology,
    log_order: LogOrder = LogOrder.NEWEST_FIRST,
) -> TurnResult:
    """
    Records a new game state and reports on the turn it represents.
    Rule violations do not block storage; they are returned in the report
    and validation outcome instead.
    """
    if not db_path:
        return _fail(STORAGE_NOT_CONFIGURED, "Storage is not configured. Check CHAUPAR_DB.")
    if not isinstance(game_id, str) or not game_id.strip():
        return _fail(INVALID_GAME_ID, "Invalid game id. Expected a non-empty string.")
    if not isinstance(payload, dict):
        return _fail(INVALID_GAME_STATE, "Invalid game state. Expected a JSON object.")
    try:
        json.dumps(payload)
    except (TypeError, ValueError):
        return _fail(INVALID_JSON, "The game state cannot be serialised to JSON.")
    try:
        current = snapshot_from_json(payload)
    except SnapshotError as e:
        return _fail(INVALID_GAME_STATE, f"Invalid game state: {e}")

    try:
        if not db_game_exists(db_path, game_id):
            return _fail(RECORD_NOT_FOUND, f'Game "{game_id}" was not found.')
        previous_raw = db_fetch_previous_state(db_path, game_id)
    except (sqlite3.Error, OSError):
        logger.exception("failed to read game %s", game_id)
        return _fail(STORAGE_ERROR, "Error while reading the game from storage.")

    analysis = analyze_turn(_previous_snapshot(game_id, previous_raw), current, topology, log_order)
    if not analysis.validation.is_valid:
        logger.info("game %s: turn recorded with %d rule violation(s)", game_id, len(analysis.validation.errors))

    status = db_store_state(db_path, game_id, payload)
    if status is StoreStatus.NOT_FOUND:
        return _fail(RECORD_NOT_FOUND, f'Game "{game_id}" was not found.')
    if status is StoreStatus.STORAGE_ERROR:
        return _fail(STORAGE_ERROR, "Error while updating the game in storage.")

    return TurnResult(
        success=True,
        message="Game updated.",
        updated_id=game_id,
        move_report=analysis.report,
        validation=analysis.validation,
    )
