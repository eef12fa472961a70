from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from chaupar_core.config import load_settings
from chaupar_core.db import db_create_game, db_fetch_previous_state, db_game_exists
from chaupar_core.dice import is_special_double, roll_dice
from chaupar_core.layout import standard_topology
from chaupar_core.state import SnapshotError, snapshot_from_json
from chaupar_core.topology import BoardTopology, load_topology
from chaupar_core.turns import (
    INVALID_GAME_ID,
    INVALID_GAME_STATE,
    INVALID_JSON,
    RECORD_NOT_FOUND,
    STORAGE_ERROR,
    STORAGE_NOT_CONFIGURED,
    analyze_turn,
    update_game_state,
)

logger = logging.getLogger(__name__)

SETTINGS = load_settings()
DB_PATH: Optional[str] = SETTINGS.db_path
LOG_ORDER = SETTINGS.dice_log_order


def _load_board(path: Optional[str]) -> BoardTopology:
    if path:
        logger.info("loading board topology from %s", path)
        return load_topology(path)
    return standard_topology()


TOPOLOGY = _load_board(SETTINGS.board_path)

app = Flask(__name__)

_STATUS_BY_ERROR: Dict[str, int] = {
    INVALID_GAME_ID: 400,
    INVALID_GAME_STATE: 400,
    INVALID_JSON: 400,
    RECORD_NOT_FOUND: 404,
    STORAGE_ERROR: 500,
    STORAGE_NOT_CONFIGURED: 500,
}


def _storage_error(message: str) -> Any:
    return jsonify({"success": False, "error": STORAGE_ERROR, "message": message}), 500


@app.after_request
def _cors(resp: Any) -> Any:
    resp.headers["Access-Control-Allow-Origin"] = "*"
    resp.headers["Access-Control-Allow-Headers"] = "Origin, X-Requested-With, Content-Type, Accept"
    return resp


@app.get("/")
def index() -> Any:
    return jsonify({
        "message": "Chaupar game server is running.",
        "endpoints": {
            "simpleRoll": "GET /api/roll/simple - roll two dice",
            "createGame": "POST /api/games - register a game",
            "getState": "GET /api/games/<gameId>/state - last saved state",
            "updateState": "POST /api/games/<gameId>/state - save a state and report on the turn",
            "analyze": "POST /api/analyze - report on a turn without saving",
        },
    })


@app.get("/api/roll/simple")
def api_roll_simple() -> Any:
    roll = roll_dice()
    return jsonify({
        "success": True,
        "dice1": roll.dice1,
        "dice2": roll.dice2,
        "sum": roll.sum,
        "specialDouble": is_special_double(roll),
    })


@app.post("/api/games")
def api_create_game() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    game_id = body.get("gameId")
    state = body.get("state")
    if not isinstance(game_id, str) or not game_id.strip():
        return jsonify({"success": False, "error": INVALID_GAME_ID, "message": "gameId required"}), 400
    if state is not None:
        try:
            snapshot_from_json(state)
        except SnapshotError as e:
            return jsonify({"success": False, "error": INVALID_GAME_STATE, "message": str(e)}), 400
    if not DB_PATH:
        return jsonify({"success": False, "error": STORAGE_NOT_CONFIGURED, "message": "storage is not configured"}), 500
    try:
        created = db_create_game(DB_PATH, game_id, state)
    except (sqlite3.Error, OSError):
        logger.exception("failed to create game %s", game_id)
        return _storage_error("Error while creating the game in storage.")
    if not created:
        return jsonify({"success": False, "error": "GAME_EXISTS", "message": f'Game "{game_id}" already exists.'}), 409
    logger.info("created game %s", game_id)
    return jsonify({"success": True, "gameId": game_id}), 201


@app.get("/api/games/<game_id>/state")
def api_get_state(game_id: str) -> Any:
    if not DB_PATH:
        return jsonify({"success": False, "error": STORAGE_NOT_CONFIGURED}), 500
    try:
        if not db_game_exists(DB_PATH, game_id):
            return jsonify({"success": False, "error": RECORD_NOT_FOUND}), 404
        state = db_fetch_previous_state(DB_PATH, game_id)
    except (sqlite3.Error, OSError):
        logger.exception("failed to read game %s", game_id)
        return _storage_error("Error while reading the game from storage.")
    # A registered game has no state until its first update
    return jsonify({"success": True, "gameId": game_id, "state": state})


@app.post("/api/games/<game_id>/state")
def api_update_state(game_id: str) -> Any:
    body = request.get_json(force=True, silent=True)
    result = update_game_state(game_id, body, DB_PATH, TOPOLOGY, LOG_ORDER)
    status = 200 if result.success else _STATUS_BY_ERROR.get(result.error or "", 500)
    return jsonify(result.to_json()), status


@app.post("/api/analyze")
def api_analyze() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    if not isinstance(body.get("current"), dict):
        return jsonify({"success": False, "error": INVALID_GAME_STATE, "message": "current state required"}), 400
    try:
        current = snapshot_from_json(body["current"])
        prev_in = body.get("previous")
        previous = snapshot_from_json(prev_in) if prev_in is not None else None
    except SnapshotError as e:
        return jsonify({"success": False, "error": INVALID_GAME_STATE, "message": str(e)}), 400
    analysis = analyze_turn(previous, current, TOPOLOGY, LOG_ORDER)
    out = {"success": True}
    out.update(analysis.to_json())
    return jsonify(out)


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=SETTINGS.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Chaupar server listening on port %d", SETTINGS.port)
    app.run(host="0.0.0.0", port=SETTINGS.port, debug=SETTINGS.debug)
