from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .topology import Coord


class SnapshotError(ValueError):
    """Raised when a game state payload does not match the snapshot schema."""


@dataclass(frozen=True)
class Piece:
    id: Optional[str]
    position: Optional[Coord]


@dataclass(frozen=True)
class DiceRoll:
    """Two dice plus, when taken from the dice log, who rolled them."""
    dice1: int
    dice2: int
    player: Optional[int] = None
    color: Optional[str] = None

    @property
    def sum(self) -> int:
        return self.dice1 + self.dice2

    def has(self, value: int) -> bool:
        return self.dice1 == value or self.dice2 == value

    def pretty(self) -> str:
        return f"{self.dice1}+{self.dice2}={self.sum}"


@dataclass(frozen=True)
class PlayerInfo:
    player: int
    color: str


@dataclass(frozen=True)
class PieceMovement:
    player: int
    piece: int  # index in the player's piece list
    piece_id: Optional[str]
    src: Coord
    dst: Coord

    @property
    def label(self) -> str:
        return self.piece_id or str(self.piece + 1)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of one saved game state. `pieces` must not be mutated."""
    current_player: Optional[int] = None
    pieces: Dict[int, Tuple[Piece, ...]] = field(default_factory=dict)
    last_dice_roll: Optional[Tuple[int, int]] = None
    dice_log: Tuple[DiceRoll, ...] = ()
    game_phase: Optional[str] = None
    players_order: Tuple[PlayerInfo, ...] = ()

    def positions(self) -> List[Coord]:
        """Every occupied cell on the board, any player."""
        return [p.position for pieces in self.pieces.values() for p in pieces if p.position]


def _int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise SnapshotError(f"{name}: expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise SnapshotError(f"{name}: expected an integer, got {value!r}")


def _opt_int(value: Any, name: str) -> Optional[int]:
    return None if value is None else _int(value, name)


def _opt_str(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    raise SnapshotError(f"{name}: expected a string")


def _pieces(obj: Any) -> Dict[int, Tuple[Piece, ...]]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise SnapshotError("piecesData: expected an object keyed by player")
    out: Dict[int, Tuple[Piece, ...]] = {}
    for key, items in obj.items():
        player = _int(key, "piecesData key")
        if items is None:
            out[player] = ()
            continue
        if not isinstance(items, list):
            raise SnapshotError(f"piecesData.{key}: expected a list")
        pieces: List[Piece] = []
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise SnapshotError(f"piecesData.{key}[{i}]: expected an object")
            position = item.get("position")
            if position is not None and not isinstance(position, str):
                raise SnapshotError(f"piecesData.{key}[{i}].position: expected a string")
            pieces.append(Piece(id=_opt_str(item.get("id"), "piece id"), position=position or None))
        out[player] = tuple(pieces)
    return out


def _dice_pair(obj: Any) -> Optional[Tuple[int, int]]:
    if obj is None:
        return None
    if not isinstance(obj, list) or len(obj) < 2:
        raise SnapshotError("lastDiceRoll: expected two dice values")
    return _int(obj[0], "lastDiceRoll[0]"), _int(obj[1], "lastDiceRoll[1]")


def _dice_log(obj: Any) -> Tuple[DiceRoll, ...]:
    if obj is None:
        return ()
    if not isinstance(obj, list):
        raise SnapshotError("diceLog: expected a list")
    entries: List[DiceRoll] = []
    for i, item in enumerate(obj):
        if not isinstance(item, dict):
            raise SnapshotError(f"diceLog[{i}]: expected an object")
        entries.append(DiceRoll(
            dice1=_int(item.get("dice1"), f"diceLog[{i}].dice1"),
            dice2=_int(item.get("dice2"), f"diceLog[{i}].dice2"),
            player=_opt_int(item.get("player"), f"diceLog[{i}].player"),
            color=_opt_str(item.get("color"), f"diceLog[{i}].color"),
        ))
    return tuple(entries)


def _players_order(obj: Any) -> Tuple[PlayerInfo, ...]:
    if obj is None:
        return ()
    if not isinstance(obj, list):
        raise SnapshotError("playersOrder: expected a list")
    out: List[PlayerInfo] = []
    for i, item in enumerate(obj):
        if not isinstance(item, dict):
            raise SnapshotError(f"playersOrder[{i}]: expected an object")
        color = _opt_str(item.get("color"), f"playersOrder[{i}].color")
        if color:
            out.append(PlayerInfo(player=_int(item.get("player"), f"playersOrder[{i}].player"), color=color))
    return tuple(out)


def snapshot_from_json(obj: Any) -> GameSnapshot:
    """Validates a JSON game state once, at the boundary. Missing fields get neutral defaults."""
    if not isinstance(obj, dict):
        raise SnapshotError("game state must be a JSON object")
    phase = obj.get("gamePhase")
    return GameSnapshot(
        current_player=_opt_int(obj.get("currentPlayer"), "currentPlayer"),
        pieces=_pieces(obj.get("piecesData")),
        last_dice_roll=_dice_pair(obj.get("lastDiceRoll")),
        dice_log=_dice_log(obj.get("diceLog")),
        game_phase=None if phase is None else str(phase),
        players_order=_players_order(obj.get("playersOrder")),
    )


def movement_to_json(m: PieceMovement) -> Dict[str, Any]:
    return {"player": m.player, "piece": m.piece, "pieceId": m.piece_id, "from": m.src, "to": m.dst}


def dice_to_json(d: DiceRoll) -> Dict[str, Any]:
    return {"dice1": d.dice1, "dice2": d.dice2, "sum": d.sum, "player": d.player, "color": d.color}
