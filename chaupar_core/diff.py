from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .state import DiceRoll, GameSnapshot, PieceMovement, dice_to_json, movement_to_json


class LogOrder(str, Enum):
    """Where the most recent roll sits in a snapshot's dice log."""
    NEWEST_FIRST = 'newest-first'
    NEWEST_LAST = 'newest-last'


@dataclass(frozen=True)
class TurnDelta:
    has_changes: bool = False
    player_changed: bool = False
    previous_player: Optional[int] = None
    current_player: Optional[int] = None
    movements: Tuple[PieceMovement, ...] = ()
    dice: Optional[DiceRoll] = None
    phase_changed: bool = False

    @property
    def acting_player(self) -> Optional[int]:
        """The player who made the turn: whoever held it before it passed on."""
        if self.previous_player is not None:
            return self.previous_player
        return self.current_player


def latest_log_entry(snapshot: GameSnapshot, log_order: LogOrder) -> Optional[DiceRoll]:
    if not snapshot.dice_log:
        return None
    if log_order is LogOrder.NEWEST_LAST:
        return snapshot.dice_log[-1]
    return snapshot.dice_log[0]


def _last_roll(snapshot: GameSnapshot) -> Optional[DiceRoll]:
    if snapshot.last_dice_roll is None:
        return None
    d1, d2 = snapshot.last_dice_roll
    return DiceRoll(dice1=d1, dice2=d2)


def resolve_dice(snapshot: GameSnapshot, log_order: LogOrder = LogOrder.NEWEST_FIRST) -> Optional[DiceRoll]:
    """The dice log wins over lastDiceRoll: it also records who rolled and their colour."""
    return latest_log_entry(snapshot, log_order) or _last_roll(snapshot)


def piece_movements(previous: GameSnapshot, current: GameSnapshot) -> List[PieceMovement]:
    out: List[PieceMovement] = []
    for player, new_pieces in current.pieces.items():
        old_pieces = previous.pieces.get(player, ())
        for index in range(min(len(old_pieces), len(new_pieces))):
            old, new = old_pieces[index], new_pieces[index]
            if old.position is None or new.position is None:
                continue
            if old.position != new.position:
                out.append(PieceMovement(
                    player=player,
                    piece=index,
                    piece_id=new.id,
                    src=old.position,
                    dst=new.position,
                ))
    return out


def diff_states(
    previous: Optional[GameSnapshot],
    current: GameSnapshot,
    log_order: LogOrder = LogOrder.NEWEST_FIRST,
) -> TurnDelta:
    """Compares two snapshots. Never raises and never mutates either snapshot."""
    if previous is None:
        return TurnDelta(
            has_changes=True,
            current_player=current.current_player or 1,
            dice=_last_roll(current),
        )

    player_changed = previous.current_player != current.current_player
    movements = piece_movements(previous, current)
    phase_changed = previous.game_phase != current.game_phase
    return TurnDelta(
        has_changes=player_changed or bool(movements) or phase_changed,
        player_changed=player_changed,
        previous_player=previous.current_player if player_changed else None,
        current_player=current.current_player,
        movements=tuple(movements),
        dice=resolve_dice(current, log_order),
        phase_changed=phase_changed,
    )


def delta_to_json(delta: TurnDelta) -> Dict[str, Any]:
    return {
        "hasChanges": delta.has_changes,
        "playerChanged": delta.player_changed,
        "previousPlayer": delta.previous_player,
        "currentPlayer": delta.current_player,
        "pieceMovements": [movement_to_json(m) for m in delta.movements],
        "diceRoll": dice_to_json(delta.dice) if delta.dice is not None else None,
        "statusChanged": delta.phase_changed,
    }
