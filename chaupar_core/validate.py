from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from .distance import dice_allows, distance
from .state import DiceRoll, PieceMovement
from .topology import BoardTopology
from .zones import ZoneType, classify, is_capture, is_waiting_exit, player_teleport


@dataclass(frozen=True)
class ValidationOutcome:
    is_valid: bool
    errors: Tuple[str, ...] = ()

    def to_json(self) -> dict:
        return {"isValid": self.is_valid, "errorMessages": list(self.errors)}


Rule = Callable[[BoardTopology, PieceMovement, Optional[DiceRoll]], Optional[str]]


def check_distance(topology: BoardTopology, m: PieceMovement, dice: Optional[DiceRoll]) -> Optional[str]:
    if dice is None:
        return None
    steps = distance(topology, m.src, m.dst, m.player)
    if dice_allows(steps, dice.dice1, dice.dice2):
        return None
    return f"Invalid move of piece {m.label}. Rolled: {dice.pretty()}, moved: {steps}"


def check_waiting_exit(topology: BoardTopology, m: PieceMovement, dice: Optional[DiceRoll]) -> Optional[str]:
    if not is_waiting_exit(topology, m.src, m.dst, m.player):
        return None
    if dice is None:
        return f"Piece {m.label} left the waiting zone without a dice roll"
    if dice.has(1):
        return None
    return f"Piece {m.label} left the waiting zone without a 1 on the dice. Rolled: {dice.dice1}+{dice.dice2}"


def check_prison_exit(topology: BoardTopology, m: PieceMovement, dice: Optional[DiceRoll]) -> Optional[str]:
    if classify(topology, m.src, m.player).type is not ZoneType.PRISON:
        return None
    if dice is None:
        return f"Piece {m.label} left prison without a dice roll"
    if dice.has(6):
        return None
    return f"Piece {m.label} left prison without a 6 on the dice. Rolled: {dice.dice1}+{dice.dice2}"


def check_teleport_owner(topology: BoardTopology, m: PieceMovement, dice: Optional[DiceRoll]) -> Optional[str]:
    if classify(topology, m.src, m.player).type is not ZoneType.TELEPORT:
        return None
    own = player_teleport(topology, m.player)
    if own is not None and m.src == own:
        return None
    return (f"Piece {m.label} of player {m.player} used another player's teleport. "
            f"Position: {m.src}, expected: {own}")


# Every rule runs; a movement can break several at once.
RULES: Tuple[Rule, ...] = (
    check_distance,
    check_waiting_exit,
    check_prison_exit,
    check_teleport_owner,
)


def validate_move(topology: BoardTopology, movement: PieceMovement, dice: Optional[DiceRoll]) -> ValidationOutcome:
    # Captured pieces are moved by the opponent's landing, not by this roll.
    if is_capture(topology, movement.src, movement.dst, movement.player):
        return ValidationOutcome(is_valid=True)
    errors = [msg for msg in (rule(topology, movement, dice) for rule in RULES) if msg]
    return ValidationOutcome(is_valid=not errors, errors=tuple(errors))


def validate_moves(topology: BoardTopology, movements: Iterable[PieceMovement], dice: Optional[DiceRoll]) -> ValidationOutcome:
    errors: List[str] = []
    for m in movements:
        errors.extend(validate_move(topology, m, dice).errors)
    return ValidationOutcome(is_valid=not errors, errors=tuple(errors))
