from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .diff import TurnDelta
from .distance import distance
from .state import DiceRoll, GameSnapshot, PieceMovement
from .topology import BoardTopology, Coord
from .zones import ZoneType, classify, is_capture, source_trigger_for, trigger_for

NO_CHANGES = "No changes detected in the game state."

DEFAULT_COLORS: Dict[int, str] = {1: "Red", 2: "Yellow", 3: "Green", 4: "Purple"}

PRISON_EXIT_ROLL = 6


def steps_text(n: int) -> str:
    return f"{n} step" if n == 1 else f"{n} steps"


# ---------- Player colour ----------

ColorSource = Callable[[TurnDelta, Optional[GameSnapshot]], Optional[Tuple[Optional[int], str]]]


def color_from_dice_log(delta: TurnDelta, context: Optional[GameSnapshot]) -> Optional[Tuple[Optional[int], str]]:
    if delta.dice is not None and delta.dice.color:
        player = delta.dice.player if delta.dice.player is not None else delta.acting_player
        return player, delta.dice.color
    return None


def color_from_players_order(delta: TurnDelta, context: Optional[GameSnapshot]) -> Optional[Tuple[Optional[int], str]]:
    if context is None:
        return None
    player = delta.acting_player
    for info in context.players_order:
        if info.player == player:
            return player, info.color
    return None


def color_from_defaults(delta: TurnDelta, context: Optional[GameSnapshot]) -> Optional[Tuple[Optional[int], str]]:
    player = delta.acting_player
    if player in DEFAULT_COLORS:
        return player, DEFAULT_COLORS[player]
    return None


COLOR_SOURCES: Tuple[ColorSource, ...] = (
    color_from_dice_log,
    color_from_players_order,
    color_from_defaults,
)


def resolve_color(delta: TurnDelta, context: Optional[GameSnapshot]) -> str:
    for source in COLOR_SOURCES:
        found = source(delta, context)
        if found is not None:
            return found[1]
    player = delta.acting_player
    return f"Player {player}" if player is not None else "Player"


# ---------- Home occupancy ----------

def subsequent_home_cells_occupied(topology: BoardTopology, context: Optional[GameSnapshot], player: int, cell: Coord) -> bool:
    """True when at least one home cell follows `cell` and every one of them holds a piece."""
    zones = topology.zones_for(player)
    if context is None or zones is None or cell not in zones.home:
        return False
    following = zones.home[zones.home.index(cell) + 1:]
    occupied = set(context.positions())
    return bool(following) and all(c in occupied for c in following)


# ---------- Per-movement text ----------

def describe_movement(
    topology: BoardTopology,
    m: PieceMovement,
    context: Optional[GameSnapshot],
    dice: Optional[DiceRoll],
) -> str:
    src_zone = classify(topology, m.src, m.player).type
    dst_zone = classify(topology, m.dst, m.player).type
    piece = f"Piece {m.label}"

    def steps(a: Coord, b: Coord) -> str:
        return steps_text(distance(topology, a, b, m.player))

    if src_zone is ZoneType.WAITING and dst_zone is ZoneType.STARTING:
        return f"{piece} left the waiting zone"

    if src_zone is ZoneType.STARTING and dst_zone is not ZoneType.STARTING:
        return f"{piece} left the starting position, travelling {steps(m.src, m.dst)}"

    if src_zone is ZoneType.PRISON:
        total = dice.sum if dice is not None else 0
        source = source_trigger_for(topology, m.src)
        if source is None or total < PRISON_EXIT_ROLL:
            return f"{piece} left prison"
        if total - PRISON_EXIT_ROLL > 0:
            return (f"{piece} left prison on six and moved from {source.trigger} to {m.dst}, "
                    f"{steps(source.trigger, m.dst)}")
        return f"{piece} left prison on six"

    if src_zone is ZoneType.TEMPLE:
        source = source_trigger_for(topology, m.src)
        if source is not None:
            return (f"{piece} left the temple and moved from {source.trigger} to {m.dst}, "
                    f"{steps(source.trigger, m.dst)}")
        return f"{piece} left the temple for {m.dst}, {steps(m.src, m.dst)}"

    if dst_zone in (ZoneType.PRISON, ZoneType.TEMPLE):
        place = "prison" if dst_zone is ZoneType.PRISON else "the temple"
        mapping = trigger_for(topology, m.dst)
        if mapping is not None:
            return f"{piece} moved from {m.src} into {place} at {m.dst}, {steps(m.src, mapping.trigger)}"
        return f"{piece} was sent to {place} at {m.dst}, {steps(m.src, m.dst)}"

    if dst_zone is ZoneType.HOME:
        if subsequent_home_cells_occupied(topology, context, m.player, m.dst):
            return f"{piece} settled in home"
        return f"{piece} is hidden in home"

    if src_zone is ZoneType.WAITING:
        return f"{piece} moved out of the waiting zone from {m.src} to {m.dst}, {steps(m.src, m.dst)}"

    if src_zone is ZoneType.STARTING:
        return f"{piece} moved within the starting position from {m.src} to {m.dst}, {steps(m.src, m.dst)}"

    return f"{piece} moved from {m.src} to {m.dst}, {steps(m.src, m.dst)}"


def _movement_lines(topology: BoardTopology, delta: TurnDelta, context: Optional[GameSnapshot]) -> List[str]:
    lines: List[str] = []
    for m in delta.movements:
        if is_capture(topology, m.src, m.dst, m.player):
            lines.append(f"Piece {m.label} was captured")
        else:
            lines.append(describe_movement(topology, m, context, delta.dice))
    return lines


def narrate(
    topology: BoardTopology,
    delta: TurnDelta,
    context: Optional[GameSnapshot] = None,
    errors: Sequence[str] = (),
) -> str:
    """Renders one turn as a single report string. Pure: same inputs, same text."""
    if not delta.has_changes:
        return NO_CHANGES

    color = resolve_color(delta, context)
    if delta.dice is not None:
        report = f"{color} rolled {delta.dice.pretty()}"
    else:
        report = f"{color} made a move"

    if delta.movements:
        if errors:
            report += f". VALIDATION ERROR: {'; '.join(errors)}"
        else:
            lines = _movement_lines(topology, delta, context)
            if len(lines) == 1:
                report += f". {lines[0]}"
            else:
                report += f". Moves made: {'; '.join(lines)}"

    return report if report.endswith(".") else report + "."
