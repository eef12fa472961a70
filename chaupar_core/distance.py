from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .topology import BoardTopology, Coord
from .zones import ZoneType, classify, source_trigger_for, trigger_for

# Virtual path indices for pieces that are not on the path yet.
WAITING_INDEX = -2   # one step to the starting cell, one more onto the path
STARTING_INDEX = -1  # one step onto the path

PATH = 'path'
MANHATTAN = 'manhattan'

_COORD_RE = re.compile(r'^([A-Za-z])(\d+)$')


@dataclass(frozen=True)
class Measurement:
    steps: int
    method: str  # PATH or MANHATTAN; the latter is only an estimate


def split_coord(coord: Coord) -> Optional[Tuple[int, int]]:
    """Splits 'K12' into (column number, row). Returns None for anything else."""
    m = _COORD_RE.match(coord or '')
    if not m:
        return None
    return ord(m.group(1).upper()) - ord('A') + 1, int(m.group(2))


def manhattan_distance(src: Coord, dst: Coord) -> int:
    """Coordinate-space estimate; does not follow the bends of a player's path."""
    a = split_coord(src)
    b = split_coord(dst)
    if a is None or b is None:
        return 0
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _resolve_from(topology: BoardTopology, src: Coord, dst: Coord, player: int) -> Tuple[Optional[int], Optional[int]]:
    """Returns (from_index, fixed_steps). fixed_steps short-circuits moves that never touch the path."""
    zones = topology.zones_for(player)
    if zones is None:
        return None, None
    idx = zones.path_index(src)
    if idx != -1:
        return idx, None
    src_zone = classify(topology, src, player).type
    dst_zone = classify(topology, dst, player).type
    if src_zone is ZoneType.WAITING:
        if dst_zone is ZoneType.STARTING:
            return None, 1
        return WAITING_INDEX, None
    if src_zone is ZoneType.STARTING:
        if dst_zone is ZoneType.STARTING:
            return None, 0
        return STARTING_INDEX, None
    if src_zone in (ZoneType.PRISON, ZoneType.TEMPLE):
        mapping = source_trigger_for(topology, src)
        if mapping is not None:
            idx = zones.path_index(mapping.trigger)
            if idx != -1:
                return idx, None
    return None, None


def _resolve_to(topology: BoardTopology, dst: Coord, player: int) -> Optional[int]:
    zones = topology.zones_for(player)
    if zones is None:
        return None
    idx = zones.path_index(dst)
    if idx != -1:
        return idx
    dst_zone = classify(topology, dst, player).type
    if dst_zone in (ZoneType.PRISON, ZoneType.TEMPLE):
        mapping = trigger_for(topology, dst)
        if mapping is not None:
            idx = zones.path_index(mapping.trigger)
    return idx if idx != -1 else None


def path_steps(topology: BoardTopology, src: Coord, dst: Coord, player: int) -> Optional[int]:
    """Steps along the player's path, or None when either end cannot be placed on it."""
    if topology.zones_for(player) is None:
        return None
    from_idx, fixed = _resolve_from(topology, src, dst, player)
    if fixed is not None:
        return fixed
    if from_idx is None:
        return None
    to_idx = _resolve_to(topology, dst, player)
    if to_idx is None:
        return None
    if from_idx == WAITING_INDEX:
        return 2 + to_idx
    if from_idx == STARTING_INDEX:
        return 1 + to_idx
    return abs(to_idx - from_idx)


def _manhattan_steps(topology: BoardTopology, src: Coord, dst: Coord, player: int) -> Optional[int]:
    return manhattan_distance(src, dst)


Strategy = Callable[[BoardTopology, Coord, Coord, int], Optional[int]]

# First strategy that produces a value wins.
STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    (PATH, path_steps),
    (MANHATTAN, _manhattan_steps),
)


def measure(topology: BoardTopology, src: Coord, dst: Coord, player: int) -> Measurement:
    for method, strategy in STRATEGIES:
        steps = strategy(topology, src, dst, player)
        if steps is not None:
            return Measurement(steps=steps, method=method)
    return Measurement(steps=0, method=MANHATTAN)


def distance(topology: BoardTopology, src: Coord, dst: Coord, player: int) -> int:
    """Number of steps a piece of `player` travelled from `src` to `dst`."""
    return measure(topology, src, dst, player).steps


def dice_allows(steps: int, dice1: int, dice2: int) -> bool:
    """A move must use exactly one die or both."""
    return steps in (dice1, dice2, dice1 + dice2)
