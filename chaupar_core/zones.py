from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .topology import BoardTopology, Coord, TriggerMapping


class ZoneType(str, Enum):
    WAITING = 'waiting'
    STARTING = 'starting'
    FIELD = 'field'
    PRISON = 'prison'
    TEMPLE = 'temple'
    MOVEMENT_START = 'movementStart'
    TELEPORT = 'teleport'
    HOME = 'home'


@dataclass(frozen=True)
class Zone:
    type: ZoneType
    zone: str  # category label, e.g. 'waitingZone'


WAITING = Zone(ZoneType.WAITING, 'waitingZone')
STARTING = Zone(ZoneType.STARTING, 'startingPosition')
HOME = Zone(ZoneType.HOME, 'homeZone')
PRISON = Zone(ZoneType.PRISON, 'prison')
TEMPLE = Zone(ZoneType.TEMPLE, 'temple')
MOVEMENT_START = Zone(ZoneType.MOVEMENT_START, 'movementStart')
TELEPORT = Zone(ZoneType.TELEPORT, 'teleport')
FIELD = Zone(ZoneType.FIELD, 'gameField')


def classify(topology: BoardTopology, coord: Coord, player: int) -> Zone:
    """
    Maps a (coordinate, player) pair to exactly one zone.
    Checked in priority order; anything unmatched is ordinary field.
    Teleport cells of every player classify as teleport so that using
    someone else's cell stays visible to the validator.
    """
    zones = topology.zones_for(player)
    if zones is not None:
        if coord in zones.waiting:
            return WAITING
        if coord in zones.starting:
            return STARTING
        if coord in zones.home:
            return HOME
    if any(m.target == coord for m in topology.prison):
        return PRISON
    if any(m.target == coord for m in topology.temple):
        return TEMPLE
    if zones is not None and coord == zones.movement_start:
        return MOVEMENT_START
    if any(z.teleport == coord for _, z in topology.players):
        return TELEPORT
    return FIELD


def trigger_for(topology: BoardTopology, target: Coord) -> Optional[TriggerMapping]:
    """Trigger cell that sends a piece to `target` (used when entering prison/temple)."""
    for mapping in topology.teleport_mappings():
        if mapping.target == target:
            return mapping
    return None


def source_trigger_for(topology: BoardTopology, occupied: Coord) -> Optional[TriggerMapping]:
    """Trigger cell a piece sitting on `occupied` re-enters the path from (used when leaving)."""
    # Teleport cells are one-to-one, so the occupied cell names its trigger.
    return trigger_for(topology, occupied)


def player_teleport(topology: BoardTopology, player: int) -> Optional[Coord]:
    zones = topology.zones_for(player)
    return zones.teleport if zones is not None else None


def is_capture(topology: BoardTopology, src: Coord, dst: Coord, player: int) -> bool:
    """A piece sent back to waiting from anywhere else was captured by an opponent."""
    return (classify(topology, dst, player).type is ZoneType.WAITING
            and classify(topology, src, player).type is not ZoneType.WAITING)


def is_waiting_exit(topology: BoardTopology, src: Coord, dst: Coord, player: int) -> bool:
    return (classify(topology, src, player).type is ZoneType.WAITING
            and classify(topology, dst, player).type is not ZoneType.WAITING)
