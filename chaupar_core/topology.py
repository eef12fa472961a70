from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

Coord = str  # column letter + row number, e.g. 'K1'
PLAYERS: Tuple[int, ...] = (1, 2, 3, 4)


class TopologyError(ValueError):
    """Raised when board data is inconsistent or cannot be parsed."""


@dataclass(frozen=True)
class TriggerMapping:
    """A teleport cell pair: landing on `trigger` moves the piece to `target`."""
    zone_type: str  # 'prison' or 'temple'
    trigger: Coord
    target: Coord


@dataclass(frozen=True)
class PlayerZones:
    """Static per-player cells of the board."""
    path: Tuple[Coord, ...]      # ordered, movement start first, home run last
    waiting: Tuple[Coord, ...]
    starting: Tuple[Coord, ...]
    home: Tuple[Coord, ...]      # ordered from entry to the end of the run
    movement_start: Coord
    teleport: Coord

    @property
    def home_entry(self) -> Optional[Coord]:
        return self.home[0] if self.home else None

    @property
    def home_end(self) -> Optional[Coord]:
        return self.home[-1] if self.home else None

    def path_index(self, coord: Coord) -> int:
        """Index of `coord` on the path, or -1 when the cell is not on it."""
        try:
            return self.path.index(coord)
        except ValueError:
            return -1


@dataclass(frozen=True)
class BoardTopology:
    """Immutable board description shared read-only by every component."""
    players: Tuple[Tuple[int, PlayerZones], ...]
    prison: Tuple[TriggerMapping, ...]
    temple: Tuple[TriggerMapping, ...]

    def __post_init__(self) -> None:
        for kind, table in (('prison', self.prison), ('temple', self.temple)):
            triggers = [m.trigger for m in table]
            targets = [m.target for m in table]
            if len(set(triggers)) != len(triggers) or len(set(targets)) != len(targets):
                raise TopologyError(f'{kind} trigger table is not one-to-one')

    def zones_for(self, player: int) -> Optional[PlayerZones]:
        for p, zones in self.players:
            if p == player:
                return zones
        return None

    def teleport_mappings(self) -> Iterable[TriggerMapping]:
        yield from self.prison
        yield from self.temple


def _coords(obj: Any, field: str) -> Tuple[Coord, ...]:
    if not isinstance(obj, list) or not all(isinstance(c, str) for c in obj):
        raise TopologyError(f'{field}: expected a list of coordinates')
    return tuple(obj)


def _player_entry(section: Dict[str, Any], key: str, name: str) -> Dict[str, Any]:
    entry = section.get(key)
    if not isinstance(entry, dict):
        raise TopologyError(f'{name}.{key} missing')
    return entry


def topology_from_json(obj: Dict[str, Any]) -> BoardTopology:
    """Builds a topology from the gameZones.json document shape."""
    try:
        players = []
        for p in PLAYERS:
            key = f'player{p}'
            home = _player_entry(obj['homeZones'], key, 'homeZones')
            zones = PlayerZones(
                path=_coords(_player_entry(obj['playerPaths'], key, 'playerPaths').get('path'), f'{key}.path'),
                waiting=_coords(_player_entry(obj['waitingZones'], key, 'waitingZones').get('coordinates'), f'{key}.waiting'),
                starting=_coords(_player_entry(obj['startingPositions'], key, 'startingPositions').get('coordinates'), f'{key}.starting'),
                home=_coords(home.get('coordinates'), f'{key}.home'),
                movement_start=str(_player_entry(obj['movementStart'], key, 'movementStart')['position']),
                teleport=str(_player_entry(obj['teleportZones'], key, 'teleportZones')['position']),
            )
            players.append((p, zones))
        special = obj['specialZones']
        prison = tuple(
            TriggerMapping('prison', str(trigger), str(data['teleportTo']))
            for trigger, data in special['prison'].items()
        )
        temple = tuple(
            TriggerMapping('temple', str(trigger), str(data['teleportTo']))
            for trigger, data in special['temple'].items()
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise TopologyError(f'bad board data: {e}') from e
    return BoardTopology(players=tuple(players), prison=prison, temple=temple)


def topology_to_json(topology: BoardTopology) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        'playerPaths': {},
        'waitingZones': {},
        'startingPositions': {},
        'homeZones': {},
        'movementStart': {},
        'teleportZones': {},
        'specialZones': {
            'prison': {m.trigger: {'teleportTo': m.target} for m in topology.prison},
            'temple': {m.trigger: {'teleportTo': m.target} for m in topology.temple},
        },
    }
    for p, z in topology.players:
        key = f'player{p}'
        out['playerPaths'][key] = {'path': list(z.path)}
        out['waitingZones'][key] = {'coordinates': list(z.waiting)}
        out['startingPositions'][key] = {'coordinates': list(z.starting)}
        out['homeZones'][key] = {'coordinates': list(z.home), 'entry': z.home_entry, 'end': z.home_end}
        out['movementStart'][key] = {'position': z.movement_start}
        out['teleportZones'][key] = {'position': z.teleport}
    return out


def load_topology(path: str) -> BoardTopology:
    """Reads a topology JSON file; raises TopologyError on malformed content."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            obj = json.load(f)
    except json.JSONDecodeError as e:
        raise TopologyError(f'{path}: invalid JSON: {e}') from e
    if not isinstance(obj, dict):
        raise TopologyError(f'{path}: expected a JSON object')
    return topology_from_json(obj)


def dump_topology(topology: BoardTopology, path: str) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(topology_to_json(topology), f, indent=2)
