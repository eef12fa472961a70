from __future__ import annotations

from typing import List, Sequence, Tuple

from .topology import BoardTopology, Coord, PlayerZones, TriggerMapping

# The standard board is a 19x19 grid (columns A-S, rows 1-19). The cross has
# three-cell-wide arms around the central block I9..K11. Player 1 owns the
# south arm; every other player's cells are quarter-turn rotations of it.
GRID_SIZE = 19

Cell = Tuple[int, int]  # (column, row), both 1-based


def cell_name(cell: Cell) -> Coord:
    col, row = cell
    return f"{chr(ord('A') + col - 1)}{row}"


def rotate(cell: Cell, turns: int = 1) -> Cell:
    """Rotates a cell a quarter turn (south arm -> west arm) `turns` times."""
    col, row = cell
    for _ in range(turns % 4):
        col, row = row, GRID_SIZE + 1 - col
    return col, row


def _player_one_path() -> List[Cell]:
    path: List[Cell] = []
    path += [(9, r) for r in range(1, 9)]          # up the near column of the south arm
    path += [(c, 9) for c in range(8, 0, -1)]      # out along the west arm
    path += [(1, 10)]
    path += [(c, 11) for c in range(1, 9)]
    path += [(9, r) for r in range(12, 20)]        # north arm
    path += [(10, 19)]
    path += [(11, r) for r in range(19, 11, -1)]
    path += [(c, 11) for c in range(12, 20)]       # east arm
    path += [(19, 10)]
    path += [(c, 9) for c in range(19, 11, -1)]
    path += [(11, r) for r in range(8, 0, -1)]     # back down the far column of the south arm
    path += [(10, 1)]
    path += _player_one_home()
    return path


def _player_one_home() -> List[Cell]:
    return [(10, r) for r in range(2, 9)]


_WAITING: Sequence[Cell] = ((3, 3), (4, 3), (3, 4), (4, 4))
_STARTING: Sequence[Cell] = ((7, 1), (8, 1), (7, 2), (8, 2))
_TELEPORT: Cell = (10, 9)
_PRISON: Tuple[Cell, Cell] = ((11, 5), (11, 9))    # trigger, target
_TEMPLE: Tuple[Cell, Cell] = ((9, 6), (13, 6))


def _names(cells: Sequence[Cell], turns: int) -> Tuple[Coord, ...]:
    return tuple(cell_name(rotate(c, turns)) for c in cells)


def standard_topology() -> BoardTopology:
    """Builds the standard four-arm board."""
    players = []
    base_path = _player_one_path()
    for turns, player in enumerate((1, 2, 3, 4)):
        path = _names(base_path, turns)
        players.append((player, PlayerZones(
            path=path,
            waiting=_names(_WAITING, turns),
            starting=_names(_STARTING, turns),
            home=_names(_player_one_home(), turns),
            movement_start=path[0],
            teleport=cell_name(rotate(_TELEPORT, turns)),
        )))
    prison = tuple(
        TriggerMapping('prison', cell_name(rotate(_PRISON[0], t)), cell_name(rotate(_PRISON[1], t)))
        for t in range(4)
    )
    temple = tuple(
        TriggerMapping('temple', cell_name(rotate(_TEMPLE[0], t)), cell_name(rotate(_TEMPLE[1], t)))
        for t in range(4)
    )
    return BoardTopology(players=tuple(players), prison=prison, temple=temple)
