from __future__ import annotations

# Facade module that re-exports the Chaupar core API.
# Used by the Flask app, the tools and the tests.
# Single-responsibility modules live under chaupar_core/*.

import sys

from chaupar_core.topology import (  # noqa: F401
    BoardTopology,
    Coord,
    PlayerZones,
    TopologyError,
    TriggerMapping,
    dump_topology,
    load_topology,
    topology_from_json,
    topology_to_json,
)
from chaupar_core.layout import cell_name, rotate, standard_topology  # noqa: F401
from chaupar_core.zones import (  # noqa: F401
    Zone,
    ZoneType,
    classify,
    is_capture,
    is_waiting_exit,
    player_teleport,
    source_trigger_for,
    trigger_for,
)
from chaupar_core.distance import (  # noqa: F401
    MANHATTAN,
    PATH,
    Measurement,
    dice_allows,
    distance,
    manhattan_distance,
    measure,
    path_steps,
    split_coord,
)
from chaupar_core.state import (  # noqa: F401
    DiceRoll,
    GameSnapshot,
    Piece,
    PieceMovement,
    PlayerInfo,
    SnapshotError,
    snapshot_from_json,
)
from chaupar_core.diff import LogOrder, TurnDelta, delta_to_json, diff_states, resolve_dice  # noqa: F401
from chaupar_core.validate import RULES, ValidationOutcome, validate_move, validate_moves  # noqa: F401
from chaupar_core.narrate import NO_CHANGES, describe_movement, narrate, resolve_color  # noqa: F401
from chaupar_core.dice import is_special_double, roll_dice  # noqa: F401
from chaupar_core.db import (  # noqa: F401
    StoreStatus,
    db_create_game,
    db_fetch_previous_state,
    db_game_exists,
    db_store_state,
)
from chaupar_core.turns import TurnAnalysis, TurnResult, analyze_turn, update_game_state  # noqa: F401


def main() -> int:
    # CLI driver delegated to chaupar_core.cli
    from chaupar_core.cli import main as _main
    return _main()


if __name__ == '__main__':
    sys.exit(main())
