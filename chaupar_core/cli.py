from __future__ import annotations

import argparse
import json
import sys
from typing import Any, List, Optional

from .config import parse_log_order
from .diff import LogOrder
from .layout import standard_topology
from .state import SnapshotError, snapshot_from_json
from .topology import BoardTopology, TopologyError, dump_topology, load_topology
from .turns import analyze_turn


def _read_json(path: str) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _topology(path: Optional[str]) -> BoardTopology:
    return load_topology(path) if path else standard_topology()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Chaupar turn analysis: compare two saved game states')
    parser.add_argument('--current', help='JSON file with the new game state')
    parser.add_argument('--previous', default=None, help='JSON file with the previous game state (omit for the first turn)')
    parser.add_argument('--board', default=None, help='Board topology JSON (defaults to the standard board)')
    parser.add_argument('--log-order', choices=[o.value for o in LogOrder], default=LogOrder.NEWEST_FIRST.value,
                        help='Where the newest dice log entry sits')
    parser.add_argument('--json', action='store_true', help='Print the full analysis as JSON')
    parser.add_argument('--dump-board', metavar='PATH', default=None, help='Write the board topology JSON and exit')
    args = parser.parse_args(argv)

    try:
        topology = _topology(args.board)
    except (OSError, TopologyError) as e:
        print(f'error: cannot load board: {e}', file=sys.stderr)
        return 2

    if args.dump_board:
        dump_topology(topology, args.dump_board)
        print(f'Board written to {args.dump_board}')
        return 0

    if not args.current:
        parser.error('--current is required')

    try:
        current = snapshot_from_json(_read_json(args.current))
        previous = snapshot_from_json(_read_json(args.previous)) if args.previous else None
    except (OSError, json.JSONDecodeError, SnapshotError) as e:
        print(f'error: {e}', file=sys.stderr)
        return 2

    analysis = analyze_turn(previous, current, topology, parse_log_order(args.log_order))
    if args.json:
        print(json.dumps(analysis.to_json(), indent=2, ensure_ascii=False))
    else:
        print(analysis.report)
    return 0 if analysis.validation.is_valid else 1
