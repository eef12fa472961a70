"""
Replays recorded game states (one JSON object per line, oldest first) and
validates every turn under both dice-log orders. Turns where the two orders
disagree show which reading of the log matches the recorded play.

usage: python tools/compare_log_orders.py turns.jsonl [--board board.json]
"""
import argparse
import json
import sys
sys.path.append('.')
import game  # type: ignore  # noqa: E402


def read_states(path):
    states = []
    with open(path, 'r', encoding='utf-8') as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                states.append(game.snapshot_from_json(json.loads(line)))
            except (json.JSONDecodeError, game.SnapshotError) as e:
                print(f"line {lineno}: skipped ({e})")
    return states


def main():
    parser = argparse.ArgumentParser(description='Compare newest-first and newest-last dice log readings')
    parser.add_argument('path')
    parser.add_argument('--board', default=None)
    args = parser.parse_args()

    topology = game.load_topology(args.board) if args.board else game.standard_topology()
    states = read_states(args.path)
    valid = {order: 0 for order in game.LogOrder}
    disagreements = 0
    for turn, (prev, cur) in enumerate(zip(states, states[1:]), 1):
        outcomes = {}
        for order in game.LogOrder:
            analysis = game.analyze_turn(prev, cur, topology, order)
            outcomes[order] = analysis.validation
            if analysis.validation.is_valid:
                valid[order] += 1
        first = outcomes[game.LogOrder.NEWEST_FIRST]
        last = outcomes[game.LogOrder.NEWEST_LAST]
        if first.is_valid != last.is_valid:
            disagreements += 1
            print(f"turn {turn}: newest-first valid={first.is_valid} newest-last valid={last.is_valid}")
            for order, outcome in outcomes.items():
                for err in outcome.errors:
                    print(f"  [{order.value}] {err}")
    total = max(len(states) - 1, 0)
    print(f"Checked {total} turns, disagreements={disagreements}")
    for order, count in valid.items():
        print(f"  {order.value}: {count}/{total} turns valid")


if __name__ == '__main__':
    main()
