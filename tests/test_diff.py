import unittest

from game import (
    DiceRoll,
    LogOrder,
    SnapshotError,
    delta_to_json,
    diff_states,
    resolve_dice,
    snapshot_from_json,
)


def make_state(pieces, current_player=1, last_roll=None, dice_log=None, phase="playing", **extra):
    obj = {
        "currentPlayer": current_player,
        "piecesData": {str(p): [{"id": pid, "position": pos} for pid, pos in items] for p, items in pieces.items()},
        "gamePhase": phase,
    }
    if last_roll is not None:
        obj["lastDiceRoll"] = list(last_roll)
    if dice_log is not None:
        obj["diceLog"] = dice_log
    obj.update(extra)
    return snapshot_from_json(obj)


LOG = [
    {"dice1": 1, "dice2": 2, "sum": 3, "player": 1, "color": "Red"},
    {"dice1": 5, "dice2": 6, "sum": 11, "player": 2, "color": "Yellow"},
]


class TestSnapshotSchema(unittest.TestCase):
    def test_given_json_state_when_parsing_then_typed_snapshot(self):
        s = make_state({1: [("R1", "C3"), ("R2", "G1")], 2: [("Y1", None)]}, last_roll=(3, 4), dice_log=LOG,
                       playersOrder=[{"player": 1, "color": "Crimson"}])
        self.assertEqual(s.current_player, 1)
        self.assertEqual([p.position for p in s.pieces[1]], ["C3", "G1"])
        self.assertIsNone(s.pieces[2][0].position)
        self.assertEqual(s.last_dice_roll, (3, 4))
        self.assertEqual(s.dice_log[1], DiceRoll(5, 6, player=2, color="Yellow"))
        self.assertEqual(s.players_order[0].color, "Crimson")
        self.assertEqual(sorted(s.positions()), ["C3", "G1"])

    def test_given_empty_object_when_parsing_then_neutral_defaults(self):
        s = snapshot_from_json({})
        self.assertIsNone(s.current_player)
        self.assertEqual(s.pieces, {})
        self.assertEqual(s.dice_log, ())
        self.assertIsNone(s.last_dice_roll)

    def test_given_malformed_fields_when_parsing_then_snapshot_error(self):
        bad = [
            [],
            {"currentPlayer": "one"},
            {"currentPlayer": True},
            {"piecesData": [1, 2]},
            {"piecesData": {"x": []}},
            {"piecesData": {"1": [{"id": "R1", "position": 5}]}},
            {"lastDiceRoll": [3]},
            {"diceLog": [{"dice1": 1}]},
            {"playersOrder": "red"},
        ]
        for obj in bad:
            with self.assertRaises(SnapshotError, msg=repr(obj)):
                snapshot_from_json(obj)


class TestDiffStates(unittest.TestCase):
    def test_given_no_previous_when_diffing_then_changed_with_default_player_and_last_roll(self):
        s = make_state({1: [("R1", "C3")]}, current_player=None, last_roll=(2, 5), dice_log=LOG)
        d = diff_states(None, s)
        self.assertTrue(d.has_changes)
        self.assertEqual(d.current_player, 1)
        self.assertEqual(d.dice, DiceRoll(2, 5))
        self.assertEqual(d.movements, ())

    def test_given_same_snapshot_when_diffing_then_no_changes(self):
        s = make_state({1: [("R1", "C3")], 2: [("Y1", "I4")]}, last_roll=(3, 4), dice_log=LOG)
        d = diff_states(s, s)
        self.assertFalse(d.has_changes)
        self.assertEqual(d.movements, ())
        self.assertFalse(d.player_changed)
        self.assertFalse(d.phase_changed)

    def test_given_piece_moved_when_diffing_then_one_movement(self):
        prev = make_state({1: [("R1", "C3"), ("R2", "D3")]})
        cur = make_state({1: [("R1", "G1"), ("R2", "D3")]}, last_roll=(1, 4))
        d = diff_states(prev, cur)
        self.assertTrue(d.has_changes)
        self.assertEqual(len(d.movements), 1)
        m = d.movements[0]
        self.assertEqual((m.player, m.piece, m.piece_id, m.src, m.dst), (1, 0, "R1", "C3", "G1"))
        self.assertEqual(m.label, "R1")
        self.assertEqual(d.dice, DiceRoll(1, 4))

    def test_given_lists_of_different_length_when_diffing_then_only_common_indices(self):
        prev = make_state({1: [("R1", "I1")], 2: [("Y1", "A11")]})
        cur = make_state({1: [("R1", "I3"), ("R2", "I5")], 3: [("G1", "K19")]})
        d = diff_states(prev, cur)
        self.assertEqual([(m.piece_id, m.dst) for m in d.movements], [("R1", "I3")])

    def test_given_missing_positions_when_diffing_then_no_movement(self):
        prev = make_state({1: [("R1", None)]})
        cur = make_state({1: [("R1", "I3")]})
        self.assertEqual(diff_states(prev, cur).movements, ())

    def test_given_unnamed_piece_when_labelling_then_one_based_index(self):
        prev = make_state({1: [("R1", "I1"), (None, "I2")]})
        cur = make_state({1: [("R1", "I1"), (None, "I4")]})
        self.assertEqual(diff_states(prev, cur).movements[0].label, "2")

    def test_given_turn_passed_when_diffing_then_player_change_recorded(self):
        prev = make_state({1: [("R1", "I1")]}, current_player=1)
        cur = make_state({1: [("R1", "I1")]}, current_player=2)
        d = diff_states(prev, cur)
        self.assertTrue(d.has_changes)
        self.assertTrue(d.player_changed)
        self.assertEqual((d.previous_player, d.current_player), (1, 2))
        self.assertEqual(d.acting_player, 1)

    def test_given_same_player_when_diffing_then_acting_player_is_current(self):
        prev = make_state({1: [("R1", "I1")]}, current_player=3)
        cur = make_state({1: [("R1", "I4")]}, current_player=3)
        d = diff_states(prev, cur)
        self.assertIsNone(d.previous_player)
        self.assertEqual(d.acting_player, 3)

    def test_given_phase_change_when_diffing_then_flagged(self):
        prev = make_state({}, phase="playing")
        cur = make_state({}, phase="finished")
        d = diff_states(prev, cur)
        self.assertTrue(d.phase_changed)
        self.assertTrue(d.has_changes)
        self.assertEqual(delta_to_json(d)["statusChanged"], True)


class TestDiceLogOrder(unittest.TestCase):
    def test_given_log_when_newest_first_then_first_entry(self):
        s = make_state({}, last_roll=(4, 4), dice_log=LOG)
        self.assertEqual(resolve_dice(s, LogOrder.NEWEST_FIRST), DiceRoll(1, 2, player=1, color="Red"))

    def test_given_log_when_newest_last_then_last_entry(self):
        s = make_state({}, last_roll=(4, 4), dice_log=LOG)
        self.assertEqual(resolve_dice(s, LogOrder.NEWEST_LAST), DiceRoll(5, 6, player=2, color="Yellow"))

    def test_given_empty_log_when_resolving_then_last_dice_roll(self):
        s = make_state({}, last_roll=(4, 4), dice_log=[])
        for order in LogOrder:
            self.assertEqual(resolve_dice(s, order), DiceRoll(4, 4))
        self.assertIsNone(resolve_dice(make_state({})))

    def test_given_log_order_when_diffing_then_delta_uses_it(self):
        prev = make_state({1: [("R1", "I1")]})
        cur = make_state({1: [("R1", "I3")]}, dice_log=LOG)
        self.assertEqual(diff_states(prev, cur, LogOrder.NEWEST_LAST).dice.sum, 11)
        self.assertEqual(diff_states(prev, cur).dice.sum, 3)


if __name__ == "__main__":
    unittest.main(verbosity=2)
