import unittest

from game import (
    MANHATTAN,
    PATH,
    BoardTopology,
    PlayerZones,
    TriggerMapping,
    dice_allows,
    distance,
    manhattan_distance,
    measure,
    path_steps,
    split_coord,
    standard_topology,
)
from chaupar_core.distance import _resolve_from, _resolve_to


class TestPathDistance(unittest.TestCase):
    def setUp(self):
        self.topology = standard_topology()

    def _d(self, a, b, player=1):
        return distance(self.topology, a, b, player)

    def test_given_two_path_cells_when_measuring_then_index_difference(self):
        self.assertEqual(self._d("I1", "I5"), 4)
        self.assertEqual(self._d("I5", "I1"), 4)
        self.assertEqual(self._d("I8", "H9"), 1)  # corner jump counts as one step
        self.assertEqual(measure(self.topology, "I1", "I5", 1).method, PATH)

    def test_given_path_that_bends_when_measuring_then_differs_from_coordinates(self):
        # player 2 walks A11..H11 then turns up column I
        self.assertEqual(self._d("A11", "I12", 2), 8)
        self.assertEqual(manhattan_distance("A11", "I12"), 9)

    def test_given_waiting_piece_when_measuring_then_two_steps_before_path(self):
        self.assertEqual(self._d("C3", "G1"), 1)   # waiting -> starting
        self.assertEqual(self._d("C3", "I1"), 2)
        self.assertEqual(self._d("C3", "I3"), 4)

    def test_given_starting_piece_when_measuring_then_one_step_before_path(self):
        self.assertEqual(self._d("G1", "H1"), 0)   # no board movement
        self.assertEqual(self._d("G1", "I1"), 1)
        self.assertEqual(self._d("G1", "I3"), 3)

    def test_given_prison_or_temple_when_leaving_then_measured_from_trigger(self):
        self.assertEqual(self._d("K9", "K2"), 3)   # via K5
        self.assertEqual(self._d("M6", "I8"), 2)   # via I6

    def test_given_prison_or_temple_when_entering_then_measured_to_trigger(self):
        self.assertEqual(self._d("K8", "K9"), 3)   # K8 -> K5
        self.assertEqual(self._d("I1", "M6"), 5)   # I1 -> I6

    def test_given_home_cell_when_measuring_then_home_is_part_of_path(self):
        self.assertEqual(self._d("K1", "J4"), 4)
        self.assertEqual(self._d("J2", "J8"), 6)


class TestManhattanFallback(unittest.TestCase):
    """The fallback is an approximation: it need not agree with the dice."""

    def setUp(self):
        self.topology = standard_topology()

    def test_given_coords_when_splitting_then_column_and_row(self):
        self.assertEqual(split_coord("K12"), (11, 12))
        self.assertEqual(split_coord("a1"), (1, 1))
        self.assertIsNone(split_coord("12"))
        self.assertIsNone(split_coord(""))

    def test_given_unresolvable_pair_when_measuring_then_col_plus_row_delta(self):
        m = measure(self.topology, "Z1", "Z5", 1)
        self.assertEqual(m.method, MANHATTAN)
        self.assertEqual(m.steps, 4)

    def test_given_teleport_origin_when_measuring_then_falls_back(self):
        # J9 is not on the path: |J-I| + |9-3|
        m = measure(self.topology, "J9", "I3", 1)
        self.assertEqual(m.method, MANHATTAN)
        self.assertEqual(m.steps, 7)

    def test_given_destination_off_path_when_measuring_then_falls_back(self):
        self.assertEqual(distance(self.topology, "I1", "J10", 1), 10)

    def test_given_unknown_player_when_measuring_then_falls_back(self):
        m = measure(self.topology, "I1", "I5", 9)
        self.assertEqual(m.method, MANHATTAN)
        self.assertEqual(m.steps, 4)

    def test_given_unparseable_coords_when_measuring_then_zero(self):
        self.assertEqual(manhattan_distance("??", "I5"), 0)

    def test_given_unknown_player_when_resolving_path_ends_then_unresolved(self):
        self.assertEqual(_resolve_from(self.topology, "I1", "I5", 9), (None, None))
        self.assertIsNone(_resolve_to(self.topology, "I5", 9))
        self.assertIsNone(path_steps(self.topology, "I1", "I5", 9))


class TestSyntheticBoard(unittest.TestCase):
    def _mk_board(self):
        zones = PlayerZones(
            path=("B1", "B2", "B3", "C3", "D3", "D2"),
            waiting=("A1",),
            starting=("A2",),
            home=("D3", "D2"),
            movement_start="B1",
            teleport="E5",
        )
        return BoardTopology(
            players=((1, zones),),
            prison=(TriggerMapping("prison", "B3", "X1"),),
            temple=(),
        )

    def test_given_injected_board_when_measuring_then_uses_its_path(self):
        t = self._mk_board()
        self.assertEqual(distance(t, "A1", "B2", 1), 3)
        self.assertEqual(distance(t, "A2", "C3", 1), 4)
        self.assertEqual(distance(t, "X1", "D2", 1), 3)
        self.assertEqual(distance(t, "B1", "X1", 1), 2)


class TestDiceAllows(unittest.TestCase):
    def test_given_steps_when_checking_against_dice_then_single_or_sum_only(self):
        self.assertTrue(dice_allows(2, 2, 5))
        self.assertTrue(dice_allows(5, 2, 5))
        self.assertTrue(dice_allows(7, 2, 5))
        self.assertFalse(dice_allows(3, 2, 5))
        self.assertFalse(dice_allows(0, 2, 5))


if __name__ == "__main__":
    unittest.main(verbosity=2)
