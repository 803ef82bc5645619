import unittest

from tourforge.tours import Tour


class TestTour(unittest.TestCase):
    """Tour construction, queries and in-place edits for the three tour variants."""

    def test_closed_tour(self):
        tour = Tour([0, 1, 2, 3], last=0)
        self.assertTrue(tour.is_closed)
        self.assertEqual(tour.count, 4)
        self.assertEqual(tour.to_list(), [0, 1, 2, 3])
        self.assertEqual(list(tour.pairs()), [(0, 1), (1, 2), (2, 3), (3, 0)])
        self.assertEqual(tour.successor(3), 0)
        self.assertEqual(tour.predecessor(0), 3)

    def test_open_tour(self):
        tour = Tour([2, 0, 1])
        self.assertFalse(tour.is_closed)
        self.assertIsNone(tour.last)
        self.assertIsNone(tour.successor(1))
        self.assertIsNone(tour.predecessor(2))
        self.assertEqual(list(tour.pairs()), [(2, 0), (0, 1)])
        self.assertEqual(tour.end, 1)

    def test_fixed_last_is_appended(self):
        tour = Tour([0, 1, 2], last=5)
        self.assertTrue(tour.is_fixed_last)
        self.assertEqual(tour.to_list(), [0, 1, 2, 5])
        with self.assertRaises(ValueError):
            Tour([0, 5, 1], last=5)

    def test_single_visit_closed_tour_has_no_pairs(self):
        tour = Tour([3], last=3)
        self.assertEqual(list(tour.pairs()), [])
        self.assertEqual(tour.successor(3), 3)

    def test_insert_after(self):
        tour = Tour([0, 1, 2], last=0)
        tour.insert_after(1, 7)
        self.assertEqual(tour.to_list(), [0, 1, 7, 2])
        self.assertEqual(tour.count, 4)
        tour.insert_after(2, 4)
        self.assertEqual(list(tour.pairs())[-1], (4, 0))

    def test_insert_after_rejects_invalid_input(self):
        tour = Tour([0, 1, 2], last=4)
        with self.assertRaises(ValueError):
            tour.insert_after(9, 5)
        with self.assertRaises(ValueError):
            tour.insert_after(0, 1)
        with self.assertRaises(ValueError):
            tour.insert_after(4, 5)
        with self.assertRaises(ValueError):
            tour.insert_after(0, -1)

    def test_remove(self):
        tour = Tour([0, 1, 2, 3], last=0)
        tour.remove(3)
        self.assertEqual(tour.to_list(), [0, 1, 2])
        self.assertEqual(list(tour.pairs())[-1], (2, 0))
        self.assertNotIn(3, tour)
        with self.assertRaises(ValueError):
            tour.remove(0)
        with self.assertRaises(ValueError):
            tour.remove(3)

    def test_remove_undoes_insert_after(self):
        for last in (0, None, 3):
            tour = Tour([0, 1, 2, 3], last=last)
            visits, pairs = tour.to_list(), list(tour.pairs())
            for pred in visits:
                if tour.is_fixed_last and pred == tour.last:
                    continue
                tour.insert_after(pred, 8)
                tour.remove(8)
                self.assertEqual(tour.to_list(), visits)
                self.assertEqual(list(tour.pairs()), pairs)
                self.assertEqual(tour.end, visits[-1])
                self.assertEqual(tour.count, 4)

    def test_remove_fixed_last_fails(self):
        tour = Tour([0, 1, 2], last=2)
        with self.assertRaises(ValueError):
            tour.remove(2)

    def test_replace(self):
        tour = Tour([0, 1, 2, 3], last=0)
        tour.replace(2, 9)
        self.assertEqual(tour.to_list(), [0, 1, 9, 3])

    def test_clone_is_independent(self):
        tour = Tour([0, 1, 2, 3], last=0)
        copy = tour.clone()
        copy.remove(2)
        self.assertEqual(tour.to_list(), [0, 1, 2, 3])
        self.assertEqual(copy.to_list(), [0, 1, 3])
        self.assertNotEqual(tour, copy)

    def test_copy_from_requires_same_endpoints(self):
        tour = Tour([0, 1, 2], last=0)
        tour.copy_from(Tour([0, 2, 1], last=0))
        self.assertEqual(tour.to_list(), [0, 2, 1])
        with self.assertRaises(ValueError):
            tour.copy_from(Tour([1, 0, 2], last=1))

    def test_triples(self):
        tour = Tour([0, 1, 2], last=0)
        self.assertEqual(list(tour.triples()), [(2, 0, 1), (0, 1, 2), (1, 2, 0)])
        self.assertEqual(list(Tour([0, 1, 2]).triples()), [(0, 1, 2)])


if __name__ == "__main__":
    unittest.main()
