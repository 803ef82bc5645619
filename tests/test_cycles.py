import threading
import unittest

from tourforge.cycles import AsymmetricAlternatingCycles, AsymmetricCycles
from tourforge.lazy import Lazy
from tourforge.tours import NOT_SET


class TestAsymmetricCycles(unittest.TestCase):

    def setUp(self):
        self.cycles = AsymmetricCycles(5)
        for frm, to in [(0, 1), (1, 0), (2, 3), (3, 2)]:
            self.cycles.add_edge(frm, to)

    def test_cycles_are_keyed_by_lowest_member(self):
        self.assertEqual(self.cycles.cycles, {0: 2, 2: 2})
        self.assertEqual(self.cycles.cycle_of(3), 2)
        self.assertEqual(self.cycles.cycle_of(4), NOT_SET)

    def test_merging_two_cycles(self):
        self.cycles.add_edge(1, 2)
        self.cycles.add_edge(3, 0)
        self.assertEqual(self.cycles.cycles, {0: 4})
        self.assertEqual(self.cycles[3], 0)

    def test_clone_is_independent(self):
        copy = self.cycles.clone()
        copy.add_edge(1, 2)
        copy.add_edge(3, 0)
        self.assertEqual(copy.cycles, {0: 4})
        self.assertEqual(self.cycles.cycles, {0: 2, 2: 2})


class TestAsymmetricAlternatingCycles(unittest.TestCase):

    def test_cycle_follows_second_entries(self):
        cycles = AsymmetricAlternatingCycles(4)
        cycles.add_edge(0, 1, 2)
        cycles.add_edge(2, 3, 0)
        self.assertEqual(cycles.cycles, {0: 2})
        self.assertEqual(cycles.next(2), (3, 0))
        self.assertEqual(cycles.next(1), (NOT_SET, NOT_SET))

    def test_open_walk_is_not_a_cycle(self):
        cycles = AsymmetricAlternatingCycles(4)
        cycles.add_edge(0, 1, 2)
        self.assertEqual(cycles.cycles, {})


class TestLazy(unittest.TestCase):

    def test_factory_runs_once(self):
        calls = []

        def factory():
            calls.append(1)
            return 42

        lazy = Lazy(factory)
        self.assertFalse(lazy.is_built)
        threads = [threading.Thread(target=lambda: lazy.value) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(lazy.value, 42)
        self.assertTrue(lazy.is_built)
        self.assertEqual(len(calls), 1)


if __name__ == "__main__":
    unittest.main()
