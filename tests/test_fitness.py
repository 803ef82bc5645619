import unittest

from tourforge.fitness import INFINITE, ZERO, Fitness
from tourforge.tours import Tour
from tourforge.tsp import TSPObjective, TSProblem


class TestFitness(unittest.TestCase):

    def test_more_customers_always_wins(self):
        self.assertLess(Fitness(5, 1000.0).compare_to(Fitness(4, 1.0)), 0)
        self.assertGreater(Fitness(4, 1.0).compare_to(Fitness(5, 1000.0)), 0)

    def test_weight_breaks_ties(self):
        self.assertLess(Fitness(3, 1.0).compare_to(Fitness(3, 2.0)), 0)
        self.assertEqual(Fitness(3, 2.0).compare_to(Fitness(3, 2.0)), 0)

    def test_arithmetic(self):
        a = Fitness(3, 10.0)
        b = Fitness(1, 2.5)
        self.assertEqual(a + b, Fitness(4, 12.5))
        self.assertEqual(a - b, Fitness(2, 7.5))
        self.assertEqual((a + b) - b, a)
        self.assertEqual(a + ZERO, a)

    def test_zero_and_infinite(self):
        self.assertTrue(ZERO.is_zero())
        self.assertFalse(Fitness(0, 0.1).is_zero())
        self.assertGreater(INFINITE.compare_to(Fitness(0, 1e12)), 0)


class TestTSPObjective(unittest.TestCase):

    def setUp(self):
        self.problem = TSProblem([[0, 1, 4], [2, 0, 1], [1, 3, 0]])
        self.objective = TSPObjective()

    def test_closed_tour_weight_includes_closing_edge(self):
        fitness = self.objective.calculate(self.problem, Tour([0, 1, 2], last=0))
        self.assertEqual(fitness, Fitness(3, 3.0))

    def test_open_tour_weight(self):
        problem = TSProblem([[0, 1, 4], [2, 0, 1], [1, 3, 0]], last=None)
        fitness = self.objective.calculate(problem, Tour([0, 2, 1]))
        self.assertEqual(fitness, Fitness(3, 7.0))

    def test_is_better_follows_compare(self):
        good = Fitness(3, 3.0)
        bad = Fitness(3, 8.0)
        self.assertTrue(self.objective.is_better(self.problem, good, bad))
        self.assertFalse(self.objective.is_better(self.problem, bad, good))
        self.assertFalse(self.objective.is_better(self.problem, good, good))
        self.assertTrue(self.objective.is_better(self.problem, bad, self.objective.infinite))


if __name__ == "__main__":
    unittest.main()
