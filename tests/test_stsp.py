import unittest

import numpy as np

from tourforge import solve
from tourforge.fitness import Fitness
from tourforge.solvers import IterativeOperator, IterativeSolver, OperatorSequence, SolverBase
from tourforge.stsp import (InsertOperator, RandomInsertionSolver, STSPObjective, STSProblem, cheapest_insertion,
                            default_solver)
from tourforge.tours import Tour
from tourforge.tsp import Local1Shift, vns_construction_solver


def line_weights(positions):
    positions = np.asarray(positions, dtype=np.float64)
    return np.abs(positions[:, None] - positions[None, :])


# visit 4 sits far away from the others
POSITIONS = [0, 1, 2, 3, 10]


class FixedTourSolver(SolverBase):
    """Hands out pre-made tours one after the other."""

    name = "FIXED"

    def __init__(self, tours):
        self._tours = list(tours)

    def solve(self, problem, objective):
        tour = self._tours.pop(0)
        return tour, objective.calculate(problem, tour)


class TestSTSProblem(unittest.TestCase):

    def test_unserved(self):
        problem = STSProblem(line_weights(POSITIONS), max_weight=6.0)
        self.assertEqual(problem.unserved(Tour([0, 2, 3], last=0)), [1, 4])
        self.assertEqual(STSPObjective().unserved(problem, Fitness(3, 6.0)), 2)

    def test_rejects_negative_max_weight(self):
        with self.assertRaises(ValueError):
            STSProblem(line_weights(POSITIONS), max_weight=-1.0)


class TestInsertion(unittest.TestCase):

    def setUp(self):
        self.weights = line_weights(POSITIONS)
        self.objective = STSPObjective()

    def test_cheapest_insertion_positions(self):
        self.assertEqual(cheapest_insertion(self.weights, Tour([0], last=0), [3, 1]), (2.0, 1, 0))
        self.assertEqual(cheapest_insertion(self.weights, Tour([0, 3], last=0), [1]), (0.0, 1, 0))
        # open tours may also grow at their end
        self.assertEqual(cheapest_insertion(self.weights, Tour([0, 1]), [4]), (9.0, 4, 1))
        self.assertEqual(cheapest_insertion(self.weights, Tour([0, 3], last=3), [2]), (0.0, 2, 0))

    def test_random_insertion_leaves_out_what_does_not_fit(self):
        problem = STSProblem(self.weights, max_weight=6.0)
        for seed in range(5):
            tour, fitness = RandomInsertionSolver(seed).solve(problem, self.objective)
            self.assertEqual(fitness, Fitness(4, 6.0))
            self.assertEqual(problem.unserved(tour), [4])

    def test_random_insertion_open_tour(self):
        problem = STSProblem(self.weights, max_weight=3.0, last=None)
        for seed in range(5):
            tour, fitness = RandomInsertionSolver(seed).solve(problem, self.objective)
            self.assertEqual(fitness, Fitness(4, 3.0))
            self.assertIsNone(tour.last)

    def test_random_insertion_with_tight_budget(self):
        problem = STSProblem(self.weights, max_weight=1.0)
        tour, fitness = RandomInsertionSolver(1).solve(problem, self.objective)
        self.assertEqual(tour.to_list(), [0])
        self.assertEqual(fitness, Fitness(1, 0.0))

    def test_insert_operator_until_the_budget_is_used(self):
        problem = STSProblem(self.weights, max_weight=6.0)
        tour = Tour([0], last=0)
        improved, delta = IterativeOperator(InsertOperator()).apply(problem, self.objective, tour)
        self.assertTrue(improved)
        self.assertEqual(delta, Fitness(3, 6.0))
        self.assertEqual(sorted(tour.to_list()), [0, 1, 2, 3])
        self.assertEqual(self.objective.calculate(problem, tour), Fitness(4, 6.0))

        improved, delta = InsertOperator().apply(problem, self.objective, tour)
        self.assertFalse(improved)
        self.assertEqual(delta, Fitness(0, 0.0))


class TestSTSPSolvers(unittest.TestCase):

    def test_more_visits_beat_less_weight(self):
        problem = STSProblem(line_weights(POSITIONS), max_weight=6.0)
        short = Tour([0, 1], last=0)
        long = Tour([0, 1, 2, 3], last=0)
        tour, fitness = IterativeSolver(FixedTourSolver([short, long]), 2).solve(problem, STSPObjective())
        self.assertEqual(tour, long)
        self.assertEqual(fitness, Fitness(4, 6.0))

    def test_local_search_adds_visits(self):
        problem = STSProblem(line_weights(POSITIONS), max_weight=6.0)
        objective = STSPObjective()
        tour = Tour([0, 2, 1], last=0)
        local_search = IterativeOperator(OperatorSequence(Local1Shift(), InsertOperator()))
        improved, delta = local_search.apply(problem, objective, tour)
        self.assertTrue(improved)
        self.assertEqual(objective.calculate(problem, tour).customers, 4)
        self.assertAlmostEqual(objective.add(problem, Fitness(3, 4.0), delta).weight,
                               objective.calculate(problem, tour).weight)

    def test_vns_construction(self):
        points = np.random.default_rng(2).random((10, 2))
        weights = np.linalg.norm(points[:, None, :] - points[None, :, :], axis=-1)
        problem = STSProblem(weights, max_weight=1.5)
        objective = STSPObjective()
        tour, fitness = default_solver(problem, rng=4, max_iterations=2, level_max=20).solve(problem, objective)
        self.assertAlmostEqual(fitness.weight, objective.calculate(problem, tour).weight)
        self.assertEqual(fitness.customers, tour.count)
        self.assertLessEqual(fitness.weight, problem.max_weight + 1e-6)
        self.assertEqual(len(set(tour.to_list())), tour.count)

    def test_solve(self):
        problem = STSProblem(line_weights(POSITIONS), max_weight=6.0)
        result = solve(problem, default_solver(problem, rng=1, max_iterations=2, level_max=10))
        self.assertEqual(result.fitness, Fitness(4, 6.0))
        self.assertEqual(result.unassigned, [4])
        self.assertEqual(sorted(result.tour.to_list()), [0, 1, 2, 3])

    def test_factory_reuses_vns_construction(self):
        self.assertEqual(type(default_solver()).__name__, type(vns_construction_solver()).__name__)


if __name__ == "__main__":
    unittest.main()
