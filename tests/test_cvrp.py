import unittest

import numpy as np

from tourforge.cvrp import (Capacity, CapacityConstraint, Coordinate, CVRPObjective, CVRProblem, CVRPSolution,
                            SeededCheapestInsertion, bounding_box_overlaps, default_solver, never_overlaps)
from tourforge.fitness import Fitness
from tourforge.seeds import random_seed, seed_with_close_neighbours
from tourforge.tours import Tour


def uniform_problem(size, max_weight, depot=None):
    weights = np.ones((size, size)) - np.eye(size)
    return CVRProblem(weights, visit_weights=[1.0] * size, max_weight=max_weight, depot=depot)


def line_weights(positions):
    positions = np.asarray(positions, dtype=np.float64)
    return np.abs(positions[:, None] - positions[None, :])


class TestCapacity(unittest.TestCase):

    def setUp(self):
        self.capacity = Capacity(3, visit_weights=[1, 2, 3], max_weight=4,
                                 constraints=[CapacityConstraint("volume", 10, [5, 5, 1])])

    def test_metrics(self):
        self.assertEqual(self.capacity.metrics, ("weight", "volume"))
        self.assertEqual(self.capacity.load_of([0, 2]).tolist(), [4.0, 6.0])

    def test_fits(self):
        load = self.capacity.load_of([0])
        self.assertTrue(self.capacity.fits_visit(load, 2))
        self.assertFalse(self.capacity.fits_visit(load + self.capacity.cost(1), 2))
        self.assertEqual(self.capacity.fits_many(load, np.array([1, 2])).tolist(), [True, True])
        # volume: 5 + 5 + 5 > 10
        self.assertFalse(self.capacity.fits_visit(self.capacity.load_of([0, 1]), 0))

    def test_fits_exchange(self):
        load = self.capacity.load_of([0, 1])
        self.assertTrue(self.capacity.fits_exchange(load, self.capacity.cost(1), self.capacity.cost(2)))
        self.assertFalse(self.capacity.fits_exchange(load, self.capacity.cost(0), self.capacity.cost(2)))

    def test_without_metrics_everything_fits(self):
        capacity = Capacity(3)
        self.assertEqual(len(capacity), 0)
        self.assertTrue(capacity.fits_visit(capacity.empty(), 2))
        self.assertEqual(capacity.fits_many(capacity.empty(), np.array([0, 1])).tolist(), [True, True])

    def test_cost_length_mismatch(self):
        with self.assertRaises(ValueError):
            Capacity(3, constraints=[CapacityConstraint("volume", 1, [1, 1])])


class TestCVRProblem(unittest.TestCase):

    def test_depot_is_not_a_visit(self):
        problem = uniform_problem(5, 2, depot=0)
        self.assertEqual(problem.visits, [1, 2, 3, 4])
        self.assertFalse(problem.contains(0))
        self.assertEqual(problem.count, 4)

    def test_invalid_depot(self):
        with self.assertRaises(ValueError):
            uniform_problem(3, 2, depot=3)

    def test_visit_locations(self):
        problem = CVRProblem(np.zeros((2, 2)), visit_locations=[(50.0, 4.0), (51.0, 5.0)])
        self.assertEqual(problem.visit_location(1), Coordinate(51.0, 5.0))
        self.assertIsNone(CVRProblem(np.zeros((2, 2))).visit_location(1))
        with self.assertRaises(ValueError):
            CVRProblem(np.zeros((2, 2)), visit_locations=[(50.0, 4.0)])

    def test_seeded_tour_pool_respects_capacity(self):
        problem = uniform_problem(5, 2)
        pool = problem.seeded_tour_pool
        self.assertIs(pool, problem.seeded_tour_pool)
        for visit in problem.visits:
            cluster = pool.get(visit)
            self.assertEqual(cluster[0], visit)
            self.assertEqual(len(cluster), 2)

    def test_seeded_tour_pool_skips_oversized_visits(self):
        problem = CVRProblem(np.ones((3, 3)), visit_weights=[1, 5, 1], max_weight=2)
        self.assertEqual(problem.seeded_tour_pool.get(1), [])


class TestSeeds(unittest.TestCase):

    def test_random_seed_is_a_remaining_visit(self):
        problem = uniform_problem(6, 10)
        self.assertIn(random_seed(problem, [2, 4, 5], 1), [2, 4, 5])

    def test_close_neighbours_prefers_dense_regions(self):
        problem = CVRProblem(line_weights([0.0, 0.1, 0.2, 0.3, 10.0, 20.0, 30.0]))
        seed = seed_with_close_neighbours(problem, problem.visits, 3, n=3, sample_ratio=1.0)
        self.assertIn(seed, [1, 2])

    def test_close_neighbours_with_few_visits(self):
        problem = uniform_problem(4, 10)
        self.assertIn(seed_with_close_neighbours(problem, [3], 0), [3])


class TestObjective(unittest.TestCase):

    def test_served_count_and_weight(self):
        problem = CVRProblem(line_weights([0, 1, 2, 3, 4]), depot=0)
        solution = CVRPSolution(depot=0)
        solution.add_tour(Tour([0, 1, 2], last=0), problem.capacity.empty())
        solution.add_tour(Tour([0, 4], last=0), problem.capacity.empty())
        objective = CVRPObjective()
        fitness = objective.calculate(problem, solution)
        self.assertEqual(fitness, Fitness(3, 12.0))
        self.assertEqual(objective.unassigned(problem, fitness), 1)

    def test_clone_is_independent(self):
        solution = CVRPSolution()
        solution.add_tour(Tour([0, 1], last=0), np.array([2.0]))
        copy = solution.clone()
        copy.tours[0].remove(1)
        copy.loads[0][0] = 0.0
        self.assertEqual(solution.tours[0].to_list(), [0, 1])
        self.assertEqual(solution.loads[0].tolist(), [2.0])


class TestOverlap(unittest.TestCase):

    def setUp(self):
        locations = [(0, 0), (1, 1), (0.5, 0.5), (5, 5), (6, 6)]
        self.problem = CVRProblem(np.zeros((5, 5)), visit_locations=locations)
        self.solution = CVRPSolution()
        self.solution.add_tour(Tour([0, 1], last=0), self.problem.capacity.empty())
        self.solution.add_tour(Tour([3], last=3), self.problem.capacity.empty())

    def test_never(self):
        self.assertEqual(never_overlaps(self.problem, self.solution, 1, np.array([2, 4])).tolist(), [False, False])

    def test_bounding_box(self):
        mask = bounding_box_overlaps(self.problem, self.solution, 1, np.array([2, 4]))
        self.assertEqual(mask.tolist(), [True, False])
        mask = bounding_box_overlaps(self.problem, self.solution, 0, np.array([2, 4]))
        self.assertEqual(mask.tolist(), [False, False])


class TestSeededCheapestInsertion(unittest.TestCase):

    def setUp(self):
        self.objective = CVRPObjective()

    def assert_feasible(self, problem, solution):
        served = list(solution.visits())
        self.assertEqual(len(served), len(set(served)))
        self.assertEqual(sorted(served + solution.unassigned), problem.visits)
        for idx, tour in enumerate(solution.tours):
            visits = solution.tour_visits(idx)
            load = problem.capacity.load_of(visits)
            self.assertTrue(np.allclose(load, solution.loads[idx]))
            self.assertTrue(np.all(load <= problem.capacity.max))

    def test_uniform_visits_need_three_tours(self):
        problem = uniform_problem(5, 2)
        solution, fitness = SeededCheapestInsertion(rng=1).solve(problem, self.objective)
        self.assert_feasible(problem, solution)
        self.assertGreaterEqual(len(solution.tours), 3)
        self.assertEqual(fitness.customers, 5)
        self.assertEqual(solution.unassigned, [])

    def test_tours_start_at_the_depot(self):
        problem = uniform_problem(5, 2, depot=0)
        solution, fitness = SeededCheapestInsertion(rng=2).solve(problem, self.objective)
        self.assert_feasible(problem, solution)
        self.assertEqual(len(solution.tours), 2)
        for tour in solution.tours:
            self.assertEqual(tour.first, 0)
            self.assertTrue(tour.is_closed)
        self.assertEqual(fitness.customers, 4)

    def test_max_tours_leaves_visits_unassigned(self):
        problem = uniform_problem(5, 2)
        solution, fitness = SeededCheapestInsertion(max_tours=1, rng=1).solve(problem, self.objective)
        self.assertEqual(len(solution.tours), 1)
        self.assertEqual(len(solution.unassigned), 3)
        self.assertEqual(self.objective.unassigned(problem, fitness), 3)

    def test_oversized_visit_is_unassigned(self):
        problem = CVRProblem(np.ones((3, 3)) - np.eye(3), visit_weights=[1, 5, 1], max_weight=2)
        solution, fitness = SeededCheapestInsertion(rng=0).solve(problem, self.objective)
        self.assertEqual(solution.unassigned, [1])
        self.assertEqual(fitness.customers, 2)

    def test_larger_instance_with_improvements(self):
        rng = np.random.default_rng(4)
        points = rng.random((40, 2))
        weights = np.linalg.norm(points[:, None, :] - points[None, :, :], axis=-1)
        demands = rng.integers(1, 5, size=40).astype(float)
        problem = CVRProblem(weights, visit_weights=demands, max_weight=15.0, depot=0,
                             visit_locations=[tuple(point) for point in points])
        solver = default_solver(problem, iterations=2, rng=3)
        solution, fitness = solver.solve(problem, self.objective)
        self.assert_feasible(problem, solution)
        self.assertEqual(solution.unassigned, [])
        self.assertAlmostEqual(fitness.weight, self.objective.calculate(problem, solution).weight)

    def test_same_seed_same_solution(self):
        problem = uniform_problem(7, 3)
        solution1, fitness1 = SeededCheapestInsertion(rng=5).solve(problem, self.objective)
        solution2, fitness2 = SeededCheapestInsertion(rng=5).solve(problem, self.objective)
        self.assertEqual(fitness1, fitness2)
        self.assertEqual([t.to_list() for t in solution1.tours], [t.to_list() for t in solution2.tours])


if __name__ == "__main__":
    unittest.main()
