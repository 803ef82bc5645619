from typing import List, Tuple

import numpy as np

from ..fitness import Fitness
from ..solvers import SolverBase
from ..tours import Tour


def free_visits(problem) -> List[int]:
    """The visits of the problem that are neither the first nor the last."""
    return [v for v in problem.visits if v != problem.first and v != problem.last]


def build_tour(problem, order) -> Tour:
    """Wraps an order of free visits between the problem's first and last."""
    visits = [problem.first]
    visits.extend(int(v) for v in order)
    return Tour(visits, problem.last)


class RandomSolver(SolverBase):
    """A uniformly random order of the free visits."""

    name = "RAN"

    def __init__(self, rng=None):
        self._rng = np.random.default_rng(rng)

    def solve(self, problem, objective) -> Tuple[Tour, Fitness]:
        order = self._rng.permutation(np.asarray(free_visits(problem), dtype=np.int64))
        tour = build_tour(problem, order)
        return tour, objective.calculate(problem, tour)


class NearestNeighbourSolver(SolverBase):
    """
    Greedy construction: always travel to the closest unvisited visit.

    The nearest neighbour cache is consulted first, the full row of the
    weight matrix only when none of the cached neighbours is still free.
    """

    name = "NN"

    def solve(self, problem, objective) -> Tuple[Tour, Fitness]:
        weights = problem.weights
        nearest = problem.nearest_neighbours
        remaining = np.zeros(weights.shape[0], dtype=bool)
        remaining[free_visits(problem)] = True
        left = int(remaining.sum())

        order = []
        current = problem.first
        while left > 0:
            nxt = -1
            for candidate in nearest.get(current):
                if remaining[candidate]:
                    nxt = int(candidate)
                    break
            if nxt < 0:
                candidates = np.flatnonzero(remaining)
                nxt = int(candidates[np.argmin(weights[current, candidates])])
            order.append(nxt)
            remaining[nxt] = False
            left -= 1
            current = nxt

        tour = build_tour(problem, order)
        return tour, objective.calculate(problem, tour)
