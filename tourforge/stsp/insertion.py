import logging
from typing import Tuple

import numpy as np

from .. import config
from ..fitness import Fitness
from ..solvers import OperatorBase, SolverBase
from ..tours import Tour
from ..tsp.construction import build_tour, free_visits

logger = logging.getLogger(__name__)


def cheapest_insertion(weights: np.ndarray, tour: Tour, candidates) -> Tuple[float, int, int]:
    """Returns (cost, visit, after) for the cheapest way to add one of the candidates to the tour."""
    candidates = np.asarray(candidates, dtype=np.int64)
    pairs = list(tour.pairs())
    if tour.is_closed and not pairs:
        pairs = [(tour.first, tour.first)]

    froms = np.empty(0, dtype=np.int64)
    costs = np.empty((0, len(candidates)))
    if pairs:
        pairs = np.asarray(pairs, dtype=np.int64)
        froms = pairs[:, 0]
        tos = pairs[:, 1]
        costs = weights[np.ix_(froms, candidates)] + weights[np.ix_(candidates, tos)].T
        costs -= np.where(froms == tos, 0.0, weights[froms, tos])[:, None]
    if tour.last is None:
        # an open tour can also grow at its end
        froms = np.append(froms, tour.end)
        costs = np.vstack([costs, weights[tour.end, candidates][None, :]])

    position, column = np.unravel_index(int(np.argmin(costs)), costs.shape)
    return float(costs[position, column]), int(candidates[column]), int(froms[position])


class RandomInsertionSolver(SolverBase):
    """
    Takes the free visits in random order and adds each one at its cheapest
    position, as long as the tour stays within the maximum weight.
    """

    name = "RAN_INS"

    def __init__(self, rng=None):
        self._rng = np.random.default_rng(rng)

    def solve(self, problem, objective) -> Tuple[Tour, Fitness]:
        tour = build_tour(problem, [])
        weight = objective.calculate(problem, tour).weight
        for visit in self._rng.permutation(np.asarray(free_visits(problem), dtype=np.int64)):
            cost, visit, after = cheapest_insertion(problem.weights, tour, [visit])
            if weight + cost <= problem.max_weight + config.EPSILON:
                tour.insert_after(after, visit)
                weight += cost

        fitness = objective.calculate(problem, tour)
        logger.debug("%s: served %d of %d visits", self.name, tour.count, problem.count)
        return tour, fitness


class InsertOperator(OperatorBase):
    """Adds the unserved visit that is cheapest to insert, if it fits within the maximum weight."""

    name = "INS"

    def __init__(self, epsilon: float = config.EPSILON):
        self._epsilon = epsilon

    def apply(self, problem, objective, solution: Tour) -> Tuple[bool, Fitness]:
        unserved = problem.unserved(solution)
        if not unserved:
            return False, objective.zero

        current = objective.calculate(problem, solution)
        cost, visit, after = cheapest_insertion(problem.weights, solution, unserved)
        if current.weight + cost > problem.max_weight + self._epsilon:
            return False, objective.zero
        solution.insert_after(after, visit)
        return True, Fitness(1, cost)
