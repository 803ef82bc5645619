import logging
from typing import Tuple

import numpy as np
from numba import njit

from .. import config
from ..fitness import Fitness
from ..solvers import OperatorBase, PerturberBase
from ..tours import Tour

logger = logging.getLogger(__name__)


class Local1Shift(OperatorBase):
    """
    Moves a single visit to another position in the same tour (Or-opt with
    segments of one). Candidate positions are next to the nearest neighbours
    of the moved visit; the first improving move is applied.
    """

    name = "1SHFT"

    def __init__(self, epsilon: float = config.EPSILON):
        self._epsilon = epsilon

    def apply(self, problem, objective, solution: Tour) -> Tuple[bool, Fitness]:
        if objective.is_non_continuous:
            return self._apply_recalculated(problem, objective, solution)

        weights = problem.weights
        nearest = problem.nearest_neighbours
        tour = solution
        for visit in tour.to_list():
            if visit == tour.first or visit == tour.last:
                continue
            p = tour.predecessor(visit)
            s = tour.successor(visit)
            removal = -weights[p, visit]
            if s is not None:
                removal += weights[p, s] - weights[visit, s]

            for neighbour in nearest.get(visit):
                neighbour = int(neighbour)
                if neighbour not in tour:
                    continue
                before = tour.predecessor(neighbour)
                for x in (neighbour, before):
                    if x is None or x == visit or x == p:
                        continue
                    if tour.is_fixed_last and x == tour.last:
                        continue
                    y = tour.successor(x)
                    insertion = weights[x, visit]
                    if y is not None:
                        insertion += weights[visit, y] - weights[x, y]
                    delta = removal + insertion
                    if delta < -self._epsilon:
                        tour.remove(visit)
                        tour.insert_after(x, visit)
                        return True, Fitness(0, float(delta))
        return False, objective.zero

    def _apply_recalculated(self, problem, objective, tour: Tour) -> Tuple[bool, Fitness]:
        current = objective.calculate(problem, tour)
        for visit in tour.to_list():
            if visit == tour.first or visit == tour.last:
                continue
            p = tour.predecessor(visit)
            for x in tour.to_list():
                if x == visit or x == p or (tour.is_fixed_last and x == tour.last):
                    continue
                candidate = tour.clone()
                candidate.remove(visit)
                candidate.insert_after(x, visit)
                fitness = objective.calculate(problem, candidate)
                delta = objective.subtract(problem, fitness, current)
                if objective.compare(problem, fitness, current) < 0 and delta.weight < -self._epsilon:
                    tour.copy_from(candidate)
                    return True, delta
        return False, objective.zero


@njit(cache=True)
def _two_opt_numba(route: np.ndarray, weights: np.ndarray, closed: bool, fixed_last: bool,
                   max_iterations: int) -> np.ndarray:
    """
    First-improvement 2-opt with exact asymmetric deltas: reversing a
    segment also reverses the direction of every edge inside it.
    """
    n = len(route)
    last_free = n - 2 if fixed_last else n - 1
    for _ in range(max_iterations):
        improved = False
        for i in range(1, last_free):
            inner_forward = 0.0
            inner_backward = 0.0
            for j in range(i + 1, last_free + 1):
                inner_forward += weights[route[j - 1], route[j]]
                inner_backward += weights[route[j], route[j - 1]]
                a = route[i - 1]
                if j + 1 < n:
                    b = route[j + 1]
                elif closed:
                    b = route[0]
                else:
                    b = -1
                delta = weights[a, route[j]] - weights[a, route[i]] + inner_backward - inner_forward
                if b >= 0:
                    delta += weights[route[i], b] - weights[route[j], b]
                if delta < -1e-9:
                    route[i:j + 1] = route[i:j + 1][::-1].copy()
                    improved = True
                    break
            if improved:
                break
        if not improved:
            break
    return route


class Local2Opt(OperatorBase):
    """Runs 2-opt on the tour until no reversal improves it."""

    name = "2OPT"

    def __init__(self, max_iterations: int = config.LOCAL_SEARCH_MAX_ITERATIONS):
        self._max_iterations = max_iterations

    def apply(self, problem, objective, solution: Tour) -> Tuple[bool, Fitness]:
        before = objective.calculate(problem, solution)
        route = np.fromiter(solution, dtype=np.int64, count=solution.count)
        route = _two_opt_numba(route, problem.weights, solution.is_closed, solution.is_fixed_last,
                               self._max_iterations)
        candidate = Tour(route.tolist(), solution.last)
        after = objective.calculate(problem, candidate)
        if not objective.is_better(problem, after, before):
            return False, objective.zero
        solution.copy_from(candidate)
        return True, objective.subtract(problem, after, before)


class RandomExchange(PerturberBase):
    """Swaps random pairs of free visits, `level` swaps at a time."""

    name = "RAN_EX"

    def __init__(self, rng=None):
        self._rng = np.random.default_rng(rng)

    def apply_level(self, problem, objective, solution: Tour, level: int) -> Tuple[bool, Fitness]:
        order = solution.to_list()
        fixed = {solution.first, solution.last}
        free = [idx for idx, visit in enumerate(order) if visit not in fixed]
        if len(free) < 2:
            return False, objective.zero

        before = objective.calculate(problem, solution)
        swaps = min(level, len(free))
        for _ in range(swaps):
            i, j = self._rng.choice(len(free), size=2, replace=False)
            a, b = free[i], free[j]
            order[a], order[b] = order[b], order[a]
        candidate = Tour(order, solution.last)
        solution.copy_from(candidate)
        after = objective.calculate(problem, solution)
        return True, objective.subtract(problem, after, before)
