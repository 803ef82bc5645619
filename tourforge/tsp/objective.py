import numpy as np
from numba import njit

from ..fitness import Fitness
from ..objective import ObjectiveBase
from ..tours import Tour


@njit(cache=True)
def _route_weight_numba(route: np.ndarray, weights: np.ndarray, closed: bool) -> float:
    """Sum of the weights along the route, including the closing edge when closed."""
    total = 0.0
    n = len(route)
    for i in range(n - 1):
        total += weights[route[i], route[i + 1]]
    if closed and n > 1:
        total += weights[route[n - 1], route[0]]
    return total


def tour_weight(weights: np.ndarray, tour: Tour) -> float:
    route = np.fromiter(tour, dtype=np.int64, count=tour.count)
    return float(_route_weight_numba(route, weights, tour.is_closed))


class TSPObjective(ObjectiveBase):
    """Total travel weight of the tour, every visit in the tour counts as served."""

    name = "TSP"

    def calculate(self, problem, solution: Tour) -> Fitness:
        return Fitness(solution.count, tour_weight(problem.weights, solution))
