from typing import Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

from .. import config
from ..lazy import Lazy
from ..nearest import NearestNeighbourCache
from ..tsp.problem import TSProblem, as_weights
from .capacity import Capacity, CapacityConstraint
from .seeded_pool import SeededTourPool


class Coordinate(NamedTuple):
    latitude: float
    longitude: float


class CVRProblem:
    """
    A capacitated vehicle routing problem.

    Without a depot every vehicle tour is a closed cycle through its own
    visits; with a depot every tour starts and ends there. The derived
    nearest neighbour cache and seeded tour pool are built at most once, on
    first use.
    """

    def __init__(self, weights, visit_weights: Optional[Sequence[float]] = None, max_weight: float = float("inf"),
                 capacity_constraints: Optional[Iterable[CapacityConstraint]] = None,
                 visits: Optional[Iterable[int]] = None,
                 visit_locations: Optional[Sequence[Coordinate]] = None,
                 depot: Optional[int] = None,
                 nn_count: int = config.NN_COUNT,
                 seeded_tour_size: int = config.SEEDED_TOUR_SIZE):
        self.weights = as_weights(weights)
        n = self.weights.shape[0]
        self.depot = None if depot is None else int(depot)
        if self.depot is not None and not 0 <= self.depot < n:
            raise ValueError(f"Depot {self.depot} is outside of the weight matrix (size {n}).")
        self.max_weight = float(max_weight)
        self.capacity = Capacity(n, visit_weights, self.max_weight, capacity_constraints or ())
        self._visit_weights = None if visit_weights is None else np.asarray(visit_weights, dtype=np.float64)

        if visits is None:
            visits = range(n)
        self._visits = sorted({int(v) for v in visits} - {self.depot})
        for visit in self._visits:
            if not 0 <= visit < n:
                raise ValueError(f"Visit {visit} is outside of the weight matrix (size {n}).")
        self._visit_set = frozenset(self._visits)

        if visit_locations is not None:
            if len(visit_locations) != n:
                raise ValueError(f"Expected {n} visit locations, got {len(visit_locations)}.")
            visit_locations = [Coordinate(*location) for location in visit_locations]
            self.location_array = np.asarray(visit_locations, dtype=np.float64).reshape(n, 2)
            self.location_array.setflags(write=False)
        else:
            self.location_array = None
        self._visit_locations = visit_locations

        self._nearest_neighbours = Lazy(lambda: NearestNeighbourCache(self.weights, self._visits, nn_count))
        self._seeded_tour_pool = Lazy(lambda: SeededTourPool(self, seeded_tour_size))

    @property
    def visits(self) -> List[int]:
        return self._visits

    @property
    def count(self) -> int:
        return len(self._visits)

    @property
    def max_visit(self) -> int:
        return self.weights.shape[0]

    @property
    def capacity_constraints(self) -> List[CapacityConstraint]:
        return [CapacityConstraint(metric, float(maximum), self.capacity.costs[idx])
                for idx, (metric, maximum) in enumerate(zip(self.capacity.metrics, self.capacity.max))]

    def contains(self, visit: int) -> bool:
        return visit in self._visit_set

    def weight(self, frm: int, to: int) -> float:
        return self.weights[frm, to]

    def visit_weight(self, visit: int) -> float:
        if self._visit_weights is None:
            return 0.0
        return float(self._visit_weights[visit])

    def visit_location(self, visit: int) -> Optional[Coordinate]:
        if self._visit_locations is None:
            return None
        return self._visit_locations[visit]

    @property
    def visit_locations(self) -> Optional[List[Coordinate]]:
        return self._visit_locations

    @property
    def nearest_neighbours(self) -> NearestNeighbourCache:
        return self._nearest_neighbours.value

    @property
    def seeded_tour_pool(self) -> SeededTourPool:
        return self._seeded_tour_pool.value

    def tour_first(self, seed: int) -> int:
        """The first visit of a tour grown from `seed`."""
        return seed if self.depot is None else self.depot

    def tour_problem(self, seed: int, visits: Iterable[int]) -> TSProblem:
        """A closed TSP over the given visits, sharing this problem's weights."""
        first = self.tour_first(seed)
        visits = set(visits)
        visits.add(first)
        return TSProblem(self.weights, first=first, last=first, visits=visits)

    def __repr__(self):
        return f"CVRProblem(count={self.count}, depot={self.depot}, metrics={self.capacity.metrics})"
