from typing import Iterable, NamedTuple, Optional, Sequence

import numpy as np


class CapacityConstraint(NamedTuple):
    """A per-vehicle maximum for one metric, with the cost of every visit."""
    metric: str
    max: float
    costs: Sequence[float]


class Capacity:
    """
    All capacity limits of a vehicle as arrays: `costs` has one row per
    metric and one column per visit, `max` one limit per metric.

    The visit weights (with the maximum weight per vehicle) are the first
    metric, named "weight", when given.
    """

    def __init__(self, size: int, visit_weights: Optional[Sequence[float]] = None,
                 max_weight: float = float("inf"), constraints: Iterable[CapacityConstraint] = ()):
        metrics = []
        rows = []
        maxima = []
        if visit_weights is not None:
            metrics.append("weight")
            rows.append(visit_weights)
            maxima.append(max_weight)
        for constraint in constraints:
            constraint = CapacityConstraint(*constraint)
            metrics.append(constraint.metric)
            rows.append(constraint.costs)
            maxima.append(constraint.max)

        costs = np.zeros((len(rows), size), dtype=np.float64)
        for idx, (metric, row) in enumerate(zip(metrics, rows)):
            row = np.asarray(row, dtype=np.float64)
            if row.shape != (size,):
                raise ValueError(f"Costs for metric '{metric}' need {size} values, got {row.shape}.")
            costs[idx] = row
        self.metrics = tuple(metrics)
        self.costs = costs
        self.max = np.asarray(maxima, dtype=np.float64)
        self.costs.setflags(write=False)
        self.max.setflags(write=False)

    def __len__(self) -> int:
        return len(self.metrics)

    def empty(self) -> np.ndarray:
        return np.zeros(len(self.metrics), dtype=np.float64)

    def cost(self, visit: int) -> np.ndarray:
        return self.costs[:, visit]

    def load_of(self, visits: Iterable[int]) -> np.ndarray:
        visits = np.fromiter(visits, dtype=np.int64)
        return self.costs[:, visits].sum(axis=1)

    def fits(self, load: np.ndarray, extra: np.ndarray) -> bool:
        """True when adding `extra` to `load` stays within every maximum."""
        return bool(np.all(load + extra <= self.max))

    def fits_visit(self, load: np.ndarray, visit: int) -> bool:
        return self.fits(load, self.costs[:, visit])

    def fits_many(self, load: np.ndarray, visits: np.ndarray) -> np.ndarray:
        """Boolean mask of the visits that can each be added to `load`."""
        if len(self.metrics) == 0:
            return np.ones(len(visits), dtype=bool)
        totals = load[:, None] + self.costs[:, visits]
        return np.all(totals <= self.max[:, None], axis=0)

    def fits_exchange(self, load: np.ndarray, removed: np.ndarray, added: np.ndarray) -> bool:
        return bool(np.all(load - removed + added <= self.max))
