from typing import Iterable, List, Optional

import numpy as np

from .. import config
from ..lazy import Lazy
from ..nearest import NearestNeighbourCache


def as_weights(weights) -> np.ndarray:
    """Validates and converts a weight matrix to a contiguous float64 array."""
    weights = np.ascontiguousarray(weights, dtype=np.float64)
    if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
        raise ValueError(f"Weights must be a square matrix, got shape {weights.shape}.")
    return weights


class TSProblem:
    """
    A travelling salesman problem over a (possibly asymmetric) weight matrix.

    `last=first` (the default) asks for a closed tour, `last=None` for an open
    one ending anywhere, any other value fixes the final visit. `visits`
    restricts the problem to a subset of the matrix.
    """

    def __init__(self, weights, first: int = 0, last: Optional[int] = 0, visits: Optional[Iterable[int]] = None,
                 nn_count: int = config.NN_COUNT):
        self.weights = as_weights(weights)
        self.first = int(first)
        self.last = None if last is None else int(last)

        n = self.weights.shape[0]
        if visits is None:
            self._visits = list(range(n))
        else:
            self._visits = sorted({int(v) for v in visits} | {self.first})
            if self.last is not None and self.last not in self._visits:
                self._visits.append(self.last)
                self._visits.sort()
        for visit in (self.first, self.last, *self._visits):
            if visit is not None and not 0 <= visit < n:
                raise ValueError(f"Visit {visit} is outside of the weight matrix (size {n}).")
        self._visit_set = frozenset(self._visits)
        self._nearest_neighbours = Lazy(
            lambda: NearestNeighbourCache(self.weights, None if visits is None else self._visits, nn_count))

    @property
    def is_closed(self) -> bool:
        return self.last == self.first

    @property
    def visits(self) -> List[int]:
        return self._visits

    @property
    def count(self) -> int:
        return len(self._visits)

    @property
    def max_visit(self) -> int:
        return self.weights.shape[0]

    def contains(self, visit: int) -> bool:
        return visit in self._visit_set

    def weight(self, frm: int, to: int) -> float:
        return self.weights[frm, to]

    @property
    def nearest_neighbours(self) -> NearestNeighbourCache:
        return self._nearest_neighbours.value

    def __repr__(self):
        kind = "closed" if self.is_closed else ("open" if self.last is None else f"fixed-last {self.last}")
        return f"TSProblem(count={self.count}, first={self.first}, {kind})"
