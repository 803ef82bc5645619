from typing import Iterable, List, Optional

from .. import config
from ..tours import Tour
from ..tsp.problem import TSProblem


class STSProblem(TSProblem):
    """
    A selective TSP: the tour may not weigh more than `max_weight`, so only
    the visits that fit are served.

    `first` and `last` are always part of the tour, even when travelling
    between them alone exceeds the budget.
    """

    def __init__(self, weights, max_weight: float, first: int = 0, last: Optional[int] = 0,
                 visits: Optional[Iterable[int]] = None, nn_count: int = config.NN_COUNT):
        super().__init__(weights, first, last, visits, nn_count)
        self.max_weight = float(max_weight)
        if not self.max_weight >= 0:
            raise ValueError(f"Maximum weight has to be non-negative, got {max_weight}.")

    def unserved(self, tour: Tour) -> List[int]:
        """The visits of the problem the tour leaves out."""
        return [visit for visit in self.visits if visit not in tour]

    def __repr__(self):
        kind = "closed" if self.is_closed else ("open" if self.last is None else f"fixed-last {self.last}")
        return f"STSProblem(count={self.count}, first={self.first}, {kind}, max_weight={self.max_weight})"
