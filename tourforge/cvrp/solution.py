from typing import Iterator, List, Optional

import numpy as np

from ..tours import Tour


class CVRPSolution:
    """
    A set of closed vehicle tours with the capacity load of each tour.

    When the problem has a depot every tour starts (and ends) at it and the
    depot is neither counted as served nor as load.
    """

    def __init__(self, depot: Optional[int] = None):
        self.depot = depot
        self.tours: List[Tour] = []
        self.loads: List[np.ndarray] = []
        self.unassigned: List[int] = []

    def add_tour(self, tour: Tour, load: np.ndarray) -> int:
        self.tours.append(tour)
        self.loads.append(np.array(load, dtype=np.float64))
        return len(self.tours) - 1

    def remove_tour(self, idx: int):
        del self.tours[idx]
        del self.loads[idx]

    def tour_visits(self, idx: int) -> List[int]:
        """The served visits of a tour, without the depot."""
        return [visit for visit in self.tours[idx] if visit != self.depot]

    def served_count(self) -> int:
        total = 0
        for tour in self.tours:
            total += tour.count - (1 if self.depot is not None else 0)
        return total

    def visits(self) -> Iterator[int]:
        for idx in range(len(self.tours)):
            yield from self.tour_visits(idx)

    def tour_of(self, visit: int) -> Optional[int]:
        for idx, tour in enumerate(self.tours):
            if visit != self.depot and visit in tour:
                return idx
        return None

    def clone(self) -> "CVRPSolution":
        other = CVRPSolution(self.depot)
        other.tours = [tour.clone() for tour in self.tours]
        other.loads = [load.copy() for load in self.loads]
        other.unassigned = list(self.unassigned)
        return other

    __copy__ = clone

    def __len__(self) -> int:
        return len(self.tours)

    def __repr__(self):
        return f"CVRPSolution(tours={len(self.tours)}, served={self.served_count()}, " \
               f"unassigned={len(self.unassigned)})"
