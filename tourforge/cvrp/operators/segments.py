"""
Segments of consecutive visits and the pieces shared by the inter-tour
operators: weight deltas for cutting and pasting segments, candidate
insertion points from the nearest neighbour cache, and the base class that
runs a pairwise operator over all tour pairs.
"""
from abc import abstractmethod
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ...fitness import Fitness
from ...solvers import OperatorBase
from ...tours import Tour


class Segment(NamedTuple):
    visits: List[int]
    before: int
    after: int


def segment_at(tour: Tour, start: int, length: int) -> Optional[Segment]:
    """The `length` visits starting at `start`, None when they would include the first visit."""
    if start == tour.first or start not in tour:
        return None
    visits = [start]
    current = start
    for _ in range(length - 1):
        current = tour.successor(current)
        if current is None or current == tour.first:
            return None
        visits.append(current)
    after = tour.successor(current)
    if after is None:
        return None
    return Segment(visits, tour.predecessor(start), after)


def internal_weight(weights: np.ndarray, visits: Sequence[int]) -> float:
    total = 0.0
    for idx in range(len(visits) - 1):
        total += weights[visits[idx], visits[idx + 1]]
    return total


def removal_delta(weights: np.ndarray, segment: Segment) -> float:
    """Weight change of cutting the segment out and closing the gap."""
    visits = segment.visits
    delta = -(weights[segment.before, visits[0]] + internal_weight(weights, visits) +
              weights[visits[-1], segment.after])
    if segment.before != segment.after:
        delta += weights[segment.before, segment.after]
    return delta


def insertion_delta(weights: np.ndarray, x: int, y: int, visits: Sequence[int]) -> float:
    """Weight change of pasting the visits, in this order, between x and y."""
    delta = weights[x, visits[0]] + internal_weight(weights, visits) + weights[visits[-1], y]
    if x != y:
        delta -= weights[x, y]
    return delta


def best_orientation(weights: np.ndarray, x: int, y: int, visits: List[int],
                     reverse: bool) -> Tuple[float, List[int]]:
    delta = insertion_delta(weights, x, y, visits)
    if reverse and len(visits) > 1:
        reversed_visits = visits[::-1]
        reversed_delta = insertion_delta(weights, x, y, reversed_visits)
        if reversed_delta < delta:
            return reversed_delta, reversed_visits
    return delta, visits


def cut(tour: Tour, segment: Segment):
    for visit in segment.visits:
        tour.remove(visit)


def paste(tour: Tour, after: int, visits: Sequence[int]):
    previous = after
    for visit in visits:
        tour.insert_after(previous, visit)
        previous = visit


def insertion_points(tour: Tour, nearest, head: int, tail: int) -> Iterator[int]:
    """
    Visits of `tour` to paste a segment after: the first visit, then visits
    next to the nearest neighbours of the segment's head and tail.
    """
    seen = set()
    candidates = [tour.first]
    for neighbour in nearest.get(head):
        neighbour = int(neighbour)
        if neighbour in tour:
            candidates.append(neighbour)
            candidates.append(tour.predecessor(neighbour))
    for neighbour in nearest.get(tail):
        neighbour = int(neighbour)
        if neighbour in tour:
            candidates.append(tour.predecessor(neighbour))
    for x in candidates:
        if x is not None and x not in seen:
            seen.add(x)
            yield x


class InterTourOperator(OperatorBase):
    """
    An operator moving visits between (or within) two tours of a
    `CVRPSolution`. `apply` tries every ordered pair of tours.
    """

    supports_same_tour = False

    def apply(self, problem, objective, solution) -> Tuple[bool, Fitness]:
        total = objective.zero
        improved = False
        count = len(solution.tours)
        for t1 in range(count):
            for t2 in range(count):
                if t1 == t2 and not self.supports_same_tour:
                    continue
                success, delta = self.apply_pair(problem, objective, solution, t1, t2)
                if success:
                    improved = True
                    total = objective.add(problem, total, delta)
        return improved, total

    @abstractmethod
    def apply_pair(self, problem, objective, solution, t1: int, t2: int) -> Tuple[bool, Fitness]:
        """Tries to improve tours t1 and t2, both are left untouched on failure."""
