import logging
from typing import Optional, Tuple

from ... import config
from ...fitness import Fitness
from .segments import (InterTourOperator, Segment, best_orientation, cut, paste, removal_delta,
                       segment_at)

logger = logging.getLogger(__name__)


def _replacement_delta(weights, segment: Segment, visits, reverse: bool):
    """Weight change of replacing `segment` by `visits` at the same place."""
    removal = removal_delta(weights, segment)
    insertion, ordered = best_orientation(weights, segment.before, segment.after, visits, reverse)
    return removal + insertion, ordered


class ExchangeOperator(InterTourOperator):
    """Swaps one visit of tour t1 with a nearby visit of tour t2."""

    name = "EX"

    def __init__(self, best_improvement: bool = False, epsilon: float = config.EPSILON):
        self._min_length = 1
        self._max_length = 1
        self._reverse = False
        self._best_improvement = best_improvement
        self._epsilon = epsilon

    def _candidate_starts(self, tour, nearest, start: int):
        seen = set()
        for neighbour in nearest.get(start):
            neighbour = int(neighbour)
            if neighbour not in tour:
                continue
            for candidate in (neighbour, tour.successor(neighbour)):
                if candidate is not None and candidate != tour.first and candidate not in seen:
                    seen.add(candidate)
                    yield candidate

    def apply_pair(self, problem, objective, solution, t1: int, t2: int) -> Tuple[bool, Fitness]:
        if t1 == t2:
            return False, objective.zero
        weights = problem.weights
        capacity = problem.capacity
        nearest = problem.nearest_neighbours
        tour1 = solution.tours[t1]
        tour2 = solution.tours[t2]
        load1 = solution.loads[t1]
        load2 = solution.loads[t2]

        best: Optional[tuple] = None
        best_delta = -self._epsilon
        for start1 in tour1.to_list():
            for length in range(self._min_length, self._max_length + 1):
                segment1 = segment_at(tour1, start1, length)
                if segment1 is None:
                    break
                cost1 = capacity.load_of(segment1.visits)
                for start2 in self._candidate_starts(tour2, nearest, start1):
                    segment2 = segment_at(tour2, start2, length)
                    if segment2 is None:
                        continue
                    cost2 = capacity.load_of(segment2.visits)
                    if not capacity.fits_exchange(load1, cost1, cost2) or \
                            not capacity.fits_exchange(load2, cost2, cost1):
                        continue
                    delta1, into1 = _replacement_delta(weights, segment1, segment2.visits, self._reverse)
                    delta2, into2 = _replacement_delta(weights, segment2, segment1.visits, self._reverse)
                    delta = delta1 + delta2
                    if delta < best_delta:
                        best = (segment1, segment2, into1, into2, cost1, cost2)
                        best_delta = delta
                        if not self._best_improvement:
                            break
                if best is not None and not self._best_improvement:
                    break
            if best is not None and not self._best_improvement:
                break

        if best is None:
            return False, objective.zero

        segment1, segment2, into1, into2, cost1, cost2 = best
        cut(tour1, segment1)
        cut(tour2, segment2)
        paste(tour1, segment1.before, into1)
        paste(tour2, segment2.before, into2)
        solution.loads[t1] = load1 - cost1 + cost2
        solution.loads[t2] = load2 - cost2 + cost1
        logger.debug("%s: swapped %s (tour %d) and %s (tour %d), delta %.4f",
                     self.name, segment1.visits, t1, segment2.visits, t2, best_delta)
        return True, Fitness(0, float(best_delta))
