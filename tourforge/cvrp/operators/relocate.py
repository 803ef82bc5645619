import logging
from typing import Optional, Tuple

from ... import config
from ...fitness import Fitness
from .segments import (InterTourOperator, Segment, best_orientation, cut, insertion_points, paste,
                       removal_delta, segment_at)

logger = logging.getLogger(__name__)


class RelocateOperator(InterTourOperator):
    """
    Moves a single visit from tour t1 to the cheapest nearby position in
    tour t2, or within the same tour. The first improving move is applied.
    """

    name = "RELOC"
    supports_same_tour = True

    def __init__(self, best_improvement: bool = False, epsilon: float = config.EPSILON):
        self._min_length = 1
        self._max_length = 1
        self._reverse = False
        self._best_improvement = best_improvement
        self._epsilon = epsilon

    def apply_pair(self, problem, objective, solution, t1: int, t2: int) -> Tuple[bool, Fitness]:
        weights = problem.weights
        capacity = problem.capacity
        nearest = problem.nearest_neighbours
        source = solution.tours[t1]
        target = solution.tours[t2]
        same = t1 == t2

        best: Optional[Tuple[Segment, int, list]] = None
        best_delta = -self._epsilon
        for start in source.to_list():
            for length in range(self._min_length, self._max_length + 1):
                segment = segment_at(source, start, length)
                if segment is None:
                    break
                if not same and not capacity.fits(solution.loads[t2], capacity.load_of(segment.visits)):
                    continue
                removal = removal_delta(weights, segment)
                members = set(segment.visits)
                for x in insertion_points(target, nearest, segment.visits[0], segment.visits[-1]):
                    if x in members or (same and x == segment.before):
                        continue
                    y = target.successor(x)
                    insertion, ordered = best_orientation(weights, x, y, segment.visits, self._reverse)
                    delta = removal + insertion
                    if delta < best_delta:
                        best = (segment, x, ordered)
                        best_delta = delta
                        if not self._best_improvement:
                            break
                if best is not None and not self._best_improvement:
                    break
            if best is not None and not self._best_improvement:
                break

        if best is None:
            return False, objective.zero

        segment, x, ordered = best
        cut(source, segment)
        paste(target, x, ordered)
        if not same:
            moved = capacity.load_of(segment.visits)
            solution.loads[t1] = solution.loads[t1] - moved
            solution.loads[t2] = solution.loads[t2] + moved
        logger.debug("%s: moved %s from tour %d to %d, delta %.4f", self.name, ordered, t1, t2, best_delta)
        return True, Fitness(0, float(best_delta))
