"""
Edge assembly crossover (EAX) for closed, possibly asymmetric, tours.

The offspring starts as the edge set of the first parent. Alternating cycles
between both parents (an edge of parent 1, then an edge of parent 2 walked
backwards) are selected and applied, replacing parent 1 edges by parent 2
edges. This usually splits the tour into sub-tours, which are merged again
with the cheapest 2-edge reconnections.
"""
import enum
import logging
from typing import List, Optional, Tuple

import numpy as np

from .. import config
from ..cycles import AsymmetricAlternatingCycles, AsymmetricCycles
from ..fitness import Fitness
from ..solvers import CrossOverBase
from ..tours import NOT_SET, Tour

logger = logging.getLogger(__name__)


class SelectionStrategy(enum.Enum):
    SINGLE_RANDOM = "SR"  # EAX-1AB
    MULTIPLE_RANDOM = "MR"


class EAXOperator(CrossOverBase):

    def __init__(self, max_offspring: int = config.EAX_MAX_OFFSPRING,
                 strategy: SelectionStrategy = SelectionStrategy.SINGLE_RANDOM,
                 nn: bool = True, nn_merge: int = config.EAX_NN_MERGE,
                 keep_probability: float = config.EAX_MULTIPLE_RANDOM_KEEP, rng=None):
        self._max_offspring = max_offspring
        self._strategy = strategy
        self._nn = nn
        self._nn_merge = nn_merge
        self._keep_probability = keep_probability
        self._rng = np.random.default_rng(rng)

    @property
    def name(self) -> str:
        suffix = "_NN" if self._nn else ""
        return f"EAX_({self._strategy.value}{self._max_offspring}{suffix})"

    def _select_cycles(self, cycles: List[int]) -> List[int]:
        """Picks the cycles to apply; single selection consumes the picked cycle."""
        if self._strategy == SelectionStrategy.MULTIPLE_RANDOM:
            return [cycle for cycle in cycles if self._rng.random() < self._keep_probability]
        if not cycles:
            return []
        idx = int(self._rng.integers(len(cycles)))
        return [cycles.pop(idx)]

    def apply(self, problem, objective, solution1: Tour, solution2: Tour) -> Tuple[Tour, Fitness]:
        for parent in (solution1, solution2):
            if parent.is_closed != problem.is_closed:
                raise ValueError("Tour and problem have to be both closed or both open.")
        if not problem.is_closed:
            raise ValueError("Edge assembly crossover only applies to closed problems.")

        weights = problem.weights
        size = problem.max_visit

        e_a = AsymmetricCycles(size)
        for frm, to in solution1.pairs():
            e_a.add_edge(frm, to)

        # predecessors in parent 2
        e_b = [NOT_SET] * size
        for frm, to in solution2.pairs():
            e_b[to] = frm

        cycles = AsymmetricAlternatingCycles(size)
        for idx in range(size):
            a = e_a[idx]
            if a != NOT_SET:
                b = e_b[a]
                if idx != b and b != NOT_SET:
                    cycles.add_edge(idx, a, b)

        selectable = list(cycles.cycles.keys())
        attempts = 0
        best: Optional[Tour] = None
        best_fitness = objective.infinite
        while attempts < self._max_offspring and selectable:
            attempts += 1
            starts = self._select_cycles(selectable)
            a = e_a.clone()

            for start in starts:
                current = start
                while True:
                    via, nxt = cycles.next(current)
                    a.add_edge(nxt, via)
                    current = nxt
                    if current == start:
                        break

            self._merge_subtours(problem, weights, a, solution1)

            offspring = self._materialize(problem, a.next_array)
            if offspring is not None and offspring.count == solution1.count:
                fitness = objective.calculate(problem, offspring)
                if best is None or objective.compare(problem, best_fitness, fitness) > 0:
                    best = offspring
                    best_fitness = fitness

        if best is None:
            logger.debug("%s: no offspring assembled after %d attempts, returning parent 1", self.name, attempts)
            best = self._materialize(problem, e_a.next_array)
            best_fitness = objective.calculate(problem, best)
        return best, best_fitness

    def _merge_subtours(self, problem, weights: np.ndarray, a: AsymmetricCycles, parent: Tour):
        next_a = a.next_array
        nearest = problem.nearest_neighbours if self._nn else None
        cycle_count = len(a.cycles)
        while cycle_count > 1:
            # the smallest sub-tour gets merged into another one
            smallest, smallest_size = -1, None
            for cycle, count in a.cycles.items():
                if smallest_size is None or count < smallest_size:
                    smallest, smallest_size = cycle, count

            ignore = [False] * len(next_a)
            frm = smallest
            while True:
                ignore[frm] = True
                frm = next_a[frm]
                if frm == smallest:
                    break

            weight = np.inf
            selected = None
            if nearest is not None:
                frm = smallest
                while True:
                    to = next_a[frm]
                    weight_from_to = weights[frm, to]
                    for neighbour in nearest.get(frm, self._nn_merge):
                        neighbour_to = next_a[neighbour]
                        if neighbour_to != NOT_SET and not ignore[neighbour] and not ignore[neighbour_to]:
                            merge_weight = (weights[frm, neighbour_to] + weights[neighbour, to]) - \
                                           (weight_from_to + weights[neighbour, neighbour_to])
                            if weight > merge_weight:
                                weight = merge_weight
                                selected = (frm, int(neighbour), to, neighbour_to)
                    frm = to
                    if frm == smallest:
                        break

            if selected is None:
                frm = smallest
                while True:
                    to = next_a[frm]
                    for customer in parent:
                        customer_to = next_a[customer]
                        if not ignore[customer] and not ignore[customer_to]:
                            merge_weight = (weights[frm, customer_to] + weights[customer, to]) - \
                                           (weights[frm, to] + weights[customer, customer_to])
                            if weight > merge_weight:
                                weight = merge_weight
                                selected = (frm, customer, to, customer_to)
                    frm = to
                    if frm == smallest:
                        break

            if selected is None:
                return
            from1, from2, to1, to2 = selected
            a.add_edge(from1, to2)
            a.add_edge(from2, to1)
            cycle_count -= 1

    @staticmethod
    def _materialize(problem, next_array: List[int]) -> Optional[Tour]:
        tour = Tour([problem.first], problem.last)
        previous = problem.first
        nxt = next_array[previous]
        while nxt != NOT_SET and nxt != problem.first:
            if nxt in tour:
                return None
            tour.insert_after(previous, nxt)
            previous = nxt
            nxt = next_array[nxt]
        return tour
