import logging
from typing import Callable, Optional, Sequence, Set, Tuple

import numpy as np

from .. import config
from ..fitness import Fitness
from ..seeds import seed_with_close_neighbours
from ..solvers import OperatorBase, SolverBase
from ..tours import Tour
from ..tsp.hill_climbing import HillClimbing3OptSolver
from ..tsp.objective import TSPObjective
from .overlap import never_overlaps
from .solution import CVRPSolution

logger = logging.getLogger(__name__)


class SeededCheapestInsertion(SolverBase):
    """
    Builds tours one at a time. A tour starts from a seed visit and its
    pooled cluster of neighbours (ordered by a small TSP solver), then keeps
    receiving the unplaced visit with the cheapest insertion until nothing
    fits anymore. Improvement operators run between the new tour and the
    existing ones every `improvements_threshold * len(tour)` insertions and
    once more when the tour is closed.

    Visits that fit no tour, or are left over when `max_tours` is reached,
    are reported as unassigned.
    """

    name = "SCI"

    def __init__(self, tsp_solver: Optional[SolverBase] = None,
                 improvement_operators: Sequence[OperatorBase] = (),
                 improvements_threshold: float = config.SCI_IMPROVEMENTS_THRESHOLD,
                 seed_func: Callable = seed_with_close_neighbours,
                 overlaps_func: Callable = never_overlaps,
                 max_tours: Optional[int] = None, rng=None):
        self._tsp_solver = tsp_solver if tsp_solver is not None else HillClimbing3OptSolver()
        self._tsp_objective = TSPObjective()
        self._operators = list(improvement_operators)
        self._threshold = improvements_threshold
        self._seed_func = seed_func
        self._overlaps_func = overlaps_func
        self._max_tours = max_tours
        self._rng = np.random.default_rng(rng)

    def solve(self, problem, objective) -> Tuple[CVRPSolution, Fitness]:
        capacity = problem.capacity
        pool = problem.seeded_tour_pool
        solution = CVRPSolution(problem.depot)
        remaining: Set[int] = set(problem.visits)
        unassigned = []

        while remaining and (self._max_tours is None or len(solution.tours) < self._max_tours):
            seed = self._seed_func(problem, sorted(remaining), self._rng)
            cluster = [visit for visit in pool.get(seed) if visit in remaining]
            if not cluster:
                # the seed alone exceeds a vehicle's capacity
                remaining.discard(seed)
                unassigned.append(seed)
                continue

            tour = self._seed_tour(problem, seed, cluster)
            idx = solution.add_tour(tour, capacity.load_of(cluster))
            remaining.difference_update(cluster)
            self._fill(problem, objective, solution, idx, remaining)
            self._improve(problem, objective, solution, idx)

        unassigned.extend(remaining)
        solution.unassigned = sorted(unassigned)
        fitness = objective.calculate(problem, solution)
        logger.debug("%s: %d tours, %d unassigned, %s", self.name, len(solution.tours),
                     len(solution.unassigned), fitness)
        return solution, fitness

    def _seed_tour(self, problem, seed: int, cluster) -> Tour:
        first = problem.tour_first(seed)
        if len(cluster) <= 2:
            visits = [first] + [visit for visit in cluster if visit != first]
            return Tour(visits, first)
        tour, _ = self._tsp_solver.solve(problem.tour_problem(seed, cluster), self._tsp_objective)
        return tour

    def _fill(self, problem, objective, solution: CVRPSolution, idx: int, remaining: Set[int]):
        weights = problem.weights
        capacity = problem.capacity
        tour = solution.tours[idx]
        inserted = 0
        while remaining:
            candidates = np.fromiter(sorted(remaining), dtype=np.int64, count=len(remaining))
            mask = capacity.fits_many(solution.loads[idx], candidates)
            mask &= ~self._overlaps_func(problem, solution, idx, candidates)
            candidates = candidates[mask]
            if len(candidates) == 0:
                break

            pairs = list(tour.pairs()) or [(tour.first, tour.first)]
            pairs = np.asarray(pairs, dtype=np.int64)
            froms = pairs[:, 0]
            tos = pairs[:, 1]
            costs = weights[np.ix_(froms, candidates)] + weights[np.ix_(candidates, tos)].T
            costs -= np.where(froms == tos, 0.0, weights[froms, tos])[:, None]
            position, column = np.unravel_index(int(np.argmin(costs)), costs.shape)

            visit = int(candidates[column])
            tour.insert_after(int(froms[position]), visit)
            solution.loads[idx] = solution.loads[idx] + capacity.cost(visit)
            remaining.discard(visit)
            inserted += 1

            if self._operators and inserted >= self._threshold * tour.count:
                self._improve(problem, objective, solution, idx)
                inserted = 0

    def _improve(self, problem, objective, solution: CVRPSolution, idx: int):
        for other in range(len(solution.tours)):
            pairs = [(idx, other)] if other == idx else [(idx, other), (other, idx)]
            for operator in self._operators:
                for t1, t2 in pairs:
                    if t1 == t2 and not getattr(operator, "supports_same_tour", False):
                        continue
                    operator.apply_pair(problem, objective, solution, t1, t2)
