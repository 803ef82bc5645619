import numpy as np

from .. import config
from ..solvers import IterativeOperator, IterativeSolver
from ..tsp.hill_climbing import HillClimbing3OptSolver
from .capacity import Capacity, CapacityConstraint
from .insertion import SeededCheapestInsertion
from .objective import CVRPObjective
from .operators import (ExchangeOperator, InterTourOperator, MultiExchangeOperator, MultiRelocateOperator,
                        RelocateOperator)
from .overlap import bounding_box_overlaps, never_overlaps
from .problem import Coordinate, CVRProblem
from .seeded_pool import SeededTourPool
from .solution import CVRPSolution


def default_solver(problem: CVRProblem = None, iterations: int = config.CVRP_CONSTRUCTION_ITERATIONS,
                   max_tours: int = None, overlaps_func=never_overlaps, rng=None) -> IterativeSolver:
    """
    Seeded cheapest insertion with relocate/exchange bursts during
    construction, repeated `iterations` times; every construction is polished
    with multi-exchange until it stops improving and the best is kept.
    """
    rng = np.random.default_rng(rng)
    if problem is not None and problem.count <= 1:
        iterations = 1
    construction = SeededCheapestInsertion(
        HillClimbing3OptSolver(),
        [MultiRelocateOperator(2, 5), RelocateOperator(), MultiExchangeOperator(1, 5)],
        overlaps_func=overlaps_func, max_tours=max_tours, rng=rng)
    polish = IterativeOperator(MultiExchangeOperator(1, 10))
    return IterativeSolver(construction, iterations, polish, IterativeOperator(RelocateOperator()))
