"""
Selective TSP: a single tour with a maximum weight that serves as many
visits as fit, then travels as little as possible.
"""
import numpy as np

from .. import config
from ..solvers import IterativeOperator, IterativeSolver, OperatorSequence
from ..tsp import vns_construction_solver
from ..tsp.operators import Local1Shift
from .insertion import InsertOperator, RandomInsertionSolver, cheapest_insertion
from .objective import STSPObjective
from .problem import STSProblem


def default_solver(problem: STSProblem = None, rng=None, max_iterations: int = config.VNS_MAX_ITERATIONS,
                   level_max: int = config.VNS_LEVEL_MAX) -> IterativeSolver:
    """
    VNS construction from random insertion tours; the local search shifts
    visits to shorten the tour and adds unserved visits whenever they fit.
    """
    rng = np.random.default_rng(rng)
    local_search = IterativeOperator(OperatorSequence(Local1Shift(), InsertOperator()))
    return vns_construction_solver(max_iterations, level_max, rng,
                                   generator=RandomInsertionSolver(rng), local_search=local_search)
