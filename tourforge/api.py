import functools
import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from . import cvrp, stsp, tsp
from .fitness import Fitness
from .tours import Tour
from .tsp.directed import DirectedTSPObjective, DirectedTSProblem, best_turns

logger = logging.getLogger(__name__)


@dataclass
class Result:
    """Solved tours with their fitness; `unassigned` lists the visits no tour serves."""
    tours: List[Tour]
    fitness: Fitness
    unassigned: List[int] = field(default_factory=list)

    @property
    def tour(self) -> Tour:
        return self.tours[0]

    @property
    def weight(self) -> float:
        return self.fitness.weight

    def visits(self) -> List[List[int]]:
        return [tour.to_list() for tour in self.tours]


@functools.singledispatch
def solve(problem, solver=None, objective=None, rng=None) -> Result:
    """
    Solves a problem with its default solver and objective unless given.

    Random components are seeded from `rng` (a seed or a numpy Generator).
    """
    raise TypeError(f"No solver registered for {type(problem).__name__}.")


@solve.register
def _(problem: tsp.TSProblem, solver=None, objective=None, rng=None) -> Result:
    objective = objective if objective is not None else tsp.TSPObjective()
    solver = solver if solver is not None else tsp.default_solver(problem, rng)
    tour, fitness = solver.solve(problem, objective)
    logger.info("%s solved %s: %s", solver.name, problem, fitness)
    return Result([tour], fitness)


@solve.register
def _(problem: stsp.STSProblem, solver=None, objective=None, rng=None) -> Result:
    objective = objective if objective is not None else stsp.STSPObjective()
    solver = solver if solver is not None else stsp.default_solver(problem, rng)
    tour, fitness = solver.solve(problem, objective)
    unserved = problem.unserved(tour)
    logger.info("%s solved %s: %s, %d visits left out", solver.name, problem, fitness, len(unserved))
    return Result([tour], fitness, unserved)


@solve.register
def _(problem: DirectedTSProblem, solver=None, objective=None, rng=None) -> Result:
    """
    The solver orders the base visits on the cheapest weight between their
    halves, the turn of every visit is chosen afterwards.
    """
    objective = objective if objective is not None else DirectedTSPObjective()
    n = problem.count
    base = problem.weights.reshape(n, 2, n, 2).min(axis=(1, 3))
    np.fill_diagonal(base, 0.0)
    base_problem = tsp.TSProblem(base, first=problem.first, last=problem.last)
    solver = solver if solver is not None else tsp.default_solver(base_problem, rng)
    order, _ = solver.solve(base_problem, tsp.TSPObjective())
    tour = best_turns(problem, order.to_list())
    fitness = objective.calculate(problem, tour)
    logger.info("Directed tour over %d visits: %s", n, fitness)
    return Result([tour], fitness)


@solve.register
def _(problem: cvrp.CVRProblem, solver=None, objective=None, rng=None) -> Result:
    objective = objective if objective is not None else cvrp.CVRPObjective()
    solver = solver if solver is not None else cvrp.default_solver(problem, rng=rng)
    solution, fitness = solver.solve(problem, objective)
    if solution.unassigned:
        logger.info("%s left %d visits unassigned", solver.name, len(solution.unassigned))
    logger.info("%s solved %s: %d tours, %s", solver.name, problem, len(solution.tours), fitness)
    return Result(solution.tours, fitness, list(solution.unassigned))
