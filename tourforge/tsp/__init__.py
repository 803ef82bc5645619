import numpy as np

from .. import config
from ..solvers import GASolver, IterativeOperator, IterativeSolver, OperatorBase, SolverBase, VNSSolver
from .construction import NearestNeighbourSolver, RandomSolver
from .directed import DirectedTSPObjective, DirectedTSProblem, DirectedVisit, best_turns
from .eax import EAXOperator, SelectionStrategy
from .hill_climbing import HillClimbing3OptSolver
from .objective import TSPObjective
from .operators import Local1Shift, Local2Opt, RandomExchange
from .problem import TSProblem


def vns_construction_solver(max_iterations: int = config.VNS_MAX_ITERATIONS,
                            level_max: int = config.VNS_LEVEL_MAX, rng=None,
                            generator: SolverBase = None, local_search: OperatorBase = None) -> IterativeSolver:
    """
    Random tours improved by VNS (random exchanges as shake, 1-shift local
    search), restarted `max_iterations` times.

    `generator` and `local_search` replace the random tours and the 1-shift
    local search.
    """
    rng = np.random.default_rng(rng)
    generator = generator if generator is not None else RandomSolver(rng)
    local_search = local_search if local_search is not None else IterativeOperator(Local1Shift())

    def vns_stop(iteration, level, problem, objective, solution):
        if level > level_max:
            return True
        return objective.is_zero(problem, objective.calculate(problem, solution))

    def stop(iteration, problem, objective, solution):
        return objective.is_zero(problem, objective.calculate(problem, solution))

    vns = VNSSolver(generator, RandomExchange(rng), local_search, vns_stop)
    return IterativeSolver(vns, max_iterations, stop_condition=stop)


def ga_solver(population_size: int = config.GA_POPULATION_SIZE, generations: int = config.GA_GENERATIONS,
              max_offspring: int = config.EAX_MAX_OFFSPRING,
              strategy: SelectionStrategy = SelectionStrategy.SINGLE_RANDOM,
              rng=None, progress: bool = False) -> GASolver:
    """Memetic search over closed tours: EAX crossover and 2-opt on every offspring."""
    rng = np.random.default_rng(rng)
    return GASolver(RandomSolver(rng), EAXOperator(max_offspring, strategy, rng=rng), Local2Opt(),
                    population_size=population_size, generations=generations, rng=rng, progress=progress)


def default_solver(problem: TSProblem, rng=None):
    if problem.is_closed and problem.count > 3:
        return ga_solver(rng=rng)
    return vns_construction_solver(rng=rng)
