"""
Solver composition: generic drivers over {problem, objective, solution}.

Solvers create solutions, operators improve them in place, perturbers shake
them with a given strength and crossover operators combine two of them. The
drivers below compose these without knowing the concrete problem type.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from . import config
from .fitness import Fitness

logger = logging.getLogger(__name__)

# (iteration, problem, objective, solution) -> stop?
StopCondition = Callable[[int, object, object, object], bool]
# (iteration, level, problem, objective, solution) -> stop?
LevelStopCondition = Callable[[int, int, object, object, object], bool]


class SolverBase(ABC):
    """Builds a solution from scratch."""

    name = "solver"

    @abstractmethod
    def solve(self, problem, objective) -> Tuple[object, Fitness]:
        """Returns a new solution and its fitness."""

    def __repr__(self):
        return self.name


class OperatorBase(ABC):
    """Tries to improve a solution in place."""

    name = "operator"

    @abstractmethod
    def apply(self, problem, objective, solution) -> Tuple[bool, Fitness]:
        """
        Returns (improved, delta). On success the solution is modified and
        `delta` is the fitness change (new minus old). On failure the
        solution is left untouched.
        """

    def __repr__(self):
        return self.name


class PerturberBase(OperatorBase):
    """An operator with a tunable strength, used to escape local optima."""

    def apply(self, problem, objective, solution) -> Tuple[bool, Fitness]:
        return self.apply_level(problem, objective, solution, 1)

    @abstractmethod
    def apply_level(self, problem, objective, solution, level: int) -> Tuple[bool, Fitness]:
        """Perturbs the solution, the strength grows with `level`."""


class CrossOverBase(ABC):
    """Combines two parent solutions into one offspring."""

    name = "crossover"

    @abstractmethod
    def apply(self, problem, objective, solution1, solution2) -> Tuple[object, Fitness]:
        """Returns a new offspring and its fitness, the parents are not modified."""

    def __repr__(self):
        return self.name


class IterativeOperator(OperatorBase):
    """Applies an operator repeatedly, by default until it stops improving."""

    def __init__(self, operator: OperatorBase, max_iterations: int = config.LOCAL_SEARCH_MAX_ITERATIONS,
                 stop_at_fail: bool = True):
        self._operator = operator
        self._max_iterations = max_iterations
        self._stop_at_fail = stop_at_fail
        self.name = f"ITER_[{max_iterations}_{operator.name}]"

    def apply(self, problem, objective, solution) -> Tuple[bool, Fitness]:
        total = objective.zero
        improved = False
        for _ in range(self._max_iterations):
            success, delta = self._operator.apply(problem, objective, solution)
            if success:
                improved = True
                total = objective.add(problem, total, delta)
            elif self._stop_at_fail:
                break
        return improved, total


class OperatorSequence(OperatorBase):
    """Applies each operator once, in the given order."""

    def __init__(self, *operators: OperatorBase):
        self._operators = list(operators)
        self.name = "_".join(operator.name for operator in self._operators)

    def apply(self, problem, objective, solution) -> Tuple[bool, Fitness]:
        total = objective.zero
        improved = False
        for operator in self._operators:
            success, delta = operator.apply(problem, objective, solution)
            if success:
                improved = True
                total = objective.add(problem, total, delta)
        return improved, total


class IterativeSolver(SolverBase):
    """
    Runs a solver several times, improving each result with the given
    operators, and keeps the best solution.
    """

    def __init__(self, solver: SolverBase, max_iterations: int, *operators: OperatorBase,
                 stop_condition: Optional[StopCondition] = None):
        self._solver = solver
        self._max_iterations = max_iterations
        self._operators = list(operators)
        self._stop_condition = stop_condition
        self.name = f"ITER_[{max_iterations}x{solver.name}]"

    def solve(self, problem, objective) -> Tuple[object, Fitness]:
        best = None
        best_fitness = objective.infinite
        for i in range(self._max_iterations):
            solution, fitness = self._solver.solve(problem, objective)
            for operator in self._operators:
                improved, delta = operator.apply(problem, objective, solution)
                if improved:
                    fitness = objective.add(problem, fitness, delta)

            if best is None or objective.is_better(problem, fitness, best_fitness):
                logger.debug("%s: iteration %d improved to %s", self.name, i, fitness)
                best = solution
                best_fitness = fitness

            if self._stop_condition is not None and self._stop_condition(i, problem, objective, best):
                break
        return best, best_fitness


class VNSSolver(SolverBase):
    """
    Variable neighbourhood search.

    Builds an initial solution, then repeatedly shakes a copy of the incumbent
    at the current level and runs local search on it. An improvement is
    accepted and resets the level to 1, otherwise the level grows. With an
    equal served count the weight has to drop by more than `epsilon`.
    """

    def __init__(self, generator: SolverBase, perturber: PerturberBase, local_search: OperatorBase,
                 stop_condition: Optional[LevelStopCondition] = None, level_max: int = config.VNS_LEVEL_MAX,
                 epsilon: float = config.EPSILON):
        self._generator = generator
        self._epsilon = epsilon
        self._perturber = perturber
        self._local_search = local_search
        if stop_condition is None:
            stop_condition = lambda i, level, problem, objective, solution: level > level_max
        self._stop_condition = stop_condition
        self.name = f"VNS_[{generator.name}_{perturber.name}_{local_search.name}]"

    def _accepts(self, problem, objective, candidate: Fitness, incumbent: Fitness) -> bool:
        if not objective.is_better(problem, candidate, incumbent):
            return False
        gain = objective.subtract(problem, incumbent, candidate)
        return gain.customers != 0 or gain.weight > self._epsilon

    def solve(self, problem, objective) -> Tuple[object, Fitness]:
        solution, fitness = self._generator.solve(problem, objective)
        improved, delta = self._local_search.apply(problem, objective, solution)
        if improved:
            fitness = objective.add(problem, fitness, delta)

        iteration = 0
        level = 1
        while not self._stop_condition(iteration, level, problem, objective, solution):
            candidate = solution.clone()
            candidate_fitness = fitness
            shaken, delta = self._perturber.apply_level(problem, objective, candidate, level)
            if shaken:
                candidate_fitness = objective.add(problem, candidate_fitness, delta)
            improved, delta = self._local_search.apply(problem, objective, candidate)
            if improved:
                candidate_fitness = objective.add(problem, candidate_fitness, delta)

            if self._accepts(problem, objective, candidate_fitness, fitness):
                logger.debug("%s: level %d improved to %s", self.name, level, candidate_fitness)
                solution = candidate
                fitness = candidate_fitness
                level = 1
            else:
                level += 1
            iteration += 1
        return solution, fitness


class GASolver(SolverBase):
    """
    Steady-state memetic search: tournament selection, crossover, local
    search on the offspring, and replacement of the worse parent when the
    offspring beats it.
    """

    def __init__(self, generator: SolverBase, crossover: CrossOverBase, mutation: Optional[OperatorBase] = None,
                 population_size: int = config.GA_POPULATION_SIZE, generations: int = config.GA_GENERATIONS,
                 tournament_size: int = config.GA_TOURNAMENT_SIZE, rng=None,
                 stop_condition: Optional[StopCondition] = None, progress: bool = False):
        self._generator = generator
        self._crossover = crossover
        self._mutation = mutation
        self._population_size = population_size
        self._generations = generations
        self._tournament_size = tournament_size
        self._rng = np.random.default_rng(rng)
        self._stop_condition = stop_condition
        self._progress = progress
        self.name = f"GA_[{generator.name}_{crossover.name}]"

    def _tournament_selection(self, problem, objective, fitnesses: List[Fitness]) -> int:
        k = min(self._tournament_size, len(fitnesses))
        candidates = self._rng.choice(len(fitnesses), size=k, replace=False)
        best_idx = int(candidates[0])
        for idx in candidates[1:]:
            if objective.is_better(problem, fitnesses[idx], fitnesses[best_idx]):
                best_idx = int(idx)
        return best_idx

    def _best_index(self, problem, objective, fitnesses: List[Fitness]) -> int:
        best_idx = 0
        for idx in range(1, len(fitnesses)):
            if objective.is_better(problem, fitnesses[idx], fitnesses[best_idx]):
                best_idx = idx
        return best_idx

    def solve(self, problem, objective) -> Tuple[object, Fitness]:
        population = []
        fitnesses = []
        for _ in range(self._population_size):
            solution, fitness = self._generator.solve(problem, objective)
            if self._mutation is not None:
                improved, delta = self._mutation.apply(problem, objective, solution)
                if improved:
                    fitness = objective.add(problem, fitness, delta)
            population.append(solution)
            fitnesses.append(fitness)

        best_idx = self._best_index(problem, objective, fitnesses)
        best, best_fitness = population[best_idx], fitnesses[best_idx]
        logger.debug("%s: initial best %s", self.name, best_fitness)

        generations = range(self._generations)
        if self._progress:
            generations = tqdm(generations, desc=self.name)
        for generation in generations:
            p1_idx = self._tournament_selection(problem, objective, fitnesses)
            p2_idx = self._tournament_selection(problem, objective, fitnesses)
            if p1_idx == p2_idx:
                continue

            offspring, offspring_fitness = self._crossover.apply(
                problem, objective, population[p1_idx], population[p2_idx])
            if self._mutation is not None:
                improved, delta = self._mutation.apply(problem, objective, offspring)
                if improved:
                    offspring_fitness = objective.add(problem, offspring_fitness, delta)

            # replace the worse of the two parents
            if objective.is_better(problem, fitnesses[p1_idx], fitnesses[p2_idx]):
                target_idx = p2_idx
            else:
                target_idx = p1_idx
            if objective.is_better(problem, offspring_fitness, fitnesses[target_idx]):
                population[target_idx] = offspring
                fitnesses[target_idx] = offspring_fitness
                if objective.is_better(problem, offspring_fitness, best_fitness):
                    best, best_fitness = offspring, offspring_fitness
                    logger.debug("%s: generation %d new best %s", self.name, generation, best_fitness)

            if self._stop_condition is not None and self._stop_condition(generation, problem, objective, best):
                break
        return best, best_fitness
