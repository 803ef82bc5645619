from abc import ABC, abstractmethod

from .fitness import INFINITE, ZERO, Fitness


class ObjectiveBase(ABC):
    """
    Defines how solutions are scored and ordered.

    Operators compute moves as fitness deltas and combine them through
    `add`/`subtract`; `compare` decides which of two fitness values is better.
    """

    name = "objective"

    @property
    def zero(self) -> Fitness:
        return ZERO

    @property
    def infinite(self) -> Fitness:
        return INFINITE

    @property
    def is_non_continuous(self) -> bool:
        """True when a move's delta cannot be derived from the changed edges only."""
        return False

    @abstractmethod
    def calculate(self, problem, solution) -> Fitness:
        """Calculates the fitness of the solution from scratch."""

    def add(self, problem, fitness1: Fitness, fitness2: Fitness) -> Fitness:
        return fitness1 + fitness2

    def subtract(self, problem, fitness1: Fitness, fitness2: Fitness) -> Fitness:
        return fitness1 - fitness2

    def compare(self, problem, fitness1: Fitness, fitness2: Fitness) -> int:
        return fitness1.compare_to(fitness2)

    def is_better(self, problem, fitness1: Fitness, fitness2: Fitness) -> bool:
        return self.compare(problem, fitness1, fitness2) < 0

    def is_zero(self, problem, fitness: Fitness) -> bool:
        return fitness.is_zero()

    def __repr__(self):
        return f"{type(self).__name__}({self.name})"
