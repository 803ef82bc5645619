import sys
from dataclasses import dataclass

MIN_CUSTOMERS = -2 ** 31


@dataclass(frozen=True)
class Fitness:
    """
    The quality of a solution, or the change in quality produced by a move.

    `customers` is the number of served visits and is compared first (more
    is better), `weight` breaks ties (less is better). Feasibility therefore
    always dominates travel cost.
    """
    customers: int = 0
    weight: float = 0.0

    def __add__(self, other: "Fitness") -> "Fitness":
        return Fitness(self.customers + other.customers, self.weight + other.weight)

    def __sub__(self, other: "Fitness") -> "Fitness":
        return Fitness(self.customers - other.customers, self.weight - other.weight)

    def compare_to(self, other: "Fitness") -> int:
        """Negative when self is better than other, positive when worse, 0 when equal."""
        if self.customers == other.customers:
            if self.weight < other.weight:
                return -1
            if self.weight > other.weight:
                return 1
            return 0
        return -1 if self.customers > other.customers else 1

    def is_zero(self) -> bool:
        return self.customers == 0 and self.weight == 0

    def __repr__(self):
        return f"Fitness(customers={self.customers}, weight={self.weight:.4f})"


ZERO = Fitness(0, 0.0)
INFINITE = Fitness(MIN_CUSTOMERS, sys.float_info.max)
