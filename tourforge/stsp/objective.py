from ..fitness import Fitness
from ..tsp.objective import TSPObjective


class STSPObjective(TSPObjective):
    """
    Served visits first, travel weight second. Staying within the problem's
    maximum weight is left to the solvers: they never produce a tour that
    exceeds it.
    """

    name = "STSP"

    def unserved(self, problem, fitness: Fitness) -> int:
        return problem.count - fitness.customers
