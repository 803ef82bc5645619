from ..fitness import Fitness
from ..objective import ObjectiveBase
from ..tsp.objective import tour_weight
from .solution import CVRPSolution


class CVRPObjective(ObjectiveBase):
    """
    Served visits first, total travel weight of all tours second. A solution
    serving more visits always wins, whatever its travel weight.
    """

    name = "CVRP"

    def calculate(self, problem, solution: CVRPSolution) -> Fitness:
        weight = 0.0
        for tour in solution.tours:
            weight += tour_weight(problem.weights, tour)
        return Fitness(solution.served_count(), weight)

    def unassigned(self, problem, fitness: Fitness) -> int:
        return problem.count - fitness.customers
