from .api import Result, solve
from .fitness import INFINITE, ZERO, Fitness
from .matrix import LocationError, LocationErrorCode, MatrixError, WeightMatrix
from .objective import ObjectiveBase
from .solvers import (CrossOverBase, GASolver, IterativeOperator, IterativeSolver, OperatorBase, OperatorSequence,
                      PerturberBase, SolverBase, VNSSolver)
from .tours import NOT_SET, Tour

__version__ = "0.1.0"
