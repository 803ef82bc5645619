"""
Input from a matrix calculation: a weight matrix over all requested
locations plus the locations that could not be resolved.

Solvers only see the resolved part, `WeightMatrix.resolved()` extracts it
and `to_locations()` maps a solved tour back to the requested locations.
"""
import enum
import logging
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class LocationErrorCode(enum.Enum):
    NOT_RESOLVED = "not_resolved"
    NOT_ROUTABLE = "not_routable"


class LocationError(NamedTuple):
    code: LocationErrorCode
    message: str = ""


class MatrixError(ValueError):
    """The weight matrix cannot be used for solving."""


class WeightMatrix:

    def __init__(self, weights, errors: Optional[Mapping[int, LocationError]] = None):
        self.weights = np.asarray(weights, dtype=np.float64)
        if self.weights.ndim != 2 or self.weights.shape[0] != self.weights.shape[1]:
            raise MatrixError(f"Weights must be a square matrix, got shape {self.weights.shape}.")
        n = self.weights.shape[0]
        self.errors: Dict[int, LocationError] = dict(errors or {})
        for location in self.errors:
            if not 0 <= location < n:
                raise MatrixError(f"Error reported for location {location} outside of the matrix (size {n}).")

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    def resolved(self) -> Tuple[np.ndarray, List[int]]:
        """
        Returns the weights between resolved locations only and, for every
        row of that matrix, the index of the requested location.
        """
        index_map = [location for location in range(self.size) if location not in self.errors]
        if not index_map:
            raise MatrixError("None of the locations could be resolved.")
        sub = self.weights[np.ix_(index_map, index_map)]
        if not np.all(np.isfinite(sub)):
            raise MatrixError("The weights between resolved locations contain non-finite values.")
        if self.has_errors:
            logger.info("%d of %d locations could not be resolved and are left out",
                        len(self.errors), self.size)
        return np.ascontiguousarray(sub), index_map

    def to_locations(self, tour) -> List[int]:
        """Maps the visits of a tour over `resolved()` weights back to requested locations."""
        _, index_map = self.resolved()
        return [index_map[visit] for visit in tour]
