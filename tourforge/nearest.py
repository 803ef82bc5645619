import numpy as np
from numba import njit

from . import config


@njit(cache=True)
def _nearest_neighbours_numba(weights: np.ndarray, eligible: np.ndarray, k: int) -> np.ndarray:
    """
    Ranks, for every row, the k eligible columns with the lowest weight.
    Missing slots (fewer than k eligible visits) are filled with -1.
    """
    n = weights.shape[0]
    result = np.full((n, k), -1, dtype=np.int64)
    if k == 0:
        return result
    for i in range(n):
        if not eligible[i]:
            continue
        order = np.argsort(weights[i], kind='mergesort')
        found = 0
        for idx in range(n):
            j = order[idx]
            if j == i or not eligible[j]:
                continue
            result[i, found] = j
            found += 1
            if found == k:
                break
    return result


class NearestNeighbourCache:
    """
    The k nearest visits, by outgoing travel weight, of every eligible visit.

    Built once from a weight matrix and read-only afterwards.
    """

    def __init__(self, weights: np.ndarray, visits=None, k: int = config.NN_COUNT):
        n = weights.shape[0]
        eligible = np.zeros(n, dtype=np.bool_)
        if visits is None:
            eligible[:] = True
        else:
            eligible[np.fromiter(visits, dtype=np.int64)] = True
        self.k = min(k, max(n - 1, 0))
        self._table = _nearest_neighbours_numba(weights, eligible, self.k)
        self._table.setflags(write=False)

    def get(self, visit: int, n: int = None) -> np.ndarray:
        """The (up to) n nearest neighbours of the visit, closest first."""
        row = self._table[visit]
        if n is not None:
            row = row[:n]
        return row[row >= 0]

    def __getitem__(self, visit: int) -> np.ndarray:
        return self.get(visit)

    def __len__(self) -> int:
        return self._table.shape[0]
