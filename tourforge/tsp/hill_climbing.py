from typing import Tuple

import numpy as np
from numba import njit

from .. import config
from ..fitness import Fitness
from ..solvers import SolverBase
from ..tours import Tour


@njit(cache=True)
def _greedy_route_numba(weights: np.ndarray, first: int, fixed_last: int) -> np.ndarray:
    """Nearest neighbour order starting at `first`, ending at `fixed_last` when >= 0."""
    n = weights.shape[0]
    route = np.empty(n, dtype=np.int64)
    unvisited = np.ones(n, dtype=np.bool_)
    route[0] = first
    unvisited[first] = False
    size = 1
    if fixed_last >= 0 and fixed_last != first:
        unvisited[fixed_last] = False
        route[n - 1] = fixed_last
        size += 1

    current = first
    for position in range(1, 1 + n - size):
        best_node = -1
        best_weight = np.inf
        for v in range(n):
            if unvisited[v] and (best_node < 0 or weights[current, v] < best_weight):
                best_weight = weights[current, v]
                best_node = v
        if best_node < 0:
            break
        route[position] = best_node
        unvisited[best_node] = False
        current = best_node
    return route


@njit(cache=True)
def _segment_weight(route: np.ndarray, weights: np.ndarray, i: int, e: int, reverse: bool) -> float:
    total = 0.0
    for k in range(i, e):
        if reverse:
            total += weights[route[k + 1], route[k]]
        else:
            total += weights[route[k], route[k + 1]]
    return total


@njit(cache=True)
def _or_opt_numba(route: np.ndarray, weights: np.ndarray, closed: bool, fixed_last: bool,
                  max_segment: int, max_iterations: int) -> np.ndarray:
    """
    Best-improvement segment moves: a segment of 1..max_segment visits is cut
    out and reinserted elsewhere, in either orientation. The first visit (and
    the fixed last) never moves.
    """
    n = len(route)
    if n <= 2:
        return route
    last_free = n - 2 if fixed_last else n - 1

    for _ in range(max_iterations):
        best_delta = -1e-9
        best_i = -1
        best_e = -1
        best_j = -1
        best_reverse = False

        for i in range(1, last_free + 1):
            for length in range(1, max_segment + 1):
                e = i + length - 1
                if e > last_free:
                    break
                prev = route[i - 1]
                s = route[i]
                t = route[e]
                if e + 1 < n:
                    nxt = route[e + 1]
                elif closed:
                    nxt = route[0]
                else:
                    nxt = -1

                if nxt >= 0:
                    removal = weights[prev, nxt] - weights[prev, s] - weights[t, nxt]
                else:
                    removal = -weights[prev, s]
                forward = _segment_weight(route, weights, i, e, False)
                backward = _segment_weight(route, weights, i, e, True)

                for j in range(n):
                    if i - 1 <= j <= e:
                        continue
                    a = route[j]
                    if j + 1 < n:
                        b = route[j + 1]
                    elif closed:
                        b = route[0]
                    elif fixed_last:
                        continue
                    else:
                        b = -1

                    for reverse in (False, True):
                        if reverse and length == 1:
                            continue
                        head = t if reverse else s
                        tail = s if reverse else t
                        inner = backward - forward if reverse else 0.0
                        if b >= 0:
                            insertion = weights[a, head] + weights[tail, b] - weights[a, b]
                        else:
                            insertion = weights[a, head]
                        delta = removal + insertion + inner
                        if delta < best_delta:
                            best_delta = delta
                            best_i = i
                            best_e = e
                            best_j = j
                            best_reverse = reverse

        if best_i < 0:
            break

        segment = route[best_i:best_e + 1].copy()
        if best_reverse:
            segment = segment[::-1].copy()
        rest = np.concatenate((route[:best_i], route[best_e + 1:]))
        if best_j < best_i:
            position = best_j + 1
        else:
            position = best_j + 1 - len(segment)
        route = np.concatenate((rest[:position], segment, rest[position:]))
    return route


class HillClimbing3OptSolver(SolverBase):
    """
    Small-instance TSP solver: a greedy start improved by segment moves
    (the sequential 3-opt variant) until no move improves or the iteration
    bound is reached. Deterministic for a given problem.
    """

    name = "HC3OPT"

    def __init__(self, max_iterations: int = config.HILL_CLIMBING_MAX_ITERATIONS,
                 max_segment: int = config.HILL_CLIMBING_MAX_SEGMENT):
        self._max_iterations = max_iterations
        self._max_segment = max_segment

    def solve(self, problem, objective) -> Tuple[Tour, Fitness]:
        visits = np.asarray(problem.visits, dtype=np.int64)
        local = {int(v): idx for idx, v in enumerate(visits)}
        sub = np.ascontiguousarray(problem.weights[np.ix_(visits, visits)])

        first = local[problem.first]
        fixed_last = problem.last is not None and problem.last != problem.first
        last = local[problem.last] if fixed_last else -1

        route = _greedy_route_numba(sub, first, last)
        route = _or_opt_numba(route, sub, problem.is_closed, fixed_last,
                              self._max_segment, self._max_iterations)
        tour = Tour(visits[route].tolist(), problem.last)
        return tour, objective.calculate(problem, tour)
