"""
Seed heuristics: pick the visit a new tour grows from.

A seed function takes (problem, visits, rng) where `visits` are the visits
still to be placed, and returns one of them.
"""
from typing import Sequence

import numpy as np

from . import config


def random_seed(problem, visits: Sequence[int], rng) -> int:
    rng = np.random.default_rng(rng)
    return int(visits[int(rng.integers(len(visits)))])


def seed_with_close_neighbours(problem, visits: Sequence[int], rng, n: int = config.SCI_SEED_NEIGHBOURS,
                               sample_ratio: float = config.SCI_SEED_SAMPLE_RATIO,
                               neighbour_ratio: float = config.SCI_SEED_NEIGHBOUR_RATIO) -> int:
    """
    Samples candidate seeds and keeps the one whose `n` closest visits are
    both still unplaced and closest on average (in both directions).

    Candidates with fewer than `neighbour_ratio * n` unplaced visits among
    their closest are skipped, this favours seeds in dense regions that are
    not yet served.
    """
    rng = np.random.default_rng(rng)
    visits = np.asarray(visits, dtype=np.int64)
    if len(visits) <= 2:
        return int(visits[int(rng.integers(len(visits)))])

    weights = problem.weights
    remaining = np.zeros(problem.max_visit, dtype=bool)
    remaining[visits] = True
    all_visits = np.asarray(problem.visits, dtype=np.int64)

    size = max(1, int(np.ceil(len(visits) * sample_ratio)))
    candidates = rng.choice(visits, size=size, replace=False)
    k = min(n, len(all_visits) - 1)
    required = max(1, int(np.ceil(min(n, len(visits) - 1) * neighbour_ratio)))

    best = int(candidates[0])
    best_score = np.inf
    for candidate in candidates:
        row = weights[candidate, all_visits] + weights[all_visits, candidate]
        row[all_visits == candidate] = np.inf
        closest = all_visits[np.argpartition(row, k - 1)[:k]]
        free = closest[remaining[closest]]
        if len(free) < required:
            continue
        score = (weights[candidate, free] + weights[free, candidate]).mean()
        if score < best_score:
            best = int(candidate)
            best_score = score
    return best
