"""
Overlap predicates for tour construction.

An overlap predicate is called as `overlaps(problem, solution, tour_idx,
visits)` with an array of candidate visits and returns a boolean mask:
True forbids inserting that visit into tour `tour_idx`.
"""
import numpy as np


def never_overlaps(problem, solution, tour_idx: int, visits: np.ndarray) -> np.ndarray:
    return np.zeros(len(visits), dtype=bool)


def bounding_box_overlaps(problem, solution, tour_idx: int, visits: np.ndarray) -> np.ndarray:
    """Forbids visits located inside the bounding box of another tour."""
    locations = problem.location_array
    mask = np.zeros(len(visits), dtype=bool)
    if locations is None or len(visits) == 0:
        return mask

    candidates = locations[visits]
    for idx in range(len(solution.tours)):
        if idx == tour_idx:
            continue
        members = solution.tour_visits(idx)
        if len(members) < 2:
            continue
        box = locations[members]
        low = box.min(axis=0)
        high = box.max(axis=0)
        mask |= np.all((candidates >= low) & (candidates <= high), axis=1)
    return mask
