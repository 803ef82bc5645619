import logging
from typing import Dict, List

from .. import config

logger = logging.getLogger(__name__)


class SeededTourPool:
    """
    For every visit, a small cluster of it and its nearest neighbours that
    fits in one vehicle. Used to start new tours from a seed.
    """

    def __init__(self, problem, tour_size: int = config.SEEDED_TOUR_SIZE):
        self.tour_size = tour_size
        self._clusters: Dict[int, List[int]] = {}

        capacity = problem.capacity
        nearest = problem.nearest_neighbours
        for seed in problem.visits:
            load = capacity.empty()
            if not capacity.fits_visit(load, seed):
                self._clusters[seed] = []
                continue
            load = load + capacity.cost(seed)
            cluster = [seed]
            for neighbour in nearest.get(seed):
                if len(cluster) >= tour_size:
                    break
                neighbour = int(neighbour)
                if capacity.fits_visit(load, neighbour):
                    load = load + capacity.cost(neighbour)
                    cluster.append(neighbour)
            self._clusters[seed] = cluster
        logger.debug("Seeded tour pool built for %d visits (tour size %d)", len(self._clusters), tour_size)

    def get(self, seed: int) -> List[int]:
        """The cluster for `seed`, starting with the seed; empty when the seed alone does not fit."""
        return self._clusters.get(seed, [])

    def __len__(self) -> int:
        return len(self._clusters)
