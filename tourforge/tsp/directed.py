"""
Directed visits: a visit id combined with the direction in which the visit is
arrived at and departed from.

A directed id packs a base visit id and a turn (0..3) into one integer::

    directed_id = id * 4 + turn

The turn selects the arrival and departure offsets into the directed weight
matrix, which holds two rows/columns per base visit::

    turn  arrival offset  departure offset
    0     0               0
    1     0               1
    2     1               0
    3     1               1

    arrival = id * 2 + arrival offset
    departure = id * 2 + departure offset

Decoding always yields (arrival, departure, id, turn) in that order.
"""
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from ..fitness import Fitness
from ..objective import ObjectiveBase
from ..tours import Tour
from .problem import as_weights

TURNS = 4


class DirectedVisit(NamedTuple):
    arrival: int
    departure: int
    id: int
    turn: int


def build_directed_id(visit: int, turn: int) -> int:
    if not 0 <= turn < TURNS:
        raise ValueError(f"Turn has to be in [0, {TURNS}), got {turn}.")
    return visit * TURNS + turn


def extract_turn(directed_id: int) -> int:
    return directed_id % TURNS


def extract_id(directed_id: int) -> int:
    return directed_id // TURNS


def extract_offsets(turn: int):
    """(arrival offset, departure offset) for the given turn."""
    return turn // 2, turn % 2


def extract_all(directed_id: int) -> DirectedVisit:
    turn = extract_turn(directed_id)
    visit = extract_id(directed_id)
    arrival_offset, departure_offset = extract_offsets(turn)
    return DirectedVisit(visit * 2 + arrival_offset, visit * 2 + departure_offset, visit, turn)


class DirectedTSProblem:
    """
    A TSP over directed visits.

    `weights` is a (2n, 2n) matrix between departure and arrival half-ids,
    `turn_penalties` holds the extra weight for each of the four turns.
    `first` and `last` are base visit ids.
    """

    def __init__(self, weights, turn_penalties: Sequence[float], first: int = 0, last: Optional[int] = 0):
        self.weights = as_weights(weights)
        if self.weights.shape[0] % 2 != 0:
            raise ValueError("A directed weight matrix needs two rows per visit.")
        self.turn_penalties = np.asarray(turn_penalties, dtype=np.float64)
        if self.turn_penalties.shape != (TURNS,):
            raise ValueError(f"Expected {TURNS} turn penalties, got {self.turn_penalties.shape}.")
        self.first = int(first)
        self.last = None if last is None else int(last)

    @property
    def count(self) -> int:
        return self.weights.shape[0] // 2

    @property
    def visits(self) -> List[int]:
        return list(range(self.count))

    @property
    def is_closed(self) -> bool:
        return self.last == self.first


class DirectedTSPObjective(ObjectiveBase):
    """
    Travel weight between consecutive directed visits plus the turn penalty
    of every visit.

    The weight of an edge depends on the turns chosen at both ends, so
    operators cannot derive deltas from the raw matrix and always recalculate.
    """

    name = "DirectedTSP"

    @property
    def is_non_continuous(self) -> bool:
        return True

    def calculate(self, problem: DirectedTSProblem, solution: Tour) -> Fitness:
        weights = problem.weights
        weight = 0.0
        previous_departure = None
        first_arrival = None
        for directed_id in solution:
            arrival, departure, _, turn = extract_all(directed_id)
            if previous_departure is not None:
                weight += weights[previous_departure, arrival]
            else:
                first_arrival = arrival
            weight += problem.turn_penalties[turn]
            previous_departure = departure

        if solution.is_closed and previous_departure is not None:
            weight += weights[previous_departure, first_arrival]
        return Fitness(solution.count, float(weight))


def best_turns(problem: DirectedTSProblem, order: Sequence[int]) -> Tour:
    """
    Chooses the turn of every visit in the given base visit order so that the
    directed objective is minimal, by dynamic programming over the 4 turns.
    """
    order = list(order)
    if not order:
        raise ValueError("Cannot choose turns for an empty order.")
    weights = problem.weights
    penalties = problem.turn_penalties
    offsets = [extract_offsets(turn) for turn in range(TURNS)]

    best_total = np.inf
    best_turns_found = None
    # a closed tour has to be evaluated once per turn of the first visit
    first_turns = range(TURNS) if problem.is_closed else [None]
    for fixed_first in first_turns:
        cost = np.full(TURNS, np.inf)
        for turn in range(TURNS):
            if fixed_first is None or turn == fixed_first:
                cost[turn] = penalties[turn]
        back = []
        for previous_visit, visit in zip(order, order[1:]):
            new_cost = np.full(TURNS, np.inf)
            pointers = np.zeros(TURNS, dtype=np.int64)
            for turn in range(TURNS):
                arrival = visit * 2 + offsets[turn][0]
                for previous_turn in range(TURNS):
                    departure = previous_visit * 2 + offsets[previous_turn][1]
                    candidate = cost[previous_turn] + weights[departure, arrival] + penalties[turn]
                    if candidate < new_cost[turn]:
                        new_cost[turn] = candidate
                        pointers[turn] = previous_turn
            back.append(pointers)
            cost = new_cost

        if fixed_first is not None and len(order) > 1:
            first_arrival = order[0] * 2 + offsets[fixed_first][0]
            for turn in range(TURNS):
                cost[turn] += weights[order[-1] * 2 + offsets[turn][1], first_arrival]

        end_turn = int(np.argmin(cost))
        if cost[end_turn] < best_total:
            turns = [end_turn]
            for pointers in reversed(back):
                turns.append(int(pointers[turns[-1]]))
            turns.reverse()
            best_total = cost[end_turn]
            best_turns_found = turns

    directed = [build_directed_id(v, t) for v, t in zip(order, best_turns_found)]
    last = None
    if problem.last is not None:
        last = directed[0] if problem.is_closed else directed[-1]
    return Tour(directed, last)
