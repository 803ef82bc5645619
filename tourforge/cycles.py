"""
Successor-array cycle structures used by the edge assembly crossover.

Both structures are plain integer arrays indexed by visit. The cycle
bookkeeping is recalculated lazily: adding edges only marks it stale, so a
batch of edge replacements costs one O(n) pass when the cycles are read.
"""
from typing import Dict, List, Optional, Tuple

from .tours import NOT_SET


class AsymmetricCycles:
    """A set of directed cycles, each visit has at most one successor."""

    def __init__(self, length: int, next_array: Optional[List[int]] = None):
        self._next = next_array if next_array is not None else [NOT_SET] * length
        self._cycles: Optional[Dict[int, int]] = None
        self._cycle_of: Optional[List[int]] = None

    @property
    def length(self) -> int:
        return len(self._next)

    @property
    def next_array(self) -> List[int]:
        """The live successor array, edits through `add_edge` are reflected here."""
        return self._next

    def __getitem__(self, visit: int) -> int:
        return self._next[visit]

    def __len__(self) -> int:
        return len(self._next)

    def add_edge(self, frm: int, to: int):
        """Sets the successor of `frm` to `to`, replacing any existing edge."""
        self._next[frm] = to
        self._cycles = None
        self._cycle_of = None

    @property
    def cycles(self) -> Dict[int, int]:
        """Maps a cycle id (the lowest visit in the cycle) to its member count."""
        if self._cycles is None:
            self._calculate()
        return self._cycles

    def cycle_of(self, visit: int) -> int:
        """The id of the cycle the visit belongs to, NOT_SET when it is on no cycle."""
        if self._cycle_of is None:
            self._calculate()
        return self._cycle_of[visit]

    def _calculate(self):
        n = len(self._next)
        cycles = {}
        cycle_of = [NOT_SET] * n
        state = [0] * n  # 0: unseen, 1: on current walk, 2: done
        for start in range(n):
            if state[start] != 0 or self._next[start] == NOT_SET:
                continue
            walk = []
            current = start
            while current != NOT_SET and state[current] == 0:
                state[current] = 1
                walk.append(current)
                current = self._next[current]
            if current != NOT_SET and state[current] == 1:
                # closed a new cycle at 'current'
                members = walk[walk.index(current):]
                cycle_id = min(members)
                for member in members:
                    cycle_of[member] = cycle_id
                cycles[cycle_id] = len(members)
            for visit in walk:
                state[visit] = 2
        self._cycles = cycles
        self._cycle_of = cycle_of

    def clone(self) -> "AsymmetricCycles":
        copy = AsymmetricCycles(len(self._next), self._next[:])
        if self._cycles is not None:
            copy._cycles = dict(self._cycles)
            copy._cycle_of = self._cycle_of[:]
        return copy

    def __repr__(self):
        return f"AsymmetricCycles(length={len(self._next)}, cycles={self.cycles})"


class AsymmetricAlternatingCycles:
    """
    Alternating cycles between two asymmetric tours.

    Each entry `visit -> (a, b)` means: follow the first tour from `visit` to
    `a`, then walk the second tour backwards from `a` to its predecessor `b`.
    """

    def __init__(self, length: int):
        self._next_a = [NOT_SET] * length
        self._next_b = [NOT_SET] * length
        self._cycles: Optional[Dict[int, int]] = None

    @property
    def length(self) -> int:
        return len(self._next_a)

    def add_edge(self, frm: int, a: int, b: int):
        self._next_a[frm] = a
        self._next_b[frm] = b
        self._cycles = None

    def next(self, visit: int) -> Tuple[int, int]:
        """Returns (a, b) for the given visit, (NOT_SET, NOT_SET) when absent."""
        return self._next_a[visit], self._next_b[visit]

    @property
    def cycles(self) -> Dict[int, int]:
        """Maps a cycle id (the lowest visit in the cycle) to its member count."""
        if self._cycles is None:
            cycles = {}
            seen = [False] * len(self._next_b)
            for start in range(len(self._next_b)):
                if seen[start] or self._next_b[start] == NOT_SET:
                    continue
                walk = []
                current = start
                while current != NOT_SET and not seen[current]:
                    seen[current] = True
                    walk.append(current)
                    current = self._next_b[current]
                if current == start:
                    cycles[start] = len(walk)
            self._cycles = cycles
        return self._cycles
