from typing import Iterable, Iterator, List, Optional, Tuple

NOT_SET = -1


class Tour:
    """
    A sequence of unique visits stored as successor/predecessor arrays.

    The tour starts at `first`. With `last=None` it is open, with
    `last == first` it is closed (the end links back to first) and with any
    other value the tour is open with a fixed end visit.

    Inserting, removing and neighbour lookups are all O(1).
    """

    def __init__(self, visits: Iterable[int], last: Optional[int] = None):
        visits = [int(v) for v in visits]
        if not visits:
            raise ValueError("A tour needs at least one visit.")
        if last is not None and last != visits[0] and last not in visits:
            visits.append(int(last))
        if last is not None and last != visits[0] and visits[-1] != last:
            raise ValueError(f"Fixed last visit {last} has to be the final visit of the sequence.")

        self._first = visits[0]
        self._last = None if last is None else int(last)
        size = max(visits) + 1
        self._next = [NOT_SET] * size
        self._previous = [NOT_SET] * size
        self._count = 1
        self._end = self._first
        if self.is_closed:
            self._next[self._first] = self._first
            self._previous[self._first] = self._first

        previous = self._first
        for visit in visits[1:]:
            self.insert_after(previous, visit)
            previous = visit

    @property
    def first(self) -> int:
        return self._first

    @property
    def last(self) -> Optional[int]:
        """The fixed last visit, equal to `first` for closed tours, None when open."""
        return self._last

    @property
    def end(self) -> int:
        """The visit enumerated last."""
        return self._end

    @property
    def is_closed(self) -> bool:
        return self._last == self._first

    @property
    def is_fixed_last(self) -> bool:
        return self._last is not None and self._last != self._first

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def contains(self, visit: int) -> bool:
        if visit < 0 or visit >= len(self._next):
            return False
        if visit == self._first:
            return True
        return self._previous[visit] != NOT_SET

    def __contains__(self, visit) -> bool:
        return self.contains(visit)

    def successor(self, visit: int) -> Optional[int]:
        """Returns the visit after the given one, None at the open end."""
        if not self.contains(visit):
            raise ValueError(f"Visit {visit} is not part of the tour.")
        nxt = self._next[visit]
        return None if nxt == NOT_SET else nxt

    def predecessor(self, visit: int) -> Optional[int]:
        """Returns the visit before the given one, None for the first of an open tour."""
        if not self.contains(visit):
            raise ValueError(f"Visit {visit} is not part of the tour.")
        prv = self._previous[visit]
        return None if prv == NOT_SET else prv

    def _ensure_size(self, visit: int):
        if visit >= len(self._next):
            extra = visit + 1 - len(self._next)
            self._next.extend([NOT_SET] * extra)
            self._previous.extend([NOT_SET] * extra)

    def insert_after(self, pred: int, visit: int):
        """Inserts `visit` directly after `pred`."""
        if visit < 0:
            raise ValueError(f"Cannot insert negative visit {visit}.")
        if not self.contains(pred):
            raise ValueError(f"Cannot insert after {pred}: it is not part of the tour.")
        if self.contains(visit):
            raise ValueError(f"Cannot insert {visit}: it is already part of the tour.")
        if self.is_fixed_last and pred == self._last:
            raise ValueError(f"Cannot insert after the fixed last visit {pred}.")
        self._ensure_size(visit)

        nxt = self._next[pred]
        self._next[pred] = visit
        self._previous[visit] = pred
        self._next[visit] = nxt
        if nxt != NOT_SET:
            self._previous[nxt] = visit
        if pred == self._end:
            self._end = visit
        self._count += 1

    def remove(self, visit: int):
        """Removes `visit`, the first and the fixed last visit cannot be removed."""
        if visit == self._first:
            raise ValueError(f"Cannot remove the first visit {visit}.")
        if self.is_fixed_last and visit == self._last:
            raise ValueError(f"Cannot remove the fixed last visit {visit}.")
        if not self.contains(visit):
            raise ValueError(f"Cannot remove {visit}: it is not part of the tour.")

        prv = self._previous[visit]
        nxt = self._next[visit]
        self._next[prv] = nxt
        if nxt != NOT_SET:
            self._previous[nxt] = prv
        if visit == self._end:
            self._end = prv
        self._next[visit] = NOT_SET
        self._previous[visit] = NOT_SET
        self._count -= 1

    def replace(self, old: int, new: int):
        """Puts `new` in the position of `old`."""
        if old == self._first or (self.is_fixed_last and old == self._last):
            raise ValueError(f"Cannot replace the fixed visit {old}.")
        if not self.contains(old):
            raise ValueError(f"Cannot replace {old}: it is not part of the tour.")
        if self.contains(new):
            raise ValueError(f"Cannot insert {new}: it is already part of the tour.")
        prv = self._previous[old]
        self.remove(old)
        self.insert_after(prv, new)

    def __iter__(self) -> Iterator[int]:
        visit = self._first
        for _ in range(self._count):
            yield visit
            visit = self._next[visit]

    def pairs(self) -> Iterator[Tuple[int, int]]:
        """Consecutive edges, including (end, first) for closed tours."""
        previous = None
        for visit in self:
            if previous is not None:
                yield previous, visit
            previous = visit
        if self.is_closed and self._count > 1:
            yield self._end, self._first

    def triples(self) -> Iterator[Tuple[int, int, int]]:
        """(predecessor, visit, successor) for every visit with both neighbours."""
        for visit in self:
            prv = self._previous[visit]
            nxt = self._next[visit]
            if prv != NOT_SET and nxt != NOT_SET and prv != visit:
                yield prv, visit, nxt

    def to_list(self) -> List[int]:
        return list(self)

    def clone(self) -> "Tour":
        copy = Tour.__new__(Tour)
        copy._first = self._first
        copy._last = self._last
        copy._next = self._next[:]
        copy._previous = self._previous[:]
        copy._count = self._count
        copy._end = self._end
        return copy

    __copy__ = clone

    def copy_from(self, other: "Tour"):
        """Overwrites this tour with the content of another tour with the same endpoints."""
        if other.first != self._first or other.last != self._last:
            raise ValueError("Can only copy from a tour with the same first and last visits.")
        self._next = other._next[:]
        self._previous = other._previous[:]
        self._count = other._count
        self._end = other._end

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tour):
            return NotImplemented
        return self._last == other._last and self.to_list() == other.to_list()

    def __repr__(self):
        visits = "->".join(str(v) for v in self)
        if self.is_closed:
            visits += f"->{self._first}"
        return f"Tour({visits})"
