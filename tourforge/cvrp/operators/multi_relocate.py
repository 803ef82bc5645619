from ... import config
from .relocate import RelocateOperator


class MultiRelocateOperator(RelocateOperator):
    """Relocates segments of `min_length` to `max_length` consecutive visits between two tours."""

    supports_same_tour = False

    def __init__(self, min_length: int = 2, max_length: int = 5, reverse: bool = True,
                 best_improvement: bool = False, epsilon: float = config.EPSILON):
        super().__init__(best_improvement, epsilon)
        if min_length < 1 or max_length < min_length:
            raise ValueError(f"Invalid segment lengths {min_length}..{max_length}.")
        self._min_length = min_length
        self._max_length = max_length
        self._reverse = reverse
        self.name = f"MULTI_RELOC_{min_length}_{max_length}"
