from ... import config
from .exchange import ExchangeOperator


class MultiExchangeOperator(ExchangeOperator):
    """
    Swaps segments of `min_length` to `max_length` consecutive visits
    between two tours, each segment optionally reversed when that is cheaper
    in its new tour.
    """

    def __init__(self, min_length: int = 1, max_length: int = 5, best_improvement: bool = False,
                 reverse: bool = True, epsilon: float = config.EPSILON):
        super().__init__(best_improvement, epsilon)
        if min_length < 1 or max_length < min_length:
            raise ValueError(f"Invalid segment lengths {min_length}..{max_length}.")
        self._min_length = min_length
        self._max_length = max_length
        self._reverse = reverse
        suffix = "_BI" if best_improvement else ""
        self.name = f"MULTI_EX_{min_length}_{max_length}{suffix}"
