import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class Lazy(Generic[T]):
    """A value built on first access, at most once even across threads."""

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._value = _UNSET
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T:
        value = self._value
        if value is _UNSET:
            with self._lock:
                if self._value is _UNSET:
                    self._value = self._factory()
                    self._factory = None
                value = self._value
        return value
