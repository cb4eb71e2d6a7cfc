"""Identifier generation scoped to a single store."""

from typing import Callable, Iterable, Optional


class IdGenerator:
    """
    Monotonic counter producing ``<prefix>_<n>`` identifiers.

    Each store owns its own generator, so separate graphs (and separate
    tests) never share a sequence. Node and edge ids draw from the same
    counter, so no two generated ids are ever equal.
    """

    def __init__(self, start: int = 0):
        self._counter = start

    @property
    def last(self) -> int:
        return self._counter

    def __call__(self, prefix: str, taken: Optional[Iterable[str]] = None) -> str:
        taken_ids = set(taken) if taken is not None else ()
        while True:
            self._counter += 1
            candidate = f"{prefix}_{self._counter}"
            if candidate not in taken_ids:
                return candidate


IdFactory = Callable[..., str]
