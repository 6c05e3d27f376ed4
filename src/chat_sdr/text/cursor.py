"""Wrap-around cursor with epoch counting over an immutable symbol sequence."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

from ..errors import EmptyInput

__all__ = ["SequenceCursor", "MEMORY_PATH"]

T = TypeVar("T")

MEMORY_PATH = "<memory>"


class SequenceCursor(Generic[T]):
    """Iterate a symbol sequence forever, one symbol per :meth:`next` call.

    ``position`` always lies in ``[0, len(symbols))``. Stepping off the end
    wraps to 0 and bumps ``epoch``; ``total_steps`` counts every call.
    The sequence itself is never modified after construction.
    """

    def __init__(self, symbols: Sequence[T], path: str = MEMORY_PATH):
        if len(symbols) == 0:
            raise EmptyInput(f"{type(self).__name__}: no symbols in {path}")
        self._symbols = symbols
        self._path = str(path)
        self._pos = 0
        self._epoch = 0
        self._total_steps = 0

    def next(self) -> T:
        value = self._symbols[self._pos]
        self._pos += 1
        self._total_steps += 1
        if self._pos >= len(self._symbols):
            self._pos = 0
            self._epoch += 1
        return value

    def peek(self) -> T:
        return self._symbols[self._pos]

    def symbol_at(self, index: int) -> T:
        """Symbol at absolute *index*, wrapped into the sequence."""
        return self._symbols[index % len(self._symbols)]

    def reset(self) -> None:
        self._pos = 0
        self._epoch = 0
        self._total_steps = 0

    def size(self) -> int:
        return len(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    @property
    def position(self) -> int:
        return self._pos

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def total_steps(self) -> int:
        return self._total_steps

    @property
    def path(self) -> str:
        return self._path

    @property
    def symbols(self) -> Sequence[T]:
        return self._symbols

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self._path!r}, size={len(self._symbols)}, "
            f"position={self._pos}, epoch={self._epoch})"
        )
