"""Word-row encoder: one letter block per row, one row per character position."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import InvalidConfiguration
from .utils import empty_sdr

__all__ = ["WordRowEncoderParams", "WordRowEncoder", "DEFAULT_ALPHABET"]

DEFAULT_ALPHABET = "abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class WordRowEncoderParams:
    rows: int = 5
    cols: int = 108
    letter_bits: int = 4
    alphabet: str = DEFAULT_ALPHABET


class WordRowEncoder:
    """Encode a word as ``rows`` stacked one-hot letter blocks.

    Row ``r`` holds the ``r``-th character of the word. Each alphabet symbol
    owns a ``letter_bits`` wide block of columns, and one extra block at the
    end catches characters outside the alphabet. Rows past the end of the
    word stay zero; characters past ``rows`` are dropped.
    """

    def __init__(self, params: WordRowEncoderParams | None = None):
        self.params = params if params is not None else WordRowEncoderParams()
        self._validate()
        self._index = {ch: i for i, ch in reversed(list(enumerate(self.params.alphabet)))}

    def _validate(self) -> None:
        p = self.params
        if p.rows <= 0:
            raise InvalidConfiguration("WordRowEncoder: rows must be > 0")
        if p.cols <= 0:
            raise InvalidConfiguration("WordRowEncoder: cols must be > 0")
        if p.letter_bits <= 0:
            raise InvalidConfiguration("WordRowEncoder: letter_bits must be > 0")
        if not p.alphabet:
            raise InvalidConfiguration("WordRowEncoder: alphabet must not be empty")
        required = p.letter_bits * (len(p.alphabet) + 1)
        if p.cols != required:
            raise InvalidConfiguration(
                f"WordRowEncoder: cols must equal letter_bits * (alphabet_size + 1) = {required}, got {p.cols}"
            )

    @property
    def total_bits(self) -> int:
        return self.params.rows * self.params.cols

    @property
    def unknown_bucket(self) -> int:
        return len(self.params.alphabet)

    def bucket_for_char(self, ch: str) -> int:
        # first occurrence wins if the alphabet repeats a symbol
        return self._index.get(ch.lower(), self.unknown_bucket)

    def encode(self, word: str) -> np.ndarray:
        p = self.params
        grid = empty_sdr(self.total_bits).reshape(p.rows, p.cols)
        for r, ch in enumerate(word[: p.rows]):
            start = self.bucket_for_char(ch) * p.letter_bits
            grid[r, start : start + p.letter_bits] = 1
        return grid.reshape(-1)

    def __repr__(self) -> str:
        p = self.params
        return (
            f"WordRowEncoder(rows={p.rows}, cols={p.cols}, letter_bits={p.letter_bits}, "
            f"alphabet_size={len(p.alphabet)})"
        )
