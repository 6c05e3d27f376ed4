"""Scalar encoder: integer value -> sliding window of active bits."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..errors import InvalidConfiguration
from .utils import empty_sdr, sdr_overlap

__all__ = ["ScalarEncoderParams", "ScalarEncoder"]


@dataclass(frozen=True)
class ScalarEncoderParams:
    """Configuration of a :class:`ScalarEncoder`.

    Attributes:
        n: Total number of bits in the output SDR.
        w: Number of active bits per encoding.
        min_val: Smallest encodable value (inclusive).
        max_val: Largest encodable value (inclusive).
    """

    n: int = 400
    w: int = 21
    min_val: int = 0
    max_val: int = 127


class ScalarEncoder:
    """Encode an integer in ``[min_val, max_val]`` as ``w`` contiguous bits.

    The active window starts at one of ``n - w + 1`` offsets and slides right
    as the value grows, so nearby values share most of their active bits::

        n=20, w=5, range 0..15
        encode(0)  -> 11111 00000 00000 00000
        encode(1)  -> 01111 10000 00000 00000
        encode(15) -> 00000 00000 00000 11111

    Out-of-range values are clamped rather than rejected.
    """

    def __init__(self, params: ScalarEncoderParams | None = None):
        self.params = params if params is not None else ScalarEncoderParams()
        self._validate()
        self.num_buckets = self.params.n - self.params.w
        self._range = float(self.params.max_val - self.params.min_val)

    def _validate(self) -> None:
        p = self.params
        if p.n <= 0:
            raise InvalidConfiguration("ScalarEncoder: n must be > 0")
        if p.w <= 0:
            raise InvalidConfiguration("ScalarEncoder: w must be > 0")
        if p.w > p.n:
            raise InvalidConfiguration("ScalarEncoder: w must be <= n")
        if p.max_val < p.min_val:
            raise InvalidConfiguration("ScalarEncoder: max_val must be >= min_val")

    @property
    def total_bits(self) -> int:
        return self.params.n

    @property
    def active_bits(self) -> int:
        return self.params.w

    def clamp(self, value: int) -> int:
        return min(max(int(value), self.params.min_val), self.params.max_val)

    def bucket(self, value: int) -> int:
        """Start offset of the active window for *value*."""
        v = self.clamp(value)
        start = 0
        if self._range > 0:
            frac = (v - self.params.min_val) / self._range
            start = int(math.floor(frac * self.num_buckets + 0.5))
        return min(max(start, 0), self.num_buckets)

    def encode(self, value: int) -> np.ndarray:
        sdr = empty_sdr(self.params.n)
        start = self.bucket(value)
        sdr[start : start + self.params.w] = 1
        return sdr

    def overlap(self, val_a: int, val_b: int) -> int:
        return sdr_overlap(self.encode(val_a), self.encode(val_b))

    def __repr__(self) -> str:
        p = self.params
        return f"ScalarEncoder(n={p.n}, w={p.w}, range=[{p.min_val}, {p.max_val}])"
