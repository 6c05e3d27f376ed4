"""Shared SDR helpers for the encoder brick.

SDRs are kept as flat ``int8`` arrays of 0/1 values. The helpers below are
the handful of snippets the encoders, the runtime and the tests all need.
"""
from __future__ import annotations

import numpy as np


__all__ = [
    "as_vec",
    "empty_sdr",
    "sdr_overlap",
    "active_indices",
    "population",
    "sdr_to_string",
]


def as_vec(a: np.ndarray) -> np.ndarray:
    arr = np.asarray(a)
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D vector, got shape={arr.shape}")
    return arr


def empty_sdr(n: int) -> np.ndarray:
    """Return an all-zero SDR of length *n* in int8."""
    return np.zeros(int(n), dtype=np.int8)


def sdr_overlap(a: np.ndarray, b: np.ndarray) -> int:
    """Number of bits active in both *a* and *b*."""
    av = as_vec(a)
    bv = as_vec(b)
    if av.shape != bv.shape:
        raise ValueError(f"shape mismatch: {av.shape} vs {bv.shape}")
    return int(np.count_nonzero((av != 0) & (bv != 0)))


def active_indices(sdr: np.ndarray) -> np.ndarray:
    return np.flatnonzero(as_vec(sdr)).astype(np.int64, copy=False)


def population(sdr: np.ndarray) -> int:
    return int(np.count_nonzero(as_vec(sdr)))


def sdr_to_string(sdr: np.ndarray, on: str = "#", off: str = ".") -> str:
    return "".join(on if bit else off for bit in as_vec(sdr).tolist())
