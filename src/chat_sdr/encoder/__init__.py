"""Encoder brick: symbols to sparse binary vectors."""
from __future__ import annotations

from . import scalar, utils, word_row
from .scalar import ScalarEncoder, ScalarEncoderParams
from .word_row import WordRowEncoder, WordRowEncoderParams

__all__ = [
    "scalar",
    "utils",
    "word_row",
    "ScalarEncoder",
    "ScalarEncoderParams",
    "WordRowEncoder",
    "WordRowEncoderParams",
]
