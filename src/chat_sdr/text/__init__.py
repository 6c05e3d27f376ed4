"""Corpus iteration primitives."""
from __future__ import annotations

from .chunkers import TextChunker, WordChunker, read_corpus, tokenize_words
from .cursor import MEMORY_PATH, SequenceCursor

__all__ = [
    "MEMORY_PATH",
    "SequenceCursor",
    "TextChunker",
    "WordChunker",
    "read_corpus",
    "tokenize_words",
]
