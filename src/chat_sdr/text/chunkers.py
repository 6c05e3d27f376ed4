"""Corpus readers: raw bytes (character mode) and lowercase words (word mode)."""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import List

from ..errors import NotFound
from .cursor import MEMORY_PATH, SequenceCursor

__all__ = ["TextChunker", "WordChunker", "tokenize_words", "read_corpus"]

log = logging.getLogger(__name__)

_WORD_RE = re.compile(r"[A-Za-z]+")
_WORD_RE_BYTES = re.compile(rb"[A-Za-z]+")


def read_corpus(path: str | os.PathLike[str], owner: str) -> bytes:
    """Read the whole file at *path*; :class:`NotFound` when it cannot be opened."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise NotFound(f"{owner}: cannot open file: {path} ({exc.strerror or exc})") from exc


def tokenize_words(text: str | bytes) -> List[str]:
    """Split *text* into maximal runs of ASCII letters, lowercased.

    Everything else is a separator and never produces an empty token::

        >>> tokenize_words("Hello, World!")
        ['hello', 'world']
    """
    if isinstance(text, bytes):
        return [m.decode("ascii").lower() for m in _WORD_RE_BYTES.findall(text)]
    return [m.lower() for m in _WORD_RE.findall(text)]


class TextChunker(SequenceCursor[int]):
    """Yield the corpus one byte at a time, as integer values 0..255.

    The file is loaded once so that multi-epoch replay never touches disk.
    """

    def __init__(self, data: bytes, path: str = MEMORY_PATH):
        super().__init__(bytes(data), path)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "TextChunker":
        chunker = cls(read_corpus(path, cls.__name__), str(path))
        log.info("Loaded %d characters from %s", chunker.size(), path)
        return chunker

    @classmethod
    def from_string(cls, text: str) -> "TextChunker":
        return cls(text.encode("utf-8"))

    def peek_at(self, offset: int) -> int:
        """Byte at ``position + offset``, wrapping around the text."""
        return self.symbol_at(self.position + int(offset))

    @property
    def text(self) -> bytes:
        return self.symbols


class WordChunker(SequenceCursor[str]):
    """Yield the corpus one normalized word at a time."""

    def __init__(self, words: List[str] | tuple[str, ...], path: str = MEMORY_PATH):
        super().__init__(tuple(words), path)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "WordChunker":
        chunker = cls(tokenize_words(read_corpus(path, cls.__name__)), str(path))
        log.info("Loaded %d words from %s", chunker.size(), path)
        return chunker

    @classmethod
    def from_string(cls, text: str) -> "WordChunker":
        return cls(tokenize_words(text))

    @property
    def words(self) -> tuple[str, ...]:
        return self.symbols
