"""Runtime that replays a text corpus into an associative-memory model.

Each :meth:`TextRuntime.step` first scores the model's previous prediction
against the columns it now reports active, then pulls the next symbol from
the cursor, encodes it and advances the model by one tick. Scoring must
happen before feeding: afterwards the snapshot would describe the new input.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Generic, List, TypeVar

import numpy as np

from ..config import AppConfig, TextMode
from ..encoder.scalar import ScalarEncoder
from ..encoder.word_row import WordRowEncoder
from ..errors import InvalidConfiguration, NullDependency
from ..model.transition import TransitionRegion
from ..model.types import (
    DistalSynapseQuery,
    InputSequence,
    ModelLayer,
    ModelRegion,
    ProximalSynapseQuery,
    Snapshot,
)
from ..text.chunkers import TextChunker, WordChunker
from ..text.cursor import SequenceCursor
from .interface import HtmRuntime

__all__ = ["TextRuntime", "build_runtime", "printable", "CHAR_CONTEXT_RADIUS", "WORD_CONTEXT_RADIUS"]

log = logging.getLogger(__name__)

S = TypeVar("S")

CHAR_CONTEXT_RADIUS = 10
WORD_CONTEXT_RADIUS = 4


def printable(value: int) -> str:
    """Map a byte to a single display character."""
    if value in (0x0A, 0x0D, 0x09):
        return " "
    if value < 32 or value > 126:
        return "."
    return chr(value)


@dataclass(frozen=True)
class _Channel(Generic[S]):
    """A cursor paired with the encoder and renderer for its symbol type."""

    mode: TextMode
    cursor: SequenceCursor[S]
    encode: Callable[[S], np.ndarray]
    render: Callable[[S], str]
    radius: int
    separator: str

    def context(self) -> str:
        size = self.cursor.size()
        # the cursor already points past the symbol just fed
        cur = (self.cursor.position - 1) % size
        parts = []
        for j in range(-self.radius, self.radius + 1):
            text = self.render(self.cursor.symbol_at(cur + j))
            parts.append(f"[{text}]" if j == 0 else text)
        return self.separator.join(parts)


class TextRuntime(HtmRuntime):
    """Feed characters (scalar encoder) or words (word-row encoder) to a model.

    The mode is fixed by the cursor/encoder pair handed in: a
    :class:`TextChunker` requires a :class:`ScalarEncoder`, a
    :class:`WordChunker` requires a :class:`WordRowEncoder`. The encoder
    width must equal the model's declared input size.
    """

    def __init__(
        self,
        region: ModelRegion,
        chunker: TextChunker | WordChunker,
        encoder: ScalarEncoder | WordRowEncoder,
        name: str = "chat_sdr",
    ):
        if region is None:
            raise NullDependency("TextRuntime: region must not be None")
        if chunker is None:
            raise NullDependency("TextRuntime: chunker must not be None")
        if encoder is None:
            raise NullDependency("TextRuntime: encoder must not be None")

        self._channel: _Channel
        if isinstance(chunker, TextChunker):
            if not isinstance(encoder, ScalarEncoder):
                raise InvalidConfiguration("TextRuntime: character mode requires a ScalarEncoder")
            self._channel = _Channel(
                mode=TextMode.CHARACTER,
                cursor=chunker,
                encode=encoder.encode,
                render=printable,
                radius=CHAR_CONTEXT_RADIUS,
                separator="",
            )
        elif isinstance(chunker, WordChunker):
            if not isinstance(encoder, WordRowEncoder):
                raise InvalidConfiguration("TextRuntime: word_rows mode requires a WordRowEncoder")
            self._channel = _Channel(
                mode=TextMode.WORD_ROWS,
                cursor=chunker,
                encode=encoder.encode,
                render=str,
                radius=WORD_CONTEXT_RADIUS,
                separator=" ",
            )
        else:
            raise InvalidConfiguration(f"TextRuntime: unsupported cursor type {type(chunker).__name__}")

        if encoder.total_bits != region.input_size:
            raise InvalidConfiguration(
                f"TextRuntime: encoder width {encoder.total_bits} != model input size {region.input_size}"
            )

        self._region = region
        self._encoder = encoder
        self._name = name
        self._active_layer_idx = 0
        self._log_text = False
        self._last_symbol: int | str | None = None
        self._correct_predictions = 0
        self._total_predictions = 0
        log.info(
            "TextRuntime %s: mode=%s symbols=%d input_bits=%d",
            name,
            self._channel.mode.value,
            chunker.size(),
            encoder.total_bits,
        )

    # ------------------------------------------------------------------
    # Stepping and accuracy
    # ------------------------------------------------------------------

    def step(self, n: int = 1) -> None:
        if n <= 0:
            return
        for _ in range(int(n)):
            # nothing to score until the model has seen at least one input
            if self._total_predictions > 0 or self._region.timestep() > 0:
                self._score_prediction()

            symbol = self._channel.cursor.next()
            self._region.set_input(self._channel.encode(symbol))
            self._region.step(1)
            self._last_symbol = symbol

            if self._log_text:
                log.info(
                    "[text] step=%d  epoch=%d  accuracy=%.1f%%  | %s",
                    self._region.timestep(),
                    self._channel.cursor.epoch,
                    self.prediction_accuracy() * 100.0,
                    self.input_context(),
                )

    def _score_prediction(self) -> None:
        snap = self._region.layer(0).snapshot()
        masks = snap.column_cell_masks
        if not masks:
            return
        predicted_and_active = 0
        total_active = 0
        for idx in snap.active_column_indices:
            if 0 <= idx < len(masks):
                total_active += 1
                if masks[idx].predictive != 0:
                    predicted_and_active += 1
        if total_active > 0 and predicted_and_active > total_active // 2:
            self._correct_predictions += 1
        self._total_predictions += 1

    def prediction_accuracy(self) -> float:
        if self._total_predictions == 0:
            return 0.0
        return self._correct_predictions / self._total_predictions

    @property
    def correct_predictions(self) -> int:
        return self._correct_predictions

    @property
    def total_predictions(self) -> int:
        return self._total_predictions

    # ------------------------------------------------------------------
    # Layer selection and introspection
    # ------------------------------------------------------------------

    def _selected_layer(self) -> ModelLayer | None:
        if 0 <= self._active_layer_idx < self.num_layers():
            return self._region.layer(self._active_layer_idx)
        return None

    def snapshot(self) -> Snapshot:
        layer = self._selected_layer()
        return layer.snapshot() if layer is not None else Snapshot()

    def query_proximal(self, column_x: int, column_y: int) -> ProximalSynapseQuery:
        layer = self._selected_layer()
        if layer is None:
            return ProximalSynapseQuery()
        return layer.query_proximal(column_x, column_y)

    def num_segments(self, column_x: int, column_y: int, cell: int) -> int:
        layer = self._selected_layer()
        return layer.num_segments(column_x, column_y, cell) if layer is not None else 0

    def query_distal(self, column_x: int, column_y: int, cell: int, segment: int) -> DistalSynapseQuery:
        layer = self._selected_layer()
        if layer is None:
            return DistalSynapseQuery()
        return layer.query_distal(column_x, column_y, cell, segment)

    def activation_threshold(self) -> int:
        layer = self._selected_layer()
        return layer.activation_threshold() if layer is not None else 0

    def input_sequences(self) -> List[InputSequence]:
        return [InputSequence(0, f"Text: {self._channel.cursor.path}")]

    def name(self) -> str:
        return f"{self._name} (Layer {self._active_layer_idx}/{self.num_layers()})"

    def layer_options(self) -> List[InputSequence]:
        return [InputSequence(i, f"Layer {i}") for i in range(self.num_layers())]

    def num_layers(self) -> int:
        return self._region.num_layers()

    def active_layer(self) -> int:
        return self._active_layer_idx

    def set_active_layer(self, idx: int) -> None:
        if 0 <= idx < self.num_layers():
            self._active_layer_idx = idx

    # ------------------------------------------------------------------
    # Text accessors
    # ------------------------------------------------------------------

    @property
    def input_mode(self) -> TextMode:
        return self._channel.mode

    @property
    def chunker(self) -> TextChunker | WordChunker:
        return self._channel.cursor

    @property
    def encoder(self) -> ScalarEncoder | WordRowEncoder:
        return self._encoder

    @property
    def region(self) -> ModelRegion:
        return self._region

    def input_size(self) -> int:
        return self._channel.cursor.size()

    def input_epoch(self) -> int:
        return self._channel.cursor.epoch

    def input_total_steps(self) -> int:
        return self._channel.cursor.total_steps

    def input_context(self) -> str:
        """Symbols around the one most recently fed, the centre bracketed."""
        return self._channel.context()

    @property
    def last_symbol(self) -> int | str | None:
        return self._last_symbol

    @property
    def last_char(self) -> str:
        if self._channel.mode is not TextMode.CHARACTER or self._last_symbol is None:
            return ""
        return chr(self._last_symbol)

    @property
    def last_word(self) -> str:
        if self._channel.mode is not TextMode.WORD_ROWS or self._last_symbol is None:
            return ""
        return str(self._last_symbol)

    @property
    def log_text(self) -> bool:
        return self._log_text

    def set_log_text(self, enabled: bool) -> None:
        self._log_text = bool(enabled)


def build_runtime(config: AppConfig, input_path: str | os.PathLike[str]) -> TextRuntime:
    """Build region, cursor and encoder from *config* and wire them together."""
    region = TransitionRegion(config.region, name=config.name)
    if config.text_mode is TextMode.WORD_ROWS:
        encoder: ScalarEncoder | WordRowEncoder = WordRowEncoder(config.word_row_encoder_params())
        chunker: TextChunker | WordChunker = WordChunker.from_file(input_path)
    else:
        encoder = ScalarEncoder(config.scalar_encoder_params())
        chunker = TextChunker.from_file(input_path)
    return TextRuntime(region, chunker, encoder, name=config.name)
