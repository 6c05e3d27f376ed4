"""Reference associative-memory region built on first-order transition counts.

Every distinct active-column pattern is a *context*. When pattern ``B``
follows context ``A`` the columns of ``B`` are accumulated into ``A``'s
int32 counter row (the same accumulate-then-threshold scheme as an
associative bank). Columns whose count under the current context reaches
``activation_threshold`` become the prediction for the next tick.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..config import LayerConfig, RegionConfig
from ..encoder.utils import as_vec
from .types import (
    CellMask,
    DistalSynapse,
    DistalSynapseQuery,
    ProximalSynapse,
    ProximalSynapseQuery,
    Snapshot,
)

__all__ = ["TransitionLayer", "TransitionRegion"]

log = logging.getLogger(__name__)


@dataclass
class _Context:
    ordinal: int
    cell: int
    columns: np.ndarray
    counts: np.ndarray = field(repr=False)


class TransitionLayer:
    """One layer: ``columns_x * columns_y`` columns fed one-to-one by its input."""

    def __init__(self, config: LayerConfig, columns_x: int, columns_y: int):
        self.config = config
        self.columns_x = int(columns_x)
        self.columns_y = int(columns_y)
        self.num_columns = self.columns_x * self.columns_y
        self._contexts: Dict[bytes, _Context] = {}
        self._prev_key: Optional[bytes] = None
        self._active = np.empty((0,), dtype=np.int64)
        # prediction made for the current input, and the one for the next input
        self._predicted = np.empty((0,), dtype=np.int64)
        self._predicted_cell = 0
        self._next_predicted = np.empty((0,), dtype=np.int64)
        self._next_cell = 0
        self._timestep = 0

    @property
    def cells_per_column(self) -> int:
        return self.config.cells_per_column

    def activation_threshold(self) -> int:
        return self.config.activation_threshold

    def num_contexts(self) -> int:
        return len(self._contexts)

    def _context(self, key: bytes, columns: np.ndarray) -> _Context:
        ctx = self._contexts.get(key)
        if ctx is None:
            ordinal = len(self._contexts)
            ctx = _Context(
                ordinal=ordinal,
                cell=ordinal % self.cells_per_column,
                columns=columns.copy(),
                counts=np.zeros((self.num_columns,), dtype=np.int32),
            )
            ctx.columns.setflags(write=False)
            self._contexts[key] = ctx
        return ctx

    def compute(self, input_vec: np.ndarray) -> None:
        vec = as_vec(input_vec)
        if vec.shape != (self.num_columns,):
            raise ValueError(f"input must have shape ({self.num_columns},), got {vec.shape}")
        active = np.flatnonzero(vec).astype(np.int64, copy=False)
        key = active.tobytes()

        if self.config.learning and self._prev_key is not None:
            self._contexts[self._prev_key].counts[active] += 1
        ctx = self._context(key, active)

        self._predicted = self._next_predicted
        self._predicted_cell = self._next_cell
        self._next_predicted = np.flatnonzero(ctx.counts >= self.config.activation_threshold)
        self._next_cell = ctx.cell

        self._active = active
        self._prev_key = key
        self._timestep += 1

    def active_vector(self) -> np.ndarray:
        out = np.zeros((self.num_columns,), dtype=np.int8)
        out[self._active] = 1
        return out

    def predicted_columns(self) -> np.ndarray:
        """Columns expected to become active on the next tick."""
        return self._next_predicted.copy()

    def snapshot(self) -> Snapshot:
        all_cells = (1 << self.cells_per_column) - 1
        predicted_bit = 1 << self._predicted_cell
        predicted = np.zeros((self.num_columns,), dtype=bool)
        predicted[self._predicted] = True
        active = np.zeros((self.num_columns,), dtype=bool)
        active[self._active] = True

        masks: List[CellMask] = []
        for col in range(self.num_columns):
            pred = predicted_bit if predicted[col] else 0
            if active[col]:
                # predicted columns fire the predicted cell, others burst
                masks.append(CellMask(active=pred or all_cells, predictive=pred))
            else:
                masks.append(CellMask(active=0, predictive=pred))
        return Snapshot(
            columns_x=self.columns_x,
            columns_y=self.columns_y,
            cells_per_column=self.cells_per_column,
            timestep=self._timestep,
            column_cell_masks=tuple(masks),
            active_column_indices=tuple(int(i) for i in self._active),
        )

    def _column_index(self, column_x: int, column_y: int) -> Optional[int]:
        if not (0 <= column_x < self.columns_x and 0 <= column_y < self.columns_y):
            return None
        return column_y * self.columns_x + column_x

    def query_proximal(self, column_x: int, column_y: int) -> ProximalSynapseQuery:
        if self._column_index(column_x, column_y) is None:
            return ProximalSynapseQuery()
        synapse = ProximalSynapse(input_x=column_x, input_y=column_y, permanence=1.0, connected=True)
        return ProximalSynapseQuery(column_x=column_x, column_y=column_y, synapses=(synapse,))

    def _segments(self, col: int, cell: int) -> List[_Context]:
        return [c for c in self._contexts.values() if c.cell == cell and c.counts[col] > 0]

    def num_segments(self, column_x: int, column_y: int, cell: int) -> int:
        col = self._column_index(column_x, column_y)
        if col is None or not 0 <= cell < self.cells_per_column:
            return 0
        return len(self._segments(col, cell))

    def query_distal(self, column_x: int, column_y: int, cell: int, segment: int) -> DistalSynapseQuery:
        col = self._column_index(column_x, column_y)
        if col is None or not 0 <= cell < self.cells_per_column:
            return DistalSynapseQuery()
        segments = self._segments(col, cell)
        if not 0 <= segment < len(segments):
            return DistalSynapseQuery()
        ctx = segments[segment]
        count = int(ctx.counts[col])
        threshold = self.config.activation_threshold
        synapses = tuple(
            DistalSynapse(
                src_column_x=int(src) % self.columns_x,
                src_column_y=int(src) // self.columns_x,
                src_cell=ctx.cell,
                permanence=min(1.0, count / float(threshold)),
                connected=count >= threshold,
            )
            for src in ctx.columns
        )
        return DistalSynapseQuery(
            column_x=column_x, column_y=column_y, cell=cell, segment=segment, synapses=synapses
        )


class TransitionRegion:
    """Stack of :class:`TransitionLayer`; layer ``k > 0`` is fed by layer ``k - 1``."""

    def __init__(self, config: RegionConfig, name: str = "region"):
        self.config = config
        self.name = name
        cols_x = config.input_cols
        cols_y = config.input_rows
        self._layers = [TransitionLayer(layer_cfg, cols_x, cols_y) for layer_cfg in config.layers]
        self._input = np.zeros((config.input_bits,), dtype=np.int8)
        self._timestep = 0
        log.info(
            "TransitionRegion %s: %d layer(s), %dx%d columns",
            name,
            len(self._layers),
            cols_x,
            cols_y,
        )

    @property
    def input_size(self) -> int:
        return int(self._input.shape[0])

    def set_input(self, sdr: np.ndarray) -> None:
        vec = as_vec(sdr)
        if vec.shape != self._input.shape:
            raise ValueError(f"input must have shape {self._input.shape}, got {vec.shape}")
        self._input = (vec != 0).astype(np.int8, copy=False)

    def step(self, n: int = 1) -> None:
        for _ in range(int(n)):
            feed = self._input
            for layer in self._layers:
                layer.compute(feed)
                feed = layer.active_vector()
            self._timestep += 1

    def timestep(self) -> int:
        return self._timestep

    def num_layers(self) -> int:
        return len(self._layers)

    def layer(self, index: int) -> TransitionLayer:
        return self._layers[index]
