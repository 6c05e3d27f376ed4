"""Read-only value types exchanged with the associative-memory model."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Tuple

import numpy as np

__all__ = [
    "CellMask",
    "Snapshot",
    "ProximalSynapse",
    "ProximalSynapseQuery",
    "DistalSynapse",
    "DistalSynapseQuery",
    "InputSequence",
    "ModelLayer",
    "ModelRegion",
]


@dataclass(frozen=True)
class CellMask:
    """Per-column cell state; bit ``i`` describes cell ``i``."""

    active: int = 0
    predictive: int = 0


@dataclass(frozen=True)
class Snapshot:
    columns_x: int = 0
    columns_y: int = 0
    cells_per_column: int = 0
    timestep: int = 0
    column_cell_masks: Tuple[CellMask, ...] = ()
    active_column_indices: Tuple[int, ...] = ()

    @property
    def num_columns(self) -> int:
        return self.columns_x * self.columns_y

    def is_predictive(self, column: int) -> bool:
        if not 0 <= column < len(self.column_cell_masks):
            return False
        return self.column_cell_masks[column].predictive != 0


@dataclass(frozen=True)
class ProximalSynapse:
    input_x: int
    input_y: int
    permanence: float
    connected: bool


@dataclass(frozen=True)
class ProximalSynapseQuery:
    column_x: int = 0
    column_y: int = 0
    synapses: Tuple[ProximalSynapse, ...] = ()


@dataclass(frozen=True)
class DistalSynapse:
    src_column_x: int
    src_column_y: int
    src_cell: int
    permanence: float
    connected: bool


@dataclass(frozen=True)
class DistalSynapseQuery:
    column_x: int = 0
    column_y: int = 0
    cell: int = 0
    segment: int = 0
    synapses: Tuple[DistalSynapse, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InputSequence:
    id: int
    name: str


class ModelLayer(Protocol):
    """Per-layer view a runtime reads from the model."""

    def snapshot(self) -> Snapshot: ...

    def query_proximal(self, column_x: int, column_y: int) -> ProximalSynapseQuery: ...

    def num_segments(self, column_x: int, column_y: int, cell: int) -> int: ...

    def query_distal(self, column_x: int, column_y: int, cell: int, segment: int) -> DistalSynapseQuery: ...

    def activation_threshold(self) -> int: ...


class ModelRegion(Protocol):
    """Contract the text runtime requires from an associative-memory model.

    ``set_input`` replaces the current input vector, ``step`` advances model
    time by ``n`` ticks on that input and ``timestep`` counts ticks so far.
    ``input_size`` is the declared input width every encoder must match.
    """

    @property
    def input_size(self) -> int: ...

    def set_input(self, sdr: np.ndarray) -> None: ...

    def step(self, n: int = 1) -> None: ...

    def timestep(self) -> int: ...

    def num_layers(self) -> int: ...

    def layer(self, index: int) -> ModelLayer: ...
