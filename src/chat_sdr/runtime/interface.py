"""Capability surface shared by every runtime a front end can drive."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..model.types import DistalSynapseQuery, InputSequence, ProximalSynapseQuery, Snapshot

__all__ = ["HtmRuntime"]


class HtmRuntime(ABC):
    """What a debugger or shell may ask of a runtime.

    Introspection calls read the currently selected layer. None of them
    mutate model state; only :meth:`step` advances it.
    """

    @abstractmethod
    def snapshot(self) -> Snapshot: ...

    @abstractmethod
    def step(self, n: int = 1) -> None: ...

    @abstractmethod
    def query_proximal(self, column_x: int, column_y: int) -> ProximalSynapseQuery: ...

    @abstractmethod
    def num_segments(self, column_x: int, column_y: int, cell: int) -> int: ...

    @abstractmethod
    def query_distal(self, column_x: int, column_y: int, cell: int, segment: int) -> DistalSynapseQuery: ...

    @abstractmethod
    def input_sequences(self) -> List[InputSequence]: ...

    def input_sequence(self) -> int:
        return 0

    def set_input_sequence(self, sequence_id: int) -> None:
        """Single-sequence runtimes ignore the request."""

    @abstractmethod
    def activation_threshold(self) -> int: ...

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def layer_options(self) -> List[InputSequence]: ...

    @abstractmethod
    def num_layers(self) -> int: ...

    @abstractmethod
    def active_layer(self) -> int: ...

    @abstractmethod
    def set_active_layer(self, idx: int) -> None: ...

    @abstractmethod
    def prediction_accuracy(self) -> float: ...
