"""Associative-memory model contract and the bundled reference region."""
from __future__ import annotations

from . import transition, types
from .transition import TransitionLayer, TransitionRegion
from .types import (
    CellMask,
    DistalSynapse,
    DistalSynapseQuery,
    InputSequence,
    ModelLayer,
    ModelRegion,
    ProximalSynapse,
    ProximalSynapseQuery,
    Snapshot,
)

__all__ = [
    "transition",
    "types",
    "TransitionLayer",
    "TransitionRegion",
    "CellMask",
    "DistalSynapse",
    "DistalSynapseQuery",
    "InputSequence",
    "ModelLayer",
    "ModelRegion",
    "ProximalSynapse",
    "ProximalSynapseQuery",
    "Snapshot",
]
