"""Runtime orchestration: text cursor + encoder + model."""
from __future__ import annotations

from .interface import HtmRuntime
from .text_runtime import TextRuntime, build_runtime, printable

__all__ = ["HtmRuntime", "TextRuntime", "build_runtime", "printable"]
