"""Turn text into sparse distributed representations and replay it into a model."""
from __future__ import annotations

from .config import AppConfig, EncoderConfig, LayerConfig, RegionConfig, TextMode
from .encoder import ScalarEncoder, ScalarEncoderParams, WordRowEncoder, WordRowEncoderParams
from .errors import ChatSdrError, EmptyInput, InvalidConfiguration, NotFound, NullDependency
from .model import TransitionRegion
from .runtime import HtmRuntime, TextRuntime, build_runtime
from .text import TextChunker, WordChunker, tokenize_words

__all__ = [
    "AppConfig",
    "EncoderConfig",
    "LayerConfig",
    "RegionConfig",
    "TextMode",
    "ScalarEncoder",
    "ScalarEncoderParams",
    "WordRowEncoder",
    "WordRowEncoderParams",
    "ChatSdrError",
    "EmptyInput",
    "InvalidConfiguration",
    "NotFound",
    "NullDependency",
    "TransitionRegion",
    "HtmRuntime",
    "TextRuntime",
    "build_runtime",
    "TextChunker",
    "WordChunker",
    "tokenize_words",
]
