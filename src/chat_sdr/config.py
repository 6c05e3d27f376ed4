"""YAML-backed configuration for the text runtime.

A config file carries three sections::

    text:
      mode: character          # or word_rows
    encoder:
      active_bits: 21          # character mode
      min_value: 0
      max_value: 127
      letter_bits: 4           # word_rows mode
      alphabet: abcdefghijklmnopqrstuvwxyz
    layers:
      - num_input_rows: 20
        num_input_cols: 20
        cells_per_column: 4
        activation_threshold: 1

The encoder width is never configured directly: it is derived from the
input dimensions of the first layer.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from .encoder.scalar import ScalarEncoderParams
from .encoder.word_row import DEFAULT_ALPHABET, WordRowEncoderParams
from .errors import InvalidConfiguration, NotFound

__all__ = [
    "TextMode",
    "EncoderConfig",
    "LayerConfig",
    "RegionConfig",
    "AppConfig",
    "list_config_files",
]

log = logging.getLogger(__name__)


class TextMode(Enum):
    CHARACTER = "character"
    WORD_ROWS = "word_rows"

    @classmethod
    def parse(cls, value: Any) -> "TextMode":
        if value is None:
            return cls.CHARACTER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            log.warning("Unknown text mode %r, falling back to %s", value, cls.CHARACTER.value)
            return cls.CHARACTER


def _require_int(owner: str, name: str, value: Any) -> None:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{owner}: {name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class EncoderConfig:
    active_bits: int = 21
    min_value: int = 0
    max_value: int = 127
    letter_bits: int = 4
    alphabet: str = DEFAULT_ALPHABET

    def __post_init__(self) -> None:
        for name in ("active_bits", "min_value", "max_value", "letter_bits"):
            _require_int("EncoderConfig", name, getattr(self, name))
        if not isinstance(self.alphabet, str):
            raise InvalidConfiguration(f"EncoderConfig: alphabet must be a string, got {self.alphabet!r}")


@dataclass(frozen=True)
class LayerConfig:
    """Parameters of one layer of the transition-memory region.

    Attributes:
        num_input_rows: Input grid height; only read for the first layer.
        num_input_cols: Input grid width; only read for the first layer.
        cells_per_column: Cells per column, used to spread contexts.
        activation_threshold: Times a transition must be seen before the
            target column is flagged predictive.
        learning: Whether the layer updates its transition counts.
    """

    num_input_rows: int = 20
    num_input_cols: int = 20
    cells_per_column: int = 4
    activation_threshold: int = 1
    learning: bool = True

    def __post_init__(self) -> None:
        for name in ("num_input_rows", "num_input_cols", "cells_per_column", "activation_threshold"):
            value = getattr(self, name)
            _require_int("LayerConfig", name, value)
            if value <= 0:
                raise InvalidConfiguration(f"LayerConfig: {name} must be > 0")


@dataclass(frozen=True)
class RegionConfig:
    layers: List[LayerConfig] = field(default_factory=lambda: [LayerConfig()])

    def __post_init__(self) -> None:
        if not self.layers:
            raise InvalidConfiguration("RegionConfig: at least one layer is required")

    @property
    def input_rows(self) -> int:
        return self.layers[0].num_input_rows

    @property
    def input_cols(self) -> int:
        return self.layers[0].num_input_cols

    @property
    def input_bits(self) -> int:
        return self.input_rows * self.input_cols


def _known_kwargs(cls: type, data: Mapping[str, Any], section: str) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        log.warning("Ignoring unknown %s keys: %s", section, ", ".join(map(str, unknown)))
    return {k: v for k, v in data.items() if k in names}


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, Mapping):
        raise InvalidConfiguration(f"config section '{key}' must be a mapping")
    return value


@dataclass(frozen=True)
class AppConfig:
    text_mode: TextMode = TextMode.CHARACTER
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    region: RegionConfig = field(default_factory=RegionConfig)
    name: str = "chat_sdr"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = "chat_sdr") -> "AppConfig":
        if not isinstance(data, Mapping):
            raise InvalidConfiguration("config document must be a mapping")
        text = _section(data, "text")
        encoder = EncoderConfig(**_known_kwargs(EncoderConfig, _section(data, "encoder"), "encoder"))
        raw_layers = data.get("layers")
        if raw_layers is None:
            layers = [LayerConfig()]
        elif isinstance(raw_layers, list):
            layers = []
            for idx, raw in enumerate(raw_layers):
                if not isinstance(raw, Mapping):
                    raise InvalidConfiguration(f"layer {idx} must be a mapping")
                layers.append(LayerConfig(**_known_kwargs(LayerConfig, raw, f"layers[{idx}]")))
        else:
            raise InvalidConfiguration("config key 'layers' must be a list")
        return cls(
            text_mode=TextMode.parse(text.get("mode")),
            encoder=encoder,
            region=RegionConfig(layers=layers),
            name=name,
        )

    @classmethod
    def from_yaml(cls, path: str | os.PathLike[str]) -> "AppConfig":
        """Load config from a YAML file; the file stem becomes the runtime name."""
        p = Path(path)
        try:
            with p.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except OSError as exc:
            raise NotFound(f"AppConfig: cannot open config: {path}") from exc
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"AppConfig: malformed YAML in {path}: {exc}") from exc
        return cls.from_dict(data, name=p.stem)

    def scalar_encoder_params(self) -> ScalarEncoderParams:
        return ScalarEncoderParams(
            n=self.region.input_bits,
            w=self.encoder.active_bits,
            min_val=self.encoder.min_value,
            max_val=self.encoder.max_value,
        )

    def word_row_encoder_params(self) -> WordRowEncoderParams:
        return WordRowEncoderParams(
            rows=self.region.input_rows,
            cols=self.region.input_cols,
            letter_bits=self.encoder.letter_bits,
            alphabet=self.encoder.alphabet,
        )


def list_config_files(directory: str | os.PathLike[str] = "configs") -> List[str]:
    root = Path(directory)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.suffix in {".yaml", ".yml"} and p.is_file())
