"""Error taxonomy shared by the encoders, text cursors and the runtime."""
from __future__ import annotations

__all__ = [
    "ChatSdrError",
    "InvalidConfiguration",
    "NotFound",
    "EmptyInput",
    "NullDependency",
]


class ChatSdrError(Exception):
    """Base class for every error raised by ``chat_sdr``."""


class InvalidConfiguration(ChatSdrError, ValueError):
    """An encoder, cursor, config or runtime invariant does not hold."""


class NotFound(ChatSdrError, FileNotFoundError):
    """A corpus or configuration file cannot be opened."""


class EmptyInput(ChatSdrError, ValueError):
    """The corpus yields no symbols."""


class NullDependency(ChatSdrError, TypeError):
    """A required collaborator was passed as ``None``."""
