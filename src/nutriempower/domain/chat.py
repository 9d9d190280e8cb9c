"""Chat domain models and errors."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChatReply:
    """Result of a single chat request."""

    response: str
    cached: bool
    ms: int


class ChatError(Exception):
    """Base error for chat requests."""


class ChatValidationError(ChatError):
    """Raised when a chat message is rejected before any backend work."""


class ChatBackendError(ChatError):
    """Raised when the LLM backend call fails."""
