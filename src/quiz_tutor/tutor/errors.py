"""Failure conditions raised by the session core."""

from __future__ import annotations

__all__ = ["GenerationFailed", "ChatTurnFailed"]


class GenerationFailed(RuntimeError):
    """No quiz was produced; the previous questions stay in place."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ChatTurnFailed(RuntimeError):
    """The chat capability failed for a turn.

    Never escapes the turn manager: it is converted into the connectivity
    fallback reply.
    """
