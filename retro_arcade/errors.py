"""Exceptions raised by the arcade engine.

Most engine misuse is not an error: unknown key codes are never
"down" and lifecycle calls in the wrong state are silent no-ops. What remains
are lookups and configuration problems.
"""

from typing import List, Optional


class ArcadeError(Exception):
    """Base class for all engine errors."""
    pass


class UnknownGameError(ArcadeError):
    """Raised when a game identifier is not registered."""

    def __init__(self, game_id: str, available: Optional[List[str]] = None):
        message = f"Unknown game: {game_id!r}"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)
        self.game_id = game_id
        self.available = list(available or [])


class ConfigError(ArcadeError):
    """Raised when configuration cannot be loaded or fails validation."""
    pass
