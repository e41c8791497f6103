"""
Shared models for the arcade.

This package provides the Pydantic data models used across the engine
and the games:
- Primitives: Resolution and Color (with CSS-style color parsing)

Usage:
    >>> from models import Color, Resolution
    >>> Color.parse('#0aff00').as_rgb_tuple
    (10, 255, 0)
"""

from .primitives import (
    Resolution,
    Color,
    ColorLike,
)

__all__ = [
    "Resolution",
    "Color",
    "ColorLike",
]
