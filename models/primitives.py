"""
Shared primitive data types for the arcade.

This module provides the resolution and color types used throughout
the engine and the games.
"""

import re
from functools import lru_cache
from typing import Sequence, Tuple, Union

from pydantic import BaseModel, Field, field_validator, computed_field, ConfigDict


class Resolution(BaseModel):
    """Logical or window resolution in pixels.

    Attributes:
        width: Width in pixels (must be positive)
        height: Height in pixels (must be positive)

    Examples:
        >>> logical = Resolution(width=800, height=600)
        >>> logical.aspect_ratio
        1.3333333333333333
    """
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @computed_field
    @property
    def aspect_ratio(self) -> float:
        """Calculate aspect ratio (width / height)."""
        return self.width / self.height

    def scaled(self, factor: int) -> 'Resolution':
        """Return this resolution multiplied by an integer factor."""
        return Resolution(width=self.width * factor, height=self.height * factor)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Resolution({self.width}x{self.height})"


# CSS names used by the games
_NAMED_COLORS = {
    'black': (0, 0, 0),
    'white': (255, 255, 255),
    'red': (255, 0, 0),
    'green': (0, 128, 0),
    'lime': (0, 255, 0),
    'blue': (0, 0, 255),
    'yellow': (255, 255, 0),
    'cyan': (0, 255, 255),
    'magenta': (255, 0, 255),
    'orange': (255, 165, 0),
    'gray': (128, 128, 128),
    'grey': (128, 128, 128),
}

_FUNCTIONAL_COLOR = re.compile(
    r'^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([0-9.]+)\s*)?\)$'
)

ColorLike = Union['Color', str, Sequence[int]]


class Color(BaseModel):
    """Immutable RGBA color with validation.

    All color components must be in the range [0, 255] inclusive.

    Attributes:
        r: Red component (0-255)
        g: Green component (0-255)
        b: Blue component (0-255)
        a: Alpha/opacity component (0-255), where 255 is fully opaque

    Examples:
        >>> Color.parse('#ff00de').as_tuple
        (255, 0, 222, 255)
        >>> Color.parse('rgba(255, 255, 255, 0.2)').a
        51
    """
    r: int
    g: int
    b: int
    a: int = 255

    @field_validator('r', 'g', 'b', 'a')
    @classmethod
    def validate_color_range(cls, v: int) -> int:
        """Validate color components are in valid range [0, 255]."""
        if not 0 <= v <= 255:
            raise ValueError(f'Color component must be in range [0, 255], got {v}')
        return v

    @computed_field
    @property
    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Return color as RGBA tuple for pygame compatibility."""
        return (self.r, self.g, self.b, self.a)

    @computed_field
    @property
    def as_rgb_tuple(self) -> Tuple[int, int, int]:
        """Return color as RGB tuple (without alpha)."""
        return (self.r, self.g, self.b)

    def with_alpha_scale(self, opacity: float) -> 'Color':
        """Return a copy with alpha multiplied by an opacity in [0, 1]."""
        opacity = max(0.0, min(1.0, opacity))
        return Color(r=self.r, g=self.g, b=self.b, a=int(round(self.a * opacity)))

    @classmethod
    def parse(cls, value: ColorLike) -> 'Color':
        """Build a Color from a CSS-style string, a tuple, or a Color.

        Accepted strings: '#rgb', '#rgba', '#rrggbb', '#rrggbbaa',
        'rgb(r, g, b)', 'rgba(r, g, b, a)' with a in [0, 1], and a small
        set of color names.

        Raises:
            ValueError: If the value cannot be interpreted as a color
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return _parse_color_string(value.strip().lower())
        components = tuple(int(c) for c in value)
        if len(components) not in (3, 4):
            raise ValueError(f'Color tuple must have 3 or 4 components, got {value!r}')
        return cls(r=components[0], g=components[1], b=components[2],
                   a=components[3] if len(components) == 4 else 255)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Color(r={self.r}, g={self.g}, b={self.b}, a={self.a})"


@lru_cache(maxsize=256)
def _parse_color_string(text: str) -> Color:
    if text.startswith('#'):
        digits = text[1:]
        if len(digits) in (3, 4):
            digits = ''.join(ch * 2 for ch in digits)
        if len(digits) not in (6, 8):
            raise ValueError(f'Invalid hex color: {text!r}')
        try:
            channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError as e:
            raise ValueError(f'Invalid hex color: {text!r}') from e
        return Color.parse(channels)

    match = _FUNCTIONAL_COLOR.match(text)
    if match:
        r, g, b, alpha = match.groups()
        a = 255 if alpha is None else int(round(max(0.0, min(1.0, float(alpha))) * 255))
        return Color(r=int(r), g=int(g), b=int(b), a=a)

    if text in _NAMED_COLORS:
        return Color.parse(_NAMED_COLORS[text])

    raise ValueError(f'Unrecognized color: {text!r}')
