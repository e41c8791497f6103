"""
Configuration for Snake.

Values can be overridden with SNAKE_* environment variables.
"""

import os

def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.environ.get(key, default))

def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.environ.get(key, default))

# Grid
GRID_SIZE: int = _get_int('SNAKE_GRID_SIZE', 25)  # Pixels per cell
START_LENGTH: int = _get_int('SNAKE_START_LENGTH', 3)

# Movement
START_SPEED: float = _get_float('SNAKE_START_SPEED', 10)  # Cells per second
MAX_SPEED: float = _get_float('SNAKE_MAX_SPEED', 20)
SPEEDUP_EVERY: int = _get_int('SNAKE_SPEEDUP_EVERY', 50)  # Points per +1 speed

# Scoring
FOOD_POINTS: int = _get_int('SNAKE_FOOD_POINTS', 10)

# Colors
HEAD_COLOR = '#0aff00'
BODY_COLOR = '#00f3ff'
FOOD_COLOR = '#ff00de'
GRID_COLOR = 'rgba(0, 243, 255, 0.05)'
