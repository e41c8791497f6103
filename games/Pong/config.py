"""
Configuration for Pong.

Values can be overridden with PONG_* environment variables.
"""

import os

def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.environ.get(key, default))

def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.environ.get(key, default))

# Paddles
PADDLE_WIDTH: int = _get_int('PONG_PADDLE_WIDTH', 15)
PADDLE_HEIGHT: int = _get_int('PONG_PADDLE_HEIGHT', 80)
PADDLE_MARGIN: int = _get_int('PONG_PADDLE_MARGIN', 30)  # Distance from the side walls
PADDLE_SPEED: float = _get_float('PONG_PADDLE_SPEED', 400)  # Pixels per second
AI_SPEED: float = _get_float('PONG_AI_SPEED', 350)
AI_DEAD_ZONE: float = _get_float('PONG_AI_DEAD_ZONE', 10)

# Ball
BALL_RADIUS: int = _get_int('PONG_BALL_RADIUS', 8)
BALL_SPEED: float = _get_float('PONG_BALL_SPEED', 400)
BALL_SPEEDUP: float = _get_float('PONG_BALL_SPEEDUP', 1.05)  # Multiplier per paddle hit

# Rules
TARGET_SCORE: int = _get_int('PONG_TARGET_SCORE', 10)  # First to this many points wins

# Colors
PLAYER_COLOR = '#00f3ff'
AI_COLOR = '#ff00de'
BALL_COLOR = '#ffffff'
NET_COLOR = 'rgba(255, 255, 255, 0.2)'
