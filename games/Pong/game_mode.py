"""
Pong game mode.

The player holds ArrowUp/ArrowDown to move the left paddle against a simple
tracking AI on the right. First side to the target score ends the game; the
session score is the player's points.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional

from retro_arcade.engine.session import GameSession
from games.Pong.config import (
    PADDLE_WIDTH,
    PADDLE_HEIGHT,
    PADDLE_MARGIN,
    PADDLE_SPEED,
    AI_SPEED,
    AI_DEAD_ZONE,
    BALL_RADIUS,
    BALL_SPEED,
    BALL_SPEEDUP,
    TARGET_SCORE,
    PLAYER_COLOR,
    AI_COLOR,
    BALL_COLOR,
    NET_COLOR,
)


@dataclass
class Paddle:
    """A paddle's top-left corner and its points."""
    x: float
    y: float
    score: int = 0

    @property
    def center_y(self) -> float:
        return self.y + PADDLE_HEIGHT / 2


@dataclass
class Ball:
    """Ball position, velocity, and current speed."""
    x: float = 0.0
    y: float = 0.0
    dx: float = 0.0
    dy: float = 0.0
    speed: float = BALL_SPEED
    radius: float = BALL_RADIUS


class PongMode(GameSession):
    """Single-player Pong against a tracking AI."""

    # Game metadata
    GAME_ID = "pong"
    NAME = "Pong"
    DESCRIPTION = "Classic Pong against the computer. First to the target score wins."
    VERSION = "1.0.0"
    AUTHOR = "Retro Arcade"

    # CLI argument definitions
    ARGUMENTS = [
        {
            'name': '--target-score',
            'type': int,
            'default': None,
            'help': f'Points needed to end the match (default: {TARGET_SCORE})'
        },
        {
            'name': '--ai-speed',
            'type': float,
            'default': None,
            'help': f'AI paddle speed in pixels per second (default: {AI_SPEED:g})'
        },
    ]

    def __init__(
        self,
        surface,
        target_score: Optional[int] = None,
        ai_speed: Optional[float] = None,
        rng: Optional[random.Random] = None,
        **kwargs,
    ):
        """
        Initialize game mode.

        Args:
            surface: Render surface
            target_score: Points needed by either side to end the match
            ai_speed: AI paddle speed in pixels per second
            rng: Random source for serve direction
            **kwargs: GameSession arguments
        """
        super().__init__(surface, **kwargs)
        self.target_score = target_score if target_score is not None else TARGET_SCORE
        self.ai_speed = ai_speed if ai_speed is not None else AI_SPEED
        self._rng = rng or random.Random()

        self.player = Paddle(x=PADDLE_MARGIN, y=0)
        self.ai = Paddle(x=0, y=0)
        self.ball = Ball()

    def init(self) -> None:
        self.score = 0
        self.player = Paddle(x=PADDLE_MARGIN, y=self.height / 2 - PADDLE_HEIGHT / 2)
        self.ai = Paddle(x=self.width - PADDLE_MARGIN - PADDLE_WIDTH,
                         y=self.height / 2 - PADDLE_HEIGHT / 2)
        self.ball = Ball()
        self.reset_ball()

    def reset_ball(self) -> None:
        """Serve from the center in a random direction within 30 degrees of horizontal."""
        ball = self.ball
        ball.x = self.width / 2
        ball.y = self.height / 2
        ball.speed = BALL_SPEED

        direction = 1 if self._rng.random() > 0.5 else -1
        angle = (self._rng.random() - 0.5) * math.pi / 3
        ball.dx = math.cos(angle) * ball.speed * direction
        ball.dy = math.sin(angle) * ball.speed

    def _clamp_paddle(self, paddle: Paddle) -> None:
        paddle.y = max(0.0, min(self.height - PADDLE_HEIGHT, paddle.y))

    def update(self, dt: float) -> None:
        # Player
        if self.input.is_down('ArrowUp'):
            self.player.y -= PADDLE_SPEED * dt
        if self.input.is_down('ArrowDown'):
            self.player.y += PADDLE_SPEED * dt
        self._clamp_paddle(self.player)

        # AI tracks the ball with a small dead zone
        ball = self.ball
        if ball.y < self.ai.center_y - AI_DEAD_ZONE:
            self.ai.y -= self.ai_speed * dt
        elif ball.y > self.ai.center_y + AI_DEAD_ZONE:
            self.ai.y += self.ai_speed * dt
        self._clamp_paddle(self.ai)

        ball.x += ball.dx * dt
        ball.y += ball.dy * dt

        # Walls
        if ball.y - ball.radius < 0:
            ball.y = ball.radius
            ball.dy = abs(ball.dy)
        elif ball.y + ball.radius > self.height:
            ball.y = self.height - ball.radius
            ball.dy = -abs(ball.dy)

        # Paddles
        if ball.dx < 0 and self._touches(self.player):
            self.hit_paddle(self.player, 1)
        elif ball.dx > 0 and self._touches(self.ai):
            self.hit_paddle(self.ai, -1)

        # Scoring
        if ball.x < 0:
            self.ai.score += 1
            self.shake(10)
            self.reset_ball()
        elif ball.x > self.width:
            self.player.score += 1
            self.score = self.player.score
            self.emit(self.width, ball.y, '#0aff00', 20)
            self.shake(10)
            self.reset_ball()

        if self.player.score >= self.target_score or self.ai.score >= self.target_score:
            self.game_over()

    def _touches(self, paddle: Paddle) -> bool:
        ball = self.ball
        return (ball.x - ball.radius < paddle.x + PADDLE_WIDTH
                and ball.x + ball.radius > paddle.x
                and paddle.y < ball.y < paddle.y + PADDLE_HEIGHT)

    def hit_paddle(self, paddle: Paddle, direction: int) -> None:
        """Bounce off a paddle; the further from center, the steeper the angle."""
        ball = self.ball
        ball.speed *= BALL_SPEEDUP

        hit_point = (ball.y - paddle.center_y) / (PADDLE_HEIGHT / 2)
        angle = hit_point * math.pi / 4

        ball.dx = direction * math.cos(angle) * ball.speed
        ball.dy = math.sin(angle) * ball.speed
        self.emit(ball.x, ball.y, '#ffffff', 5)

    def draw(self) -> None:
        surface = self.surface

        # Dashed net
        for y in range(0, self.height, 20):
            surface.line(self.width / 2, y, self.width / 2, y + 10, NET_COLOR)

        surface.fill_rect(self.player.x, self.player.y, PADDLE_WIDTH, PADDLE_HEIGHT, PLAYER_COLOR)
        surface.fill_rect(self.ai.x, self.ai.y, PADDLE_WIDTH, PADDLE_HEIGHT, AI_COLOR)
        surface.fill_circle(self.ball.x, self.ball.y, self.ball.radius, BALL_COLOR)

        self.draw_particles()

        self.draw_text(str(self.player.score), self.width / 4, 80, 40, PLAYER_COLOR, 'center')
        self.draw_text(str(self.ai.score), self.width * 0.75, 80, 40, AI_COLOR, 'center')
