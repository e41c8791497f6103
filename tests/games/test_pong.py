"""
Pong Tests

Paddle control, ball physics, scoring and the end of a match.

Run with: pytest tests/games/test_pong.py -v
"""

import math
import random

import pytest

from games.Pong.config import BALL_SPEED, BALL_SPEEDUP, PADDLE_HEIGHT, PADDLE_SPEED
from games.Pong.game_mode import PongMode
from retro_arcade.engine.clock import SimulationClock


@pytest.fixture
def results():
    return []


@pytest.fixture
def make_game(surface, fake_time, results):
    def _make(**kwargs):
        game = PongMode(surface, rng=random.Random(0), clock=SimulationClock(1 / 64),
                        time_source=fake_time, on_game_over=results.append, **kwargs)
        game.start()
        return game
    return _make


@pytest.fixture
def game(make_game):
    return make_game()


def place_ball(game, x, y, dx, dy):
    ball = game.ball
    ball.x, ball.y, ball.dx, ball.dy = x, y, dx, dy


class TestServe:
    """Test init() and reset_ball()."""

    def test_paddles_centered(self, game):
        """Both paddles start vertically centered."""
        assert game.player.y == 300 - PADDLE_HEIGHT / 2
        assert game.ai.y == game.player.y
        assert game.player.x < game.ai.x

    def test_serve_from_center_within_30_degrees(self, game):
        """Serves start at the center and stay within 30 degrees of horizontal."""
        for _ in range(50):
            game.reset_ball()
            ball = game.ball
            assert (ball.x, ball.y) == (400, 300)
            assert math.hypot(ball.dx, ball.dy) == pytest.approx(BALL_SPEED)
            assert abs(math.atan2(ball.dy, abs(ball.dx))) <= math.pi / 6 + 1e-9


class TestPaddles:
    """Test paddle control."""

    def test_held_key_moves_paddle(self, game):
        """Holding ArrowUp moves the paddle on every step, not just the first."""
        start = game.player.y
        game.input.key_down('ArrowUp')
        game.update(0.1)
        game.input.consume_frame()
        game.update(0.1)
        assert game.player.y == pytest.approx(start - PADDLE_SPEED * 0.2)

    def test_paddle_clamped(self, game):
        """Paddles never leave the screen."""
        game.input.key_down('ArrowDown')
        for _ in range(30):
            game.update(0.1)
        assert game.player.y == 600 - PADDLE_HEIGHT

    def test_ai_tracks_ball(self, game):
        """The AI paddle moves toward the ball."""
        place_ball(game, 400, 50, 0, 0)
        start = game.ai.y
        game.update(0.1)
        assert game.ai.y < start

    def test_ai_dead_zone(self, game):
        """The AI paddle holds still when the ball is level with it."""
        place_ball(game, 400, game.ai.center_y + 5, 0, 0)
        start = game.ai.y
        game.update(0.1)
        assert game.ai.y == start


class TestBall:
    """Test walls and paddle bounces."""

    def test_bounces_off_top_wall(self, game):
        """The ball reflects off the top wall."""
        place_ball(game, 400, 5, 0, -100)
        game.update(0.01)
        assert game.ball.dy > 0
        assert game.ball.y == game.ball.radius

    def test_hit_paddle_reverses_and_speeds_up(self, game):
        """A center hit sends the ball straight back, faster."""
        place_ball(game, 50, game.player.center_y, -BALL_SPEED, 0)
        game.hit_paddle(game.player, 1)
        assert game.ball.dx == pytest.approx(BALL_SPEED * BALL_SPEEDUP)
        assert game.ball.dy == pytest.approx(0)
        assert len(game.effects.particles) == 5

    def test_edge_hit_is_steeper(self, game):
        """Hits near the paddle edge leave at a steeper angle."""
        place_ball(game, 50, game.player.y + PADDLE_HEIGHT - 1, -BALL_SPEED, 0)
        game.hit_paddle(game.player, 1)
        assert game.ball.dy > 0
        assert game.ball.dx > 0

    def test_ball_bounces_off_player_paddle(self, game):
        """A ball moving into the player paddle comes back."""
        place_ball(game, 50, game.player.center_y, -BALL_SPEED, 0)
        game.update(0.01)
        assert game.ball.dx > 0


class TestScoring:
    """Test points and the end of the match."""

    def test_player_scores(self, game):
        """Ball past the right edge is a player point and the session score."""
        place_ball(game, 810, 300, 100, 0)
        game.update(0.001)
        assert game.player.score == 1
        assert game.score == 1
        assert len(game.effects.particles) == 20
        assert (game.ball.x, game.ball.y) == (400, 300)

    def test_ai_scores(self, game):
        """Ball past the left edge is an AI point and shakes the screen."""
        place_ball(game, -10, 300, -100, 0)
        game.update(0.001)
        assert game.ai.score == 1
        assert game.score == 0
        assert game.effects.screen_shake.active

    def test_match_ends_at_target(self, make_game, results):
        """Reaching the target score ends the game with the player's points."""
        game = make_game(target_score=1)
        place_ball(game, 810, 300, 100, 0)
        game.update(0.001)
        assert not game.running
        assert results == [1]

    def test_ai_win_reports_player_score(self, make_game, results):
        """An AI win still reports the player's points."""
        game = make_game(target_score=1)
        place_ball(game, -10, 300, -100, 0)
        game.update(0.001)
        assert not game.running
        assert results == [0]


class TestDraw:
    """Test rendering."""

    def test_draws_paddles_and_scores(self, game, surface):
        """Both paddles and both scores are drawn."""
        surface.reset_records()
        game.draw()
        assert len(surface.rects) == 2
        assert surface.texts == ['0', '0']
