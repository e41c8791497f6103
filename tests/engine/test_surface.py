"""
RenderSurface Tests

Drawing state (translation, opacity, save/restore) and pixel output of the
basic primitives on a headless pygame Surface.

Run with: pytest tests/engine/test_surface.py -v
"""

import pygame
import pytest

from retro_arcade.engine.surface import RenderSurface


@pytest.fixture
def canvas():
    return RenderSurface(pygame.Surface((100, 80)))


class TestDrawingState:
    """Test translation and opacity scoping."""

    def test_size(self, canvas):
        """Width and height come from the target surface."""
        assert (canvas.width, canvas.height) == (100, 80)

    def test_translate_accumulates(self, canvas):
        """translate() adds to the current offset."""
        canvas.translate(3, 4)
        canvas.translate(-1, 1)
        assert canvas.offset == (2, 5)

    def test_saved_restores_offset_and_alpha(self, canvas):
        """saved() restores translation and opacity on exit."""
        with canvas.saved():
            canvas.translate(10, 10)
            canvas.global_alpha = 0.5
        assert canvas.offset == (0.0, 0.0)
        assert canvas.global_alpha == 1.0

    def test_saved_restores_on_error(self, canvas):
        """saved() restores state even if the block raises."""
        with pytest.raises(RuntimeError):
            with canvas.saved():
                canvas.translate(5, 5)
                raise RuntimeError("boom")
        assert canvas.offset == (0.0, 0.0)

    def test_nested_saves(self, canvas):
        """Saves nest like a stack."""
        canvas.translate(1, 1)
        canvas.save()
        canvas.translate(1, 1)
        canvas.save()
        canvas.translate(1, 1)
        canvas.restore()
        assert canvas.offset == (2, 2)
        canvas.restore()
        assert canvas.offset == (1, 1)

    def test_restore_without_save_is_noop(self, canvas):
        """restore() with nothing saved changes nothing."""
        canvas.translate(4, 4)
        canvas.restore()
        assert canvas.offset == (4, 4)

    def test_global_alpha_is_clamped(self, canvas):
        """Opacity is clamped to [0, 1]."""
        canvas.global_alpha = 2.0
        assert canvas.global_alpha == 1.0
        canvas.global_alpha = -1.0
        assert canvas.global_alpha == 0.0


class TestPrimitives:
    """Test pixel output."""

    def test_clear(self, canvas):
        """clear() fills the whole surface."""
        canvas.clear('#102030')
        assert canvas.target.get_at((50, 40))[:3] == (16, 32, 48)

    def test_fill_rect(self, canvas):
        """fill_rect paints inside the rectangle only."""
        canvas.clear('black')
        canvas.fill_rect(10, 10, 5, 5, '#ff0000')
        assert canvas.target.get_at((12, 12))[:3] == (255, 0, 0)
        assert canvas.target.get_at((20, 20))[:3] == (0, 0, 0)

    def test_fill_rect_translated(self, canvas):
        """Translation moves drawing."""
        canvas.clear('black')
        canvas.translate(20, 0)
        canvas.fill_rect(0, 0, 5, 5, '#00ff00')
        assert canvas.target.get_at((22, 2))[:3] == (0, 255, 0)
        assert canvas.target.get_at((2, 2))[:3] == (0, 0, 0)

    def test_translucent_fill_blends(self, canvas):
        """Half opacity blends with what is underneath."""
        canvas.clear('black')
        canvas.global_alpha = 0.5
        canvas.fill_rect(0, 0, 10, 10, '#ffffff')
        r, g, b = canvas.target.get_at((5, 5))[:3]
        assert 120 <= r <= 135
        assert r == g == b

    def test_zero_opacity_draws_nothing(self, canvas):
        """Fully transparent drawing leaves pixels unchanged."""
        canvas.clear('black')
        canvas.global_alpha = 0.0
        canvas.fill_rect(0, 0, 10, 10, '#ffffff')
        assert canvas.target.get_at((5, 5))[:3] == (0, 0, 0)

    def test_fill_circle(self, canvas):
        """fill_circle paints its center."""
        canvas.clear('black')
        canvas.fill_circle(50, 40, 6, 'white')
        assert canvas.target.get_at((50, 40))[:3] == (255, 255, 255)

    def test_text_draws_something(self, canvas):
        """text() renders visible pixels near its position."""
        canvas.clear('black')
        canvas.text("HI", 50, 40, size=30, color='white', align='center')
        lit = [(x, y) for x in range(100) for y in range(80)
               if canvas.target.get_at((x, y))[:3] != (0, 0, 0)]
        assert lit
        assert all(20 < x < 80 for x, _ in lit)

    def test_invalid_color_raises(self, canvas):
        """Unknown colors raise ValueError."""
        with pytest.raises(ValueError):
            canvas.fill_rect(0, 0, 1, 1, 'chartreuse-ish')
