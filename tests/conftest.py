"""Shared pytest fixtures: headless pygame, a fake clock, a recording surface."""

import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pygame
import pytest

from retro_arcade.engine.surface import RenderSurface


class FakeTime:
    """Millisecond time source the test advances by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


class RecordingSurface(RenderSurface):
    """RenderSurface that records rectangles and text as they are drawn."""

    def __init__(self, width: int = 800, height: int = 600):
        super().__init__(pygame.Surface((width, height)))
        self.rects = []
        self.texts = []
        self.clears = 0

    def clear(self, color='#000000'):
        self.clears += 1
        super().clear(color)

    def fill_rect(self, x, y, width, height, color):
        self.rects.append({
            'rect': (x, y, width, height),
            'color': color,
            'alpha': self.global_alpha,
            'offset': self.offset,
        })
        super().fill_rect(x, y, width, height, color)

    def text(self, text, x, y, size=20, color='white', align='left'):
        self.texts.append(str(text))
        super().text(text, x, y, size=size, color=color, align=align)

    def reset_records(self):
        self.rects = []
        self.texts = []
        self.clears = 0


@pytest.fixture(scope='session', autouse=True)
def pygame_headless():
    """Initialise pygame once against the dummy video driver."""
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def surface():
    return RecordingSurface()
