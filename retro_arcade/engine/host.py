"""
pygame host: window, frame pacing, event pump and presentation.

Games draw onto a logical surface of the configured resolution. The host
scales it to the window on present(), so games never see the window size.
"""

from typing import List, Optional

import pygame

from models import Resolution
from retro_arcade.config import ArcadeConfig
from retro_arcade.engine.surface import RenderSurface
from retro_arcade.logging import get_logger

log = get_logger('host')


class PygameHost:
    """Owns the pygame display for one run of the arcade.

    Attributes:
        config: Engine configuration
        surface: Logical RenderSurface games draw onto
        quit_requested: True once the window has been closed
    """

    def __init__(self, config: Optional[ArcadeConfig] = None, caption: str = 'Retro Arcade'):
        self.config = config or ArcadeConfig()
        pygame.init()

        logical = Resolution(width=self.config.width, height=self.config.height)
        window = logical.scaled(self.config.scale)
        self.window = pygame.display.set_mode((window.width, window.height))
        pygame.display.set_caption(caption)

        self.canvas = pygame.Surface((logical.width, logical.height))
        self.surface = RenderSurface(self.canvas, font_name=self.config.font_name)
        self._clock = pygame.time.Clock()
        self.quit_requested = False
        log.info("Window %dx%d (logical %dx%d)", window.width, window.height,
                 logical.width, logical.height)

    def set_caption(self, caption: str) -> None:
        pygame.display.set_caption(caption)

    def now(self) -> float:
        """Milliseconds since pygame.init()."""
        return float(pygame.time.get_ticks())

    def next_frame(self) -> float:
        """Wait for the next frame at the configured rate and return its timestamp."""
        self._clock.tick(self.config.fps)
        return self.now()

    def poll_events(self) -> List[pygame.event.Event]:
        """Drain the pygame event queue, noting window close."""
        events = pygame.event.get()
        for event in events:
            if event.type == pygame.QUIT:
                self.quit_requested = True
        return events

    def present(self) -> None:
        """Scale the logical surface to the window and flip."""
        if self.window.get_size() == self.canvas.get_size():
            self.window.blit(self.canvas, (0, 0))
        else:
            pygame.transform.scale(self.canvas, self.window.get_size(), self.window)
        pygame.display.flip()

    def show_fault(self, exc: BaseException, wait: bool = True) -> None:
        """Draw a fault screen naming the exception.

        Args:
            exc: The fault that stopped the game
            wait: Block until a key press or window close
        """
        surface = self.surface
        with surface.saved():
            surface.clear('#200000')
            surface.text("The game stopped because of an error", surface.width / 2, 120,
                         size=32, color='#ff5555', align='center')
            surface.text(type(exc).__name__, surface.width / 2, 200, size=28,
                         color='white', align='center')
            message = str(exc) or '(no message)'
            for i, line in enumerate(message.splitlines()[:8]):
                surface.text(line[:90], surface.width / 2, 250 + i * 26, size=22,
                             color='#dddddd', align='center')
            surface.text("Press any key to exit", surface.width / 2, surface.height - 60,
                         size=24, color='white', align='center')
        self.present()

        while wait:
            event = pygame.event.wait()
            if event.type in (pygame.QUIT, pygame.KEYDOWN):
                break

    def close(self) -> None:
        pygame.quit()
