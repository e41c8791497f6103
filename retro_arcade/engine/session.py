"""Base class for all arcade games.

A GameSession is one play-through of one game. Concrete games subclass it
and override three hooks:

    - init(): reset every per-game entity (called once per start())
    - update(dt): advance the game by one fixed step of ``dt`` seconds
    - draw(): render the current state onto ``self.surface``

The base class owns the lifecycle (stopped -> running <-> paused ->
stopped), the fixed-step frame pump, and the services every game shares:
an InputState, an EffectsState (particles and screen shake), and a few
drawing helpers.

A session never schedules itself. Its owner calls ``frame(now)`` once per
host frame for as long as ``running`` is true.

Usage:
    class MyGame(GameSession):
        GAME_ID = 'mygame'
        NAME = 'My Game'

        def init(self):
            self.x = self.width / 2

        def update(self, dt):
            if self.input.is_down('ArrowRight'):
                self.x += 200 * dt

        def draw(self):
            self.surface.fill_rect(self.x, 300, 20, 20, '#0aff00')
"""

import time
from enum import Enum
from typing import Callable, Optional

from models import ColorLike
from retro_arcade.engine.clock import SimulationClock
from retro_arcade.engine.effects import EffectsState
from retro_arcade.engine.input import InputState
from retro_arcade.engine.surface import RenderSurface
from retro_arcade.logging import get_logger

log = get_logger('session')


def monotonic_ms() -> float:
    """Default time source: monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class SessionState(Enum):
    """Lifecycle state of a game session."""
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class GameSession:
    """Lifecycle and frame pump shared by every game.

    Class Attributes (metadata):
        GAME_ID: Identifier used for registry lookup and high scores
        NAME: Display name for the game
        DESCRIPTION: Short description of gameplay
        VERSION: Semantic version string
        AUTHOR: Author/team name

    Attributes:
        game_id: Identifier this session reports scores under
        surface: Drawing surface for draw()
        input: Keyboard state for this session
        effects: Particles and screen shake for this session
        clock: Fixed-step simulation clock
        running: True between start() and stop()
        paused: True while paused
        score: Current score
    """

    GAME_ID: str = ""
    NAME: str = "Unnamed Game"
    DESCRIPTION: str = "No description"
    VERSION: str = "1.0.0"
    AUTHOR: str = "Unknown"

    def __init__(
        self,
        surface: RenderSurface,
        input_state: Optional[InputState] = None,
        effects: Optional[EffectsState] = None,
        clock: Optional[SimulationClock] = None,
        time_source: Optional[Callable[[], float]] = None,
        on_game_over: Optional[Callable[[int], None]] = None,
        game_id: Optional[str] = None,
        background_color: ColorLike = '#000000',
    ):
        self.game_id = game_id or self.GAME_ID
        self.surface = surface
        self.width = surface.width
        self.height = surface.height
        self.input = input_state or InputState()
        self.effects = effects or EffectsState()
        self.clock = clock or SimulationClock()
        self.background_color = background_color
        self._time_source = time_source or monotonic_ms
        self._on_game_over = on_game_over

        self.running = False
        self.paused = False
        self.score = 0
        self._game_over_reported = False

    # =========================================================================
    # Game hooks (override in subclasses)
    # =========================================================================

    def init(self) -> None:
        """Reset all per-game entities. Called exactly once by start()."""
        pass

    def update(self, dt: float) -> None:
        """Advance the game by one fixed step of ``dt`` seconds."""
        pass

    def draw(self) -> None:
        """Render the current state. Called once per frame, paused or not."""
        pass

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        if not self.running:
            return SessionState.STOPPED
        if self.paused:
            return SessionState.PAUSED
        return SessionState.RUNNING

    def start(self) -> None:
        """Start the session. Does nothing if already running.

        Restarting a game must go through a fresh start(), never through
        a direct call to init().
        """
        if self.running:
            return
        self.running = True
        self.paused = False
        self._game_over_reported = False
        self.clock.reset(self._time_source())
        self.effects.reset()
        self.input.consume_frame()
        self.init()
        log.info("Started %s", self.game_id or type(self).__name__)

    def stop(self) -> None:
        """Stop the session. The next frame() call does nothing."""
        if self.running:
            log.info("Stopped %s (score %d)", self.game_id or type(self).__name__, self.score)
        self.running = False
        self.paused = False

    def pause(self) -> None:
        """Suspend simulation steps. Frames keep drawing while paused."""
        if self.running and not self.paused:
            self.paused = True
            log.debug("Paused %s", self.game_id)

    def resume(self) -> None:
        """Resume simulation without crediting the time spent paused.

        Key presses that happened while paused are dropped.
        """
        if self.running and self.paused:
            self.paused = False
            self.clock.reset(self._time_source())
            self.input.consume_frame()
            log.debug("Resumed %s", self.game_id)

    def frame(self, now: float) -> bool:
        """Run one host frame: zero or more fixed steps, then one draw.

        Each step reads input, calls update(), advances effects, then
        clears the input edges. If a step stops the session, the remaining
        steps of this frame are skipped; the frame is still drawn.

        Exceptions from update() or draw() propagate to the caller.

        Args:
            now: Host timestamp in milliseconds

        Returns:
            True if the session is still running afterwards
        """
        if not self.running:
            return False

        if not self.paused:
            steps = self.clock.tick(now)
            dt = self.clock.step_seconds
            for _ in range(steps):
                self.update(dt)
                self.effects.update(dt)
                self.input.consume_frame()
                if not self.running:
                    break

        self.render()
        return self.running

    def render(self) -> None:
        """Clear the surface and draw the game under the shake offset."""
        self.surface.clear(self.background_color)
        dx, dy = self.effects.shake_offset()
        with self.surface.saved():
            self.surface.translate(dx, dy)
            self.draw()
        self.effects.advance_frame()

    def game_over(self) -> None:
        """End the session and report the score to the owner once."""
        self.stop()
        if self._game_over_reported:
            return
        self._game_over_reported = True
        log.info("Game over in %s with score %d", self.game_id, self.score)
        if self._on_game_over is not None:
            self._on_game_over(self.score)

    # =========================================================================
    # Shared utilities
    # =========================================================================

    @property
    def render_alpha(self) -> float:
        """Interpolation fraction between the last two simulation steps."""
        return self.clock.alpha

    def add_score(self, points: int) -> int:
        """Add points to the score and return the new total."""
        self.score += points
        return self.score

    def emit(self, x: float, y: float, color: ColorLike, count: int = 10,
             speed: float = 100.0, life: float = 0.5) -> None:
        """Spawn a particle burst."""
        self.effects.emit(x, y, color, count, speed, life)

    def shake(self, magnitude: float, duration: Optional[float] = None) -> None:
        """Start a screen shake."""
        self.effects.shake(magnitude, duration)

    def draw_particles(self) -> None:
        """Draw this session's particles at the current point in draw()."""
        self.effects.draw(self.surface)

    def draw_text(self, text: str, x: float, y: float, size: int = 20,
                  color: ColorLike = 'white', align: str = 'left') -> None:
        """Draw a line of text with its baseline at ``y``."""
        self.surface.text(text, x, y, size=size, color=color, align=align)
