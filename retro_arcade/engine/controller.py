"""
Session controller: owns the active game and the run loop.

The controller holds at most one live GameSession. Switching games always
stops and discards the current session first, so sessions never overlap.
Each session gets its own InputState and EffectsState, constructed here and
torn down when the session is discarded.

The controller also owns a second InputState for global keys (pause,
restart, quit) that lives for the controller's whole lifetime.

Usage:
    controller = SessionController(registry, host.surface, JsonScoreStore(),
                                   config=config, time_source=host.now)
    controller.switch_to('snake')
    controller.run(host)
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from retro_arcade.config import ArcadeConfig
from retro_arcade.engine.clock import SimulationClock
from retro_arcade.engine.effects import EffectsState
from retro_arcade.engine.input import InputState, KeyboardInputSource
from retro_arcade.engine.session import GameSession, monotonic_ms
from retro_arcade.engine.surface import RenderSurface
from retro_arcade.logging import emit_record, get_logger
from retro_arcade.scores import ScoreStore

if TYPE_CHECKING:
    import pygame

    from games.registry import GameRegistry

log = get_logger('controller')

HUD_COLOR = '#ffffff'
HUD_ACCENT = '#ffdd00'
OVERLAY_COLOR = 'rgba(0, 0, 0, 0.6)'


class ControllerState(Enum):
    """What the controller is currently showing."""
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameOverResult:
    """Outcome of a finished session."""
    game_id: str
    score: int
    high_score: int
    new_record: bool


class SessionController:
    """Top-level state machine driving one GameSession at a time.

    Args:
        registry: Game registry used to build sessions by identifier
        surface: Render surface shared by every session
        score_store: High score store
        config: Engine configuration (default ArcadeConfig())
        keyboard: Host keyboard source (created if omitted)
        time_source: Millisecond timestamp source used by sessions
        rng: Random source for effects (seedable for tests)
    """

    def __init__(
        self,
        registry: 'GameRegistry',
        surface: RenderSurface,
        score_store: ScoreStore,
        config: Optional[ArcadeConfig] = None,
        keyboard: Optional[KeyboardInputSource] = None,
        time_source: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.registry = registry
        self.surface = surface
        self.scores = score_store
        self.config = config or ArcadeConfig()
        self.keyboard = keyboard or KeyboardInputSource()
        self._time_source = time_source or monotonic_ms
        self._rng = rng

        self.global_input = InputState()
        self.keyboard.subscribe(self.global_input)

        self.session: Optional[GameSession] = None
        self.game_id: Optional[str] = None
        self._options: Dict[str, Any] = {}
        self.high_score = 0
        self.result: Optional[GameOverResult] = None
        self.running = True
        self._pause_locked = False

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> ControllerState:
        """Current controller state."""
        if self.result is not None:
            return ControllerState.GAME_OVER
        if self.session is None or not self.session.running:
            return ControllerState.IDLE
        if self.session.paused:
            return ControllerState.PAUSED
        return ControllerState.PLAYING

    # =========================================================================
    # Session management
    # =========================================================================

    def switch_to(self, game_id: str, **options) -> GameSession:
        """Stop the current session and start a fresh one of ``game_id``.

        Args:
            game_id: Registered game identifier
            **options: Game-specific constructor options, reused by restart()

        Raises:
            UnknownGameError: If ``game_id`` is not registered
        """
        game_class = self.registry.get_class(game_id)
        self._discard_session()
        self.result = None

        config = self.config
        input_state = InputState()
        session = game_class(
            self.surface,
            input_state=input_state,
            effects=EffectsState.from_config(config, rng=self._rng),
            clock=SimulationClock(config.step_seconds, config.max_frame_seconds),
            time_source=self._time_source,
            on_game_over=self._handle_game_over,
            game_id=game_id,
            background_color=config.background_color,
            **options,
        )
        # Only a constructed session receives keys
        self.keyboard.subscribe(input_state)

        self.session = session
        self.game_id = game_id
        self._options = dict(options)
        self.high_score = self.scores.get(game_id)
        session.start()
        self._record('start')
        return session

    def stop(self) -> None:
        """Stop and discard the active session, if any."""
        if self.session is not None:
            self._record('stop')
        self._discard_session()
        self.result = None

    def pause(self) -> None:
        """Pause the active session."""
        if self.state is ControllerState.PLAYING:
            self.session.pause()
            self._record('pause')

    def resume(self) -> None:
        """Resume the active session."""
        if self.state is ControllerState.PAUSED:
            self.session.resume()
            self._record('resume')

    def toggle_pause(self) -> None:
        """Pause if playing, resume if paused, otherwise do nothing."""
        if self.state is ControllerState.PLAYING:
            self.pause()
        elif self.state is ControllerState.PAUSED:
            self.resume()

    def restart(self) -> Optional[GameSession]:
        """Start the last played game again from scratch."""
        if self.game_id is None:
            return None
        return self.switch_to(self.game_id, **self._options)

    def quit(self) -> None:
        """Discard the session and end the run loop."""
        self.stop()
        self.running = False
        self.keyboard.unsubscribe(self.global_input)

    def _discard_session(self) -> None:
        session = self.session
        if session is None:
            return
        session.stop()
        self.keyboard.unsubscribe(session.input)
        session.input.release_all()
        session.effects.reset()
        self.session = None

    def _handle_game_over(self, score: int) -> None:
        game_id = self.game_id
        new_record = self.scores.set(game_id, score)
        if new_record:
            self.high_score = score
        self.result = GameOverResult(
            game_id=game_id,
            score=score,
            high_score=self.high_score,
            new_record=new_record,
        )
        log.info("%s finished with %d%s", game_id, score, " (new record)" if new_record else "")
        self._record('game_over', score=score, new_record=new_record)

    def _record(self, event: str, **fields) -> None:
        record = {'event': event, 'game_id': self.game_id}
        if self.session is not None:
            record['score'] = self.session.score
        record.update(fields)
        emit_record('session', record)

    # =========================================================================
    # Frame
    # =========================================================================

    def frame(self, now: float) -> None:
        """Run one host frame: global keys, the session's steps, one draw.

        Faults raised by the game propagate unchanged.
        """
        self._route_global_keys()
        if not self.running:
            return

        session = self.session
        if session is not None and session.running:
            session.frame(now)
        else:
            self.surface.clear(self.config.background_color)

        # A finished session stays visible behind the game-over overlay
        # for the frame that ended it, then goes away.
        if self.result is not None and self.session is not None and not self.session.running:
            self._discard_session()

        self._draw_hud()
        self.global_input.consume_frame()

    def _route_global_keys(self) -> None:
        keys = self.global_input
        config = self.config

        if self.state is ControllerState.GAME_OVER:
            if keys.is_pressed(config.restart_key):
                self.restart()
            elif keys.is_pressed(config.quit_key):
                self.quit()
            return

        pause_keys = config.pause_keys
        pause_held = any(keys.is_down(code) for code in pause_keys)
        pause_pressed = any(keys.is_pressed(code) for code in pause_keys)
        if (pause_pressed or pause_held) and not self._pause_locked:
            self._pause_locked = True
            self.toggle_pause()
            log.debug("Pause toggled, now %s", self.state.value)
        elif not pause_held:
            self._pause_locked = False

    def _draw_hud(self) -> None:
        surface = self.surface
        state = self.state
        width, height = surface.width, surface.height

        if self.session is not None:
            score = self.session.score
            surface.text(f"SCORE {score}", 10, 24, size=24, color=HUD_COLOR)
            surface.text(f"HI {max(self.high_score, score)}", width - 10, 24,
                         size=24, color=HUD_COLOR, align='right')

        if state is ControllerState.PAUSED:
            surface.fill_rect(0, 0, width, height, OVERLAY_COLOR)
            surface.text("PAUSED", width / 2, height / 2, size=64,
                         color=HUD_COLOR, align='center')
            surface.text(f"Press {self.config.pause_keys[0]} to resume", width / 2,
                         height / 2 + 40, size=24, color=HUD_COLOR, align='center')

        elif state is ControllerState.GAME_OVER:
            result = self.result
            surface.fill_rect(0, 0, width, height, OVERLAY_COLOR)
            surface.text("GAME OVER", width / 2, height / 2 - 40, size=64,
                         color=HUD_ACCENT, align='center')
            surface.text(f"SCORE {result.score}", width / 2, height / 2 + 10,
                         size=32, color=HUD_COLOR, align='center')
            if result.new_record:
                surface.text("NEW HIGH SCORE!", width / 2, height / 2 + 50,
                             size=28, color=HUD_ACCENT, align='center')
            surface.text(
                f"{self.config.restart_key} restart  {self.config.quit_key} quit",
                width / 2, height / 2 + 90, size=24, color=HUD_COLOR, align='center',
            )

    # =========================================================================
    # Run loop
    # =========================================================================

    def run(self, host, max_frames: Optional[int] = None) -> int:
        """Drive frames from a host until quit.

        The host provides ``next_frame() -> float`` (waits for the next
        frame and returns its millisecond timestamp), ``poll_events()``,
        ``quit_requested`` and ``present()``.

        Args:
            host: Frame source and presenter (normally a PygameHost)
            max_frames: Stop after this many frames (None runs until quit)

        Returns:
            Number of frames run
        """
        frames = 0
        while self.running:
            now = host.next_frame()
            events: List['pygame.event.Event'] = host.poll_events()
            if host.quit_requested:
                self.quit()
                break
            self.keyboard.process(events)
            self.frame(now)
            host.present()
            frames += 1
            if max_frames is not None and frames >= max_frames:
                break
        return frames
