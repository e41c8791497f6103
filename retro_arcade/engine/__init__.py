"""
Engine core: clock, input, effects, render surface, sessions and controller.

Usage:
    from retro_arcade.engine import GameSession, SessionController
"""

from retro_arcade.engine.clock import SimulationClock
from retro_arcade.engine.input import InputState, KeyEvent, KeyboardInputSource
from retro_arcade.engine.effects import (
    EffectsState,
    Particle,
    ParticleSystem,
    ScreenShake,
)
from retro_arcade.engine.surface import RenderSurface
from retro_arcade.engine.session import GameSession, SessionState
from retro_arcade.engine.controller import ControllerState, GameOverResult, SessionController

__all__ = [
    'SimulationClock',
    'InputState',
    'KeyEvent',
    'KeyboardInputSource',
    'EffectsState',
    'Particle',
    'ParticleSystem',
    'ScreenShake',
    'RenderSurface',
    'GameSession',
    'SessionState',
    'ControllerState',
    'GameOverResult',
    'SessionController',
]
