"""
Transient visual effects: particle bursts and screen shake.

Both effects are purely cosmetic. Particles advance with the simulation
(once per fixed step) so bursts look the same at any frame rate. Screen
shake only ever produces a draw-time translation and never touches
simulation state.

Two shake decay policies exist and are selected explicitly:

- ShakePolicy.DURATION: magnitude is held constant while a timer counts
  down once per simulation step; the shake stops abruptly at zero.
- ShakePolicy.DECAY: magnitude is multiplied by a decay factor every
  rendered frame and snaps to zero once it drops below a floor.
"""

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from models import ColorLike
from retro_arcade.config import ArcadeConfig, ShakePolicy

if TYPE_CHECKING:
    from retro_arcade.engine.surface import RenderSurface


@dataclass
class Particle:
    """A single short-lived particle.

    Attributes:
        x, y: Position in logical pixels
        vx, vy: Velocity in pixels per second
        life: Remaining life in seconds; the particle is removed at <= 0
        max_life: Requested life, used for the fade-out ratio
        color: Fill color
        size: Edge length of the square in pixels
    """
    x: float
    y: float
    vx: float
    vy: float
    life: float
    max_life: float
    color: ColorLike
    size: float

    @property
    def opacity(self) -> float:
        """Linear fade from 1 at spawn to 0 at end of life."""
        if self.max_life <= 0:
            return 0.0
        return max(0.0, min(1.0, self.life / self.max_life))


class ParticleSystem:
    """Owns a list of particles and advances them each simulation step.

    Examples:
        >>> system = ParticleSystem(rng=random.Random(1))
        >>> burst = system.emit(100, 100, '#fff', count=5, speed=0, life=1.0)
        >>> system.update(0.5)
        >>> len(system)
        5
        >>> system.update(0.6)
        >>> len(system)
        0
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        life_jitter: float = 0.1,
        size_range: Tuple[float, float] = (1.0, 4.0),
    ):
        self._rng = rng or random.Random()
        self.life_jitter = life_jitter
        self.size_range = size_range
        self.particles: List[Particle] = []

    def __len__(self) -> int:
        return len(self.particles)

    def emit(self, x: float, y: float, color: ColorLike, count: int = 10,
             speed: float = 100.0, life: float = 0.5) -> List[Particle]:
        """Spawn a burst of particles at a point.

        Each particle gets a uniformly random heading in [0, 2*pi), a speed
        uniformly in [0, speed), and a life of ``life`` plus a uniform
        jitter in [0, life * life_jitter) so the burst does not vanish all
        at once.

        Returns:
            The newly created particles
        """
        rng = self._rng
        min_size, max_size = self.size_range
        spawned = []
        for _ in range(count):
            angle = rng.random() * math.pi * 2
            velocity = rng.random() * speed
            spawned.append(Particle(
                x=x,
                y=y,
                vx=math.cos(angle) * velocity,
                vy=math.sin(angle) * velocity,
                life=life + rng.random() * life * self.life_jitter,
                max_life=life,
                color=color,
                size=min_size + rng.random() * (max_size - min_size),
            ))
        self.particles.extend(spawned)
        return spawned

    def update(self, dt: float) -> None:
        """Move every particle, age it by ``dt`` and drop the dead ones."""
        for p in self.particles:
            p.x += p.vx * dt
            p.y += p.vy * dt
            p.life -= dt
        self.particles = [p for p in self.particles if p.life > 0]

    def draw(self, surface: 'RenderSurface') -> None:
        """Draw each particle faded by its remaining life.

        The surface's global opacity is always left fully opaque afterwards,
        including when there is nothing to draw or drawing fails.
        """
        try:
            for p in self.particles:
                surface.global_alpha = p.opacity
                surface.fill_rect(p.x, p.y, p.size, p.size, p.color)
        finally:
            surface.global_alpha = 1.0

    def clear(self) -> None:
        """Remove all particles."""
        self.particles = []


class ScreenShake:
    """Screen shake state under a fixed decay policy.

    Attributes:
        policy: The decay policy in force
        magnitude: Current shake strength in pixels (0 when inactive)
        remaining: Seconds left (DURATION policy only)
    """

    def __init__(
        self,
        policy: ShakePolicy = ShakePolicy.DURATION,
        default_duration: float = 0.2,
        decay_factor: float = 0.9,
        floor: float = 0.5,
        rng: Optional[random.Random] = None,
    ):
        self.policy = policy
        self.default_duration = default_duration
        self.decay_factor = decay_factor
        self.floor = floor
        self._rng = rng or random.Random()
        self.magnitude = 0.0
        self.remaining = 0.0

    @property
    def active(self) -> bool:
        """True while the shake produces a non-zero offset."""
        if self.policy is ShakePolicy.DURATION:
            return self.remaining > 0 and self.magnitude > 0
        return self.magnitude > 0

    def start(self, magnitude: float, duration: Optional[float] = None) -> None:
        """Begin a shake, replacing any shake in progress.

        Under the DECAY policy ``duration`` is ignored. Under the DURATION
        policy a missing duration falls back to ``default_duration``.
        """
        self.magnitude = max(0.0, float(magnitude))
        if self.policy is ShakePolicy.DURATION:
            self.remaining = self.default_duration if duration is None else max(0.0, duration)

    def tick(self, dt: float) -> None:
        """Advance one simulation step (DURATION policy countdown)."""
        if self.policy is not ShakePolicy.DURATION or self.remaining <= 0:
            return
        self.remaining -= dt
        if self.remaining <= 0:
            self.remaining = 0.0
            self.magnitude = 0.0

    def advance_frame(self) -> None:
        """Advance one rendered frame (DECAY policy falloff)."""
        if self.policy is not ShakePolicy.DECAY or self.magnitude <= 0:
            return
        self.magnitude *= self.decay_factor
        if self.magnitude < self.floor:
            self.magnitude = 0.0

    def offset(self) -> Tuple[float, float]:
        """Random symmetric draw offset in [-magnitude/2, magnitude/2] per axis."""
        if not self.active:
            return (0.0, 0.0)
        half = self.magnitude / 2
        return (self._rng.uniform(-half, half), self._rng.uniform(-half, half))

    def reset(self) -> None:
        """Stop any shake immediately."""
        self.magnitude = 0.0
        self.remaining = 0.0


class EffectsState:
    """Particles plus screen shake for one game session.

    Examples:
        >>> effects = EffectsState()
        >>> effects.emit(400, 300, '#ff00de', count=10)
        >>> effects.shake(5, 0.2)
        >>> effects.update(1 / 60)
    """

    def __init__(self, particles: Optional[ParticleSystem] = None,
                 shake: Optional[ScreenShake] = None):
        self.particles = particles or ParticleSystem()
        self.screen_shake = shake or ScreenShake()

    @classmethod
    def from_config(cls, config: ArcadeConfig,
                    rng: Optional[random.Random] = None) -> 'EffectsState':
        """Build effects using the particle and shake settings of a config."""
        rng = rng or random.Random()
        return cls(
            particles=ParticleSystem(
                rng=rng,
                life_jitter=config.particle_life_jitter,
                size_range=config.particle_size_range,
            ),
            shake=ScreenShake(
                policy=config.shake_policy,
                default_duration=config.shake_default_duration,
                decay_factor=config.shake_decay_factor,
                floor=config.shake_floor,
                rng=rng,
            ),
        )

    def emit(self, x: float, y: float, color: ColorLike, count: int = 10,
             speed: float = 100.0, life: float = 0.5) -> None:
        """Spawn a particle burst (see ParticleSystem.emit)."""
        self.particles.emit(x, y, color, count, speed, life)

    def shake(self, magnitude: float, duration: Optional[float] = None) -> None:
        """Start a screen shake (see ScreenShake.start)."""
        self.screen_shake.start(magnitude, duration)

    def update(self, dt: float) -> None:
        """Advance effects by one simulation step."""
        self.particles.update(dt)
        self.screen_shake.tick(dt)

    def shake_offset(self) -> Tuple[float, float]:
        """Draw-time translation for the current frame."""
        return self.screen_shake.offset()

    def advance_frame(self) -> None:
        """Advance per-frame effect state after a frame has been drawn."""
        self.screen_shake.advance_frame()

    def draw(self, surface: 'RenderSurface') -> None:
        """Draw all particles."""
        self.particles.draw(surface)

    def reset(self) -> None:
        """Drop every particle and stop any shake."""
        self.particles.clear()
        self.screen_shake.reset()
