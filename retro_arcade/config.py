"""
Configuration for the arcade engine.

ArcadeConfig holds every tunable the engine core reads: logical resolution,
fixed-step timing, screen shake policy, particle jitter, and key bindings
for the session controller.

Configuration is layered, lowest priority first:
    1. Field defaults below
    2. A YAML file (``load_config(path)``)
    3. ARCADE_<FIELD> environment variables (ARCADE_SHAKE_POLICY=decay)
    4. Explicit overrides (command-line arguments)

Usage:
    from retro_arcade.config import load_config

    config = load_config('arcade.yaml', overrides={'scale': 2})
    clock = SimulationClock(config.step_seconds, config.max_frame_seconds)
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from retro_arcade.errors import ConfigError
from retro_arcade.logging import get_logger

log = get_logger('config')

ENV_PREFIX = 'ARCADE_'

# ARCADE_LOG_* and ARCADE_LOGGING_* belong to the logging system
_RESERVED_ENV_PREFIXES = ('ARCADE_LOG_', 'ARCADE_LOGGING_')


class ShakePolicy(Enum):
    """How an active screen shake winds down."""
    DURATION = "duration"
    DECAY = "decay"


class ArcadeConfig(BaseModel):
    """Engine configuration.

    Attributes:
        width: Logical surface width in pixels
        height: Logical surface height in pixels
        scale: Integer window scale factor applied when presenting
        fps: Render pacing target for the host
        step_seconds: Fixed simulation step size
        max_frame_seconds: Cap on elapsed time credited per frame
        shake_policy: Which screen shake decay curve to use
        shake_default_duration: Duration used for a duration-policy shake
            requested without one
        shake_decay_factor: Per-frame magnitude multiplier for decay policy
        shake_floor: Magnitude below which a decaying shake snaps to zero
        particle_life_jitter: Fraction of requested life added at random
        particle_size_range: (min, max) particle edge length in pixels
        pause_keys: Key codes that toggle pause
        restart_key: Key code that restarts after game over
        quit_key: Key code that leaves the arcade after game over
        background_color: Surface clear color
        font_name: pygame font name for text, None for the default font
        score_file: High score JSON path, None for the platform data dir
    """
    width: int = Field(800, gt=0)
    height: int = Field(600, gt=0)
    scale: int = Field(1, gt=0)
    fps: int = Field(60, gt=0)

    step_seconds: float = Field(1.0 / 60.0, gt=0)
    max_frame_seconds: float = Field(0.25, gt=0)

    shake_policy: ShakePolicy = ShakePolicy.DURATION
    shake_default_duration: float = Field(0.2, gt=0)
    shake_decay_factor: float = Field(0.9, gt=0, lt=1)
    shake_floor: float = Field(0.5, ge=0)

    particle_life_jitter: float = Field(0.1, ge=0, lt=1)
    particle_size_range: Tuple[float, float] = (1.0, 4.0)

    pause_keys: Tuple[str, ...] = ('Escape', 'KeyP')
    restart_key: str = 'KeyR'
    quit_key: str = 'KeyQ'

    background_color: str = '#000000'
    font_name: Optional[str] = None
    score_file: Optional[Path] = None

    model_config = ConfigDict(frozen=True, extra='forbid')

    @field_validator('particle_size_range')
    @classmethod
    def validate_size_range(cls, v: Tuple[float, float]) -> Tuple[float, float]:
        """Validate the particle size range is positive and ordered."""
        low, high = v
        if low <= 0 or high < low:
            raise ValueError(f'particle_size_range must satisfy 0 < min <= max, got {v}')
        return v

    @field_validator('pause_keys')
    @classmethod
    def validate_pause_keys(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError('pause_keys must name at least one key')
        return v


def _env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect ARCADE_<FIELD> overrides for known config fields."""
    environ = os.environ if environ is None else environ
    fields = ArcadeConfig.model_fields
    overrides: Dict[str, Any] = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key.startswith(_RESERVED_ENV_PREFIXES):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name not in fields:
            continue
        if name == 'particle_size_range':
            overrides[name] = tuple(float(part) for part in value.split(','))
        elif name == 'pause_keys':
            overrides[name] = tuple(part.strip() for part in value.split(',') if part.strip())
        else:
            overrides[name] = value
    return overrides


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> ArcadeConfig:
    """Load configuration from YAML, environment, and explicit overrides.

    Args:
        path: Optional YAML file containing a mapping of config fields
        overrides: Highest-priority values (None values are ignored)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated ArcadeConfig

    Raises:
        ConfigError: If the file cannot be read or the values are invalid
    """
    data: Dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file {path} must contain a mapping, got {type(loaded).__name__}")
        data.update(loaded)
        log.debug("Loaded %d settings from %s", len(loaded), path)

    data.update(_env_overrides(environ))

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ArcadeConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
