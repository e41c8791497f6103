"""
Fixed-timestep simulation clock.

Converts variable-rate frame timestamps from the host into a whole number
of fixed-size simulation steps per frame. Elapsed time per frame is capped
so that a stall (window dragged, process suspended) cannot trigger an
unbounded catch-up burst.
"""

from typing import Optional

from retro_arcade.logging import get_logger

log = get_logger('clock')

DEFAULT_STEP_SECONDS = 1.0 / 60.0
DEFAULT_MAX_FRAME_SECONDS = 0.25


class SimulationClock:
    """Accumulator-based fixed-step clock.

    Timestamps are host milliseconds (monotonically increasing). Each
    call to tick() credits the clamped elapsed time to an accumulator and
    drains it in whole steps. After every tick the accumulator lies in
    [0, step_seconds).

    Attributes:
        step_seconds: Size of one simulation step
        max_frame_seconds: Cap on elapsed time credited by a single tick

    Examples:
        >>> clock = SimulationClock()
        >>> clock.reset(0.0)
        >>> clock.tick(55.0)
        3
        >>> clock.tick(10_000.0)  # stall is capped at 0.25 s
        15
    """

    def __init__(
        self,
        step_seconds: float = DEFAULT_STEP_SECONDS,
        max_frame_seconds: float = DEFAULT_MAX_FRAME_SECONDS,
    ):
        if step_seconds <= 0.0:
            raise ValueError(f"step_seconds must be > 0, got {step_seconds}")
        if max_frame_seconds <= 0.0:
            raise ValueError(f"max_frame_seconds must be > 0, got {max_frame_seconds}")
        self.step_seconds = step_seconds
        self.max_frame_seconds = max_frame_seconds
        self._last_timestamp: Optional[float] = None
        self._accumulator = 0.0

    @property
    def accumulator(self) -> float:
        """Leftover simulation time carried to the next frame, in seconds."""
        return self._accumulator

    @property
    def alpha(self) -> float:
        """Fraction of a step left in the accumulator, in [0, 1)."""
        return self._accumulator / self.step_seconds

    @property
    def last_timestamp(self) -> Optional[float]:
        """Timestamp of the previous tick or reset, None before the first."""
        return self._last_timestamp

    def reset(self, now: float) -> None:
        """Restart elapsed-time measurement from ``now``.

        Called on start and on resume so that time spent stopped or paused
        is never credited to the simulation. The accumulator keeps its
        fractional remainder.

        Args:
            now: Current host timestamp in milliseconds
        """
        self._last_timestamp = now

    def tick(self, now: float) -> int:
        """Advance the clock to ``now`` and return the steps to run.

        Args:
            now: Current host timestamp in milliseconds

        Returns:
            Number of whole fixed steps to simulate this frame
        """
        if self._last_timestamp is None:
            self._last_timestamp = now
            return 0

        elapsed = max(0.0, (now - self._last_timestamp) / 1000.0)
        self._last_timestamp = now

        if elapsed > self.max_frame_seconds:
            log.debug("Frame took %.3fs, clamped to %.3fs", elapsed, self.max_frame_seconds)
            elapsed = self.max_frame_seconds

        self._accumulator += elapsed
        steps, self._accumulator = divmod(self._accumulator, self.step_seconds)
        return int(steps)
