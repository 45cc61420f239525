"""Configuration dataclasses for motion, interpretation, and CLI runs.

All frozen dataclasses that parameterise the motion engine, the command
interpreter, and end-to-end program runs live here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from gridbot.config.constants import (
    ANIMATION_DURATION,
    ANIMATION_FRAMES,
    MIN_SETTLE_PAUSE,
    SQUASH_MIN_SCALE,
    WAIT_UNIT_SECONDS,
)

__all__ = [
    "InterpreterConfig",
    "MotionConfig",
    "RunConfig",
]


@dataclass(frozen=True)
class MotionConfig:
    """Animation timing for the motion engine."""

    frames: int = ANIMATION_FRAMES
    duration: float = ANIMATION_DURATION
    """Seconds per move/turn animation; 0 disables frame sleeps."""
    min_settle: float = MIN_SETTLE_PAUSE
    squash_min_scale: float = SQUASH_MIN_SCALE

    def __post_init__(self) -> None:
        if self.frames < 1:
            raise ValueError("frames must be >= 1")
        if self.duration < 0:
            raise ValueError("duration must be >= 0")
        if self.min_settle < 0:
            raise ValueError("min_settle must be >= 0")
        if not 0.0 < self.squash_min_scale <= 1.0:
            raise ValueError("squash_min_scale must be in (0.0, 1.0]")

    @property
    def frame_interval(self) -> float:
        """Seconds slept between interpolation frames."""
        return self.duration / self.frames

    @property
    def settle_pause(self) -> float:
        """Pause inserted after each unit step of a multi-cell move."""
        return max(self.min_settle, self.duration / 3)

    @classmethod
    def instant(cls) -> MotionConfig:
        """Zero-duration animation, used for headless runs and tests."""
        return cls(frames=1, duration=0.0, min_settle=0.0)


@dataclass(frozen=True)
class InterpreterConfig:
    """Timing knobs for non-motion instructions."""

    wait_unit_seconds: float = WAIT_UNIT_SECONDS
    time_scale: float = 1.0
    """Multiplier applied to WAIT durations (0 makes waits instantaneous)."""

    def __post_init__(self) -> None:
        if self.wait_unit_seconds < 0:
            raise ValueError("wait_unit_seconds must be >= 0")
        if self.time_scale < 0:
            raise ValueError("time_scale must be >= 0")

    def wait_seconds(self, units: int) -> float:
        return units * self.wait_unit_seconds * self.time_scale


@dataclass(frozen=True)
class RunConfig:
    """End-to-end settings for a headless program run."""

    level: str = "level1"
    level_path: Path | None = None
    program_path: Path | None = None
    instructions_path: Path | None = None
    out_dir: Path = Path("data/runs")
    motion: MotionConfig = field(default_factory=MotionConfig)
    interpreter: InterpreterConfig = field(default_factory=InterpreterConfig)
    write_trace: bool = True
    render_png: bool = False

    def __post_init__(self) -> None:
        if self.program_path is not None and self.instructions_path is not None:
            raise ValueError("program_path and instructions_path are mutually exclusive")
        if not self.level and self.level_path is None:
            raise ValueError("either level or level_path must be set")
