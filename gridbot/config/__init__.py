"""Configuration layer: constants and typed config dataclasses."""

from gridbot.config.constants import (
    ANIMATION_DURATION,
    ANIMATION_FRAMES,
    DIRECTION_COUNT,
    FLUSH_THRESHOLD,
    GRID_HEIGHT,
    GRID_WIDTH,
    MAX_COMPILED_INSTRUCTIONS,
    MIN_SETTLE_PAUSE,
    SQUASH_MIN_FRAMES,
    SQUASH_MIN_SCALE,
    WAIT_UNIT_SECONDS,
    WALL_HEIGHT,
)
from gridbot.config.types import InterpreterConfig, MotionConfig, RunConfig

__all__ = [
    "ANIMATION_DURATION",
    "ANIMATION_FRAMES",
    "DIRECTION_COUNT",
    "FLUSH_THRESHOLD",
    "GRID_HEIGHT",
    "GRID_WIDTH",
    "InterpreterConfig",
    "MAX_COMPILED_INSTRUCTIONS",
    "MIN_SETTLE_PAUSE",
    "MotionConfig",
    "RunConfig",
    "SQUASH_MIN_FRAMES",
    "SQUASH_MIN_SCALE",
    "WAIT_UNIT_SECONDS",
    "WALL_HEIGHT",
]
