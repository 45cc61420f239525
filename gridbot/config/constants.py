"""Centralized constants for the grid world, motion engine, and interpreter.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

GRID_WIDTH = 8
"""Default grid width in cells."""

GRID_HEIGHT = 8
"""Default grid height in cells."""

DIRECTION_COUNT = 4
"""Number of discrete agent headings (N, E, S, W)."""

ANIMATION_FRAMES = 20
"""Interpolation frames per move or turn."""

ANIMATION_DURATION = 0.3
"""Wall-clock seconds for one move or turn animation."""

MIN_SETTLE_PAUSE = 0.05
"""Lower bound in seconds for the pause between unit steps of a move."""

SQUASH_MIN_SCALE = 0.55
"""Vertical scale at the bottom of the pickup/dropoff squash animation."""

SQUASH_MIN_FRAMES = 4
"""Minimum frame count for the squash animation."""

WAIT_UNIT_SECONDS = 1.0
"""Seconds represented by one unit of ``WAIT <n>``."""

MAX_COMPILED_INSTRUCTIONS = 10_000
"""Safety cap on the length of an unrolled instruction list."""

FLUSH_THRESHOLD = 4_096
"""Flush buffered pose-trace rows to Parquet once this row count is reached."""

WALL_HEIGHT = 1.2
"""Default wall height metadata used by built-in levels."""
