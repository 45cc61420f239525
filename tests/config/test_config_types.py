"""Tests for gridbot.config constants and dataclasses."""

from __future__ import annotations

from pathlib import Path

import pytest

from gridbot.config.constants import (
    ANIMATION_DURATION,
    ANIMATION_FRAMES,
    DIRECTION_COUNT,
    FLUSH_THRESHOLD,
    GRID_HEIGHT,
    GRID_WIDTH,
    MAX_COMPILED_INSTRUCTIONS,
    MIN_SETTLE_PAUSE,
)
from gridbot.config.types import InterpreterConfig, MotionConfig, RunConfig


def test_grid_dimensions_are_positive_ints() -> None:
    assert isinstance(GRID_WIDTH, int) and GRID_WIDTH > 0
    assert isinstance(GRID_HEIGHT, int) and GRID_HEIGHT > 0


def test_four_headings() -> None:
    assert DIRECTION_COUNT == 4


def test_flush_threshold_is_large() -> None:
    assert isinstance(FLUSH_THRESHOLD, int) and FLUSH_THRESHOLD >= 1024


def test_compiled_instruction_cap_is_positive() -> None:
    assert isinstance(MAX_COMPILED_INSTRUCTIONS, int) and MAX_COMPILED_INSTRUCTIONS > 0


class TestMotionConfig:
    def test_defaults_match_constants(self) -> None:
        config = MotionConfig()
        assert config.frames == ANIMATION_FRAMES
        assert config.duration == ANIMATION_DURATION

    def test_settle_pause_is_a_third_of_duration(self) -> None:
        config = MotionConfig(duration=0.3)
        assert config.settle_pause == pytest.approx(0.1)

    def test_settle_pause_has_a_floor(self) -> None:
        config = MotionConfig(duration=0.06)
        assert config.settle_pause == MIN_SETTLE_PAUSE

    def test_settle_floor_applies_without_animation(self) -> None:
        config = MotionConfig(duration=0.0, min_settle=0.05)
        assert config.frame_interval == 0.0
        assert config.settle_pause == pytest.approx(0.05)

    def test_instant_config_never_sleeps(self) -> None:
        config = MotionConfig.instant()
        assert config.frame_interval == 0.0
        assert config.settle_pause == 0.0

    def test_frame_interval(self) -> None:
        config = MotionConfig(frames=10, duration=0.5)
        assert config.frame_interval == pytest.approx(0.05)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"frames": 0},
            {"duration": -0.1},
            {"min_settle": -1.0},
            {"squash_min_scale": 0.0},
            {"squash_min_scale": 1.5},
        ],
    )
    def test_rejects_invalid_values(self, kwargs: dict[str, float]) -> None:
        with pytest.raises(ValueError):
            MotionConfig(**kwargs)


class TestInterpreterConfig:
    def test_wait_seconds_scales(self) -> None:
        assert InterpreterConfig().wait_seconds(3) == 3.0
        assert InterpreterConfig(time_scale=0.5).wait_seconds(3) == 1.5
        assert InterpreterConfig(time_scale=0).wait_seconds(3) == 0.0

    def test_rejects_negative_scale(self) -> None:
        with pytest.raises(ValueError):
            InterpreterConfig(time_scale=-1)


class TestRunConfig:
    def test_program_sources_are_exclusive(self) -> None:
        with pytest.raises(ValueError, match="mutually exclusive"):
            RunConfig(program_path=Path("a.json"), instructions_path=Path("a.txt"))

    def test_needs_some_level(self) -> None:
        with pytest.raises(ValueError):
            RunConfig(level="")

    def test_level_file_without_name_is_fine(self) -> None:
        config = RunConfig(level="", level_path=Path("level.json"))
        assert config.level_path == Path("level.json")
