"""Tests for gridbot.simulation.motion module."""

from __future__ import annotations

import asyncio

import pytest

from gridbot.config.types import MotionConfig
from gridbot.domain.levels import first_level_grid
from gridbot.domain.pose import AgentPose, Direction
from gridbot.domain.world import GridWorld
from gridbot.errors import ExecutionCancelled
from gridbot.interpreter.actuators import AgentControls
from gridbot.simulation.cancellation import CancellationToken
from gridbot.simulation.motion import MotionEngine

INSTANT = MotionConfig.instant()


def _engine(world: GridWorld, config: MotionConfig = INSTANT) -> MotionEngine:
    return MotionEngine(world, config=config)


class TestMotionEngineSetup:
    def test_default_start_pose(self) -> None:
        engine = _engine(first_level_grid())
        assert engine.committed_pose.cell == (0, 7)
        assert engine.committed_pose.heading is Direction.EAST

    def test_is_agent_controls(self) -> None:
        assert isinstance(_engine(first_level_grid()), AgentControls)

    def test_rejects_wall_start(self) -> None:
        world = GridWorld.from_ascii(["#."])
        with pytest.raises(ValueError, match="not enterable"):
            MotionEngine(world, pose=AgentPose(x=0, y=0, direction=1.0), config=INSTANT)

    def test_reset(self) -> None:
        engine = _engine(GridWorld.empty(4, 4))
        asyncio.run(engine.move_forward(2))
        engine.reset()
        assert engine.committed_pose == AgentPose.start(4)


class TestMoves:
    def test_move_on_open_floor(self) -> None:
        engine = _engine(GridWorld.empty(8, 8))
        moved = asyncio.run(engine.move_forward(3))
        assert moved == 3
        assert engine.committed_pose.cell == (3, 7)

    def test_wall_ahead_is_a_no_op(self) -> None:
        world = GridWorld.from_ascii([".#", ".."])
        engine = MotionEngine(world, pose=AgentPose(x=0, y=1, direction=1.0), config=INSTANT)
        frames: list[AgentPose] = []
        engine.subscribe(frames.append)
        moved = asyncio.run(engine.move_forward(1))
        assert moved == 0
        assert engine.committed_pose.cell == (0, 1)
        assert frames == []

    def test_partial_multi_step_move(self) -> None:
        # Level 1 has a wall at (2, 7); from (0, 7) facing east only one cell is free.
        engine = _engine(first_level_grid())
        moved = asyncio.run(engine.move_forward(3))
        assert moved == 1
        assert engine.committed_pose.cell == (1, 7)

    def test_stops_in_front_of_wall_two_cells_away(self) -> None:
        world = GridWorld.from_ascii(["...#..", "......"])
        engine = MotionEngine(world, pose=AgentPose(x=0, y=1, direction=1.0), config=INSTANT)
        assert asyncio.run(engine.move_forward(5)) == 2
        assert engine.committed_pose.cell == (2, 1)

    def test_grid_edge_blocks(self) -> None:
        engine = _engine(GridWorld.empty(3, 3))
        moved = asyncio.run(engine.move_backward(2))
        assert moved == 0
        assert engine.committed_pose.cell == (0, 2)

    def test_backward_keeps_heading(self) -> None:
        engine = _engine(GridWorld.empty(5, 5))

        async def go() -> int:
            await engine.move_forward(3)
            return await engine.move_backward(2)

        assert asyncio.run(go()) == 2
        assert engine.committed_pose.cell == (1, 4)
        assert engine.committed_pose.heading is Direction.EAST

    def test_interpolated_frames(self) -> None:
        engine = _engine(GridWorld.empty(4, 4), config=MotionConfig(frames=5, duration=0.0))
        frames: list[AgentPose] = []
        engine.subscribe(frames.append)
        asyncio.run(engine.move_forward(1))
        xs = [frame.x for frame in frames]
        assert xs == sorted(xs)
        assert xs[0] == pytest.approx(0.2)
        assert frames[-1] == engine.committed_pose
        assert any(frame.is_moving for frame in frames)
        assert not frames[-1].is_moving

    def test_unsubscribe(self) -> None:
        engine = _engine(GridWorld.empty(4, 4))
        frames: list[AgentPose] = []
        unsubscribe = engine.subscribe(frames.append)
        unsubscribe()
        asyncio.run(engine.move_forward(1))
        assert frames == []


class TestTurns:
    def test_turn_right_and_left(self) -> None:
        engine = _engine(GridWorld.empty(4, 4))
        asyncio.run(engine.turn_right())
        assert engine.committed_pose.heading is Direction.SOUTH
        asyncio.run(engine.turn_left())
        asyncio.run(engine.turn_left())
        assert engine.committed_pose.heading is Direction.NORTH

    def test_turn_interpolates_along_short_arc(self) -> None:
        world = GridWorld.empty(4, 4)
        engine = MotionEngine(
            world,
            pose=AgentPose(x=0, y=0, direction=float(Direction.NORTH)),
            config=MotionConfig(frames=4, duration=0.0),
        )
        frames: list[AgentPose] = []
        engine.subscribe(frames.append)
        asyncio.run(engine.turn_left())
        # North (0) to West (3) passes through 3.x, never through 1 or 2.
        for frame in frames[:-2]:
            assert 3.0 < frame.direction < 4.0
        assert engine.committed_pose.heading is Direction.WEST
        assert engine.committed_pose.cell == (0, 0)


class TestCargo:
    def _beside_pickup(self) -> MotionEngine:
        world = first_level_grid()
        pose = AgentPose(x=1, y=6, direction=float(Direction.SOUTH))
        return MotionEngine(world, pose=pose, config=INSTANT)

    def test_pickup_away_from_pickup_cell_is_a_no_op(self) -> None:
        engine = _engine(first_level_grid())
        assert asyncio.run(engine.pick_up()) is False
        assert not engine.committed_pose.carrying_cargo

    def test_pickup_beside_pickup_cell(self) -> None:
        engine = self._beside_pickup()
        frames: list[AgentPose] = []
        engine.subscribe(frames.append)
        assert asyncio.run(engine.pick_up()) is True
        assert engine.committed_pose.carrying_cargo
        assert min(frame.scale_y for frame in frames) == pytest.approx(0.55)
        assert frames[-1].scale_y == 1.0

    def test_second_pickup_is_a_no_op(self) -> None:
        engine = self._beside_pickup()

        async def go() -> list[bool]:
            return [await engine.pick_up(), await engine.pick_up()]

        assert asyncio.run(go()) == [True, False]

    def test_dropoff_without_cargo_is_a_no_op(self) -> None:
        world = first_level_grid()
        engine = MotionEngine(world, pose=AgentPose(x=5, y=6, direction=0.0), config=INSTANT)
        assert asyncio.run(engine.drop_off()) is False
        assert engine.levels_completed == 0

    def test_full_delivery_fires_completion_once(self) -> None:
        engine = self._beside_pickup()
        completions: list[int] = []
        engine.on_level_completed(lambda: completions.append(1))

        async def go() -> list[bool]:
            picked = await engine.pick_up()
            await engine.turn_left()
            await engine.move_forward(4)
            dropped = await engine.drop_off()
            again = await engine.drop_off()
            return [picked, dropped, again]

        assert asyncio.run(go()) == [True, True, False]
        assert engine.committed_pose.cell == (5, 6)
        assert not engine.committed_pose.carrying_cargo
        assert completions == [1]
        assert engine.levels_completed == 1

    def test_dropoff_with_cargo_away_from_dropoff(self) -> None:
        engine = self._beside_pickup()

        async def go() -> bool:
            await engine.pick_up()
            return await engine.drop_off()

        assert asyncio.run(go()) is False
        assert engine.committed_pose.carrying_cargo


class TestCancellation:
    def test_cancel_mid_step_reverts_to_committed_pose(self) -> None:
        engine = _engine(GridWorld.empty(8, 8), config=MotionConfig(frames=10, duration=1.0))
        token = CancellationToken()

        async def go() -> None:
            task = asyncio.create_task(engine.move_forward(3, token=token))
            await asyncio.sleep(0.25)
            token.cancel("paused")
            await task

        with pytest.raises(ExecutionCancelled):
            asyncio.run(go())
        assert engine.committed_pose.cell == (0, 7)
        assert engine.pose == engine.committed_pose

    def test_committed_steps_survive_cancellation(self) -> None:
        engine = _engine(GridWorld.empty(8, 8), config=MotionConfig(frames=4, duration=0.2))
        token = CancellationToken()

        async def go() -> None:
            task = asyncio.create_task(engine.move_forward(5, token=token))
            # First step commits at ~0.2s, the second not before ~0.47s.
            await asyncio.sleep(0.4)
            token.cancel("paused")
            await task

        with pytest.raises(ExecutionCancelled):
            asyncio.run(go())
        assert engine.committed_pose.cell[0] >= 1
        assert engine.committed_pose.cell[0] < 5
        assert engine.pose == engine.committed_pose
