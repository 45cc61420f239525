"""Motion engine: sole owner of the agent pose.

Every discrete action (unit move, quarter turn, squash) is animated as a
sequence of interpolated poses published to frame observers, then snapped to
an exact logical pose. Only those settled poses feed gameplay decisions.

"Cannot proceed" situations (wall ahead, nothing to pick up, not adjacent to
the dropoff) are silent no-ops, never errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from gridbot.config.constants import DIRECTION_COUNT, SQUASH_MIN_FRAMES
from gridbot.config.types import MotionConfig
from gridbot.domain.pose import AgentPose, Direction, shortest_turn
from gridbot.domain.world import GridWorld
from gridbot.errors import ExecutionCancelled
from gridbot.simulation.cancellation import CancellationToken

logger = logging.getLogger(__name__)

FrameObserver = Callable[[AgentPose], None]
LevelCompletedListener = Callable[[], None]


class MotionEngine:
    """Animates and validates agent actions against a static world."""

    def __init__(
        self,
        world: GridWorld,
        pose: AgentPose | None = None,
        config: MotionConfig | None = None,
    ) -> None:
        self.world = world
        self.config = config or MotionConfig()
        start = (pose or AgentPose.start(world.height)).settled()
        self._check_start(start)
        self._pose = start
        self._committed = start
        self._observers: list[FrameObserver] = []
        self._level_listeners: list[LevelCompletedListener] = []
        self.levels_completed = 0

    def _check_start(self, pose: AgentPose) -> None:
        if not self.world.can_enter(*pose.cell):
            raise ValueError(f"start cell {pose.cell} is not enterable")

    # ------------------------------------------------------------------ #
    # Observation
    # ------------------------------------------------------------------ #

    @property
    def pose(self) -> AgentPose:
        """Latest published pose (possibly mid-animation)."""
        return self._pose

    @property
    def committed_pose(self) -> AgentPose:
        """Last settled pose; the only one used for gameplay decisions."""
        return self._committed

    def subscribe(self, observer: FrameObserver) -> Callable[[], None]:
        """Register a per-frame pose observer; returns an unsubscribe callable."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def on_level_completed(self, listener: LevelCompletedListener) -> None:
        self._level_listeners.append(listener)

    def _publish(self, pose: AgentPose) -> None:
        self._pose = pose
        for observer in list(self._observers):
            observer(pose)

    def _commit(self, pose: AgentPose) -> None:
        settled = pose.settled()
        self._committed = settled
        self._publish(settled)

    def reset(self, pose: AgentPose | None = None) -> None:
        """Place the agent at a fresh start pose (between runs only)."""
        start = (pose or AgentPose.start(self.world.height)).settled()
        self._check_start(start)
        self._commit(start)

    # ------------------------------------------------------------------ #
    # Animation primitives
    # ------------------------------------------------------------------ #

    async def _animate_to(self, target: AgentPose, token: CancellationToken) -> None:
        origin = self._committed
        d_dir = shortest_turn(int(origin.direction), int(target.direction))
        dx = target.x - origin.x
        dy = target.y - origin.y
        moving = dx != 0 or dy != 0
        frames = self.config.frames
        try:
            for step in range(1, frames + 1):
                await token.sleep(self.config.frame_interval)
                t = step / frames
                if t < 1:
                    direction = (origin.direction + d_dir * t) % DIRECTION_COUNT
                else:
                    direction = target.direction
                self._publish(
                    replace(
                        origin,
                        x=origin.x + dx * t,
                        y=origin.y + dy * t,
                        direction=direction,
                        scale_y=1.0,
                        is_moving=moving,
                    )
                )
        except ExecutionCancelled:
            self._publish(self._committed)
            raise
        self._commit(target)

    async def _animate_squash(self, token: CancellationToken) -> None:
        origin = self._committed
        min_scale = self.config.squash_min_scale
        frames = max(SQUASH_MIN_FRAMES, self.config.frames // 2)
        half = frames // 2
        interval = self.config.duration / frames
        try:
            for i in range(1, half + 1):
                await token.sleep(interval)
                t = i / half
                self._publish(replace(origin, scale_y=1 - (1 - min_scale) * t))
            rest = frames - half
            for i in range(1, rest + 1):
                await token.sleep(interval)
                t = i / rest
                self._publish(replace(origin, scale_y=min_scale + (1 - min_scale) * t))
        except ExecutionCancelled:
            self._publish(self._committed)
            raise
        self._publish(replace(origin, scale_y=1.0))

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #

    async def _move(self, steps: int, sign: int, token: CancellationToken | None) -> int:
        token = token or CancellationToken()
        total = max(1, int(steps))
        moved = 0
        for _ in range(total):
            current = self._committed
            heading = current.heading
            dx, dy = heading.delta
            i, j = current.cell
            target_cell = (i + sign * dx, j + sign * dy)
            if not self.world.can_enter(*target_cell):
                logger.debug("Move blocked at %s heading %s", target_cell, heading.name)
                break
            target = replace(current, x=float(target_cell[0]), y=float(target_cell[1]))
            await self._animate_to(target, token)
            moved += 1
            await token.sleep(self.config.settle_pause)
        return moved

    async def move_forward(self, steps: int = 1, token: CancellationToken | None = None) -> int:
        """Advance up to ``steps`` cells; stops early at the first blocked cell.

        Returns the number of cells actually moved.
        """
        return await self._move(steps, 1, token)

    async def move_backward(self, steps: int = 1, token: CancellationToken | None = None) -> int:
        """Back up to ``steps`` cells while keeping the current heading."""
        return await self._move(steps, -1, token)

    async def _turn(self, quarter_turns: int, token: CancellationToken | None) -> None:
        token = token or CancellationToken()
        current = self._committed
        new_direction: Direction = current.heading.turned(quarter_turns)
        await self._animate_to(replace(current, direction=float(new_direction)), token)

    async def turn_left(self, token: CancellationToken | None = None) -> None:
        await self._turn(-1, token)

    async def turn_right(self, token: CancellationToken | None = None) -> None:
        await self._turn(1, token)

    async def pick_up(self, token: CancellationToken | None = None) -> bool:
        """Take cargo from an adjacent pickup cell; returns True on success."""
        token = token or CancellationToken()
        current = self._committed
        if current.carrying_cargo:
            return False
        if not self.world.is_adjacent_to_pickup(*current.cell):
            logger.debug("Pickup ignored: %s is not next to a pickup cell", current.cell)
            return False
        await self._animate_squash(token)
        self._commit(replace(self._committed, carrying_cargo=True))
        return True

    async def drop_off(self, token: CancellationToken | None = None) -> bool:
        """Deliver cargo to an adjacent dropoff cell; fires level completion on success."""
        token = token or CancellationToken()
        current = self._committed
        if not current.carrying_cargo:
            return False
        if not self.world.is_adjacent_to_dropoff(*current.cell):
            logger.debug("Dropoff ignored: %s is not next to a dropoff cell", current.cell)
            return False
        await self._animate_squash(token)
        self._commit(replace(self._committed, carrying_cargo=False))
        self.levels_completed += 1
        logger.info("Level completed at %s", current.cell)
        for listener in list(self._level_listeners):
            listener()
        return True
