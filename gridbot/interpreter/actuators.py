"""Capability interface the interpreter drives.

The interpreter never reaches for a shared global; a concrete
``AgentControls`` (normally the :class:`~gridbot.simulation.motion.MotionEngine`)
is passed in for every instruction.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from gridbot.domain.pose import AgentPose
from gridbot.domain.world import GridWorld
from gridbot.simulation.cancellation import CancellationToken


@runtime_checkable
class AgentControls(Protocol):
    """Actuators and sensors available to a running program."""

    world: GridWorld

    @property
    def committed_pose(self) -> AgentPose: ...

    async def move_forward(self, steps: int = 1, token: CancellationToken | None = None) -> int: ...

    async def move_backward(self, steps: int = 1, token: CancellationToken | None = None) -> int: ...

    async def turn_left(self, token: CancellationToken | None = None) -> None: ...

    async def turn_right(self, token: CancellationToken | None = None) -> None: ...

    async def pick_up(self, token: CancellationToken | None = None) -> bool: ...

    async def drop_off(self, token: CancellationToken | None = None) -> bool: ...
