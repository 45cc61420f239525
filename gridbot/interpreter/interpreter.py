"""Command interpreter: one instruction at a time against an ``AgentControls``.

Conditional execution uses a stack of booleans. ``IF`` pushes the evaluated
condition (or ``False`` without evaluating when already inside a skipped
branch); ``END_IF`` pops. A non-control instruction under a ``False`` top
frame is skipped but still reported as completed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from gridbot.config.types import InterpreterConfig
from gridbot.errors import (
    ConditionStackUnderflowError,
    UnbalancedConditionalError,
    UnknownConditionError,
)
from gridbot.interpreter.actuators import AgentControls
from gridbot.interpreter.instructions import Instruction, Opcode, parse_instruction
from gridbot.simulation.cancellation import CancellationToken

logger = logging.getLogger(__name__)

ConditionPredicate = Callable[[AgentControls], bool]


def is_wall_ahead(controls: AgentControls) -> bool:
    """True when the single cell directly ahead of the settled pose is a wall."""
    return controls.world.is_wall(*controls.committed_pose.cell_ahead())


DEFAULT_CONDITIONS: Mapping[str, ConditionPredicate] = {
    "IS_WALL_AHEAD": is_wall_ahead,
    "TRUE": lambda controls: True,
    "FALSE": lambda controls: False,
}


@dataclass(frozen=True)
class StepResult:
    """Outcome of one successfully completed instruction."""

    instruction: Instruction
    skipped: bool = False
    condition_value: bool | None = None
    cells_moved: int | None = None
    effective: bool | None = None


class CommandInterpreter:
    """Parses and dispatches instruction lines, tracking conditional frames."""

    def __init__(
        self,
        config: InterpreterConfig | None = None,
        conditions: Mapping[str, ConditionPredicate] | None = None,
    ) -> None:
        self.config = config or InterpreterConfig()
        self._conditions = dict(conditions or DEFAULT_CONDITIONS)
        self._stack: list[bool] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def skipping(self) -> bool:
        return bool(self._stack) and not self._stack[-1]

    def reset(self) -> None:
        self._stack.clear()

    def check_balanced(self) -> None:
        """Raise if any ``IF`` is still open (call at program end)."""
        if self._stack:
            raise UnbalancedConditionalError(
                f"program ended with {len(self._stack)} unclosed IF block(s)"
            )

    def register_condition(self, name: str, predicate: ConditionPredicate) -> None:
        self._conditions[name.upper()] = predicate

    async def execute(
        self,
        line: str,
        controls: AgentControls,
        token: CancellationToken | None = None,
    ) -> StepResult:
        """Run one instruction line to completion.

        Raises an :class:`~gridbot.errors.InstructionError` subclass on parse,
        parameter, or stack errors, and
        :class:`~gridbot.errors.ExecutionCancelled` when ``token`` is cancelled.
        """
        token = token or CancellationToken()
        instruction = parse_instruction(line)
        token.check()

        if instruction.opcode is Opcode.IF:
            return self._enter_if(instruction, controls)
        if instruction.opcode is Opcode.END_IF:
            if not self._stack:
                raise ConditionStackUnderflowError("END_IF without a matching IF", instruction.text)
            self._stack.pop()
            return StepResult(instruction=instruction)

        if self.skipping:
            logger.debug("Skipping %r inside a false branch", instruction.text)
            return StepResult(instruction=instruction, skipped=True)
        return await self._dispatch(instruction, controls, token)

    def _enter_if(self, instruction: Instruction, controls: AgentControls) -> StepResult:
        condition = instruction.condition or ""
        predicate = self._conditions.get(condition)
        if predicate is None:
            raise UnknownConditionError(f"Unknown condition: {condition!r}", instruction.text)
        if self.skipping:
            # Nested under a false branch: keep the whole subtree skipped.
            self._stack.append(False)
            return StepResult(instruction=instruction, skipped=True, condition_value=False)
        value = bool(predicate(controls))
        self._stack.append(value)
        return StepResult(instruction=instruction, condition_value=value)

    async def _dispatch(
        self, instruction: Instruction, controls: AgentControls, token: CancellationToken
    ) -> StepResult:
        op = instruction.opcode
        if op is Opcode.MOVE_FORWARD:
            moved = await controls.move_forward(instruction.argument or 1, token=token)
            return StepResult(instruction=instruction, cells_moved=moved)
        if op is Opcode.MOVE_BACKWARD:
            moved = await controls.move_backward(instruction.argument or 1, token=token)
            return StepResult(instruction=instruction, cells_moved=moved)
        if op is Opcode.TURN_LEFT:
            await controls.turn_left(token=token)
            return StepResult(instruction=instruction)
        if op is Opcode.TURN_RIGHT:
            await controls.turn_right(token=token)
            return StepResult(instruction=instruction)
        if op is Opcode.PICKUP:
            done = await controls.pick_up(token=token)
            return StepResult(instruction=instruction, effective=done)
        if op is Opcode.DROPOFF:
            done = await controls.drop_off(token=token)
            return StepResult(instruction=instruction, effective=done)
        if op is Opcode.WAIT:
            await token.sleep(self.config.wait_seconds(instruction.argument or 1))
            return StepResult(instruction=instruction)
        raise AssertionError(f"unhandled opcode {op}")
