"""Program-to-instruction compiler.

Walks the block tree depth-first in sibling order and emits one flat list of
instruction lines. ``repeat_n_times`` is unrolled statically: its compiled
body is repeated ``TIMES`` times, so the instruction vocabulary needs no loop
primitive. ``if_then`` is bracketed by ``IF <condition>`` / ``END_IF``.

Unknown block types contribute no lines (a warning is logged) and never stop
compilation of their siblings.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from gridbot.config.constants import MAX_COMPILED_INSTRUCTIONS
from gridbot.errors import CompileError

if TYPE_CHECKING:
    from gridbot.compiler.program import BlockNode, FieldValue, Program

logger = logging.getLogger(__name__)

StatementHandler = Callable[["InstructionCompiler", "BlockNode"], list[str]]
ValueHandler = Callable[["InstructionCompiler", "BlockNode"], str]

FALSE_CONDITION = "FALSE"
"""Condition emitted for an ``if_then`` whose condition slot is empty."""


def _format_literal(value: FieldValue) -> str:
    """Render a field value as it appears on an instruction line."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _count_field(block: BlockNode, name: str) -> int:
    """Read a loop count that must be a non-negative integer literal."""
    raw = block.fields.get(name, 0)
    if isinstance(raw, bool):
        raise CompileError(f"{block.type}.{name} must be an integer, got {raw!r}")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise CompileError(f"{block.type}.{name} must be an integer, got {raw!r}")
        raw = int(raw)
    if isinstance(raw, str):
        try:
            raw = int(raw.strip())
        except ValueError as exc:
            raise CompileError(f"{block.type}.{name} must be an integer, got {raw!r}") from exc
    if not isinstance(raw, int):
        raise CompileError(f"{block.type}.{name} must be an integer, got {raw!r}")
    if raw < 0:
        raise CompileError(f"{block.type}.{name} must be >= 0, got {raw}")
    return raw


def _simple(keyword: str, field_name: str | None = None, default: int = 1) -> StatementHandler:
    """Handler for an action block that emits one line with an optional literal."""

    def handler(compiler: InstructionCompiler, block: BlockNode) -> list[str]:
        if field_name is None:
            return [keyword]
        value = block.fields.get(field_name, default)
        return [f"{keyword} {_format_literal(value)}"]

    return handler


def _repeat_n_times(compiler: InstructionCompiler, block: BlockNode) -> list[str]:
    times = _count_field(block, "TIMES")
    body = compiler.compile_sequence(block.body("DO"))
    if times and len(body) * times > compiler.max_instructions:
        raise CompileError(
            f"repeat_n_times unrolls to {len(body) * times} lines "
            f"(limit {compiler.max_instructions})"
        )
    return body * times


def _if_then(compiler: InstructionCompiler, block: BlockNode) -> list[str]:
    condition_block = block.inputs.get("CONDITION")
    condition = (
        compiler.compile_value(condition_block) if condition_block is not None else ""
    ) or FALSE_CONDITION
    return [f"IF {condition}", *compiler.compile_sequence(block.body("DO")), "END_IF"]


def _is_wall_ahead(compiler: InstructionCompiler, block: BlockNode) -> str:
    return "IS_WALL_AHEAD"


DEFAULT_STATEMENT_HANDLERS: Mapping[str, StatementHandler] = {
    "move_forward": _simple("MOVE_FORWARD", "CELLS"),
    "move_backward": _simple("MOVE_BACKWARD", "CELLS"),
    "turn_left": _simple("TURN_LEFT"),
    "turn_right": _simple("TURN_RIGHT"),
    "pickup": _simple("PICKUP"),
    "dropoff": _simple("DROPOFF"),
    "wait": _simple("WAIT", "SECONDS"),
    "repeat_n_times": _repeat_n_times,
    "if_then": _if_then,
}

DEFAULT_VALUE_HANDLERS: Mapping[str, ValueHandler] = {
    "is_wall_ahead": _is_wall_ahead,
}


class InstructionCompiler:
    """Compiles block trees to instruction lines using a handler registry.

    Additional block types can be bound by passing extended registries.
    """

    def __init__(
        self,
        statement_handlers: Mapping[str, StatementHandler] | None = None,
        value_handlers: Mapping[str, ValueHandler] | None = None,
        max_instructions: int = MAX_COMPILED_INSTRUCTIONS,
    ) -> None:
        if max_instructions < 1:
            raise ValueError("max_instructions must be >= 1")
        self._statements = dict(statement_handlers or DEFAULT_STATEMENT_HANDLERS)
        self._values = dict(value_handlers or DEFAULT_VALUE_HANDLERS)
        self.max_instructions = max_instructions

    def compile(self, program: Program) -> list[str]:
        lines = self.compile_sequence(program)
        if len(lines) > self.max_instructions:
            raise CompileError(
                f"program compiles to {len(lines)} lines (limit {self.max_instructions})"
            )
        return lines

    def compile_sequence(self, blocks: Program) -> list[str]:
        lines: list[str] = []
        for block in blocks:
            lines.extend(self.compile_block(block))
        return lines

    def compile_block(self, block: BlockNode) -> list[str]:
        handler = self._statements.get(block.type)
        if handler is None:
            if block.type in self._values:
                logger.warning("Value block %r used as a statement; ignoring", block.type)
            else:
                logger.warning("No compile rule for block type %r; skipping", block.type)
            return []
        return handler(self, block)

    def compile_value(self, block: BlockNode) -> str:
        handler = self._values.get(block.type)
        if handler is None:
            logger.warning("No condition rule for block type %r", block.type)
            return ""
        return handler(self, block)

    def registry(self) -> dict[str, list[str]]:
        """Return the bound statement and value block types."""
        return {"statements": sorted(self._statements), "values": sorted(self._values)}


def compile_program(program: Program, compiler: InstructionCompiler | None = None) -> list[str]:
    """Compile ``program`` with the default block registry."""
    return (compiler or InstructionCompiler()).compile(program)


def compile_to_text(program: Program, compiler: InstructionCompiler | None = None) -> str:
    """Compile ``program`` to newline-terminated instruction text."""
    lines = compile_program(program, compiler)
    return "".join(f"{line}\n" for line in lines)
