"""Interpreter layer: instruction grammar, actuator interface, and dispatcher."""

from gridbot.interpreter.actuators import AgentControls
from gridbot.interpreter.instructions import (
    Instruction,
    Opcode,
    parse_instruction,
    parse_program_text,
)
from gridbot.interpreter.interpreter import (
    DEFAULT_CONDITIONS,
    CommandInterpreter,
    StepResult,
    is_wall_ahead,
)

__all__ = [
    "AgentControls",
    "CommandInterpreter",
    "DEFAULT_CONDITIONS",
    "Instruction",
    "Opcode",
    "StepResult",
    "is_wall_ahead",
    "parse_instruction",
    "parse_program_text",
]
