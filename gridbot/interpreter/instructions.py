"""Instruction vocabulary and line parser.

Grammar (one instruction per line, keywords case-insensitive)::

    MOVE_FORWARD <positive-int>
    MOVE_BACKWARD <positive-int>
    TURN_LEFT
    TURN_RIGHT
    PICKUP
    DROPOFF
    WAIT <positive-int-seconds>
    IF <condition>
    END_IF
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from gridbot.errors import InvalidParameterError, UnknownInstructionError


class Opcode(Enum):
    MOVE_FORWARD = "MOVE_FORWARD"
    MOVE_BACKWARD = "MOVE_BACKWARD"
    TURN_LEFT = "TURN_LEFT"
    TURN_RIGHT = "TURN_RIGHT"
    PICKUP = "PICKUP"
    DROPOFF = "DROPOFF"
    WAIT = "WAIT"
    IF = "IF"
    END_IF = "END_IF"

    @property
    def is_control(self) -> bool:
        return self in (Opcode.IF, Opcode.END_IF)


# Opcodes that carry a signed integer literal which must be positive.
_COUNTED = (Opcode.MOVE_FORWARD, Opcode.MOVE_BACKWARD, Opcode.WAIT)
_BARE = (Opcode.TURN_LEFT, Opcode.TURN_RIGHT, Opcode.PICKUP, Opcode.DROPOFF, Opcode.END_IF)

_COUNTED_RE = re.compile(
    r"^(?P<op>" + "|".join(op.value for op in _COUNTED) + r")\s+(?P<count>[+-]?\d+)$",
    re.IGNORECASE,
)
_BARE_RE = re.compile(
    r"^(?P<op>" + "|".join(op.value for op in _BARE) + r")$",
    re.IGNORECASE,
)
_IF_RE = re.compile(r"^IF\s+(?P<condition>[A-Za-z_][A-Za-z0-9_]*)$", re.IGNORECASE)


@dataclass(frozen=True)
class Instruction:
    """A parsed instruction line."""

    opcode: Opcode
    text: str
    argument: int | None = None
    condition: str | None = None


def parse_instruction(line: str) -> Instruction:
    """Parse one instruction line.

    Raises :class:`UnknownInstructionError` for lines matching no pattern and
    :class:`InvalidParameterError` for non-positive counts.
    """
    text = str(line).strip()
    match = _COUNTED_RE.match(text)
    if match:
        opcode = Opcode(match.group("op").upper())
        count = int(match.group("count"))
        if count <= 0:
            raise InvalidParameterError(
                f"{opcode.value} needs a positive count, got {count}: {text!r}", text
            )
        return Instruction(opcode=opcode, text=text, argument=count)
    match = _BARE_RE.match(text)
    if match:
        return Instruction(opcode=Opcode(match.group("op").upper()), text=text)
    match = _IF_RE.match(text)
    if match:
        return Instruction(opcode=Opcode.IF, text=text, condition=match.group("condition").upper())
    raise UnknownInstructionError(f"Unknown command: {text!r}", text)


def parse_program_text(text: str) -> list[str]:
    """Split instruction text into non-blank lines (parsing is deferred to run time)."""
    return [line.strip() for line in text.splitlines() if line.strip()]
