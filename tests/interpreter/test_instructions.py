"""Tests for the instruction line grammar."""

from __future__ import annotations

import pytest

from gridbot.errors import InvalidParameterError, UnknownInstructionError
from gridbot.interpreter.instructions import Opcode, parse_instruction, parse_program_text


class TestParseInstruction:
    @pytest.mark.parametrize(
        ("line", "opcode", "argument"),
        [
            ("MOVE_FORWARD 3", Opcode.MOVE_FORWARD, 3),
            ("MOVE_BACKWARD 1", Opcode.MOVE_BACKWARD, 1),
            ("WAIT 2", Opcode.WAIT, 2),
            ("move_forward 2", Opcode.MOVE_FORWARD, 2),
            ("  TURN_LEFT  ", Opcode.TURN_LEFT, None),
            ("turn_right", Opcode.TURN_RIGHT, None),
            ("PICKUP", Opcode.PICKUP, None),
            ("DROPOFF", Opcode.DROPOFF, None),
            ("END_IF", Opcode.END_IF, None),
        ],
    )
    def test_valid_lines(self, line: str, opcode: Opcode, argument: int | None) -> None:
        instruction = parse_instruction(line)
        assert instruction.opcode is opcode
        assert instruction.argument == argument
        assert instruction.text == line.strip()

    def test_if_condition_is_upper_cased(self) -> None:
        instruction = parse_instruction("if is_wall_ahead")
        assert instruction.opcode is Opcode.IF
        assert instruction.condition == "IS_WALL_AHEAD"
        assert instruction.opcode.is_control

    @pytest.mark.parametrize("line", ["MOVE_FORWARD 0", "MOVE_BACKWARD -1", "WAIT -5"])
    def test_non_positive_counts(self, line: str) -> None:
        with pytest.raises(InvalidParameterError) as excinfo:
            parse_instruction(line)
        assert excinfo.value.instruction == line

    @pytest.mark.parametrize(
        "line",
        ["JUMP", "MOVE_FORWARD", "MOVE_FORWARD two", "TURN_LEFT 2", "IF", "MOVE_FORWARD 1.5", ""],
    )
    def test_unknown_lines(self, line: str) -> None:
        with pytest.raises(UnknownInstructionError, match="Unknown command"):
            parse_instruction(line)

    def test_actions_are_not_control(self) -> None:
        assert not Opcode.MOVE_FORWARD.is_control


def test_parse_program_text_drops_blank_lines() -> None:
    text = "MOVE_FORWARD 1\n\n  TURN_LEFT \n\n"
    assert parse_program_text(text) == ["MOVE_FORWARD 1", "TURN_LEFT"]
