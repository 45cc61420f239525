"""Tests for gridbot.compiler.generator module."""

from __future__ import annotations

import logging

import pytest

from gridbot.compiler.generator import (
    DEFAULT_STATEMENT_HANDLERS,
    InstructionCompiler,
    compile_program,
    compile_to_text,
)
from gridbot.compiler.program import BlockNode, action, if_then, repeat
from gridbot.errors import CompileError

WALL_AHEAD = BlockNode(type="is_wall_ahead")


class TestStraightLinePrograms:
    def test_one_line_per_action(self) -> None:
        program = [
            action("move_forward", CELLS=2),
            action("turn_left"),
            action("turn_right"),
            action("pickup"),
            action("dropoff"),
            action("wait", SECONDS=3),
            action("move_backward", CELLS=1),
        ]
        assert compile_program(program) == [
            "MOVE_FORWARD 2",
            "TURN_LEFT",
            "TURN_RIGHT",
            "PICKUP",
            "DROPOFF",
            "WAIT 3",
            "MOVE_BACKWARD 1",
        ]

    def test_missing_count_defaults_to_one(self) -> None:
        assert compile_program([action("move_forward"), action("wait")]) == [
            "MOVE_FORWARD 1",
            "WAIT 1",
        ]

    def test_integral_floats_print_as_ints(self) -> None:
        assert compile_program([action("move_forward", CELLS=3.0)]) == ["MOVE_FORWARD 3"]

    def test_literal_is_passed_through_unvalidated(self) -> None:
        # Range checks happen when the instruction runs.
        assert compile_program([action("move_forward", CELLS=-2)]) == ["MOVE_FORWARD -2"]

    def test_empty_program(self) -> None:
        assert compile_program([]) == []
        assert compile_to_text([]) == ""

    def test_text_form_is_newline_terminated(self) -> None:
        text = compile_to_text([action("turn_left"), action("pickup")])
        assert text == "TURN_LEFT\nPICKUP\n"


class TestRepeat:
    def test_unrolls_body_n_times(self) -> None:
        body = [action("move_forward", CELLS=1), action("turn_right")]
        lines = compile_program([repeat(3, body)])
        assert lines == ["MOVE_FORWARD 1", "TURN_RIGHT"] * 3

    def test_nested_repeats_multiply(self) -> None:
        inner = repeat(4, [action("turn_left")])
        lines = compile_program([repeat(5, [inner])])
        assert lines == ["TURN_LEFT"] * 20

    def test_zero_times_emits_nothing(self) -> None:
        assert compile_program([repeat(0, [action("pickup")]), action("dropoff")]) == ["DROPOFF"]

    def test_string_count_is_accepted(self) -> None:
        block = BlockNode(
            type="repeat_n_times",
            fields={"TIMES": "2"},
            statements={"DO": (action("pickup"),)},
        )
        assert compile_program([block]) == ["PICKUP", "PICKUP"]

    @pytest.mark.parametrize("times", [-1, 2.5, "many", True])
    def test_invalid_count_is_a_compile_error(self, times: object) -> None:
        block = BlockNode(
            type="repeat_n_times",
            fields={"TIMES": times},
            statements={"DO": (action("pickup"),)},
        )
        with pytest.raises(CompileError):
            compile_program([block])

    def test_unroll_limit(self) -> None:
        compiler = InstructionCompiler(max_instructions=10)
        with pytest.raises(CompileError, match="limit 10"):
            compiler.compile([repeat(11, [action("turn_left")])])

    def test_program_limit_counts_siblings(self) -> None:
        compiler = InstructionCompiler(max_instructions=2)
        with pytest.raises(CompileError):
            compiler.compile([action("turn_left")] * 3)


class TestIfThen:
    def test_brackets_body(self) -> None:
        lines = compile_program([if_then(WALL_AHEAD, [action("turn_right")])])
        assert lines == ["IF IS_WALL_AHEAD", "TURN_RIGHT", "END_IF"]

    def test_empty_condition_is_false(self) -> None:
        lines = compile_program([if_then(None, [action("pickup")])])
        assert lines == ["IF FALSE", "PICKUP", "END_IF"]

    def test_unknown_condition_block_is_false(self) -> None:
        lines = compile_program([if_then(BlockNode(type="is_raining"), [])])
        assert lines == ["IF FALSE", "END_IF"]

    def test_nested_in_repeat_stays_balanced(self) -> None:
        program = [repeat(2, [if_then(WALL_AHEAD, [action("turn_left")]), action("move_forward")])]
        lines = compile_program(program)
        assert lines.count("END_IF") == lines.count("IF IS_WALL_AHEAD") == 2
        depth = 0
        for line in lines:
            if line.startswith("IF "):
                depth += 1
            elif line == "END_IF":
                depth -= 1
            assert depth >= 0
        assert depth == 0


class TestUnknownBlocks:
    def test_unknown_block_is_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        program = [action("turn_left"), BlockNode(type="teleport"), action("pickup")]
        with caplog.at_level(logging.WARNING, logger="gridbot.compiler.generator"):
            lines = compile_program(program)
        assert lines == ["TURN_LEFT", "PICKUP"]
        assert "teleport" in caplog.text

    def test_value_block_used_as_statement_is_skipped(self) -> None:
        assert compile_program([WALL_AHEAD]) == []


class TestRegistry:
    def test_default_registry(self) -> None:
        registry = InstructionCompiler().registry()
        assert "repeat_n_times" in registry["statements"]
        assert registry["values"] == ["is_wall_ahead"]

    def test_custom_handler(self) -> None:
        handlers = dict(DEFAULT_STATEMENT_HANDLERS)
        handlers["spin"] = lambda compiler, block: ["TURN_RIGHT"] * 4
        compiler = InstructionCompiler(statement_handlers=handlers)
        assert compiler.compile([BlockNode(type="spin")]) == ["TURN_RIGHT"] * 4

    def test_rejects_non_positive_limit(self) -> None:
        with pytest.raises(ValueError):
            InstructionCompiler(max_instructions=0)
