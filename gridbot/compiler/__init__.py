"""Compiler layer: program tree model and instruction generator."""

from gridbot.compiler.generator import (
    DEFAULT_STATEMENT_HANDLERS,
    DEFAULT_VALUE_HANDLERS,
    FALSE_CONDITION,
    InstructionCompiler,
    compile_program,
    compile_to_text,
)
from gridbot.compiler.program import (
    BlockNode,
    Program,
    action,
    if_then,
    program_from_dict,
    program_to_dict,
    repeat,
)

__all__ = [
    "BlockNode",
    "DEFAULT_STATEMENT_HANDLERS",
    "DEFAULT_VALUE_HANDLERS",
    "FALSE_CONDITION",
    "InstructionCompiler",
    "Program",
    "action",
    "compile_program",
    "compile_to_text",
    "if_then",
    "program_from_dict",
    "program_to_dict",
    "repeat",
]
