"""Exception hierarchy for compiling and running block programs.

World-interaction no-ops (wall ahead, no cargo, not adjacent) are deliberately
absent: those complete successfully and never raise.
"""

from __future__ import annotations


class GridbotError(Exception):
    """Base class for all gridbot errors."""


class CompileError(GridbotError):
    """Raised when a program tree cannot be turned into instructions."""


class LevelFormatError(GridbotError, ValueError):
    """Raised when a level or program blob is malformed."""


class InstructionError(GridbotError):
    """Base class for failures of a single queued instruction."""

    def __init__(self, message: str, instruction: str | None = None) -> None:
        super().__init__(message)
        self.instruction = instruction


class UnknownInstructionError(InstructionError):
    """The line matches no instruction pattern."""


class UnknownConditionError(UnknownInstructionError):
    """An ``IF`` names a condition with no registered predicate."""


class InvalidParameterError(InstructionError):
    """A numeric parameter is zero or negative."""


class ConditionStackUnderflowError(InstructionError):
    """``END_IF`` was reached with no open conditional."""


class UnbalancedConditionalError(InstructionError):
    """The program ended with conditionals still open."""


class ExecutionCancelled(GridbotError):
    """The in-flight instruction observed a pause/stop request."""
