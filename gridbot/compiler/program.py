"""Typed program tree produced by the visual block editor.

A program is an ordered sequence of ``BlockNode`` stacks. Statement slots
(``DO``) hold child sequences; value slots (``CONDITION``) hold a single
value block such as ``is_wall_ahead``.

The editor exports Blockly-style JSON where siblings are chained through
``"next": {"block": ...}`` and slots live under ``"inputs"``; this module
converts that chain form to and from the sequence form used by the compiler.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from gridbot.errors import LevelFormatError

FieldValue = int | float | str | bool


@dataclass(frozen=True)
class BlockNode:
    """One block: a type tag, literal field values, and nested slots."""

    type: str
    fields: Mapping[str, FieldValue] = field(default_factory=dict)
    statements: Mapping[str, Sequence[BlockNode]] = field(default_factory=dict)
    inputs: Mapping[str, BlockNode] = field(default_factory=dict)

    def body(self, slot: str = "DO") -> Sequence[BlockNode]:
        return self.statements.get(slot, ())


Program = Sequence[BlockNode]
"""Top-level ordered block sequence."""


def action(block_type: str, **fields: FieldValue) -> BlockNode:
    """Shorthand for a simple statement block."""
    return BlockNode(type=block_type, fields=dict(fields))


def repeat(times: int, body: Sequence[BlockNode]) -> BlockNode:
    return BlockNode(type="repeat_n_times", fields={"TIMES": times}, statements={"DO": tuple(body)})


def if_then(condition: BlockNode | None, body: Sequence[BlockNode]) -> BlockNode:
    inputs = {"CONDITION": condition} if condition is not None else {}
    return BlockNode(type="if_then", statements={"DO": tuple(body)}, inputs=inputs)


# ---------------------------------------------------------------------------
# Editor JSON conversion
# ---------------------------------------------------------------------------

_STATEMENT_SLOTS = frozenset({"DO", "ELSE"})


def _block_from_dict(raw: Mapping[str, Any]) -> BlockNode:
    if not isinstance(raw, Mapping) or "type" not in raw:
        raise LevelFormatError(f"block entry must be an object with a 'type': {raw!r}")
    statements: dict[str, tuple[BlockNode, ...]] = {}
    inputs: dict[str, BlockNode] = {}
    for slot, wrapper in (raw.get("inputs") or {}).items():
        inner = wrapper.get("block") if isinstance(wrapper, Mapping) else None
        if inner is None:
            continue
        # Statement slots hold chains; value slots hold a lone value block.
        if "next" in inner or slot in _STATEMENT_SLOTS:
            statements[slot] = tuple(_chain_from_dict(inner))
        else:
            inputs[slot] = _block_from_dict(inner)
    return BlockNode(
        type=str(raw["type"]),
        fields=dict(raw.get("fields") or {}),
        statements=statements,
        inputs=inputs,
    )


def _chain_from_dict(raw: Mapping[str, Any]) -> list[BlockNode]:
    chain: list[BlockNode] = []
    current: Mapping[str, Any] | None = raw
    while current is not None:
        chain.append(_block_from_dict(current))
        nxt = current.get("next")
        current = nxt.get("block") if isinstance(nxt, Mapping) else None
    return chain


def program_from_dict(payload: Any) -> list[BlockNode]:
    """Convert editor JSON into a block sequence.

    Accepts a workspace export (``{"blocks": {"blocks": [...]}}``), a list of
    top-level stacks, or a single top-level block. Stacks are concatenated in
    order.
    """
    if isinstance(payload, Mapping) and "blocks" in payload:
        payload = payload["blocks"]
        if isinstance(payload, Mapping):
            payload = payload.get("blocks", [])
    if isinstance(payload, Mapping):
        payload = [payload]
    if not isinstance(payload, list):
        raise LevelFormatError("program payload must be a block, a list of blocks, or a workspace")
    program: list[BlockNode] = []
    for stack in payload:
        program.extend(_chain_from_dict(stack))
    return program


def _chain_to_dict(blocks: Sequence[BlockNode]) -> dict[str, Any] | None:
    head: dict[str, Any] | None = None
    for block in reversed(blocks):
        entry = _block_to_dict(block)
        if head is not None:
            entry["next"] = {"block": head}
        head = entry
    return head


def _block_to_dict(block: BlockNode) -> dict[str, Any]:
    entry: dict[str, Any] = {"type": block.type}
    if block.fields:
        entry["fields"] = dict(block.fields)
    inputs: dict[str, Any] = {}
    for slot, value in block.inputs.items():
        inputs[slot] = {"block": _block_to_dict(value)}
    for slot, body in block.statements.items():
        chain = _chain_to_dict(body)
        if chain is not None:
            inputs[slot] = {"block": chain}
    if inputs:
        entry["inputs"] = inputs
    return entry


def program_to_dict(program: Program) -> dict[str, Any]:
    """Inverse of :func:`program_from_dict`, as a single-stack workspace export."""
    chain = _chain_to_dict(program)
    return {"blocks": {"blocks": [chain] if chain is not None else []}}
