"""Load/save helpers for levels, programs, and run artifacts.

Levels and programs round-trip through JSON blobs so that a fresh world and
program can always be rebuilt from storage. Pose traces and run logs are
written to Parquet.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from gridbot.compiler.program import BlockNode, program_from_dict, program_to_dict
from gridbot.config.constants import FLUSH_THRESHOLD
from gridbot.domain.pose import AgentPose
from gridbot.domain.world import GridWorld
from gridbot.errors import LevelFormatError
from gridbot.interpreter.instructions import parse_program_text
from gridbot.interpreter.interpreter import StepResult
from gridbot.io.schemas import LEVEL_FORMAT_VERSION, POSE_TRACE_SCHEMA, RUN_LOG_SCHEMA

# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


def level_to_dict(world: GridWorld) -> dict[str, Any]:
    return {
        "version": LEVEL_FORMAT_VERSION,
        "width": world.width,
        "height": world.height,
        "rows": world.to_rows(),
    }


def level_from_dict(payload: Any) -> GridWorld:
    if not isinstance(payload, dict) or "rows" not in payload:
        raise LevelFormatError("level payload must be an object with 'rows'")
    world = GridWorld.from_rows(payload["rows"])
    for key, actual in (("width", world.width), ("height", world.height)):
        declared = payload.get(key)
        if declared is not None and declared != actual:
            raise LevelFormatError(f"level declares {key}={declared} but rows give {actual}")
    return world


def save_level_json(world: GridWorld, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(level_to_dict(world), ensure_ascii=False, indent=2))
    return path


def load_level_json(path: Path) -> GridWorld:
    try:
        payload = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise LevelFormatError(f"level file is not valid JSON: {path}: {exc}") from exc
    return level_from_dict(payload)


# ---------------------------------------------------------------------------
# Programs
# ---------------------------------------------------------------------------


def load_program_json(path: Path) -> list[BlockNode]:
    """Load an editor export and return its block sequence."""
    try:
        payload = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise LevelFormatError(f"program file is not valid JSON: {path}: {exc}") from exc
    return program_from_dict(payload)


def save_program_json(program: Sequence[BlockNode], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(program_to_dict(program), ensure_ascii=False, indent=2))
    return path


def save_program_text(lines: Sequence[str], path: Path) -> Path:
    """Persist compiled instructions, one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{line}\n" for line in lines))
    return path


def load_program_text(path: Path) -> list[str]:
    return parse_program_text(Path(path).read_text())


# ---------------------------------------------------------------------------
# Pose trace
# ---------------------------------------------------------------------------


class PoseTraceRecorder:
    """Frame observer that streams published poses to a Parquet file.

    Rows are buffered in memory and flushed every ``flush_threshold`` frames;
    call :meth:`close` (or use as a context manager) to flush the tail.
    """

    def __init__(self, path: Path, run_id: str, flush_threshold: int = FLUSH_THRESHOLD) -> None:
        if flush_threshold < 1:
            raise ValueError("flush_threshold must be >= 1")
        self.path = Path(path)
        self.run_id = run_id
        self.flush_threshold = flush_threshold
        self.frames_recorded = 0
        self._columns: dict[str, list[Any]] = {field.name: [] for field in POSE_TRACE_SCHEMA}
        self._writer: pq.ParquetWriter | None = None
        self._closed = False

    def __call__(self, pose: AgentPose) -> None:
        self._columns["run_id"].append(self.run_id)
        self._columns["frame"].append(self.frames_recorded)
        self._columns["x"].append(float(pose.x))
        self._columns["y"].append(float(pose.y))
        self._columns["direction"].append(float(pose.direction))
        self._columns["carrying_cargo"].append(pose.carrying_cargo)
        self._columns["scale_y"].append(float(pose.scale_y))
        self._columns["is_moving"].append(pose.is_moving)
        self.frames_recorded += 1
        if len(self._columns["frame"]) >= self.flush_threshold:
            self.flush()

    def flush(self) -> None:
        if not self._columns["frame"]:
            return
        table = pa.Table.from_pydict(self._columns, schema=POSE_TRACE_SCHEMA)
        if self._writer is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._writer = pq.ParquetWriter(self.path, POSE_TRACE_SCHEMA)
        self._writer.write_table(table)
        for values in self._columns.values():
            values.clear()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.flush()
        if self._writer is None:
            # No frames at all: still leave an empty, schema-correct file.
            self.path.parent.mkdir(parents=True, exist_ok=True)
            pq.write_table(POSE_TRACE_SCHEMA.empty_table(), self.path)
        else:
            self._writer.close()
            self._writer = None

    def __enter__(self) -> PoseTraceRecorder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def write_run_log(results: Sequence[StepResult], path: Path, run_id: str) -> Path:
    """Write one row per completed instruction."""
    rows = [
        {
            "run_id": run_id,
            "index": index,
            "instruction": result.instruction.text,
            "opcode": result.instruction.opcode.value,
            "skipped": result.skipped,
            "condition_value": result.condition_value,
            "cells_moved": result.cells_moved,
            "effective": result.effective,
        }
        for index, result in enumerate(results)
    ]
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(pa.Table.from_pylist(rows, schema=RUN_LOG_SCHEMA), path)
    return path
