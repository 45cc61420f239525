"""Parquet schema definitions for run artifacts.

All Arrow schemas used for persisting pose traces and per-instruction run
logs are centralised here so that every module works against the same
column contracts.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

LEVEL_FORMAT_VERSION = 1
POSE_TRACE_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Run artifact schemas
# ---------------------------------------------------------------------------

POSE_TRACE_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("frame", pa.int64()),
        ("x", pa.float64()),
        ("y", pa.float64()),
        ("direction", pa.float64()),
        ("carrying_cargo", pa.bool_()),
        ("scale_y", pa.float64()),
        ("is_moving", pa.bool_()),
    ]
)

RUN_LOG_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("index", pa.int64()),
        ("instruction", pa.string()),
        ("opcode", pa.string()),
        ("skipped", pa.bool_()),
        ("condition_value", pa.bool_()),
        ("cells_moved", pa.int64()),
        ("effective", pa.bool_()),
    ]
)
