"""I/O layer: Parquet schemas, output paths, and level/program persistence."""

from gridbot.io.persistence import (
    PoseTraceRecorder,
    level_from_dict,
    level_to_dict,
    load_level_json,
    load_program_json,
    load_program_text,
    save_level_json,
    save_program_json,
    save_program_text,
    write_run_log,
)
from gridbot.io.schemas import POSE_TRACE_SCHEMA, RUN_LOG_SCHEMA

__all__ = [
    "POSE_TRACE_SCHEMA",
    "PoseTraceRecorder",
    "RUN_LOG_SCHEMA",
    "level_from_dict",
    "level_to_dict",
    "load_level_json",
    "load_program_json",
    "load_program_text",
    "save_level_json",
    "save_program_json",
    "save_program_text",
    "write_run_log",
]
