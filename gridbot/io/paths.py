"""Path construction helpers for run output directories.

Centralises the directory/file naming conventions used by the CLI runner
and the persistence helpers.
"""

from __future__ import annotations

import re
from pathlib import Path

_SAFE_RUN_ID_RE = re.compile(r"^[A-Za-z0-9_\-]+$")


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve *path* and ensure it stays within the trusted *base_dir*.

    Raises :exc:`ValueError` if the resolved path escapes the base directory.
    """
    candidate = path if path.is_absolute() else base_dir / path
    resolved = candidate.resolve()
    base_resolved = base_dir.resolve()
    if resolved != base_resolved and base_resolved not in resolved.parents:
        raise ValueError(f"Path escapes base_dir: {path}")
    return resolved


def run_dir(out_dir: Path, run_id: str) -> Path:
    """Return path to the per-run output subdirectory."""
    if not _SAFE_RUN_ID_RE.match(run_id):
        raise ValueError(f"run_id must match [A-Za-z0-9_-]+, got {run_id!r}")
    return resolve_within_base(Path(run_id), out_dir)


def pose_trace_path(run_directory: Path) -> Path:
    """Return path to the pose trace Parquet file."""
    return run_directory / "pose_trace.parquet"


def run_log_path(run_directory: Path) -> Path:
    """Return path to the per-instruction run log Parquet file."""
    return run_directory / "run_log.parquet"


def program_text_path(run_directory: Path) -> Path:
    """Return path to the compiled instruction text."""
    return run_directory / "program.txt"


def summary_path(run_directory: Path) -> Path:
    """Return path to the JSON run summary."""
    return run_directory / "summary.json"


def trace_image_path(run_directory: Path) -> Path:
    """Return path to the rendered top-down trace image."""
    return run_directory / "trace.png"
