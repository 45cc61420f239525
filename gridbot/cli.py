"""Command-line entrypoint: compile block programs, run them headless, check levels.

Subcommands:

- ``compile``      – turn a block-tree JSON export into instruction text
- ``run``          – compile (or load) instructions and execute them on a level
- ``check-level``  – report whether a level can be completed from the start pose

``run`` accepts ``--config path/to/config.json``; CLI arguments override
config-file values, which override built-in defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from gridbot.compiler.generator import compile_to_text
from gridbot.config.constants import ANIMATION_DURATION, ANIMATION_FRAMES
from gridbot.config.types import InterpreterConfig, MotionConfig, RunConfig
from gridbot.domain.levels import LEVELS, get_level
from gridbot.domain.pose import AgentPose
from gridbot.domain.reachability import level_is_solvable, shortest_path_length
from gridbot.domain.world import CellKind, GridWorld
from gridbot.errors import GridbotError
from gridbot.io.persistence import load_level_json, load_program_json
from gridbot.simulation.runner import run_headless

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config resolution helpers
# ---------------------------------------------------------------------------


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_optional_str(raw: object, key: str) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_bool(cli_val: bool | None, key: str, file_cfg: dict[str, object], default: bool) -> bool:
    return _coerce_bool(_get_val(cli_val, key, file_cfg, default), key)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_path(
    cli_val: Path | None, key: str, file_cfg: dict[str, object], default: str | None
) -> Path | None:
    raw = _coerce_optional_str(_get_val(cli_val, key, file_cfg, default), key)
    return None if raw is None else Path(raw)


def _load_config_file(parser: argparse.ArgumentParser, path: Path | None) -> dict[str, object]:
    if path is None:
        return {}
    try:
        payload = json.loads(Path(path).read_text())
    except FileNotFoundError:
        parser.error(f"Config file not found: {path}")
    except json.JSONDecodeError as exc:
        parser.error(f"Config file is not valid JSON: {path}: {exc}")
    if not isinstance(payload, dict):
        parser.error(f"Config file must contain a JSON object: {path}")
    return payload


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_level_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--level", type=str, choices=sorted(LEVELS), default=None)
    group.add_argument("--level-file", type=Path, default=None, help="Level JSON file")


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="gridbot", description="Compile and run block programs for a grid robot"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Compile a block tree to instructions")
    compile_parser.add_argument("--program", type=Path, required=True, help="Block tree JSON")
    compile_parser.add_argument(
        "--output", type=Path, default=None, help="Write instructions here instead of stdout"
    )

    run_parser = subparsers.add_parser("run", help="Run a program headless on a level")
    run_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    source = run_parser.add_mutually_exclusive_group()
    source.add_argument("--program", type=Path, default=None, help="Block tree JSON")
    source.add_argument("--instructions", type=Path, default=None, help="Instruction text file")
    _add_level_arguments(run_parser)
    run_parser.add_argument("--out-dir", type=Path, default=None)
    run_parser.add_argument("--run-id", type=str, default=None)
    run_parser.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Multiplier on animation and wait durations (0 runs instantly)",
    )
    run_parser.add_argument("--frames", type=int, default=None)
    run_parser.add_argument("--trace", action=argparse.BooleanOptionalAction, default=None)
    run_parser.add_argument("--render-png", action=argparse.BooleanOptionalAction, default=None)

    check_parser = subparsers.add_parser("check-level", help="Report level solvability")
    _add_level_arguments(check_parser)
    return parser


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


def _resolve_world(level: str | None, level_file: Path | None) -> GridWorld:
    if level_file is not None:
        return load_level_json(level_file)
    return get_level(level or "level1")


def _handle_compile(args: argparse.Namespace) -> None:
    text = compile_to_text(load_program_json(args.program))
    if args.output is None:
        sys.stdout.write(text)
        return
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(text)
    print(json.dumps({"output": str(args.output), "instructions": text.count("\n")}, indent=2))


def _handle_run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    file_cfg = _load_config_file(parser, args.config)

    program_path = _get_path(args.program, "program", file_cfg, None)
    instructions_path = _get_path(args.instructions, "instructions", file_cfg, None)
    if args.program is not None:
        instructions_path = None
    elif args.instructions is not None:
        program_path = None
    if program_path is None and instructions_path is None:
        parser.error("run needs --program or --instructions (on the CLI or in the config file)")

    level_path = _get_path(args.level_file, "level_file", file_cfg, None)
    level = str(_get_val(args.level, "level", file_cfg, "level1"))
    if args.level is not None:
        level_path = None
    time_scale = _get_float(args.time_scale, "time_scale", file_cfg, 1.0)
    frames = _get_int(args.frames, "frames", file_cfg, ANIMATION_FRAMES)
    if time_scale < 0:
        parser.error("--time-scale must be >= 0")

    motion = (
        MotionConfig.instant()
        if time_scale == 0
        else MotionConfig(frames=frames, duration=ANIMATION_DURATION * time_scale)
    )
    config = RunConfig(
        level=level,
        level_path=level_path,
        program_path=program_path,
        instructions_path=instructions_path,
        out_dir=_get_path(args.out_dir, "out_dir", file_cfg, "data/runs") or Path("data/runs"),
        motion=motion,
        interpreter=InterpreterConfig(time_scale=time_scale),
        write_trace=_get_bool(args.trace, "trace", file_cfg, True),
        render_png=_get_bool(args.render_png, "render_png", file_cfg, False),
    )
    run_id = str(_get_val(args.run_id, "run_id", file_cfg, "run"))
    summary = run_headless(config, run_id=run_id)
    print(json.dumps(summary, ensure_ascii=False, indent=2))


def _handle_check_level(args: argparse.Namespace) -> None:
    world = _resolve_world(args.level, args.level_file)
    start = AgentPose.start(world.height).cell
    pickups = world.cells_of_kind(CellKind.PICKUP)
    dropoffs = world.cells_of_kind(CellKind.DROPOFF)
    summary = {
        "width": world.width,
        "height": world.height,
        "start": list(start),
        "start_enterable": world.can_enter(*start),
        "pickups": [list(cell) for cell in pickups],
        "dropoffs": [list(cell) for cell in dropoffs],
        "solvable": level_is_solvable(world, start),
        "walls": len(world.cells_of_kind(CellKind.WALL)),
    }
    # Pickup needs orthogonal adjacency; measure to the nearest cell beside one.
    distances = [
        shortest_path_length(world, start, cell)
        for pickup in pickups
        for cell in world.neighbors(*pickup)
    ]
    reachable = [d for d in distances if d is not None]
    summary["moves_to_pickup"] = min(reachable) if reachable else None
    print(json.dumps(summary, ensure_ascii=False, indent=2))


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "compile":
            _handle_compile(args)
        elif args.command == "run":
            _handle_run(parser, args)
        else:
            _handle_check_level(args)
    except (GridbotError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        parser.exit(2, f"gridbot {args.command}: error: {exc}\n")


if __name__ == "__main__":
    main()
