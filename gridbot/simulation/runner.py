"""End-to-end program runs: compile, execute to completion, persist artifacts."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gridbot.compiler.generator import compile_program
from gridbot.config.types import InterpreterConfig, MotionConfig, RunConfig
from gridbot.domain.levels import get_level
from gridbot.domain.pose import AgentPose
from gridbot.domain.world import GridWorld
from gridbot.interpreter.interpreter import CommandInterpreter, StepResult
from gridbot.io.paths import (
    pose_trace_path,
    program_text_path,
    run_dir,
    run_log_path,
    summary_path,
    trace_image_path,
)
from gridbot.io.persistence import (
    PoseTraceRecorder,
    load_level_json,
    load_program_json,
    load_program_text,
    save_program_text,
    write_run_log,
)
from gridbot.simulation.motion import FrameObserver, MotionEngine
from gridbot.simulation.scheduler import ExecutionQueue, QueueState, QueueStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOutcome:
    """Result of running one instruction list to a settled queue state."""

    state: QueueState
    final_pose: AgentPose
    levels_completed: int
    results: tuple[StepResult, ...]

    @property
    def succeeded(self) -> bool:
        return self.state.status is QueueStatus.IDLE

    def summary(self) -> dict[str, Any]:
        pose = self.final_pose
        return {
            "status": self.state.status.value,
            "error": None if self.state.error is None else str(self.state.error),
            "failed_instruction": self.state.current if self.state.error is not None else None,
            "instructions_completed": len(self.results),
            "instructions_pending": len(self.state.pending),
            "level_completed": self.levels_completed > 0,
            "final_pose": {
                "x": pose.x,
                "y": pose.y,
                "direction": pose.heading.name,
                "carrying_cargo": pose.carrying_cargo,
            },
        }


async def execute_program(
    lines: Sequence[str],
    world: GridWorld,
    start_pose: AgentPose | None = None,
    motion: MotionConfig | None = None,
    interpreter_config: InterpreterConfig | None = None,
    frame_observers: Iterable[FrameObserver] = (),
) -> RunOutcome:
    """Run ``lines`` against ``world`` until the queue is idle or in error."""
    engine = MotionEngine(world, pose=start_pose, config=motion)
    for observer in frame_observers:
        engine.subscribe(observer)
    queue = ExecutionQueue(CommandInterpreter(interpreter_config), engine)
    state = await queue.run_to_completion(lines)
    return RunOutcome(
        state=state,
        final_pose=engine.committed_pose,
        levels_completed=engine.levels_completed,
        results=tuple(queue.completed),
    )


def load_world(config: RunConfig) -> GridWorld:
    if config.level_path is not None:
        return load_level_json(config.level_path)
    return get_level(config.level)


def load_instructions(config: RunConfig) -> list[str]:
    if config.instructions_path is not None:
        return load_program_text(config.instructions_path)
    if config.program_path is not None:
        return compile_program(load_program_json(config.program_path))
    raise ValueError("either program_path or instructions_path must be set")


def run_headless(config: RunConfig, run_id: str = "run") -> dict[str, Any]:
    """Compile and run a program from files, writing artifacts under ``out_dir/run_id``."""
    world = load_world(config)
    lines = load_instructions(config)
    directory = run_dir(Path(config.out_dir), run_id)
    directory.mkdir(parents=True, exist_ok=True)
    save_program_text(lines, program_text_path(directory))

    recorder = PoseTraceRecorder(pose_trace_path(directory), run_id=run_id)
    rendered: list[AgentPose] = []
    observers: list[FrameObserver] = []
    if config.write_trace:
        observers.append(recorder)
    if config.render_png:
        observers.append(rendered.append)
    try:
        outcome = asyncio.run(
            execute_program(
                lines,
                world,
                motion=config.motion,
                interpreter_config=config.interpreter,
                frame_observers=observers,
            )
        )
    finally:
        if config.write_trace:
            recorder.close()

    write_run_log(outcome.results, run_log_path(directory), run_id=run_id)
    if config.render_png:
        from gridbot.viz.render import render_trace

        render_trace(world, rendered, trace_image_path(directory), title=run_id)

    summary = {"run_id": run_id, "instructions": len(lines), **outcome.summary()}
    summary_path(directory).write_text(json.dumps(summary, ensure_ascii=False, indent=2))
    logger.info("Run %s finished with status %s", run_id, summary["status"])
    return summary
