"""Execution queue: feeds instructions to the interpreter one at a time.

State machine::

    IDLE -> RUNNING -> (IDLE | ERROR)
            RUNNING <-> PAUSED

Pausing cancels the in-flight instruction cooperatively. That instruction is
abandoned rather than resumed: cells it already committed are kept, and
``resume()`` continues with the next un-started instruction.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from gridbot.errors import ExecutionCancelled, InstructionError
from gridbot.interpreter.actuators import AgentControls
from gridbot.interpreter.interpreter import CommandInterpreter, StepResult
from gridbot.simulation.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class QueueStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ERROR = "error"


@dataclass(frozen=True)
class QueueState:
    """Immutable snapshot of the queue."""

    pending: tuple[str, ...]
    current: str | None
    status: QueueStatus
    error: BaseException | None = None


StateObserver = Callable[[QueueState], None]
StepObserver = Callable[[StepResult], None]


class ExecutionQueue:
    """Cooperative single-instruction-in-flight scheduler.

    Control methods are synchronous and must be called from the event loop
    thread; advancement runs in a background task.
    """

    def __init__(self, interpreter: CommandInterpreter, controls: AgentControls) -> None:
        self.interpreter = interpreter
        self.controls = controls
        self._pending: deque[str] = deque()
        self._current: str | None = None
        self._status = QueueStatus.IDLE
        self._error: BaseException | None = None
        self._token: CancellationToken | None = None
        self._worker: asyncio.Task[None] | None = None
        self._settled = asyncio.Event()
        self._settled.set()
        self._state_observers: list[StateObserver] = []
        self._step_observers: list[StepObserver] = []
        self.completed: list[StepResult] = []

    # ------------------------------------------------------------------ #
    # Observation
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> QueueState:
        return QueueState(
            pending=tuple(self._pending),
            current=self._current,
            status=self._status,
            error=self._error,
        )

    @property
    def status(self) -> QueueStatus:
        return self._status

    def subscribe(self, observer: StateObserver) -> None:
        self._state_observers.append(observer)

    def on_step(self, observer: StepObserver) -> None:
        self._step_observers.append(observer)

    def _notify(self) -> None:
        snapshot = self.state
        for observer in list(self._state_observers):
            observer(snapshot)

    def _set_status(self, status: QueueStatus) -> None:
        if status is not self._status:
            logger.info("Queue %s -> %s", self._status.value, status.value)
        self._status = status
        if status is QueueStatus.RUNNING:
            self._settled.clear()
        else:
            self._settled.set()
        self._notify()

    # ------------------------------------------------------------------ #
    # Control
    # ------------------------------------------------------------------ #

    def run(self, instructions: Iterable[str]) -> None:
        """Replace the pending list and start running, pre-empting any in-flight work."""
        self._cancel_in_flight("preempted by run")
        self._pending = deque(instructions)
        self._current = None
        self._error = None
        self.interpreter.reset()
        self._set_status(QueueStatus.RUNNING)
        self._kick()

    def enqueue(self, instruction: str) -> None:
        self._pending.append(instruction)
        self._notify()
        self._kick()

    def set_queue(self, instructions: Iterable[str]) -> None:
        """Replace the pending list without changing status."""
        self._pending = deque(instructions)
        self._notify()
        self._kick()

    def start(self) -> None:
        """Begin (or continue) running the current pending list."""
        if self._status in (QueueStatus.IDLE, QueueStatus.PAUSED):
            self._set_status(QueueStatus.RUNNING)
            self._kick()

    def pause(self) -> None:
        if self._status is not QueueStatus.RUNNING:
            return
        self._cancel_in_flight("paused")
        self._set_status(QueueStatus.PAUSED)

    def resume(self) -> None:
        if self._status is QueueStatus.PAUSED:
            self._set_status(QueueStatus.RUNNING)
            self._kick()

    def stop(self) -> None:
        """Cancel in-flight work, drop pending instructions, and return to IDLE."""
        self._cancel_in_flight("stopped")
        self._pending.clear()
        self._current = None
        self._error = None
        self.interpreter.reset()
        self._set_status(QueueStatus.IDLE)

    async def wait_until_settled(self) -> QueueState:
        """Wait until the queue is no longer RUNNING and return its state."""
        await self._settled.wait()
        return self.state

    async def run_to_completion(self, instructions: Iterable[str]) -> QueueState:
        self.run(instructions)
        return await self.wait_until_settled()

    # ------------------------------------------------------------------ #
    # Advancement
    # ------------------------------------------------------------------ #

    def _cancel_in_flight(self, reason: str) -> None:
        if self._token is not None:
            self._token.cancel(reason)

    def _kick(self) -> None:
        if self._status is not QueueStatus.RUNNING:
            return
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._advance())

    async def _advance(self) -> None:
        while self._status is QueueStatus.RUNNING:
            if not self._pending:
                self._finish()
                return
            line = self._pending.popleft()
            token = CancellationToken()
            self._token = token
            self._current = line
            self._notify()
            try:
                result = await self.interpreter.execute(line, self.controls, token)
            except ExecutionCancelled:
                logger.info("Abandoned in-flight instruction %r (%s)", line, token.reason)
                self._current = None
                self._notify()
                continue
            except InstructionError as exc:
                self._fail(exc)
                return
            except Exception as exc:
                logger.exception("Unexpected failure executing %r", line)
                self._fail(exc)
                return
            finally:
                if self._token is token:
                    self._token = None
            self._current = None
            self.completed.append(result)
            for observer in list(self._step_observers):
                observer(result)
            self._notify()

    def _finish(self) -> None:
        try:
            self.interpreter.check_balanced()
        except InstructionError as exc:
            self._fail(exc)
            return
        self._set_status(QueueStatus.IDLE)

    def _fail(self, exc: BaseException) -> None:
        logger.info("Instruction %r failed: %s", self._current, exc)
        self._error = exc
        self._set_status(QueueStatus.ERROR)
