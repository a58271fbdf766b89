# ABOUTME: PhaseQueue, the cooperative single-phase scheduler, and the QueueHandle phases use to reach it.
# ABOUTME: Drives phase coroutines through gate suspensions, supports push/unshift/clear and generation tracking.

import time
from collections import deque
from collections.abc import Callable, Coroutine
from typing import Any

from loguru import logger

from src.models.game_state import PhaseState
from src.orchestration.exceptions import (
    PhaseAwaitError,
    PhaseLifecycleError,
    QueueContractError,
)
from src.orchestration.gate import Gate, GateRegistry, RejectCallback, ResolveCallback
from src.orchestration.phase import Phase
from src.utils.logging import log_phase_event, log_phase_transition


class _PhaseTask:
    """Steps one phase body coroutine from gate to gate"""

    def __init__(
        self,
        queue: "PhaseQueue",
        phase: Phase,
        coroutine: Coroutine[Any, Any, None]
    ):
        self._queue = queue
        self.phase = phase
        self._coroutine = coroutine
        self.done = False
        self.executing = False

    def step(self, value: Any = None, error: BaseException | None = None) -> None:
        self.executing = True
        try:
            if error is not None:
                awaited = self._coroutine.throw(error)
            else:
                awaited = self._coroutine.send(value)
        except StopIteration:
            self.executing = False
            self.done = True
            self._queue._complete(self)
            return
        except Exception as e:
            self.executing = False
            self.done = True
            log_phase_event(
                f"Phase raised, queue halted: {e!r}",
                phase=self.phase.label,
                generation=self._queue.generation,
                level="ERROR",
            )
            raise
        self.executing = False

        if not isinstance(awaited, Gate):
            self.close()
            raise PhaseAwaitError(
                f"{self.phase.label} awaited {awaited!r}; phases may only await gates"
            )

        if awaited.is_cancelled:
            log_phase_event(
                "Phase awaited a cancelled gate and will never resume",
                phase=self.phase.label,
                generation=self._queue.generation,
                level="WARNING",
                gate_id=awaited.gate_id,
            )

        self.phase.state = PhaseState.SUSPENDED
        log_phase_event(
            "Phase suspended",
            phase=self.phase.label,
            generation=self._queue.generation,
            level="DEBUG",
            gate_id=awaited.gate_id,
        )
        awaited.set_continuation(self._resume, self._resume_with_error)

    def _resume(self, value: Any) -> None:
        if self.done:
            return
        self.phase.state = PhaseState.RUNNING
        log_phase_event(
            "Phase resumed",
            phase=self.phase.label,
            generation=self._queue.generation,
            level="DEBUG",
        )
        self.step(value=value)

    def _resume_with_error(self, error: BaseException) -> None:
        if self.done:
            return
        self.phase.state = PhaseState.RUNNING
        self.step(error=error)

    def close(self) -> None:
        self.done = True
        self._coroutine.close()


class PhaseQueue:
    """
    Ordered sequence of phases driven one at a time.

    At most one phase is current. advance() pops the head and starts it; a
    phase ends when its body returns (or via end()), which starts the next
    head synchronously unless the queue was cleared during that end (its
    on_end hook); then nothing advances until the clearing code calls
    advance() or reset(). Phases pushed or unshifted while a phase runs land
    behind it. clear() discards the pending phases, cancels every gate of
    the current generation and starts a new generation.

    Nested advances are flattened into one drain loop, so long chains of
    phases that end synchronously do not grow the call stack.
    """

    def __init__(self, context: Any):
        self._context = context
        self._queue: deque[Phase] = deque()
        self._current: Phase | None = None
        self._task: _PhaseTask | None = None
        self._gates = GateRegistry()
        self._draining = False
        self._advance_pending = False
        self._started_at = 0.0
        self._idle_listeners: list[Callable[[], None]] = []

    @property
    def generation(self) -> int:
        return self._gates.generation

    @property
    def current(self) -> Phase | None:
        return self._current

    @property
    def pending(self) -> tuple[Phase, ...]:
        """Queued phases in execution order (the current phase excluded)"""
        return tuple(self._queue)

    @property
    def is_idle(self) -> bool:
        return self._current is None and not self._queue

    @property
    def open_gate_count(self) -> int:
        return self._gates.open_count

    def add_idle_listener(self, callback: Callable[[], None]) -> None:
        """Call back whenever the queue drains with no current phase"""
        self._idle_listeners.append(callback)

    def remove_idle_listener(self, callback: Callable[[], None]) -> None:
        self._idle_listeners.remove(callback)

    def push(self, phase: Phase) -> None:
        """Append a phase to the tail"""
        self._admit(phase)
        self._queue.append(phase)
        logger.bind(phase=phase.label, generation=self.generation).debug("Phase pushed")

    def unshift(self, phase: Phase) -> None:
        """Prepend a phase so it runs right after the current one"""
        self._admit(phase)
        self._queue.appendleft(phase)
        logger.bind(phase=phase.label, generation=self.generation).debug("Phase unshifted")

    def open_gate(
        self,
        on_resolve: ResolveCallback | None = None,
        on_reject: RejectCallback | None = None
    ) -> Gate:
        """Open a gate bound to the current generation"""
        return self._gates.open(on_resolve, on_reject)

    def advance(self) -> None:
        """
        Start the head of the queue.

        Raises:
            QueueContractError: If a phase is already current
        """
        if self._current is not None:
            raise QueueContractError(
                f"Cannot advance while {self._current.label} is current"
            )
        if self._draining:
            self._advance_pending = True
            return

        drained = False
        self._draining = True
        try:
            self._advance_pending = True
            while self._advance_pending and self._current is None:
                self._advance_pending = False
                if not self._queue:
                    drained = True
                    break
                self._start(self._queue.popleft())
        finally:
            self._draining = False

        if drained and self.is_idle:
            logger.bind(generation=self.generation).debug("Phase queue idle")
            for callback in list(self._idle_listeners):
                callback()

    def end(self, phase: Phase) -> None:
        """
        End the current phase and start the next head.

        Phase bodies end by returning; this is the entry point the scheduler
        uses for them and that hosts may use to end a suspended phase.

        Raises:
            PhaseLifecycleError: If the phase has already ended
            QueueContractError: If the phase is not current, or its body is
                executing right now
        """
        if phase.state is PhaseState.ENDED:
            raise PhaseLifecycleError(f"{phase.label} has already ended")
        if phase is not self._current:
            raise QueueContractError(f"{phase.label} is not the current phase")
        task = self._task
        if task is not None and not task.done:
            if task.executing:
                raise QueueContractError(
                    f"{phase.label} is executing; phase bodies end by returning"
                )
            task.close()
        self._finish(phase, run_end_hook=True)

    def clear(self) -> int:
        """
        Discard every pending phase and cancel the current generation's gates.

        Discarded phases never start or end. A current phase that is suspended
        on a gate of the discarded generation can never resume, so it is
        abandoned as well; a current phase whose body is running (the caller)
        keeps running and advances into whatever is queued after the clear.
        A clear from an on_end hook stops that end from advancing.

        Returns:
            Number of pending phases discarded
        """
        discarded = len(self._queue)
        self._queue.clear()
        cancelled = self._gates.cancel_generation()

        current = self._current
        if current is not None and current.state is PhaseState.SUSPENDED:
            if self._task is not None:
                self._task.close()
            current.state = PhaseState.ENDED
            self._current = None
            self._task = None
            log_phase_event(
                "Suspended phase abandoned by clear",
                phase=current.label,
                generation=self.generation,
                level="WARNING",
            )

        logger.bind(
            generation=self.generation,
            discarded=discarded,
            cancelled_gates=cancelled,
        ).info("Phase queue cleared")
        return discarded

    def reset(self, *phases: Phase) -> None:
        """Hard reset: clear, queue the follow-up phases and run them if nothing is current"""
        self.clear()
        for phase in phases:
            self.push(phase)
        if self._current is None:
            self.advance()

    def _admit(self, phase: Phase) -> None:
        if phase.enqueued or phase.state is not PhaseState.CREATED:
            raise PhaseLifecycleError(f"{phase.label} has already been queued")
        phase.enqueued = True

    def _start(self, phase: Phase) -> None:
        self._current = phase
        phase.state = PhaseState.RUNNING
        self._started_at = time.perf_counter()
        log_phase_event("Phase started", phase=phase.label, generation=self.generation)

        if not phase.validate(self._context):
            log_phase_event(
                "Phase failed validation, skipping",
                phase=phase.label,
                generation=self.generation,
            )
            self._finish(phase, run_end_hook=False)
            return

        task = _PhaseTask(self, phase, phase.start(self._context))
        self._task = task
        task.step()

    def _complete(self, task: _PhaseTask) -> None:
        if task is self._task:
            self.end(task.phase)

    def _finish(self, phase: Phase, run_end_hook: bool) -> None:
        generation = self.generation
        phase.state = PhaseState.ENDED
        self._task = None
        if run_end_hook:
            phase.on_end(self._context)
        self._current = None

        duration_ms = (time.perf_counter() - self._started_at) * 1000
        if self.generation != generation:
            # Cleared during this end; whoever cleared restarts the queue
            log_phase_event(
                "Queue cleared while ending, not advancing",
                phase=phase.label,
                generation=self.generation,
                level="DEBUG",
            )
            log_phase_transition(phase.label, None, self.generation, duration_ms)
            return

        next_label = self._queue[0].label if self._queue else None
        log_phase_transition(phase.label, next_label, self.generation, duration_ms)
        self.advance()


class QueueHandle:
    """The queue operations phases are allowed to use"""

    __slots__ = ("_queue",)

    def __init__(self, queue: PhaseQueue):
        self._queue = queue

    @property
    def generation(self) -> int:
        return self._queue.generation

    def push(self, phase: Phase) -> None:
        self._queue.push(phase)

    def unshift(self, phase: Phase) -> None:
        self._queue.unshift(phase)

    def clear(self) -> int:
        return self._queue.clear()

    def open_gate(
        self,
        on_resolve: ResolveCallback | None = None,
        on_reject: RejectCallback | None = None
    ) -> Gate:
        return self._queue.open_gate(on_resolve, on_reject)
