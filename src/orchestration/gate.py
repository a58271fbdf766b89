# ABOUTME: One-shot gates bridging phase logic and externally signaled completions.
# ABOUTME: Gates are bound to a queue generation; clear() cancels them and later settles are ignored.

import itertools
from collections.abc import Callable, Generator
from enum import Enum
from typing import Any

from src.orchestration.exceptions import GateStateError
from src.utils.logging import log_gate_event


class GateState(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


ResolveCallback = Callable[[Any], None]
RejectCallback = Callable[[BaseException], None]


class Gate:
    """
    Identity-bearing one-shot completion token.

    Exactly one of resolve()/reject() may be called. Once the owning
    registry discards the gate's generation the gate is cancelled: settling
    it afterwards is a no-op and its continuation never runs.

    Gates are awaitable from phase bodies. Awaiting a pending gate suspends
    the phase; awaiting a settled gate continues immediately with its value
    (or raises its error).
    """

    def __init__(self, gate_id: int, generation: int, registry: "GateRegistry"):
        self.gate_id = gate_id
        self.generation = generation
        self._registry = registry
        self._state = GateState.PENDING
        self._value: Any = None
        self._error: BaseException | None = None
        self._on_resolve: ResolveCallback | None = None
        self._on_reject: RejectCallback | None = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is GateState.PENDING

    @property
    def is_cancelled(self) -> bool:
        return self._state is GateState.CANCELLED

    def set_continuation(
        self,
        on_resolve: ResolveCallback,
        on_reject: RejectCallback | None = None
    ) -> None:
        """
        Register the code that runs when the gate settles.

        Raises:
            GateStateError: If a continuation is already registered or the
                gate has already settled
        """
        if self._on_resolve is not None:
            raise GateStateError(f"Gate {self.gate_id} already has a continuation")
        if self._state in (GateState.RESOLVED, GateState.REJECTED):
            raise GateStateError(
                f"Gate {self.gate_id} is already {self._state.value}"
            )
        self._on_resolve = on_resolve
        self._on_reject = on_reject

    def resolve(self, value: Any = None) -> bool:
        """
        Settle the gate successfully and run its continuation.

        Returns:
            True if the continuation was accepted, False if the gate was
            cancelled and the call was ignored

        Raises:
            GateStateError: If the gate was already resolved or rejected
        """
        if not self._check_settle("resolve"):
            return False
        self._state = GateState.RESOLVED
        self._value = value
        self._registry._discard(self)
        log_gate_event("Gate resolved", self.gate_id, self.generation)
        if self._on_resolve is not None:
            self._on_resolve(value)
        return True

    def reject(self, error: BaseException) -> bool:
        """
        Settle the gate with an error, delivered to the continuation.

        A gate nobody is waiting on yet keeps the error and raises it when
        awaited. A gate with a resolve-only continuation raises the error
        at the reject call site.

        Returns:
            True if the error was delivered, False if the gate was cancelled

        Raises:
            GateStateError: If the gate was already resolved or rejected
        """
        if not self._check_settle("reject"):
            return False
        self._state = GateState.REJECTED
        self._error = error
        self._registry._discard(self)
        log_gate_event(
            "Gate rejected", self.gate_id, self.generation,
            level="WARNING", error=repr(error)
        )
        if self._on_reject is not None:
            self._on_reject(error)
        elif self._on_resolve is not None:
            raise error
        return True

    def cancel(self) -> None:
        """Mark the gate cancelled; a no-op unless it is still pending"""
        if self._state is not GateState.PENDING:
            return
        self._state = GateState.CANCELLED
        self._on_resolve = None
        self._on_reject = None
        log_gate_event("Gate cancelled", self.gate_id, self.generation)

    def _check_settle(self, action: str) -> bool:
        if self._state is GateState.PENDING and self.generation != self._registry.generation:
            # Opened in a generation that has since been discarded
            self.cancel()
        if self._state is GateState.CANCELLED:
            log_gate_event(
                f"Ignoring {action} on cancelled gate", self.gate_id, self.generation
            )
            return False
        if self._state is not GateState.PENDING:
            raise GateStateError(
                f"Cannot {action} gate {self.gate_id}: already {self._state.value}"
            )
        return True

    def __await__(self) -> Generator["Gate", Any, Any]:
        if self._state is GateState.RESOLVED:
            return self._value
        if self._state is GateState.REJECTED:
            assert self._error is not None
            raise self._error
        # Suspend; the phase task sends the value (or throws the error) back in
        value = yield self
        return value

    def __repr__(self) -> str:
        return (
            f"Gate(id={self.gate_id}, generation={self.generation}, "
            f"state={self._state.value})"
        )


class GateRegistry:
    """Opens gates for the current generation and cancels them wholesale"""

    def __init__(self) -> None:
        self._generation = 0
        self._ids = itertools.count(1)
        self._open: dict[int, Gate] = {}

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def open_count(self) -> int:
        return len(self._open)

    def open(
        self,
        on_resolve: ResolveCallback | None = None,
        on_reject: RejectCallback | None = None
    ) -> Gate:
        """
        Open a gate bound to the current generation.

        Args:
            on_resolve: Optional continuation run with the resolved value
            on_reject: Optional continuation run with the rejection error

        Returns:
            The new pending gate
        """
        gate = Gate(next(self._ids), self._generation, self)
        if on_resolve is not None:
            gate.set_continuation(on_resolve, on_reject)
        self._open[gate.gate_id] = gate
        log_gate_event("Gate opened", gate.gate_id, gate.generation)
        return gate

    def cancel_generation(self) -> int:
        """
        Cancel every outstanding gate and start a new generation.

        Returns:
            Number of gates cancelled
        """
        cancelled = list(self._open.values())
        self._open.clear()
        for gate in cancelled:
            gate.cancel()
        self._generation += 1
        return len(cancelled)

    def _discard(self, gate: Gate) -> None:
        self._open.pop(gate.gate_id, None)
