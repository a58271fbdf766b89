# ABOUTME: Base contract for phases, the unit of game-state progression run by PhaseQueue.
# ABOUTME: Each variant declares a PhaseKind and implements validate/start/on_end against an explicit session.

import itertools
from typing import Any, ClassVar

from src.models.game_state import PhaseKind, PhaseState

_phase_ids = itertools.count(1)


class Phase:
    """
    A discrete unit of game-state change.

    Subclasses form a closed set of variants, each tagged with a PhaseKind.
    The scheduler calls, in order:

    - validate(session): evaluated once at start; returning False ends the
      phase immediately with no side effects (start and on_end are skipped)
    - start(session): the phase body, an ``async def`` that may ``await``
      gates; returning from it ends the phase
    - on_end(session): runs as the phase ends, before the next phase starts

    The session is passed explicitly to every operation; phases do not keep
    references to it. Phase instances are single use.
    """

    kind: ClassVar[PhaseKind]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        kind = cls.__dict__.get("kind")
        if kind is not None and not isinstance(kind, PhaseKind):
            raise TypeError(f"{cls.__name__}.kind must be a PhaseKind, got {kind!r}")

    def __init__(self) -> None:
        if not isinstance(getattr(type(self), "kind", None), PhaseKind):
            raise TypeError(f"{type(self).__name__} does not declare a PhaseKind")
        self.phase_id = next(_phase_ids)
        self.state = PhaseState.CREATED
        self.enqueued = False

    @property
    def label(self) -> str:
        return f"{self.kind.value}#{self.phase_id}"

    def validate(self, session: Any) -> bool:
        return True

    async def start(self, session: Any) -> None:
        return None

    def on_end(self, session: Any) -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label}, {self.state.value})"
