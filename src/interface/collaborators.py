# ABOUTME: Request/acknowledge contracts for the services phases consume, plus in-process implementations.
# ABOUTME: Presentation settles a gate when an effect completes; store and API back persistence and daily seeds.

from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from src.interface.exceptions import ProgressApiError, SessionLoadError
from src.models.game_state import GameState
from src.orchestration.gate import Gate


class PresentationDriver(Protocol):
    """Plays effects and settles the given gate once each completes"""

    def show_text(self, text: str, gate: Gate) -> None: ...

    def play_effect(self, effect: str, gate: Gate) -> None: ...

    def select_option(self, prompt: str, options: list[str], gate: Gate) -> None:
        """Resolve the gate with the chosen option index, or -1 when cancelled"""
        ...


class SessionStore(Protocol):
    """Persists domain state; the phase queue itself is never saved"""

    def last_session_slot(self) -> int | None: ...

    def load_session(self, slot: int) -> GameState: ...

    def save_session(self, slot: int, state: GameState) -> None: ...

    def save_run_history(self, state: GameState, victory: bool) -> None: ...


class ProgressApi(Protocol):
    """Network service; resolves or rejects the given gate, or raises ProgressApiError"""

    def fetch_daily_seed(self, gate: Gate) -> None: ...

    def new_clear(self, slot: int, victory: bool, gate: Gate) -> None: ...


@dataclass
class EffectRequest:
    """A presentation request recorded by ScriptedPresentation"""

    kind: str
    payload: Any
    gate: Gate


@dataclass
class ScriptedPresentation:
    """
    Presentation driver that records requests.

    With auto_ack every effect completes immediately and option prompts are
    answered from `choices` in order (0 once the script runs out). Without
    auto_ack requests stay pending until ack_next()/choose() settle them,
    which is how tests step through suspended phases.
    """

    auto_ack: bool = True
    choices: list[int] = field(default_factory=list)
    requests: list[EffectRequest] = field(default_factory=list)
    pending: list[EffectRequest] = field(default_factory=list)

    @property
    def texts(self) -> list[str]:
        return [request.payload for request in self.requests if request.kind == "text"]

    @property
    def effects(self) -> list[str]:
        return [request.payload for request in self.requests if request.kind == "effect"]

    def show_text(self, text: str, gate: Gate) -> None:
        self._record(EffectRequest("text", text, gate))

    def play_effect(self, effect: str, gate: Gate) -> None:
        self._record(EffectRequest("effect", effect, gate))

    def select_option(self, prompt: str, options: list[str], gate: Gate) -> None:
        self._record(EffectRequest("option", (prompt, list(options)), gate))

    def ack_next(self) -> EffectRequest:
        """Complete the oldest pending text or effect request"""
        if self.pending[0].kind == "option":
            raise ValueError("Oldest pending request is an option prompt; use choose()")
        request = self.pending.pop(0)
        request.gate.resolve(None)
        return request

    def choose(self, index: int) -> EffectRequest:
        """Answer the oldest pending request, which must be an option prompt"""
        if self.pending[0].kind != "option":
            raise ValueError(f"Oldest pending request is a {self.pending[0].kind} request")
        request = self.pending.pop(0)
        request.gate.resolve(index)
        return request

    def _record(self, request: EffectRequest) -> None:
        self.requests.append(request)
        if not self.auto_ack:
            self.pending.append(request)
            return
        if request.kind == "option":
            choice = self.choices.pop(0) if self.choices else 0
            request.gate.resolve(choice)
        else:
            request.gate.resolve(None)


class InMemorySessionStore:
    """Session store keeping deep copies of saved states per slot"""

    def __init__(self) -> None:
        self._slots: dict[int, GameState] = {}
        self._last_slot: int | None = None
        self.run_history: list[tuple[GameState, bool]] = []

    def last_session_slot(self) -> int | None:
        return self._last_slot

    def load_session(self, slot: int) -> GameState:
        state = self._slots.get(slot)
        if state is None:
            raise SessionLoadError(f"No session saved in slot {slot}")
        return state.model_copy(deep=True)

    def save_session(self, slot: int, state: GameState) -> None:
        self._slots[slot] = state.model_copy(deep=True)
        self._last_slot = slot
        logger.bind(slot=slot, wave_index=state.wave_index).debug("Session saved")

    def save_run_history(self, state: GameState, victory: bool) -> None:
        self.run_history.append((state.model_copy(deep=True), victory))


class OfflineProgressApi:
    """Progress API used when no server is reachable; every request fails"""

    def fetch_daily_seed(self, gate: Gate) -> None:
        raise ProgressApiError("Progress API is offline")

    def new_clear(self, slot: int, victory: bool, gate: Gate) -> None:
        raise ProgressApiError("Progress API is offline")
