# ABOUTME: GameSession, the explicit context handed to every phase operation.
# ABOUTME: Bundles persisted state, RNG handle, collaborators and the phase queue, plus gate-opening helpers.

from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

from src.config.settings import Settings, get_settings
from src.interface.collaborators import (
    InMemorySessionStore,
    OfflineProgressApi,
    PresentationDriver,
    ProgressApi,
    SessionStore,
)
from src.interface.exceptions import ProgressApiError
from src.models.game_state import GameState
from src.orchestration.gate import Gate
from src.orchestration.phase import Phase
from src.orchestration.phase_queue import PhaseQueue, QueueHandle
from src.utils.rng import SeededRandom

R = TypeVar("R")


class GameSession:
    """
    Runtime context for one play session.

    The queue is created fresh with the session and never persisted; only
    `state` is saved. Phases reach the queue through `phases`, which exposes
    push/unshift/clear/open_gate and nothing else.
    """

    def __init__(
        self,
        state: GameState,
        ui: PresentationDriver,
        store: SessionStore | None = None,
        api: ProgressApi | None = None,
        settings: Settings | None = None,
        rng: SeededRandom | None = None,
    ):
        self.state = state
        self.ui = ui
        self.store: SessionStore = store if store is not None else InMemorySessionStore()
        self.api: ProgressApi = api if api is not None else OfflineProgressApi()
        self.settings = settings if settings is not None else get_settings()
        self.rng = rng if rng is not None else SeededRandom(state.seed).for_wave(state.wave_index)
        self.queue = PhaseQueue(self)
        self.phases = QueueHandle(self.queue)

    def run(self, *phases: Phase) -> None:
        """Queue phases and start the queue if nothing is running"""
        for phase in phases:
            self.queue.push(phase)
        if self.queue.current is None:
            self.queue.advance()

    # --- Effects -----------------------------------------------------------

    def show_text(self, text: str) -> Gate:
        """Ask the presentation layer to show text; the gate resolves when acknowledged"""
        gate = self.phases.open_gate()
        self.ui.show_text(text, gate)
        return gate

    def play_effect(self, effect: str) -> Gate:
        """Ask the presentation layer to play an effect; the gate resolves when it finishes"""
        gate = self.phases.open_gate()
        self.ui.play_effect(effect, gate)
        return gate

    def select_option(self, prompt: str, options: list[str]) -> Gate:
        """Prompt for a choice; the gate resolves with the chosen index (-1 when cancelled)"""
        gate = self.phases.open_gate()
        self.ui.select_option(prompt, options, gate)
        return gate

    async def call_api(
        self,
        issue: Callable[[Gate], None],
        fallback: Callable[[], R],
        operation: str,
    ) -> Any:
        """
        Issue a progress API request and wait for it, falling back on failure.

        The request either settles the gate later or raises ProgressApiError
        right away; either failure becomes the fallback value, so the calling
        phase never waits on a gate nobody will settle.

        Args:
            issue: Sends the request, given the gate to settle
            fallback: Produces the offline-equivalent result
            operation: Name used in logs

        Returns:
            The API result, or the fallback value
        """
        gate = self.phases.open_gate()
        try:
            issue(gate)
        except ProgressApiError as e:
            logger.bind(operation=operation).warning(f"Progress API request failed: {e}")
            gate.resolve(fallback())
        try:
            return await gate
        except ProgressApiError as e:
            logger.bind(operation=operation).warning(f"Progress API request rejected: {e}")
            return fallback()

    # --- State -------------------------------------------------------------

    def reseed(self, seed: str) -> None:
        """Switch the run to a new seed (daily runs); draws restart from the new stream"""
        self.state.seed = seed
        self.reseed_for_wave()

    def reseed_for_wave(self) -> None:
        """Recreate the stream for the current wave so resumed runs draw identically"""
        self.rng = SeededRandom(self.state.seed).for_wave(self.state.wave_index)

    def replace_state(self, state: GameState) -> None:
        """Adopt a loaded state and the RNG stream that belongs to it"""
        self.state = state
        self.reseed_for_wave()

    def save(self) -> None:
        """Persist the domain state to its save slot, if one is selected"""
        if self.state.session_slot is None:
            logger.debug("No save slot selected, skipping save")
            return
        self.store.save_session(self.state.session_slot, self.state)
