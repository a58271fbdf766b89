# ABOUTME: Entry point for a headless seeded run through a mysterious chest encounter.
# ABOUTME: Provides simple command to run: python -m src.interface

import sys
from datetime import date

from loguru import logger

from src.config.settings import get_settings
from src.interface.collaborators import InMemorySessionStore
from src.models.game_state import GameState
from src.models.party import PartyMember
from src.orchestration.gate import Gate
from src.orchestration.session import GameSession
from src.phases.mystery_chest import MysteriousChestPhase
from src.utils.logging import setup_logging
from src.utils.rng import daily_run_seed


class ConsolePresentation:
    """Prints every request and completes it at once, always picking the first option"""

    def show_text(self, text: str, gate: Gate) -> None:
        print(text)
        gate.resolve(None)

    def play_effect(self, effect: str, gate: Gate) -> None:
        print(f"[{effect}]")
        gate.resolve(None)

    def select_option(self, prompt: str, options: list[str], gate: Gate) -> None:
        print(f"{prompt} {options} -> {options[0]}")
        gate.resolve(0)


def main() -> None:
    """Run one chest encounter on a fresh three-member party"""
    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        file_output=settings.log_to_file,
    )

    seed = settings.seed or daily_run_seed(date.today())
    state = GameState(
        seed=seed,
        wave_index=settings.mystery_encounter_min_wave,
        session_slot=0,
        party=[
            PartyMember.create("bulbasaur", 12),
            PartyMember.create("pidgey", 10),
            PartyMember.create("rattata", 8),
        ],
    )
    store = InMemorySessionStore()
    session = GameSession(state, ConsolePresentation(), store=store, settings=settings)
    session.save()

    chest = MysteriousChestPhase()
    try:
        session.run(chest)
    except Exception as e:
        logger.exception(f"Run halted: {e}")
        sys.exit(1)

    state = session.state
    print()
    print(f"Seed: {seed}")
    print(f"Roll: {chest.roll} -> {chest.outcome.value if chest.outcome else 'left'}")
    print(f"Wave: {state.wave_index}")
    print(f"Inventory: {[tier.value for tier in state.inventory]}")
    print(f"Party: {[(m.name, m.hp) for m in state.party]}")
    print(f"Game over: {state.game_over}")


if __name__ == "__main__":
    main()
