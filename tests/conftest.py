# ABOUTME: Shared pytest fixtures for all test modules (unit and integration).
# ABOUTME: Provides fixed settings, party and state builders, scripted collaborators and a ready GameSession.

import pytest
from loguru import logger

from src.config.settings import Settings
from src.interface.collaborators import InMemorySessionStore, ScriptedPresentation
from src.models.game_state import GameState
from src.models.party import PartyMember
from src.orchestration.session import GameSession


class StubRandom:
    """Random source returning scripted draws and recording each bound asked for"""

    def __init__(self, values: list[int]):
        self.values = list(values)
        self.bounds: list[int] = []

    def next_int(self, bound: int) -> int:
        self.bounds.append(bound)
        return self.values.pop(0)


def make_party(*levels: int) -> list[PartyMember]:
    """Helper to build a healthy party with one member per level"""
    species = ["bulbasaur", "pidgey", "rattata", "caterpie", "weedle", "zubat"]
    return [
        PartyMember.create(species[index % len(species)], level)
        for index, level in enumerate(levels)
    ]


@pytest.fixture(autouse=True)
def silence_logs():
    """Keep loguru output out of test runs"""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment and any .env file"""
    return Settings(
        _env_file=None,
        seed="test-seed",
        log_level="DEBUG",
        online=False,
        enable_retries=True,
    )


@pytest.fixture
def party() -> list[PartyMember]:
    """Three members; the second is the strongest"""
    return make_party(12, 20, 8)


@pytest.fixture
def state(party) -> GameState:
    """Run state sitting on a wave where the chest can appear"""
    return GameState(seed="test-seed", wave_index=15, session_slot=0, party=party)


@pytest.fixture
def ui() -> ScriptedPresentation:
    return ScriptedPresentation()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def session(state, ui, store, settings) -> GameSession:
    return GameSession(state, ui, store=store, settings=settings)
