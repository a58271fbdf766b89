# ABOUTME: Integration tests stepping the mysterious chest encounter through held presentation gates.
# ABOUTME: Validates suspension points, seeded reproducibility, and the trap's clear-and-game-over path.

from src.interface.collaborators import InMemorySessionStore, ScriptedPresentation
from src.models.encounter import ChestOutcome, RewardTier
from src.models.game_state import GameState, PhaseKind, PhaseState
from src.orchestration.session import GameSession
from src.phases.mystery_chest import CHEST_TABLE, MysteriousChestPhase
from tests.conftest import StubRandom, make_party


def fresh_session(settings, seed="flow-seed", ui=None, rng=None):
    state = GameState(seed=seed, wave_index=42, session_slot=0, party=make_party(30, 25, 20))
    return GameSession(
        state, ui or ScriptedPresentation(), store=InMemorySessionStore(),
        settings=settings, rng=rng,
    )


class TestSteppedRewardFlow:
    """Test suite for a reward chest stepped one gate at a time"""

    def test_each_effect_is_a_suspension_point(self, settings):
        """Test that the encounter waits on every text, prompt and effect"""
        ui = ScriptedPresentation(auto_ack=False)
        session = fresh_session(settings, ui=ui, rng=StubRandom([52]))
        chest = MysteriousChestPhase()

        session.run(chest)
        assert chest.state is PhaseState.SUSPENDED
        assert [r.kind for r in ui.pending] == ["text"]

        ui.ack_next()
        assert [r.kind for r in ui.pending] == ["option"]
        assert chest.roll is None

        ui.choose(0)
        assert chest.outcome is ChestOutcome.ULTRA_REWARDS
        assert ui.pending[0].payload == "chest_open"

        ui.ack_next()
        assert ui.pending[0].payload == "The chest held some great items!"
        assert session.queue.pending == ()

        ui.ack_next()
        assert session.queue.current.kind is PhaseKind.REWARD
        assert chest.state is PhaseState.ENDED

        ui.choose(1)
        ui.ack_next()

        assert session.queue.is_idle
        assert session.state.inventory == [RewardTier.ULTRA]
        assert session.state.wave_index == 43

    def test_same_seed_same_outcome(self, settings):
        """Test that two sessions on the same seed and wave open the same chest"""
        outcomes = []
        for _ in range(2):
            session = fresh_session(settings, seed="replay")
            chest = MysteriousChestPhase()
            session.run(chest)
            outcomes.append((chest.roll, chest.outcome))

        assert outcomes[0] == outcomes[1]
        assert CHEST_TABLE.total > outcomes[0][0] >= 0


class TestTrapGameOver:
    """Test suite for the trap ending the run"""

    def test_pending_phases_and_gates_discarded(self, settings):
        """Test that a trap on the last member clears queued work and only the game over runs"""
        settings.enable_retries = False
        ui = ScriptedPresentation(auto_ack=False)
        session = fresh_session(settings, ui=ui, rng=StubRandom([10]))
        for member in session.state.party[1:]:
            member.knock_out()
        chest = MysteriousChestPhase()
        queued_behind = MysteriousChestPhase()
        session.run(chest, queued_behind)

        ui.ack_next()
        ui.choose(0)
        ui.ack_next()
        ui.ack_next()
        assert session.state.party[0].is_fainted
        generation = session.queue.generation

        ui.ack_next()

        assert session.queue.generation > generation
        assert queued_behind.state is PhaseState.CREATED
        assert session.queue.current.kind is PhaseKind.GAME_OVER

        while ui.pending:
            ui.ack_next()

        assert session.queue.is_idle
        assert session.state.game_over
        assert not session.state.victory
        assert queued_behind.state is PhaseState.CREATED
        assert session.queue.open_gate_count == 0
