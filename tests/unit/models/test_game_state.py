# ABOUTME: Unit tests for GameState, GameMode and PartyMember models
# ABOUTME: Validates battle eligibility, strongest member selection, ribbons and new-run carry-over

import pytest
from pydantic import ValidationError

from src.models.encounter import RewardTier, Unlockable
from src.models.game_state import STARTING_MONEY, GameMode, GameState
from src.models.party import PartyMember
from tests.conftest import make_party


class TestPartyMember:
    """Test suite for PartyMember"""

    def test_create_is_fully_healed(self):
        """Test that created members start at full hit points"""
        member = PartyMember.create("bulbasaur", 5)

        assert member.name == "Bulbasaur"
        assert member.hp == member.max_hp == 20
        assert member.is_allowed_in_battle

    def test_knock_out(self):
        """Test that a knocked out member is fainted and cannot battle"""
        member = PartyMember.create("pidgey", 3)
        member.knock_out()

        assert member.is_fainted
        assert not member.is_allowed_in_battle

    def test_banned_member_not_allowed(self):
        """Test that banned members stay out of battle"""
        member = PartyMember.create("pidgey", 3)
        member.banned = True

        assert not member.is_fainted
        assert not member.is_allowed_in_battle

    def test_level_must_be_positive(self):
        """Test field validation"""
        with pytest.raises(ValidationError):
            PartyMember(name="x", species="x", level=0, hp=1, max_hp=1)


class TestGameMode:
    """Test suite for GameMode flags"""

    def test_mode_flags(self):
        """Test classic, endless and daily classification"""
        assert GameMode.CLASSIC.is_classic
        assert GameMode.ENDLESS.is_endless
        assert GameMode.SPLICED_ENDLESS.is_endless
        assert GameMode.DAILY.is_daily
        assert not GameMode.CHALLENGE.is_classic


class TestGameState:
    """Test suite for GameState"""

    def test_seed_required(self):
        """Test that the run seed cannot be empty"""
        with pytest.raises(ValidationError):
            GameState(seed="")

    def test_highest_level_member(self):
        """Test that the strongest eligible member is picked"""
        state = GameState(seed="s", party=make_party(10, 30, 20))

        assert state.highest_level_member() is state.party[1]

    def test_highest_level_tie_prefers_earlier_slot(self):
        """Test that ties go to the earlier party slot"""
        state = GameState(seed="s", party=make_party(15, 15))

        assert state.highest_level_member() is state.party[0]

    def test_highest_level_skips_ineligible(self):
        """Test that fainted and banned members are skipped by default"""
        state = GameState(seed="s", party=make_party(10, 30, 20))
        state.party[1].knock_out()
        state.party[2].banned = True

        assert state.highest_level_member() is state.party[0]
        assert state.highest_level_member(allowed_in_battle=False, include_fainted=True) is state.party[1]

    def test_highest_level_none_when_all_fainted(self):
        """Test that an all-fainted party has no candidate"""
        state = GameState(seed="s", party=make_party(10))
        state.party[0].knock_out()

        assert state.highest_level_member() is None
        assert state.allowed_in_battle() == []

    def test_increment_ribbon(self):
        """Test ribbon counting per species"""
        state = GameState(seed="s")

        assert state.increment_ribbon("mew") == 1
        assert state.increment_ribbon("mew") == 2

    def test_start_new_run_carries_account_progress(self):
        """Test that a new run keeps unlocks and stats but resets run data"""
        state = GameState(
            seed="old",
            wave_index=80,
            party=make_party(50),
            inventory=[RewardTier.MASTER],
            unlocks={Unlockable.ENDLESS_MODE},
            ribbons={"mew": 1},
        )
        state.stats.sessions_won = 2

        fresh = state.start_new_run("new", GameMode.DAILY, session_slot=3)

        assert fresh.seed == "new"
        assert fresh.game_mode is GameMode.DAILY
        assert fresh.session_slot == 3
        assert fresh.wave_index == 1
        assert fresh.money == STARTING_MONEY
        assert fresh.party == []
        assert fresh.inventory == []
        assert fresh.unlocks == {Unlockable.ENDLESS_MODE}
        assert fresh.ribbons == {"mew": 1}
        assert fresh.stats.sessions_won == 2
        assert fresh.stats is not state.stats

    def test_round_trips_through_json(self):
        """Test that the persisted state serializes"""
        state = GameState(seed="s", party=make_party(5), unlocks={Unlockable.EVIOLITE})

        assert GameState.model_validate_json(state.model_dump_json()) == state
