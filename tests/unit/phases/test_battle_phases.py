# ABOUTME: Unit tests for battle initialization phases and the resume/encounter phase builders.
# ABOUTME: Covers EncounterPhase setup, summoning, switch checks and queue_resume_phases conditions.

from src.interface.collaborators import ScriptedPresentation
from src.models.encounter import (
    BattleState,
    BattleType,
    EncounterRewards,
    EnemyMemberConfig,
    EnemyPartyConfig,
)
from src.models.game_state import GameMode, PhaseKind
from src.orchestration.session import GameSession
from src.phases.battle import (
    CheckSwitchPhase,
    EncounterPhase,
    SummonPhase,
    init_battle_with_enemy_config,
    queue_resume_phases,
)
from tests.conftest import make_party


def pending_kinds(session):
    return [phase.kind for phase in session.queue.pending]


class TestQueueResumePhases:
    """Test suite for rebuilding a saved wave"""

    def test_single_battle_with_bench(self, session):
        """Test summon and switch check for a single battle"""
        session.state.battle = BattleState()

        queue_resume_phases(session)

        assert pending_kinds(session) == [
            PhaseKind.ENCOUNTER, PhaseKind.SUMMON, PhaseKind.CHECK_SWITCH
        ]
        assert session.queue.pending[0].loaded

    def test_double_battle(self, session):
        """Test two summons and two switch checks for a double battle with spare members"""
        session.state.battle = BattleState(double=True)

        queue_resume_phases(session)

        assert pending_kinds(session) == [
            PhaseKind.ENCOUNTER, PhaseKind.SUMMON, PhaseKind.SUMMON,
            PhaseKind.CHECK_SWITCH, PhaseKind.CHECK_SWITCH,
        ]

    def test_double_battle_without_spare_members(self, session):
        """Test that a double battle with two members skips switch checks"""
        session.state.battle = BattleState(double=True)
        session.state.party = make_party(10, 10)

        queue_resume_phases(session)

        assert pending_kinds(session) == [PhaseKind.ENCOUNTER, PhaseKind.SUMMON, PhaseKind.SUMMON]

    def test_trainer_battle_skips_switch_checks(self, session):
        """Test that trainer battles never offer switch checks on resume"""
        session.state.battle = BattleState(battle_type=BattleType.TRAINER)

        queue_resume_phases(session)

        assert PhaseKind.CHECK_SWITCH not in pending_kinds(session)

    def test_daily_first_wave_skips_switch_checks(self, session):
        """Test that daily runs skip switch checks on the first wave only"""
        session.state.game_mode = GameMode.DAILY
        session.state.wave_index = 1

        queue_resume_phases(session)
        assert PhaseKind.CHECK_SWITCH not in pending_kinds(session)

        session.queue.clear()
        session.state.wave_index = 2
        queue_resume_phases(session)
        assert PhaseKind.CHECK_SWITCH in pending_kinds(session)

    def test_single_member_skips_switch_checks(self, session):
        """Test that a lone member has nobody to switch with"""
        session.state.party = make_party(10)

        queue_resume_phases(session)

        assert pending_kinds(session) == [PhaseKind.ENCOUNTER, PhaseKind.SUMMON]


class TestInitBattleWithEnemyConfig:
    """Test suite for starting an encounter battle"""

    def test_queues_encounter_and_summon(self, session):
        """Test that an encounter battle is queued against the configured party"""
        party = EnemyPartyConfig(members=[EnemyMemberConfig(species="zubat")])

        init_battle_with_enemy_config(session, party)

        encounter, summon, leave = session.queue.pending
        assert encounter.kind is PhaseKind.ENCOUNTER
        assert encounter.battle_type is BattleType.MYSTERY_ENCOUNTER
        assert encounter.enemy_party is party
        assert summon.kind is PhaseKind.SUMMON
        assert summon.field_index == 0
        assert leave.kind is PhaseKind.LEAVE_ENCOUNTER

    def test_pays_out_encounter_rewards_after_battle(self, session):
        """Test that rewards set for the encounter are queued behind the battle phases"""
        party = EnemyPartyConfig(members=[EnemyMemberConfig(species="zubat")])
        rewards = EncounterRewards(fill_remaining=True)
        session.state.encounter_rewards = rewards

        init_battle_with_enemy_config(session, party)

        assert pending_kinds(session) == [
            PhaseKind.ENCOUNTER, PhaseKind.SUMMON, PhaseKind.REWARD, PhaseKind.LEAVE_ENCOUNTER
        ]
        assert session.queue.pending[2].rewards is rewards


class TestEncounterPhase:
    """Test suite for wave battle setup"""

    def test_sets_up_new_battle(self, session, ui):
        """Test that a new wave gets a fresh battle"""
        session.run(EncounterPhase(double=True))

        assert session.state.battle.double
        assert session.state.battle.battle_type is BattleType.WILD
        assert ui.effects == ["encounter_intro"]
        assert ui.texts == ["Wave 15 begins!"]

    def test_announces_enemy_party(self, session, ui):
        """Test that configured enemies are announced"""
        party = EnemyPartyConfig(members=[EnemyMemberConfig(species="gimmighoul")])

        session.run(EncounterPhase(battle_type=BattleType.MYSTERY_ENCOUNTER, enemy_party=party))

        assert ui.texts == ["Gimmighoul appeared!"]

    def test_loaded_keeps_saved_battle(self, session):
        """Test that a resumed wave keeps its battle setup but empties the field"""
        saved = BattleState(battle_type=BattleType.TRAINER, double=True, field=[0, 1])
        session.state.battle = saved

        session.run(EncounterPhase(loaded=True))

        assert session.state.battle is saved
        assert saved.loaded
        assert saved.field == []


class TestSummonPhase:
    """Test suite for summoning"""

    def test_summons_first_eligible_member(self, session, ui):
        """Test that fainted members are skipped"""
        session.state.party[0].knock_out()
        session.state.battle = BattleState()

        session.run(SummonPhase(0))

        assert session.state.battle.field == [1]
        assert ui.texts == ["Go! Pidgey!"]

    def test_skipped_without_battle(self, session, ui):
        """Test that summoning needs a battle"""
        session.run(SummonPhase(0))

        assert ui.requests == []

    def test_skipped_when_nobody_left(self, session, ui):
        """Test that a second summon is skipped when every member is on the field"""
        session.state.party = make_party(10)
        session.state.battle = BattleState(field=[0])

        session.run(SummonPhase(1))

        assert session.state.battle.field == [0]
        assert ui.requests == []

    def test_summons_into_second_slot(self, session, ui):
        """Test that the field slot index decides where the member goes"""
        session.state.battle = BattleState(field=[0])

        session.run(SummonPhase(1))

        assert session.state.battle.field == [0, 1]
        assert ui.texts == ["Go! Pidgey!"]

    def test_skipped_when_earlier_slot_is_empty(self, session, ui):
        """Test that a slot past the next free one is not filled"""
        session.state.battle = BattleState()

        session.run(SummonPhase(1))

        assert session.state.battle.field == []
        assert ui.requests == []


class TestCheckSwitchPhase:
    """Test suite for pre-wave switch checks"""

    def test_switch_accepted(self, state, store, settings):
        """Test that answering yes swaps in the next bench member"""
        ui = ScriptedPresentation(choices=[0])
        session = GameSession(state, ui, store=store, settings=settings)
        session.state.battle = BattleState(field=[0])

        session.run(CheckSwitchPhase(0))

        assert session.state.battle.field == [1]
        assert session.state.battle.switch_checks == [0]
        assert ui.texts[-1] == "Go! Pidgey!"

    def test_switch_declined(self, state, store, settings):
        """Test that answering no keeps the field"""
        ui = ScriptedPresentation(choices=[1])
        session = GameSession(state, ui, store=store, settings=settings)
        session.state.battle = BattleState(field=[0])

        session.run(CheckSwitchPhase(0))

        assert session.state.battle.field == [0]
        assert session.state.battle.switch_checks == [0]

    def test_skipped_when_switching_disabled(self, session, ui):
        """Test that boss parties that disable switching skip the check"""
        session.state.battle = BattleState(
            field=[0],
            enemy_party=EnemyPartyConfig(
                disable_switch=True, members=[EnemyMemberConfig(species="gimmighoul")]
            ),
        )

        session.run(CheckSwitchPhase(0))

        assert ui.requests == []
        assert session.state.battle.switch_checks == []

    def test_skipped_with_empty_bench(self, session, ui):
        """Test that the check needs a bench member"""
        session.state.party = make_party(10)
        session.state.battle = BattleState(field=[0])

        session.run(CheckSwitchPhase(0))

        assert ui.requests == []
