# ABOUTME: Battle initialization phases: wave encounter setup, summoning party members and switch checks.
# ABOUTME: Also builds the phase sequences for resuming a saved wave and for starting an encounter battle.

from loguru import logger

from src.models.encounter import BattleState, BattleType, EnemyPartyConfig
from src.models.game_state import PhaseKind
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession
from src.phases.rewards import LeaveEncounterPhase, RewardPhase


class EncounterPhase(Phase):
    """Sets up the battle for the current wave"""

    kind = PhaseKind.ENCOUNTER

    def __init__(
        self,
        loaded: bool = False,
        battle_type: BattleType = BattleType.WILD,
        enemy_party: EnemyPartyConfig | None = None,
        double: bool = False
    ):
        super().__init__()
        self.loaded = loaded
        self.battle_type = battle_type
        self.enemy_party = enemy_party
        self.double = double

    async def start(self, session: GameSession) -> None:
        state = session.state
        if self.loaded and state.battle is not None:
            # Resumed wave keeps its saved battle setup
            state.battle.loaded = True
            state.battle.field = []
        else:
            state.battle = BattleState(
                battle_type=self.battle_type,
                double=self.double,
                enemy_party=self.enemy_party,
                loaded=self.loaded,
            )
        if not self.loaded:
            session.reseed_for_wave()

        logger.bind(
            wave_index=state.wave_index,
            battle_type=state.battle.battle_type.value,
            loaded=self.loaded,
        ).info("Wave battle initialized")

        await session.play_effect("encounter_intro")
        enemy_party = state.battle.enemy_party
        if enemy_party is not None:
            names = ", ".join(member.species.title() for member in enemy_party.members)
            await session.show_text(f"{names} appeared!")
        else:
            await session.show_text(f"Wave {state.wave_index} begins!")


class SummonPhase(Phase):
    """Sends the next eligible party member onto a field slot, filling the next free slot at most"""

    kind = PhaseKind.SUMMON

    def __init__(self, field_index: int):
        super().__init__()
        self.field_index = field_index

    def validate(self, session: GameSession) -> bool:
        battle = session.state.battle
        if battle is None or self.field_index > len(battle.field):
            return False
        return self._next_member(session) is not None

    async def start(self, session: GameSession) -> None:
        battle = session.state.battle
        assert battle is not None
        party_index = self._next_member(session)
        assert party_index is not None
        if self.field_index < len(battle.field):
            battle.field[self.field_index] = party_index
        else:
            battle.field.append(party_index)
        member = session.state.party[party_index]
        await session.play_effect(f"summon:{member.species}")
        await session.show_text(f"Go! {member.name}!")

    def _next_member(self, session: GameSession) -> int | None:
        battle = session.state.battle
        on_field = set(battle.field) if battle is not None else set()
        for index, member in enumerate(session.state.party):
            if member.is_allowed_in_battle and index not in on_field:
                return index
        return None


class CheckSwitchPhase(Phase):
    """Offers to switch out the member on a field slot before the wave starts"""

    kind = PhaseKind.CHECK_SWITCH

    def __init__(self, field_index: int):
        super().__init__()
        self.field_index = field_index

    def validate(self, session: GameSession) -> bool:
        battle = session.state.battle
        if battle is None or self.field_index >= len(battle.field):
            return False
        if battle.enemy_party is not None and battle.enemy_party.disable_switch:
            return False
        return self._bench(session) != []

    async def start(self, session: GameSession) -> None:
        battle = session.state.battle
        assert battle is not None
        battle.switch_checks.append(self.field_index)
        member = session.state.party[battle.field[self.field_index]]
        choice = await session.select_option(
            f"Will you switch out {member.name}?", ["Yes", "No"]
        )
        if choice != 0:
            return
        bench = self._bench(session)
        battle.field[self.field_index] = bench[0]
        replacement = session.state.party[bench[0]]
        await session.play_effect(f"summon:{replacement.species}")
        await session.show_text(f"Go! {replacement.name}!")

    def _bench(self, session: GameSession) -> list[int]:
        battle = session.state.battle
        on_field = set(battle.field) if battle is not None else set()
        return [
            index
            for index, member in enumerate(session.state.party)
            if member.is_allowed_in_battle and index not in on_field
        ]


def queue_resume_phases(session: GameSession) -> None:
    """
    Queue the phases that rebuild a saved wave after a load or retry.

    Summons one member per field slot the party can fill; outside trainer
    battles, offers switch checks when the bench has spare members (daily
    runs skip them on the first wave).
    """
    state = session.state
    battle = state.battle
    double = battle.double if battle is not None else False
    battle_type = battle.battle_type if battle is not None else BattleType.WILD
    available = len(state.allowed_in_battle())

    session.phases.push(EncounterPhase(loaded=True))
    session.phases.push(SummonPhase(0))
    if double and available > 1:
        session.phases.push(SummonPhase(1))

    if battle_type is not BattleType.TRAINER and (
        state.wave_index > 1 or not state.game_mode.is_daily
    ):
        min_party_size = 2 if double else 1
        if available > min_party_size:
            session.phases.push(CheckSwitchPhase(0))
            if double:
                session.phases.push(CheckSwitchPhase(1))


def init_battle_with_enemy_config(session: GameSession, enemy_party: EnemyPartyConfig) -> None:
    """
    Queue the phases that start a battle against a configured enemy party.

    Rewards already set on the state for this encounter are paid out behind
    the battle phases, and the wave is then closed.
    """
    session.phases.push(
        EncounterPhase(battle_type=BattleType.MYSTERY_ENCOUNTER, enemy_party=enemy_party)
    )
    session.phases.push(SummonPhase(0))

    rewards = session.state.encounter_rewards
    if rewards is not None:
        session.phases.push(RewardPhase(rewards))
    session.phases.push(LeaveEncounterPhase())
