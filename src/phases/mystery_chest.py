# ABOUTME: The mysterious chest encounter: open it for a weighted roll of rewards or a trap, or walk away.
# ABOUTME: Rewards queue a RewardPhase; the trap knocks out the strongest member and starts a boss battle or ends the run.

from collections.abc import Awaitable, Callable

from loguru import logger

from src.models.encounter import (
    ChestOutcome,
    EncounterRewards,
    EnemyMemberConfig,
    EnemyPartyConfig,
    RewardTier,
)
from src.models.game_state import PhaseKind
from src.orchestration.branching import OutcomeTable, RandomBranchSelector
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession
from src.phases.battle import init_battle_with_enemy_config
from src.phases.game_over import GameOverPhase
from src.phases.rewards import LeaveEncounterPhase, RewardPhase

RAND_LENGTH = 100
TRAP_PERCENT = 35
COMMON_REWARDS_PERCENT = 20
ULTRA_REWARDS_PERCENT = 30
ROGUE_REWARDS_PERCENT = 10
MASTER_REWARDS_PERCENT = 5

# Declaration order fixes the intervals: trap [0, 35), master [35, 40),
# rogue [40, 50), ultra [50, 80), common [80, 100)
CHEST_TABLE: OutcomeTable[ChestOutcome] = OutcomeTable.from_pairs([
    (TRAP_PERCENT, ChestOutcome.TRAP),
    (MASTER_REWARDS_PERCENT, ChestOutcome.MASTER_REWARDS),
    (ROGUE_REWARDS_PERCENT, ChestOutcome.ROGUE_REWARDS),
    (ULTRA_REWARDS_PERCENT, ChestOutcome.ULTRA_REWARDS),
    (COMMON_REWARDS_PERCENT, ChestOutcome.COMMON_REWARDS),
])

REWARD_TIERS: dict[ChestOutcome, list[RewardTier]] = {
    ChestOutcome.COMMON_REWARDS: [
        RewardTier.COMMON, RewardTier.COMMON, RewardTier.GREAT, RewardTier.GREAT
    ],
    ChestOutcome.ULTRA_REWARDS: [RewardTier.ULTRA] * 3,
    ChestOutcome.ROGUE_REWARDS: [RewardTier.ROGUE] * 2,
    ChestOutcome.MASTER_REWARDS: [RewardTier.MASTER],
}

REWARD_TEXT: dict[ChestOutcome, str] = {
    ChestOutcome.COMMON_REWARDS: "The chest held some useful items.",
    ChestOutcome.ULTRA_REWARDS: "The chest held some great items!",
    ChestOutcome.ROGUE_REWARDS: "The chest held some rare items!",
    ChestOutcome.MASTER_REWARDS: "The chest held an incredible item!",
}

TRAP_BOSS_PARTY = EnemyPartyConfig(
    level_additive_modifier=0.5,
    disable_switch=True,
    members=[
        EnemyMemberConfig(
            species="gimmighoul",
            form_index=0,
            is_boss=True,
            move_set=["nasty_plot", "shadow_ball", "power_gem", "thief"],
        )
    ],
)

OPEN_OPTION = 0


class MysteriousChestPhase(Phase):
    """
    A chest appears on the route.

    Opening it draws once from CHEST_TABLE; the outcome picks exactly one
    handler. Leaving ends the encounter with no rewards.
    """

    kind = PhaseKind.MYSTERY_ENCOUNTER

    def __init__(self) -> None:
        super().__init__()
        self.roll: int | None = None
        self.outcome: ChestOutcome | None = None
        self.selector: RandomBranchSelector[ChestOutcome] = RandomBranchSelector(CHEST_TABLE)
        self._handlers: dict[ChestOutcome, Callable[[GameSession], Awaitable[None]]] = {
            ChestOutcome.TRAP: self._spring_trap,
            ChestOutcome.MASTER_REWARDS: self._grant_rewards,
            ChestOutcome.ROGUE_REWARDS: self._grant_rewards,
            ChestOutcome.ULTRA_REWARDS: self._grant_rewards,
            ChestOutcome.COMMON_REWARDS: self._grant_rewards,
        }

    def validate(self, session: GameSession) -> bool:
        settings = session.settings
        wave = session.state.wave_index
        party_size = len(session.state.party)
        return (
            settings.mystery_encounter_min_wave <= wave <= settings.mystery_encounter_max_wave
            and settings.chest_min_party_size <= party_size <= settings.chest_max_party_size
        )

    async def start(self, session: GameSession) -> None:
        await session.show_text("You found a mysterious chest!")
        choice = await session.select_option(
            "What will you do?", ["Open the chest", "Leave it alone"]
        )
        if choice != OPEN_OPTION:
            await session.show_text("You leave the chest behind.")
            session.phases.push(LeaveEncounterPhase(add_rewards=False))
            return

        self.roll, self.outcome = self.selector.draw_from(session.rng)
        logger.bind(
            wave_index=session.state.wave_index,
            roll=self.roll,
            outcome=self.outcome.value,
        ).info("Chest opened")

        if self.outcome is ChestOutcome.TRAP:
            await session.play_effect("chest_red")
        await session.play_effect("chest_open")
        await self._handlers[self.outcome](session)

    async def _grant_rewards(self, session: GameSession) -> None:
        assert self.outcome is not None
        rewards = EncounterRewards(guaranteed_tiers=list(REWARD_TIERS[self.outcome]))
        session.state.encounter_rewards = rewards
        await session.show_text(REWARD_TEXT[self.outcome])
        session.phases.push(RewardPhase(rewards))
        session.phases.push(LeaveEncounterPhase())

    async def _spring_trap(self, session: GameSession) -> None:
        state = session.state
        target = state.highest_level_member(allowed_in_battle=True)
        if target is not None:
            target.knock_out()
            logger.bind(wave_index=state.wave_index, member=target.name).info(
                "Chest trap knocked out party member"
            )
            await session.show_text(f"Oh no! The chest was a trap! {target.name} was knocked out!")
        else:
            await session.show_text("Oh no! The chest was a trap!")

        if not state.allowed_in_battle():
            logger.bind(wave_index=state.wave_index).info("No party members left, ending run")
            session.phases.clear()
            session.phases.push(GameOverPhase())
            return

        await session.play_effect("battle_transition")
        state.encounter_rewards = EncounterRewards(fill_remaining=True)
        init_battle_with_enemy_config(session, TRAP_BOSS_PARTY)
