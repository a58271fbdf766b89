# ABOUTME: Reward granting and encounter exit phases.
# ABOUTME: RewardPhase offers guaranteed tiers (optionally topped up from the wave table); LeaveEncounterPhase moves on.

from loguru import logger

from src.models.encounter import EncounterRewards, RewardTier
from src.models.game_state import PhaseKind
from src.orchestration.branching import OutcomeTable, RandomBranchSelector
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession

REWARD_SLOTS = 3

# Regular wave reward odds, out of 100
WAVE_REWARD_TABLE: OutcomeTable[RewardTier] = OutcomeTable.from_pairs([
    (60, RewardTier.COMMON),
    (25, RewardTier.GREAT),
    (10, RewardTier.ULTRA),
    (4, RewardTier.ROGUE),
    (1, RewardTier.MASTER),
])


class RewardPhase(Phase):
    """Lets the player take one item from the offered reward tiers"""

    kind = PhaseKind.REWARD

    def __init__(self, rewards: EncounterRewards):
        super().__init__()
        self.rewards = rewards
        self.offered: list[RewardTier] = []

    async def start(self, session: GameSession) -> None:
        offered = list(self.rewards.guaranteed_tiers)
        if self.rewards.fill_remaining:
            selector = RandomBranchSelector(WAVE_REWARD_TABLE)
            while len(offered) < REWARD_SLOTS:
                _, tier = selector.draw_from(session.rng)
                offered.append(tier)
        self.offered = offered

        if not offered:
            return

        choice = await session.select_option(
            "Choose a reward", [f"{tier.value.title()} item" for tier in offered]
        )
        session.state.encounter_rewards = None
        if not 0 <= choice < len(offered):
            logger.bind(wave_index=session.state.wave_index, choice=choice).info("Reward skipped")
            await session.show_text("You left the rewards behind.")
            return

        tier = offered[choice]
        session.state.inventory.append(tier)
        logger.bind(wave_index=session.state.wave_index, tier=tier.value).info("Reward granted")
        await session.show_text(f"You received a {tier.value} item!")


class LeaveEncounterPhase(Phase):
    """Closes the encounter, moves on to the next wave and saves progress"""

    kind = PhaseKind.LEAVE_ENCOUNTER

    def __init__(self, add_rewards: bool = True):
        super().__init__()
        self.add_rewards = add_rewards

    async def start(self, session: GameSession) -> None:
        state = session.state
        if not self.add_rewards:
            state.encounter_rewards = None
        state.battle = None
        state.wave_index += 1
        session.reseed_for_wave()
        session.save()
        logger.bind(wave_index=state.wave_index).info("Encounter left")
