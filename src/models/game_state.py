# ABOUTME: Pydantic models for the persisted run state plus the phase kind and lifecycle enums.
# ABOUTME: Defines GameState (what saves persist), GameMode, GameStats, PhaseKind and PhaseState.

from enum import Enum

from pydantic import BaseModel, Field

from src.models.encounter import BattleState, EncounterRewards, RewardTier, Unlockable
from src.models.party import PartyMember

STARTING_MONEY = 1000
STARTING_LEVEL = 5


class PhaseKind(str, Enum):
    """Closed set of phase variants the scheduler can run"""
    TITLE = "title"
    SELECT_STARTER = "select_starter"
    ENCOUNTER = "encounter"
    SUMMON = "summon"
    CHECK_SWITCH = "check_switch"
    MESSAGE = "message"
    MYSTERY_ENCOUNTER = "mystery_encounter"
    REWARD = "reward"
    LEAVE_ENCOUNTER = "leave_encounter"
    EVOLUTION = "evolution"
    GAME_OVER = "game_over"
    END_CARD = "end_card"
    UNLOCK = "unlock"
    GAME_OVER_REWARD = "game_over_reward"
    POST_GAME_OVER = "post_game_over"


class PhaseState(str, Enum):
    """Lifecycle of a single phase instance"""
    CREATED = "created"
    RUNNING = "running"
    SUSPENDED = "suspended"
    ENDED = "ended"


class GameMode(str, Enum):
    """Run modes; daily runs share a seed across all players for a day"""
    CLASSIC = "classic"
    ENDLESS = "endless"
    SPLICED_ENDLESS = "spliced_endless"
    CHALLENGE = "challenge"
    DAILY = "daily"

    @property
    def is_classic(self) -> bool:
        return self is GameMode.CLASSIC

    @property
    def is_endless(self) -> bool:
        return self in (GameMode.ENDLESS, GameMode.SPLICED_ENDLESS)

    @property
    def is_daily(self) -> bool:
        return self is GameMode.DAILY


class GameStats(BaseModel):
    """Lifetime counters updated by title, starter and game-over phases"""

    classic_sessions_played: int = Field(default=0, ge=0)
    endless_sessions_played: int = Field(default=0, ge=0)
    daily_sessions_played: int = Field(default=0, ge=0)
    sessions_won: int = Field(default=0, ge=0)
    daily_sessions_won: int = Field(default=0, ge=0)


class GameState(BaseModel):
    """
    Domain data phases read and write.

    This is the only thing the persistence subsystem saves; the phase queue is
    rebuilt fresh on every load.
    """

    seed: str = Field(min_length=1, description="Run seed the RNG streams derive from")
    game_mode: GameMode = GameMode.CLASSIC
    session_slot: int | None = Field(default=None, description="Save slot, None before selection")
    wave_index: int = Field(default=1, ge=1)
    money: int = Field(default=0, ge=0)
    party: list[PartyMember] = Field(default_factory=list)
    battle: BattleState | None = None
    encounter_rewards: EncounterRewards | None = None
    inventory: list[RewardTier] = Field(default_factory=list)
    unlocks: set[Unlockable] = Field(default_factory=set)
    achievements: set[str] = Field(default_factory=set)
    vouchers: list[str] = Field(default_factory=list)
    ribbons: dict[str, int] = Field(default_factory=dict)
    stats: GameStats = Field(default_factory=GameStats)
    game_over: bool = False
    victory: bool = False

    def allowed_in_battle(self) -> list[PartyMember]:
        """Party members that may still be sent out"""
        return [member for member in self.party if member.is_allowed_in_battle]

    def highest_level_member(
        self,
        allowed_in_battle: bool = True,
        include_fainted: bool = False
    ) -> PartyMember | None:
        """
        Strongest party member by level; earlier party slots win ties.

        Args:
            allowed_in_battle: Only consider members that may battle
            include_fainted: Also consider fainted members

        Returns:
            The highest level candidate, or None if the party has none
        """
        best: PartyMember | None = None
        for member in self.party:
            if allowed_in_battle and not member.is_allowed_in_battle:
                continue
            if not include_fainted and member.is_fainted:
                continue
            if best is None or member.level > best.level:
                best = member
        return best

    def increment_ribbon(self, species: str) -> int:
        """Record a classic win ribbon for a species and return its new count"""
        self.ribbons[species] = self.ribbons.get(species, 0) + 1
        return self.ribbons[species]

    def start_new_run(
        self,
        seed: str,
        game_mode: GameMode,
        session_slot: int | None = None
    ) -> "GameState":
        """
        Fresh run state that keeps the account-level progress of this one.

        Unlocks, achievements, vouchers, ribbons and stats carry over; party,
        wave, money and battle start over.
        """
        return GameState(
            seed=seed,
            game_mode=game_mode,
            session_slot=session_slot,
            money=STARTING_MONEY,
            unlocks=set(self.unlocks),
            achievements=set(self.achievements),
            vouchers=list(self.vouchers),
            ribbons=dict(self.ribbons),
            stats=self.stats.model_copy(),
        )
