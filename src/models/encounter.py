# ABOUTME: Pydantic models and enums for encounters, rewards, unlocks and battle setup.
# ABOUTME: Includes ChestOutcome, RewardTier, EnemyPartyConfig, EncounterRewards and BattleState.

from enum import Enum

from pydantic import BaseModel, Field


class RewardTier(str, Enum):
    """Item tiers, ordered from most to least common"""
    COMMON = "common"
    GREAT = "great"
    ULTRA = "ultra"
    ROGUE = "rogue"
    MASTER = "master"


class ChestOutcome(str, Enum):
    """Results of opening the mysterious chest"""
    TRAP = "trap"
    MASTER_REWARDS = "master_rewards"
    ROGUE_REWARDS = "rogue_rewards"
    ULTRA_REWARDS = "ultra_rewards"
    COMMON_REWARDS = "common_rewards"


class Unlockable(str, Enum):
    """Game modes and items unlocked by clearing runs"""
    ENDLESS_MODE = "endless_mode"
    SPLICED_ENDLESS_MODE = "spliced_endless_mode"
    MINI_BLACK_HOLE = "mini_black_hole"
    EVIOLITE = "eviolite"


class BattleType(str, Enum):
    WILD = "wild"
    TRAINER = "trainer"
    MYSTERY_ENCOUNTER = "mystery_encounter"


class EnemyMemberConfig(BaseModel):
    """One enemy in a configured party"""

    species: str = Field(min_length=1)
    form_index: int = Field(default=0, ge=0)
    is_boss: bool = False
    move_set: list[str] = Field(default_factory=list, max_length=4)


class EnemyPartyConfig(BaseModel):
    """Enemy party an encounter starts a battle against"""

    level_additive_modifier: float = 0.0
    disable_switch: bool = False
    members: list[EnemyMemberConfig] = Field(min_length=1)


class EncounterRewards(BaseModel):
    """Rewards an encounter grants once it is left or won"""

    guaranteed_tiers: list[RewardTier] = Field(default_factory=list)
    fill_remaining: bool = Field(
        default=False,
        description="Fill the remaining reward slots with regular wave rewards"
    )


class BattleState(BaseModel):
    """Current wave battle as set up by the battle initialization phases"""

    battle_type: BattleType = BattleType.WILD
    double: bool = False
    enemy_party: EnemyPartyConfig | None = None
    loaded: bool = Field(default=False, description="Resumed from a save")
    field: list[int] = Field(
        default_factory=list,
        description="Party indices currently summoned, in field slot order"
    )
    switch_checks: list[int] = Field(default_factory=list)
