"""Data models for the phase scheduler runtime"""

from .encounter import (
    BattleState,
    BattleType,
    ChestOutcome,
    EncounterRewards,
    EnemyMemberConfig,
    EnemyPartyConfig,
    RewardTier,
    Unlockable,
)
from .game_state import (
    GameMode,
    GameState,
    GameStats,
    PhaseKind,
    PhaseState,
)
from .party import PartyMember

__all__ = [
    # Encounter models
    "BattleState",
    "BattleType",
    "ChestOutcome",
    "EncounterRewards",
    "EnemyMemberConfig",
    "EnemyPartyConfig",
    "RewardTier",
    "Unlockable",
    # Game state models
    "GameMode",
    "GameState",
    "GameStats",
    "PhaseKind",
    "PhaseState",
    # Party models
    "PartyMember",
]
