# ABOUTME: Concrete phase variants run by the phase queue.
# ABOUTME: Title and starter selection, battle initialization, the mysterious chest, rewards, evolution and game over.

from src.phases.battle import (
    CheckSwitchPhase,
    EncounterPhase,
    SummonPhase,
    init_battle_with_enemy_config,
    queue_resume_phases,
)
from src.phases.evolution import EvolutionPhase
from src.phases.game_over import (
    EndCardPhase,
    GameOverPhase,
    GameOverRewardPhase,
    PostGameOverPhase,
    UnlockPhase,
)
from src.phases.message import MessagePhase
from src.phases.mystery_chest import CHEST_TABLE, MysteriousChestPhase
from src.phases.rewards import LeaveEncounterPhase, RewardPhase
from src.phases.title import SelectStarterPhase, TitlePhase, build_daily_party

__all__ = [
    "CHEST_TABLE",
    "CheckSwitchPhase",
    "EncounterPhase",
    "EndCardPhase",
    "EvolutionPhase",
    "GameOverPhase",
    "GameOverRewardPhase",
    "LeaveEncounterPhase",
    "MessagePhase",
    "MysteriousChestPhase",
    "PostGameOverPhase",
    "RewardPhase",
    "SelectStarterPhase",
    "SummonPhase",
    "TitlePhase",
    "UnlockPhase",
    "build_daily_party",
    "init_battle_with_enemy_config",
    "queue_resume_phases",
]
