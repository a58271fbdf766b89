# ABOUTME: Orchestration layer exports for phase scheduling, gates and weighted branching.
# ABOUTME: Provides PhaseQueue, Phase, Gate and RandomBranchSelector; GameSession lives in src.orchestration.session.

from src.orchestration.branching import OutcomeTable, RandomBranchSelector, WeightedOutcome
from src.orchestration.exceptions import (
    GateStateError,
    PhaseAwaitError,
    PhaseLifecycleError,
    QueueContractError,
)
from src.orchestration.gate import Gate, GateRegistry, GateState
from src.orchestration.phase import Phase
from src.orchestration.phase_queue import PhaseQueue, QueueHandle

__all__ = [
    "Gate",
    "GateRegistry",
    "GateState",
    "OutcomeTable",
    "Phase",
    "PhaseQueue",
    "QueueHandle",
    "RandomBranchSelector",
    "WeightedOutcome",
    "GateStateError",
    "PhaseAwaitError",
    "PhaseLifecycleError",
    "QueueContractError",
]
