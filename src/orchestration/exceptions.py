# ABOUTME: Exception definitions for scheduler contract violations.
# ABOUTME: Defines error types raised by PhaseQueue, Gate, GateRegistry and phase task driving.


class PhaseLifecycleError(Exception):
    """Raised when a phase is ended twice or otherwise leaves its lifecycle"""

    pass


class QueueContractError(Exception):
    """Raised when the queue is driven outside its sanctioned operations"""

    pass


class GateStateError(Exception):
    """Raised when a gate is settled twice or given a second continuation"""

    pass


class PhaseAwaitError(Exception):
    """Raised when a phase body awaits something other than a gate"""

    pass
