# ABOUTME: Utility module exports for structured logging and seeded randomness.
# ABOUTME: Provides logging.py (loguru config, phase/gate log helpers) and rng.py (seeded streams, daily seeds).

from src.utils.logging import get_logger, setup_logging
from src.utils.rng import SeededRandom, daily_run_seed

__all__ = [
    "setup_logging",
    "get_logger",
    "SeededRandom",
    "daily_run_seed",
]
