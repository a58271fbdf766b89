# ABOUTME: Structured logging configuration using loguru for scheduler and phase tracing.
# ABOUTME: Supports context fields (phase, generation, wave_index, gate_id) and file/console output.

import sys
from pathlib import Path
from typing import Any

from loguru import logger


# Default log format with structured context
DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | "
    "{extra}"
)

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | Path | None = None,
    console_output: bool = True,
    file_output: bool = True,
    format_string: str | None = None,
    rotation: str = "100 MB",
    retention: str = "30 days",
    compression: str = "zip"
) -> None:
    """
    Configure loguru for structured logging of scheduler activity.

    This setup enables:
    - Structured context fields via logger.bind()
    - Console output with color formatting
    - File output with rotation and compression
    - Multiple log levels (DEBUG, INFO, WARNING, ERROR)

    Usage:
        >>> setup_logging(log_level="DEBUG", log_dir="logs")
        >>> logger = get_logger()
        >>> logger.bind(phase="title", generation=0).info("Phase started")

    Args:
        log_level: Minimum log level ("DEBUG", "INFO", "WARNING", "ERROR")
        log_dir: Directory for log files (default: "logs" in working directory)
        console_output: Enable console logging (default: True)
        file_output: Enable file logging (default: True)
        format_string: Custom format string (default: structured format)
        rotation: When to rotate log files (default: "100 MB")
        retention: How long to keep old logs (default: "30 days")
        compression: Compression for rotated logs (default: "zip")

    Raises:
        ValueError: If log_level is invalid
    """
    log_level = log_level.upper()
    if log_level not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: '{log_level}'. "
            f"Must be one of: {', '.join(sorted(VALID_LEVELS))}"
        )

    # Remove default handler
    logger.remove()

    fmt = format_string or DEFAULT_FORMAT

    if console_output:
        logger.add(
            sys.stderr,
            format=fmt,
            level=log_level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    if file_output:
        log_dir = Path("logs") if log_dir is None else Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / "phase_scheduler_{time:YYYY-MM-DD}.log"
        logger.add(
            str(log_file),
            format=fmt,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            backtrace=True,
            diagnose=True,
            enqueue=True,  # Thread-safe
        )

    logger.info(
        f"Logging configured: level={log_level}, "
        f"console={console_output}, file={file_output}"
    )


def get_logger() -> Any:
    """
    Get configured loguru logger instance.

    Usage:
        >>> logger = get_logger()
        >>> logger.bind(phase="mystery_encounter", wave_index=12).info("Chest opened")

    Returns:
        Configured loguru logger instance
    """
    return logger


def _emit(bound_logger: Any, level: str, message: str) -> None:
    level = level.upper()
    if level == "DEBUG":
        bound_logger.debug(message)
    elif level == "WARNING":
        bound_logger.warning(message)
    elif level == "ERROR":
        bound_logger.error(message)
    else:
        bound_logger.info(message)


def log_phase_event(
    message: str,
    phase: str,
    generation: int,
    wave_index: int | None = None,
    level: str = "INFO",
    **extra_context: Any
) -> None:
    """
    Log a phase lifecycle event with standard context fields.

    Usage:
        >>> log_phase_event(
        ...     "Phase suspended",
        ...     phase="game_over",
        ...     generation=2,
        ...     wave_index=37,
        ...     gate_id=14
        ... )

    Args:
        message: Log message
        phase: Phase label (kind and instance id)
        generation: Queue generation the event belongs to
        wave_index: Optional wave the session is on
        level: Log level (default: "INFO")
        **extra_context: Additional context fields
    """
    context = {
        "phase": phase,
        "generation": generation,
        **extra_context
    }

    if wave_index is not None:
        context["wave_index"] = wave_index

    _emit(logger.bind(**context), level, message)


def log_phase_transition(
    from_phase: str | None,
    to_phase: str | None,
    generation: int,
    duration_ms: float | None = None
) -> None:
    """
    Log the hand-off from one phase to the next with timing information.

    Usage:
        >>> log_phase_transition(
        ...     from_phase="mystery_encounter#4",
        ...     to_phase="reward#5",
        ...     generation=0,
        ...     duration_ms=12.5
        ... )

    Args:
        from_phase: Phase that just ended (None when the queue was idle)
        to_phase: Phase about to start (None when the queue drained)
        generation: Queue generation
        duration_ms: Optional duration of the previous phase in milliseconds
    """
    context: dict[str, Any] = {
        "from_phase": from_phase,
        "to_phase": to_phase,
        "generation": generation,
    }

    if duration_ms is not None:
        context["duration_ms"] = duration_ms

    logger.bind(**context).info(
        f"Phase transition: {from_phase or '<idle>'} -> {to_phase or '<idle>'}"
    )


def log_gate_event(
    message: str,
    gate_id: int,
    generation: int,
    level: str = "DEBUG",
    **extra_context: Any
) -> None:
    """
    Log a gate open/settle/cancel event.

    Args:
        message: Log message
        gate_id: Identity of the gate
        generation: Generation the gate is bound to
        level: Log level (default: "DEBUG")
        **extra_context: Additional context fields
    """
    context = {
        "gate_id": gate_id,
        "generation": generation,
        **extra_context
    }

    _emit(logger.bind(**context), level, message)
