# ABOUTME: Unit tests for structured logging utilities
# ABOUTME: Validates loguru configuration and the phase, transition and gate log helpers

import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from loguru import logger

from src.utils.logging import (
    DEFAULT_FORMAT,
    get_logger,
    log_gate_event,
    log_phase_event,
    log_phase_transition,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset logger state before each test"""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for log files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def records():
    """Capture emitted log records in memory"""
    captured = []
    logger.add(lambda message: captured.append(message.record), level="DEBUG")
    return captured


class TestSetupLogging:
    """Test suite for setup_logging function"""

    def test_valid_log_levels(self):
        """Test that all valid log levels are accepted"""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            setup_logging(log_level=level, console_output=True, file_output=False)

    def test_log_level_case_insensitive(self):
        """Test that log level is case-insensitive"""
        for level in ["debug", "Debug", "DeBuG"]:
            setup_logging(log_level=level, console_output=True, file_output=False)

    def test_invalid_log_level_raises_error(self):
        """Test that invalid log level raises ValueError"""
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging(log_level="INVALID")

        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging(log_level="TRACE")  # Valid in loguru but not in our API

    def test_console_output_enabled(self):
        """Test that console output goes to stderr"""
        with patch.object(logger, 'add') as mock_add:
            setup_logging(log_level="INFO", console_output=True, file_output=False)

            assert mock_add.call_args[0][0] == sys.stderr
            assert mock_add.call_args[1]['format'] == DEFAULT_FORMAT

    def test_console_output_disabled(self):
        """Test that console output can be disabled"""
        with patch.object(logger, 'add') as mock_add:
            setup_logging(log_level="INFO", console_output=False, file_output=False)

            assert not mock_add.called

    def test_file_output_enabled(self, temp_log_dir):
        """Test that file output writes scheduler log files"""
        setup_logging(
            log_level="INFO",
            log_dir=temp_log_dir,
            console_output=False,
            file_output=True
        )

        logger.info("test message")
        logger.complete()

        log_files = list(temp_log_dir.glob("phase_scheduler_*.log"))
        assert len(log_files) > 0

    def test_log_directory_creation(self, temp_log_dir):
        """Test that a nested log directory is created"""
        nested_dir = temp_log_dir / "nested" / "logs"

        setup_logging(
            log_level="INFO",
            log_dir=nested_dir,
            console_output=False,
            file_output=True
        )

        assert nested_dir.exists()

    def test_rotation_parameter(self, temp_log_dir):
        """Test that rotation parameter is passed to file handler"""
        with patch.object(logger, 'add') as mock_add:
            setup_logging(
                log_level="INFO",
                log_dir=temp_log_dir,
                console_output=False,
                file_output=True,
                rotation="50 MB"
            )

            assert mock_add.call_args[1]['rotation'] == "50 MB"


class TestGetLogger:
    """Test suite for get_logger function"""

    def test_returns_loguru_logger(self):
        """Test that get_logger returns the shared loguru logger"""
        assert get_logger() is logger


class TestLogPhaseEvent:
    """Test suite for log_phase_event"""

    def test_attaches_phase_context(self, records):
        """Test that phase and generation are bound to the record"""
        log_phase_event("Phase started", phase="title#1", generation=3)

        assert records[0]["message"] == "Phase started"
        assert records[0]["extra"]["phase"] == "title#1"
        assert records[0]["extra"]["generation"] == 3
        assert "wave_index" not in records[0]["extra"]

    def test_optional_wave_and_extra_context(self, records):
        """Test that wave index and extra fields are attached when given"""
        log_phase_event(
            "Phase suspended", phase="reward#4", generation=0,
            wave_index=12, gate_id=9
        )

        assert records[0]["extra"]["wave_index"] == 12
        assert records[0]["extra"]["gate_id"] == 9

    def test_level_is_respected(self, records):
        """Test that the requested level is used"""
        log_phase_event("halted", phase="p#1", generation=0, level="ERROR")
        log_phase_event("skipped", phase="p#2", generation=0, level="debug")

        assert [record["level"].name for record in records] == ["ERROR", "DEBUG"]


class TestLogPhaseTransition:
    """Test suite for log_phase_transition"""

    def test_idle_placeholder(self, records):
        """Test that a missing next phase is reported as idle"""
        log_phase_transition("reward#5", None, generation=1, duration_ms=2.5)

        assert records[0]["message"] == "Phase transition: reward#5 -> <idle>"
        assert records[0]["extra"]["duration_ms"] == 2.5

    def test_duration_optional(self, records):
        """Test that duration is omitted when not measured"""
        log_phase_transition("a#1", "b#2", generation=0)

        assert "duration_ms" not in records[0]["extra"]


class TestLogGateEvent:
    """Test suite for log_gate_event"""

    def test_attaches_gate_context(self, records):
        """Test that gate identity and generation are bound"""
        log_gate_event("Gate cancelled", gate_id=7, generation=2, reason="clear")

        assert records[0]["level"].name == "DEBUG"
        assert records[0]["extra"] == {"gate_id": 7, "generation": 2, "reason": "clear"}
