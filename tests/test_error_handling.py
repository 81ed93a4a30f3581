"""Tests for error types and user-facing display."""

import logging
from pathlib import Path
from unittest.mock import patch

from ghar.error_handling import (
    CommandNotExecutableError,
    CommandNotFoundError,
    ConfigurationError,
    ErrorCategory,
    GharError,
    PathNotFoundError,
    SignalDeliveryError,
    handle_error,
)


class TestGharError:
    """Test the base GharError class."""

    def test_basic_error_creation(self):
        """Test creating a basic GharError."""
        error = GharError(
            "Test error message",
            ErrorCategory.CONFIGURATION,
            solution="Fix your config",
        )

        assert error.message == "Test error message"
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.solution == "Fix your config"
        assert error.log_level == logging.ERROR

    def test_error_display(self, capsys):
        """Test error display to user."""
        error = GharError(
            "Configuration is invalid",
            ErrorCategory.CONFIGURATION,
            solution="Check your config file",
            details="restart_delay must be >= 0",
        )

        error.display_to_user()
        captured = capsys.readouterr()

        assert "Configuration Error" in captured.out
        assert "Configuration is invalid" in captured.out
        assert "Check your config file" in captured.out
        assert "restart_delay must be" in captured.out

    @patch("ghar.error_handling.logger")
    def test_error_logging(self, mock_logger):
        """Test error logging with original exception."""
        original = PermissionError("Operation not permitted")
        error = GharError(
            "Wrapped error",
            ErrorCategory.SYSTEM,
            original_error=original,
            log_level=logging.WARNING,
        )

        error.display_to_user()

        mock_logger.log.assert_called_once_with(
            logging.WARNING,
            "%s: %s",
            "system",
            "Wrapped error",
            exc_info=original,
        )


class TestSpecificErrors:
    """Test specific error types."""

    def test_configuration_error_solution_from_path(self):
        """Test ConfigurationError points at the config file."""
        error = ConfigurationError("Invalid configuration", config_path=Path("/etc/ghar.toml"))

        assert error.category == ErrorCategory.CONFIGURATION
        assert error.solution == "Check your configuration file at /etc/ghar.toml"

    def test_path_not_found(self):
        """Test PathNotFoundError keeps the missing path."""
        error = PathNotFoundError(Path("/srv/actions-runner"))

        assert error.category == ErrorCategory.FILESYSTEM
        assert error.path == Path("/srv/actions-runner")
        assert "Runner path not found" in str(error)

    def test_command_not_found(self):
        """Test CommandNotFoundError basic creation."""
        error = CommandNotFoundError("runsvc.sh")

        assert error.category == ErrorCategory.COMMAND
        assert error.command == "runsvc.sh"
        assert "runsvc.sh" in str(error)

    def test_command_not_executable(self):
        """Test CommandNotExecutableError suggests chmod."""
        error = CommandNotExecutableError("/srv/runner/run.sh")

        assert error.category == ErrorCategory.COMMAND
        assert error.solution == "Make it executable: chmod +x /srv/runner/run.sh"

    def test_signal_delivery(self):
        """Test SignalDeliveryError keeps the PID."""
        error = SignalDeliveryError(4242)

        assert error.category == ErrorCategory.SYSTEM
        assert error.pid == 4242
        assert "4242" in str(error)

    def test_custom_solution(self):
        """Test solution can be overridden."""
        error = PathNotFoundError(Path("/x"), solution="Clone the runner first")
        assert error.solution == "Clone the runner first"


class TestErrorHandler:
    """Test error handler functionality."""

    def test_handle_ghar_error(self, capsys):
        """Test GharError is displayed as-is."""
        handle_error(CommandNotFoundError("runsvc.sh"))
        captured = capsys.readouterr()

        assert "Command Error" in captured.out
        assert "Command not found: runsvc.sh" in captured.out

    def test_handle_filesystem_error(self, capsys):
        """Test filesystem exceptions are categorized."""
        handle_error(PermissionError("Permission denied: 'runner.pid'"))
        captured = capsys.readouterr()

        assert "Filesystem Error" in captured.out

    def test_handle_unknown_error(self, capsys):
        """Test other exceptions fall back to system errors."""
        handle_error(RuntimeError())
        captured = capsys.readouterr()

        assert "System Error" in captured.out
        assert "An unexpected error occurred" in captured.out

    @patch("ghar.error_handling.logger")
    def test_handle_error_logging(self, mock_logger):
        """Test error handler logs errors."""
        handle_error(GharError("Test error", ErrorCategory.CONFIGURATION))

        mock_logger.log.assert_called_once()
