"""Error types for runner supervision with user-facing display."""

import logging
from enum import Enum
from pathlib import Path

from rich.console import Console

logger = logging.getLogger(__name__)
console = Console()


class ErrorCategory(Enum):
    """Categories of errors for better user experience."""

    CONFIGURATION = "configuration"
    FILESYSTEM = "filesystem"
    COMMAND = "command"
    SYSTEM = "system"


class GharError(Exception):
    """Base exception for the runner manager."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        *,
        solution: str | None = None,
        details: str | None = None,
        log_level: int = logging.ERROR,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.solution = solution
        self.details = details
        self.log_level = log_level
        self.original_error = original_error

    def display_to_user(self) -> None:
        """Display error to user with helpful context."""
        category_styles = {
            ErrorCategory.CONFIGURATION: ("⚙️", "yellow"),
            ErrorCategory.FILESYSTEM: ("📁", "red"),
            ErrorCategory.COMMAND: ("🔧", "red"),
            ErrorCategory.SYSTEM: ("💻", "red"),
        }

        emoji, color = category_styles.get(self.category, ("❌", "red"))

        console.print(
            f"\n{emoji} [{color} bold]{self.category.value.title()} Error[/{color} bold]",
        )
        console.print(f"[{color}]{self.message}[/{color}]")

        if self.details:
            console.print(f"\n[dim]Details:[/dim] {self.details}")

        if self.solution:
            console.print(f"\n[green]💡 Solution:[/green] {self.solution}")

        if self.original_error:
            logger.log(
                self.log_level,
                "%s: %s",
                self.category.value,
                self.message,
                exc_info=self.original_error,
            )
        else:
            logger.log(self.log_level, "%s: %s", self.category.value, self.message)


class ConfigurationError(GharError):
    """Configuration-related errors."""

    def __init__(self, message: str, *, config_path: Path | None = None, **kwargs):
        solution = kwargs.pop("solution", None)
        if not solution and config_path:
            solution = f"Check your configuration file at {config_path}"
        super().__init__(
            message,
            ErrorCategory.CONFIGURATION,
            solution=solution,
            **kwargs,
        )


class PathNotFoundError(GharError):
    """The runner working directory does not exist."""

    def __init__(self, path: Path, **kwargs):
        self.path = path
        solution = kwargs.pop(
            "solution",
            "Pass the path of an existing runner directory",
        )
        super().__init__(
            f"Runner path not found: {path}",
            ErrorCategory.FILESYSTEM,
            solution=solution,
            **kwargs,
        )


class CommandNotFoundError(GharError):
    """The launch command cannot be located."""

    def __init__(self, command: str, **kwargs):
        self.command = command
        solution = kwargs.pop(
            "solution",
            "Use a command on your PATH or an existing file path",
        )
        super().__init__(
            f"Command not found: {command}",
            ErrorCategory.COMMAND,
            solution=solution,
            **kwargs,
        )


class CommandNotExecutableError(GharError):
    """The launch command exists but cannot be executed."""

    def __init__(self, command: str, **kwargs):
        self.command = command
        solution = kwargs.pop("solution", f"Make it executable: chmod +x {command}")
        super().__init__(
            f"Command is not executable: {command}",
            ErrorCategory.COMMAND,
            solution=solution,
            **kwargs,
        )


class SignalDeliveryError(GharError):
    """A signal could not be delivered to the runner process."""

    def __init__(self, pid: int, **kwargs):
        self.pid = pid
        solution = kwargs.pop(
            "solution",
            "Run the command as the user that started the runner",
        )
        super().__init__(
            f"Could not signal runner process {pid}",
            ErrorCategory.SYSTEM,
            solution=solution,
            **kwargs,
        )


def handle_error(
    error: Exception,
    *,
    category: ErrorCategory | None = None,
    **kwargs,
) -> None:
    """Convert generic exceptions to GharError and display to user."""
    if isinstance(error, GharError):
        error.display_to_user()
        return

    if category is None:
        if isinstance(error, FileNotFoundError | PermissionError | IsADirectoryError):
            category = ErrorCategory.FILESYSTEM
        else:
            category = ErrorCategory.SYSTEM

    ghar_error = GharError(
        message=str(error) or "An unexpected error occurred",
        category=category,
        original_error=error,
        **kwargs,
    )
    ghar_error.display_to_user()
