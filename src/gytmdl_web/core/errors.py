"""Custom exceptions and error formatting for gytmdl-web."""

from __future__ import annotations


class GytmdlWebError(Exception):
    """Base class for all gytmdl-web errors."""


class ConfigError(GytmdlWebError):
    """Raised when a configuration value is invalid."""

    def __init__(self, name: str, message: str) -> None:
        """Initialize ConfigError.

        Args:
            name: The configuration key that is invalid.
            message: Description of the problem.
        """
        self.name = name
        self.message = message
        super().__init__(f"Invalid setting {name}: {message}")


class InvalidRequestError(GytmdlWebError):
    """Raised when a submission is malformed or empty."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedError(GytmdlWebError):
    """Raised when a request presents the wrong credential."""

    def __init__(self, message: str = "Unauthorized") -> None:
        self.message = message
        super().__init__(message)


class TaskNotFoundError(GytmdlWebError):
    """Raised when a task id is unknown or its task already completed."""

    def __init__(self, task_id: str) -> None:
        """Initialize TaskNotFoundError.

        Args:
            task_id: The id that did not resolve in the registry.
        """
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found or already completed")


class ChannelClosedError(GytmdlWebError):
    """Raised when a result is published on a task whose channels are closed."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Channels of task {task_id} are already closed")


def format_error(error: Exception) -> str:
    """Format error for user display with actionable suggestion.

    Args:
        error: The exception to format.

    Returns:
        Human-readable error message with suggestion.
    """
    if isinstance(error, ConfigError):
        return f"Configuration error: {error.message} ({error.name}). Check your .env file or options."

    if isinstance(error, TaskNotFoundError):
        return f"Task not found: {error.task_id}. It may have already completed."

    if isinstance(error, UnauthorizedError):
        return f"{error.message}. Check the password sent in the Authorization header."

    if isinstance(error, InvalidRequestError):
        return f"Invalid request: {error.message}"

    if isinstance(error, PermissionError):
        return f"Permission denied: {error}. Check directory permissions."

    if isinstance(error, OSError):
        if "No space left" in str(error):
            return "Insufficient disk space. Free up space and retry."
        return f"System error: {error}"

    return f"Unexpected error: {error}"
