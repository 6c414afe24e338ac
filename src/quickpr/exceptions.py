"""Custom exceptions for quickpr."""


class QuickPRError(Exception):
    """Base exception for all quickpr errors."""


class ConfigError(QuickPRError):
    """Configuration-related errors."""


class CommandError(QuickPRError):
    """An external command exited non-zero, timed out, or was not found."""

    def __init__(self, command: list[str], message: str = "", returncode: int | None = None):
        self.command = command
        self.returncode = returncode
        detail = f": {message}" if message else ""
        super().__init__(f"`{' '.join(command)}` failed{detail}")


class GitError(CommandError):
    """git command errors."""


class GitHubCLIError(CommandError):
    """gh command errors."""


class WorkflowError(QuickPRError):
    """Errors writing the GitHub Actions workflow template."""
