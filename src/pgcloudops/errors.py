"""Domain errors for pgcloudops."""

from typing import List, Optional


class OpsError(RuntimeError):
    """Raised when an operation cannot continue safely."""


class ConfigurationError(OpsError):
    """Raised when a required setting is missing or invalid."""


class UsageError(OpsError):
    """Raised for an unknown subcommand or a missing positional argument."""

    def __init__(self, message: str, usage: Optional[str] = None):
        super().__init__(message)
        self.usage = usage or message


class CommandError(OpsError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, message: str, cmd: List[str], returncode: int, stderr: str = ""):
        super().__init__(message)
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
