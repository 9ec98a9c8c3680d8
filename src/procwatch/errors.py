# src/procwatch/errors.py
"""Typed exceptions and exit codes for the supervisor."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Enumeration for supervisor exit codes."""
    OK = 0
    UNKNOWN_ERROR = 1
    CONFIG_ERROR = 10
    SPAWN_ERROR = 11
    REDIRECT_ERROR = 12


class ProcwatchError(Exception):
    """Base exception for all procwatch errors."""
    def __init__(self, message: str, exit_code: ExitCode = ExitCode.UNKNOWN_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def __str__(self) -> str:
        return f"[{self.exit_code.name}] {super().__str__()}"


class ConfigError(ProcwatchError):
    """Exception for configuration loading or validation errors."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.CONFIG_ERROR)


class SpawnError(ProcwatchError):
    """The child could not be started or waited on."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.SPAWN_ERROR)


class RedirectError(ProcwatchError):
    """A redirection file for the child's standard streams could not be opened."""
    def __init__(self, message: str):
        super().__init__(message, ExitCode.REDIRECT_ERROR)
