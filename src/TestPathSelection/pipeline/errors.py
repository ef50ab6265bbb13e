"""Custom exception hierarchy for test path selection."""
from __future__ import annotations


class TestPathSelectionError(Exception):
    """Base exception for test path selection."""

    __test__ = False


class ConfigurationError(TestPathSelectionError):
    """Raised at construction when the static configuration is invalid."""


class InvalidPatternError(TestPathSelectionError):
    """Raised when an ad-hoc test path pattern is not a valid regex."""


class ChangedFilesError(TestPathSelectionError):
    """Raised when an SCM command fails while listing changed files."""

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"{' '.join(command)} exited with {returncode}: {stderr.strip()}"
        )


class SelectionError(TestPathSelectionError):
    """Raised when the select stage encounters an unrecoverable error."""


class ExecutionError(TestPathSelectionError):
    """Raised when the execute stage cannot start the test runner."""
