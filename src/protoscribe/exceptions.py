"""Exceptions raised by protoscribe."""

from pathlib import Path, PurePath
from typing import Self


class ProtoscribeError(Exception):
    """Base exception for all protoscribe errors."""


class OutputWriteError(ProtoscribeError):
    """Raised when an output directory or file cannot be written.

    This aborts the whole run. Files written before the failure are left in
    place.
    """

    def __init__(self: Self, path: Path, reason: str) -> None:
        """Initialize the error.

        Args:
            path: Directory or file that could not be written.
            reason: Underlying failure description.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class NamespaceCollisionError(ProtoscribeError):
    """Raised when two namespaces resolve to the same output path."""

    def __init__(self: Self, path: PurePath, first: str, second: str) -> None:
        """Initialize the error.

        Args:
            path: The shared output path.
            first: Namespace that claimed the path first.
            second: Namespace that collided with it.
        """
        self.path = path
        self.first = first
        self.second = second
        super().__init__(
            f"Namespaces '{first}' and '{second}' both resolve to '{path}'"
        )


class CompilerStateError(ProtoscribeError):
    """Raised when a compiler is run more than once."""


class IRLoadError(ProtoscribeError):
    """Raised when an IR program cannot be read or validated."""
