"""
Exception hierarchy for globcopy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class GlobcopyError(Exception):
    """Base exception for globcopy errors."""


class InvalidPattern(GlobcopyError):
    """Raised when a user pattern cannot be compiled as a glob."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern '{pattern}': {reason}")


class InvalidRootError(GlobcopyError):
    """Raised when the traversal root is unusable."""

    def __init__(self, root: Path, message: str) -> None:
        self.root = root
        super().__init__(message)


class RootNotFound(InvalidRootError):
    def __init__(self, root: Path) -> None:
        super().__init__(root, f"Root directory '{root}' does not exist")


class RootNotADirectory(InvalidRootError):
    def __init__(self, root: Path) -> None:
        super().__init__(root, f"Root path '{root}' is not a directory")


class DirectoryUnreadable(GlobcopyError):
    """A directory could not be listed during traversal."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read directory '{path}': {cause}")


class IgnoreFileMalformed(GlobcopyError):
    """A single ignore-file line could not be compiled."""

    def __init__(self, source: Path, lineno: int, line: str, detail: str) -> None:
        self.source = source
        self.lineno = lineno
        self.line = line
        super().__init__(f"{source}:{lineno}: skipping rule '{line}' ({detail})")


class FileReadError(GlobcopyError):
    """Raised when there are issues reading a matched file."""

    def __init__(self, path: Path, cause: Optional[OSError] = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read '{path}': {cause}")


class ConfigFileError(GlobcopyError):
    """Raised when an extra ignore file given by the user is unusable."""


class OutputError(GlobcopyError):
    """Raised when the aggregated text cannot be delivered."""
