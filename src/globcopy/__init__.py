"""
globcopy - copy files selected by glob patterns for LLM context sharing.

This package walks a directory tree, honours .gitignore/.ignore files,
selects files with ordered include/exclude glob patterns and delivers their
concatenated contents to the clipboard or stdout.
"""

__version__ = "0.1.0"

from .core import MatchEngine, find_files
from .errors import (
    GlobcopyError,
    InvalidPattern,
    RootNotADirectory,
    RootNotFound,
)
from .models import MatchedFile, TraversalConfig
from .patterns import MatchSet, Pattern, normalize

__all__ = [
    "GlobcopyError",
    "InvalidPattern",
    "MatchEngine",
    "MatchSet",
    "MatchedFile",
    "Pattern",
    "RootNotADirectory",
    "RootNotFound",
    "TraversalConfig",
    "find_files",
    "normalize",
]
