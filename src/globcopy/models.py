from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class TraversalConfig:
    """Where and how deep to walk.

    ``max_depth`` counts the root as depth 0; ``None`` means unbounded.
    ``hidden`` includes dot-files and dot-directories, which are skipped
    otherwise. ``ignore_files`` are extra ignore files applied from the root.
    """

    root: Path = Path(".")
    max_depth: Optional[int] = None
    respect_ignore: bool = True
    hidden: bool = False
    ignore_files: Tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(self, "ignore_files", tuple(Path(p) for p in self.ignore_files))


@dataclass(frozen=True)
class MatchedFile:
    """A file that passed ignore rules and user patterns."""

    path: str
    root: Path

    @property
    def absolute(self) -> Path:
        return self.root / self.path

    def read_bytes(self) -> bytes:
        return self.absolute.read_bytes()

    def __str__(self) -> str:
        return self.path
