"""
Depth-bounded, ignore-aware directory traversal.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional

from .errors import DirectoryUnreadable, RootNotADirectory, RootNotFound
from .ignore import IgnoreResolver
from .models import TraversalConfig

logger = logging.getLogger(__name__)


def validate_root(root: Path) -> Path:
    if not root.exists():
        raise RootNotFound(root)
    if not root.is_dir():
        raise RootNotADirectory(root)
    return root


class TreeWalker:
    """Yield root-relative POSIX paths of files under ``config.root``.

    Entries are visited depth-first in name order so output is reproducible.
    Symbolic links are never followed: links to directories are skipped and
    links to regular files are yielded like files.
    """

    def __init__(self, config: TraversalConfig, ignore: Optional[IgnoreResolver] = None) -> None:
        self.config = config
        self.ignore = ignore if ignore is not None else IgnoreResolver.from_config(config)
        self.skipped: List[DirectoryUnreadable] = []

    def walk(self) -> Iterator[str]:
        """Start a fresh traversal.

        The root is checked here, so a bad root raises before the first
        path is produced.
        """
        validate_root(self.config.root)
        self.skipped = []
        return self._walk("", 0)

    def _at_depth_limit(self, depth: int) -> bool:
        return self.config.max_depth is not None and depth >= self.config.max_depth

    def _list_dir(self, rel_dir: str) -> Optional[List[os.DirEntry]]:
        directory = self.config.root / rel_dir if rel_dir else self.config.root
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            err = DirectoryUnreadable(directory, e)
            self.skipped.append(err)
            logger.warning("%s", err)
            return None

    def _walk(self, rel_dir: str, depth: int) -> Iterator[str]:
        if self._at_depth_limit(depth):
            return
        entries = self._list_dir(rel_dir)
        if entries is None:
            return

        with self.ignore.scope(rel_dir):
            for entry in entries:
                if not self.config.hidden and entry.name.startswith("."):
                    continue
                rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

                if entry.is_dir(follow_symlinks=False):
                    if self._at_depth_limit(depth + 1):
                        continue
                    if not self.ignore.should_descend(rel):
                        logger.debug("Skipping ignored directory: %s", rel)
                        continue
                    yield from self._walk(rel, depth + 1)
                elif entry.is_file():
                    if not self.ignore.should_include(rel):
                        logger.debug("Skipping ignored file: %s", rel)
                        continue
                    yield rel
