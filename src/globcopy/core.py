"""
Core logic for globcopy: walk the tree, keep the files the patterns select.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .models import MatchedFile, TraversalConfig
from .patterns import MatchSet
from .walker import TreeWalker, validate_root

logger = logging.getLogger(__name__)


class MatchEngine:
    """Drive a :class:`TreeWalker` and filter its output through a :class:`MatchSet`.

    Holds no state between runs; every call to :meth:`run` starts a fresh
    traversal and returns a new list in traversal order.
    """

    def run(self, config: TraversalConfig, patterns: MatchSet) -> List[MatchedFile]:
        validate_root(config.root)
        logger.debug("Searching in root: %s", config.root)

        walker = TreeWalker(config)
        matched: List[MatchedFile] = []
        for rel in walker.walk():
            if not patterns.evaluate(rel):
                continue
            logger.debug("Matched file: %s", rel)
            matched.append(MatchedFile(path=rel, root=config.root))

        if walker.skipped:
            logger.debug("%d director(ies) could not be read", len(walker.skipped))
        logger.debug("Total matching files: %d", len(matched))
        return matched


def find_files(
    root: Path,
    patterns: Iterable[str] = (),
    max_depth: Optional[int] = None,
    respect_ignore: bool = True,
    hidden: bool = False,
    ignore_files: Sequence[Path] = (),
) -> List[MatchedFile]:
    """Convenience wrapper taking raw pattern strings."""
    config = TraversalConfig(
        root=Path(root),
        max_depth=max_depth,
        respect_ignore=respect_ignore,
        hidden=hidden,
        ignore_files=tuple(ignore_files),
    )
    return MatchEngine().run(config, MatchSet.from_strings(patterns))
