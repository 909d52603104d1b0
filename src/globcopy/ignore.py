"""
Hierarchical ignore-file handling.

Every directory may carry ``.gitignore`` and ``.ignore`` files. Their rules
apply to that directory and everything below it; rules from deeper files take
precedence over shallower ones, and within a directory ``.ignore`` wins over
``.gitignore``. The walker keeps one layer per entered directory on a stack
via :meth:`IgnoreResolver.scope`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from pathspec.patterns.gitignore.spec import GitIgnoreSpecPattern

from .errors import ConfigFileError, IgnoreFileMalformed
from .models import TraversalConfig

logger = logging.getLogger(__name__)

IGNORE_FILENAMES: Tuple[str, ...] = (".gitignore", ".ignore")

# Regex group pathspec sets when a pattern matched a parent directory.
_DIR_MARK = "ps_d"


@dataclass(frozen=True)
class IgnoreRule:
    """One compiled ignore line.

    ``dir_only`` rules (written with a trailing ``/``) apply to directories
    only. A rule matches a path itself, never through one of its ancestors:
    an ancestor that matched was already pruned or kept when it was visited.
    """

    negated: bool
    dir_only: bool
    pattern: GitIgnoreSpecPattern
    source: Path
    lineno: int

    def matches(self, rel: str, is_dir: bool = False) -> bool:
        if self.dir_only and not is_dir:
            return False
        match = self.pattern.regex.search(rel)
        if match is None:
            return False
        # The directory-marker group only takes part when the match stops at
        # an ancestor ("foo" matching "foo/bar").
        return match.groupdict().get(_DIR_MARK) is None


@dataclass(frozen=True)
class IgnoreLayer:
    """Rules from the ignore files of one directory (``base``, root-relative)."""

    base: str
    rules: Tuple[IgnoreRule, ...]

    def relative(self, rel: str) -> str:
        return rel[len(self.base) + 1:] if self.base else rel


def _strip_trailing_spaces(line: str) -> str:
    """Drop trailing spaces unless escaped with a backslash."""
    end = len(line)
    while end and line[end - 1] == " ":
        if end >= 2 and line[end - 2] == "\\":
            break
        end -= 1
    return line[:end]


def compile_rule(line: str, source: Path, lineno: int) -> Optional[IgnoreRule]:
    """Compile one ignore-file line; blank lines and comments yield None."""
    stripped = _strip_trailing_spaces(line)
    if not stripped or stripped.startswith("#"):
        return None
    negated = stripped.startswith("!")
    body = stripped[1:] if negated else stripped
    dir_only = body.endswith("/")
    if dir_only:
        body = body.rstrip("/")
        if not body:
            return None
    try:
        pattern = GitIgnoreSpecPattern(body)
    except ValueError as e:
        raise IgnoreFileMalformed(source, lineno, stripped, str(e)) from e
    if pattern.include is None:
        return None
    return IgnoreRule(negated=negated, dir_only=dir_only, pattern=pattern, source=source, lineno=lineno)


def parse_rules(lines: Iterable[str], source: Path) -> List[IgnoreRule]:
    """Compile *lines*, skipping (and logging) any rule that fails to compile."""
    rules: List[IgnoreRule] = []
    for lineno, line in enumerate(lines, start=1):
        try:
            rule = compile_rule(line, source, lineno)
        except IgnoreFileMalformed as e:
            logger.warning("%s", e)
            continue
        if rule is not None:
            rules.append(rule)
    return rules


def load_ignore_file(path: Path) -> List[IgnoreRule]:
    """Read an ignore file found during traversal; unreadable files are skipped."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read ignore file '%s': %s", path, e)
        return []
    return parse_rules(text.splitlines(), path)


def load_extra_patterns(config_path: Path) -> List[IgnoreRule]:
    """Read an ignore file named explicitly by the user."""
    if not config_path.exists():
        raise ConfigFileError(f"Ignore file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read ignore file '{config_path}': {e}") from e
    return parse_rules(text.splitlines(), config_path)


class IgnoreResolver:
    """Root-scoped ignore decisions backed by a stack of per-directory layers."""

    def __init__(
        self,
        root: Path,
        enabled: bool = True,
        extra_files: Sequence[Path] = (),
        filenames: Sequence[str] = IGNORE_FILENAMES,
    ) -> None:
        self.root = Path(root)
        self.enabled = enabled
        self.filenames = tuple(filenames)
        self._extra_rules: Tuple[IgnoreRule, ...] = ()
        if enabled:
            extra: List[IgnoreRule] = []
            for path in extra_files:
                extra.extend(load_extra_patterns(Path(path)))
            self._extra_rules = tuple(extra)
        self._stack: List[IgnoreLayer] = []

    @classmethod
    def from_config(cls, config: TraversalConfig) -> "IgnoreResolver":
        return cls(config.root, enabled=config.respect_ignore, extra_files=config.ignore_files)

    @property
    def depth(self) -> int:
        return len(self._stack)

    def _load_layer(self, rel_dir: str) -> Optional[IgnoreLayer]:
        directory = self.root / rel_dir if rel_dir else self.root
        rules: List[IgnoreRule] = []
        for name in self.filenames:
            candidate = directory / name
            if candidate.is_file():
                rules.extend(load_ignore_file(candidate))
        if not rel_dir:
            rules.extend(self._extra_rules)
        if not rules:
            return None
        logger.debug("Loaded %d ignore rule(s) for '%s'", len(rules), rel_dir or ".")
        return IgnoreLayer(base=rel_dir, rules=tuple(rules))

    @contextmanager
    def scope(self, rel_dir: str) -> Iterator[None]:
        """Apply the ignore files of *rel_dir* until the block exits."""
        layer = self._load_layer(rel_dir) if self.enabled else None
        if layer is not None:
            self._stack.append(layer)
        try:
            yield
        finally:
            if layer is not None:
                self._stack.pop()

    def _is_ignored(self, rel: str, is_dir: bool) -> bool:
        for layer in reversed(self._stack):
            candidate = layer.relative(rel)
            for rule in reversed(layer.rules):
                if rule.matches(candidate, is_dir):
                    return not rule.negated
        return False

    def should_descend(self, rel_dir: str) -> bool:
        return not self.enabled or not self._is_ignored(rel_dir, is_dir=True)

    def should_include(self, rel_file: str) -> bool:
        return not self.enabled or not self._is_ignored(rel_file, is_dir=False)
