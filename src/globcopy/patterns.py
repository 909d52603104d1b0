"""
User glob patterns: normalization, compilation and ordered evaluation.

A raw pattern such as ``!*.lock`` or ``src/**/*.py`` is turned into a
:class:`Pattern` once at startup. A :class:`MatchSet` then decides, for every
root-relative path the walker yields, whether the file is part of the output.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Iterable, Iterator, List, Tuple, Union

from .errors import InvalidPattern

SEPARATOR = "/"
RECURSIVE_PREFIX = "**/"

# Zero or more whole directories, for a ``**`` segment that is not last.
_ANY_SEGMENTS = "(?:[^/]+/)*"


@dataclass(frozen=True)
class Pattern:
    """A normalized user pattern."""

    raw: str
    negated: bool
    canonical_glob: str
    regex: "re.Pattern[str]" = field(repr=False, compare=False)

    def matches(self, path: Union[str, PurePath]) -> bool:
        return self.regex.fullmatch(_as_posix(path)) is not None


def _as_posix(path: Union[str, PurePath]) -> str:
    if isinstance(path, PurePath):
        return path.as_posix()
    return path


# Glob compilation

def _translate_class(seg: str, start: int, raw: str) -> Tuple[int, str]:
    """Translate the ``[...]`` class opening at *start*; return (next index, regex)."""
    i = start + 1
    negate = False
    if i < len(seg) and seg[i] in "!^":
        negate = True
        i += 1

    body: List[str] = []
    first = True
    while True:
        if i >= len(seg):
            raise InvalidPattern(raw, "unclosed character class")
        c = seg[i]
        if c == "]" and not first:
            break
        first = False
        if c == "\\" and i + 1 < len(seg):
            body.append(re.escape(seg[i + 1]))
            i += 2
            continue
        body.append("-" if c == "-" else re.escape(c))
        i += 1

    return i + 1, "[" + ("^/" if negate else "") + "".join(body) + "]"


def _translate_segment(seg: str, raw: str) -> str:
    out: List[str] = []
    in_alternation = False
    i = 0
    while i < len(seg):
        c = seg[i]
        if c == "*":
            if seg.startswith("**", i):
                raise InvalidPattern(raw, "'**' must be a whole path segment")
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            i, cls = _translate_class(seg, i, raw)
            out.append(cls)
            continue
        elif c == "{":
            if in_alternation:
                raise InvalidPattern(raw, "nested alternation groups are not supported")
            in_alternation = True
            out.append("(?:")
        elif c == "}":
            if not in_alternation:
                raise InvalidPattern(raw, "unopened alternation group")
            in_alternation = False
            out.append(")")
        elif c == "," and in_alternation:
            out.append("|")
        elif c == "\\":
            if i + 1 >= len(seg):
                raise InvalidPattern(raw, "dangling escape")
            out.append(re.escape(seg[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(c))
        i += 1

    if in_alternation:
        raise InvalidPattern(raw, "unclosed alternation group")
    return "".join(out)


def compile_glob(glob: str, raw: str = "") -> "re.Pattern[str]":
    """Compile *glob* into a regex matched against whole root-relative paths.

    ``*`` and ``?`` never cross a ``/``; a ``**`` segment spans zero or more
    directories.
    """
    raw = raw or glob
    segments = [s for s in glob.split(SEPARATOR) if s]
    if not segments:
        raise InvalidPattern(raw, "pattern is empty")
    if glob.endswith(SEPARATOR):
        raise InvalidPattern(raw, "trailing '/' would match directories, only files are matched")

    last = len(segments) - 1
    parts: List[str] = []
    for idx, seg in enumerate(segments):
        if seg == "**":
            parts.append(".*" if idx == last else _ANY_SEGMENTS)
        else:
            parts.append(_translate_segment(seg, raw) + ("" if idx == last else SEPARATOR))

    try:
        return re.compile("".join(parts))
    except re.error as e:
        raise InvalidPattern(raw, str(e)) from e


# Normalization

def normalize(raw: str) -> Pattern:
    """Turn a raw command-line pattern into a :class:`Pattern`.

    Leading ``!`` marks negation. A pattern without a ``/`` is rewritten to
    ``**/<pattern>`` so it matches that name at any depth; patterns with a
    ``/`` are anchored at the root.
    """
    text = raw.strip()
    negated = text.startswith("!")
    text = text.lstrip("!")
    if not text:
        raise InvalidPattern(raw, "pattern is empty")

    if SEPARATOR in text:
        glob = text
        while glob.startswith("./"):
            glob = glob[2:]
        glob = glob.lstrip(SEPARATOR)
    else:
        glob = RECURSIVE_PREFIX + text

    return Pattern(raw=raw, negated=negated, canonical_glob=glob, regex=compile_glob(glob, raw))


def parse_patterns(raws: Iterable[str]) -> List[Pattern]:
    """Normalize every non-blank entry of *raws*, keeping argument order."""
    return [normalize(raw) for raw in raws if raw.strip()]


# Evaluation

class MatchSet:
    """Ordered user patterns evaluated with last-match-wins precedence."""

    def __init__(self, patterns: Iterable[Pattern] = ()) -> None:
        self._patterns: Tuple[Pattern, ...] = tuple(patterns)

    @classmethod
    def build(cls, patterns: Iterable[Pattern]) -> "MatchSet":
        return cls(patterns)

    @classmethod
    def from_strings(cls, raws: Iterable[str]) -> "MatchSet":
        return cls(parse_patterns(raws))

    def evaluate(self, path: Union[str, PurePath]) -> bool:
        """Return True if *path* (root-relative) is included.

        An empty set includes everything; otherwise a path no pattern matches
        is excluded.
        """
        rel = _as_posix(path)
        included = not self._patterns
        for pattern in self._patterns:
            if pattern.matches(rel):
                included = not pattern.negated
        return included

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def __repr__(self) -> str:
        return f"MatchSet({[p.raw for p in self._patterns]!r})"
