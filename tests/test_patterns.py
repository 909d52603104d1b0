import pytest

from globcopy.errors import InvalidPattern
from globcopy.patterns import MatchSet, compile_glob, normalize, parse_patterns


# --- normalize ---


@pytest.mark.parametrize("name", ["p", "main.rs", "Makefile", "*.py"])
def test_bare_name_becomes_recursive(name: str) -> None:
    pattern = normalize(name)

    assert pattern.canonical_glob == f"**/{name}"
    assert pattern.negated is False


def test_bare_name_matches_at_any_depth_only_whole_segment() -> None:
    pattern = normalize("p")

    assert pattern.matches("p")
    assert pattern.matches("a/b/p")
    assert pattern.matches("x/y/z/p")
    assert not pattern.matches("pp")
    assert not pattern.matches("p2")
    assert not pattern.matches("a/p/child")


@pytest.mark.parametrize("raw", ["p", "*.rs", "src/*.rs", "docs/**/*.md"])
def test_negation_strips_bang_and_keeps_glob(raw: str) -> None:
    negated = normalize(f"!{raw}")

    assert negated.negated is True
    assert negated.canonical_glob == normalize(raw).canonical_glob


def test_pattern_with_separator_is_kept() -> None:
    assert normalize("src/*.rs").canonical_glob == "src/*.rs"


def test_leading_dot_slash_and_slash_anchor_to_root() -> None:
    assert normalize("./src/*.rs").canonical_glob == "src/*.rs"
    assert normalize("/src/*.rs").canonical_glob == "src/*.rs"


def test_whitespace_is_trimmed() -> None:
    pattern = normalize("  !*.lock ")

    assert pattern.negated is True
    assert pattern.canonical_glob == "**/*.lock"


@pytest.mark.parametrize("raw", ["", "   ", "!", "[abc", "foo\\", "a**b", "src/", "!docs/", "{a,b", "a}", "{a,{b}}", "[z-a]"])
def test_invalid_patterns_raise(raw: str) -> None:
    with pytest.raises(InvalidPattern):
        normalize(raw)


def test_invalid_pattern_carries_raw_text() -> None:
    with pytest.raises(InvalidPattern) as exc_info:
        normalize("src/[oops")

    assert exc_info.value.pattern == "src/[oops"
    assert "src/[oops" in str(exc_info.value)


def test_parse_patterns_skips_blank_entries() -> None:
    patterns = parse_patterns(["*.rs", "", "  ", "!test.rs"])

    assert [p.raw for p in patterns] == ["*.rs", "!test.rs"]


# --- glob syntax ---


def test_star_does_not_cross_directories() -> None:
    regex = compile_glob("src/*.rs")

    assert regex.fullmatch("src/main.rs")
    assert not regex.fullmatch("src/nested/main.rs")


def test_double_star_spans_zero_or_more_directories() -> None:
    regex = compile_glob("src/**/*.rs")

    assert regex.fullmatch("src/main.rs")
    assert regex.fullmatch("src/a/b/main.rs")
    assert not regex.fullmatch("lib/main.rs")


def test_trailing_double_star_matches_everything_below() -> None:
    regex = compile_glob("docs/**")

    assert regex.fullmatch("docs/index.md")
    assert regex.fullmatch("docs/api/v1.md")
    assert not regex.fullmatch("src/docs.md")


def test_question_mark_and_classes() -> None:
    assert compile_glob("file?.txt").fullmatch("file1.txt")
    assert not compile_glob("file?.txt").fullmatch("file10.txt")
    assert compile_glob("file[0-9].txt").fullmatch("file7.txt")
    assert not compile_glob("file[0-9].txt").fullmatch("filex.txt")
    assert compile_glob("file[!0-9].txt").fullmatch("filex.txt")
    assert not compile_glob("file[!0-9].txt").fullmatch("file7.txt")


def test_alternation() -> None:
    pattern = normalize("*.{rs,toml}")

    assert pattern.matches("Cargo.toml")
    assert pattern.matches("src/main.rs")
    assert not pattern.matches("README.md")


def test_escape_makes_metacharacter_literal() -> None:
    regex = compile_glob("weird\\*name")

    assert regex.fullmatch("weird*name")
    assert not regex.fullmatch("weirdXname")


def test_dot_is_literal() -> None:
    assert not normalize("*.rs").matches("mainxrs")


# --- MatchSet ---


def test_empty_set_includes_everything() -> None:
    match_set = MatchSet()

    assert match_set.evaluate("anything.txt")
    assert match_set.evaluate("deep/nested/file.bin")
    assert not match_set


def test_non_empty_set_excludes_unmatched() -> None:
    match_set = MatchSet.from_strings(["*.rs"])

    assert not match_set.evaluate("README.md")


def test_later_negation_overrides_earlier_include() -> None:
    match_set = MatchSet.from_strings(["*.rs", "!test.rs"])

    assert match_set.evaluate("test.rs") is False
    assert match_set.evaluate("main.rs") is True
    assert match_set.evaluate("src/test.rs") is False


def test_later_include_overrides_earlier_negation() -> None:
    match_set = MatchSet.from_strings(["*.md", "!docs/*.md", "docs/keep.md"])

    assert match_set.evaluate("README.md")
    assert not match_set.evaluate("docs/drop.md")
    assert match_set.evaluate("docs/keep.md")


def test_negation_after_reinclude_excludes_again() -> None:
    match_set = MatchSet.from_strings(["*", "!*.log", "debug.log", "!debug.log"])

    assert not match_set.evaluate("debug.log")
    assert match_set.evaluate("notes.txt")


def test_only_negated_patterns_exclude_everything() -> None:
    match_set = MatchSet.from_strings(["!*.lock"])

    assert not match_set.evaluate("Cargo.lock")
    assert not match_set.evaluate("main.rs")


def test_build_preserves_order() -> None:
    patterns = parse_patterns(["a", "!b", "c/*"])
    match_set = MatchSet.build(patterns)

    assert list(match_set) == patterns
    assert len(match_set) == 3
