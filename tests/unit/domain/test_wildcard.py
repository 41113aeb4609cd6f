"""Unit tests for WildcardMatcher."""

from typesafe.domain.wildcard import WildcardMatcher


def test_prefix_pattern() -> None:
    assert WildcardMatcher.matches("testHelper", ["test*"])
    assert not WildcardMatcher.matches("helperTest", ["test*"])


def test_inner_wildcards() -> None:
    assert WildcardMatcher.matches("legacyApiHelperV2", ["legacy*Helper*"])
    assert not WildcardMatcher.matches("legacyApi", ["legacy*Helper*"])


def test_exact_pattern_without_wildcard() -> None:
    assert WildcardMatcher.matches_one("main", "main")
    assert not WildcardMatcher.matches_one("main2", "main")


def test_regex_metacharacters_are_literal() -> None:
    assert WildcardMatcher.matches("a.b", ["a.*"])
    assert not WildcardMatcher.matches("axb", ["a.b*"])


def test_no_patterns_match_nothing() -> None:
    assert not WildcardMatcher.matches("anything", [])
