"""Unit tests for ReturnFlowAnalyzer."""

import astroid
import pytest

from typesafe.domain.return_flow import ReturnFlowAnalyzer


@pytest.fixture
def analyzer() -> ReturnFlowAnalyzer:
    return ReturnFlowAnalyzer()


def _function(source: str) -> astroid.nodes.FunctionDef:
    return astroid.extract_node(source)


def test_all_naked_returns_are_not_flagged(analyzer: ReturnFlowAnalyzer) -> None:
    fn = _function(
        """
def f(flag):
    if flag:
        return
    return
"""
    )
    profile = analyzer.profile(fn)
    assert profile.naked_count == 2
    assert profile.is_void_like
    assert not profile.is_flagged


def test_no_returns_are_not_flagged(analyzer: ReturnFlowAnalyzer) -> None:
    fn = _function(
        """
def f():
    print("x")
"""
    )
    assert not analyzer.profile(fn).is_flagged


def test_mixed_returns_are_flagged_with_first_label(analyzer: ReturnFlowAnalyzer) -> None:
    fn = _function(
        """
def t(c):
    if c:
        return "v"
    return
"""
    )
    profile = analyzer.profile(fn)
    assert profile.is_mixed
    assert profile.is_flagged
    assert profile.inferred_label == "str"


def test_explicit_none_return_is_flagged(analyzer: ReturnFlowAnalyzer) -> None:
    fn = _function(
        """
def f(c):
    if c:
        return 3
    return None
"""
    )
    profile = analyzer.profile(fn)
    assert profile.may_be_absent
    assert profile.is_flagged
    assert profile.inferred_label == "int"


def test_only_valued_returns_are_not_flagged(analyzer: ReturnFlowAnalyzer) -> None:
    fn = _function(
        """
def f(c):
    if c:
        return 1
    return 2
"""
    )
    assert not analyzer.profile(fn).is_flagged


def test_nested_function_returns_are_not_counted(analyzer: ReturnFlowAnalyzer) -> None:
    fn = _function(
        """
def outer():
    def inner(c):
        if c:
            return None
        return 1
    handler = lambda: None
    for item in range(3):
        def deeper():
            return None
    return inner
"""
    )
    points = analyzer.collect(fn)
    assert len(points) == 1
    assert not analyzer.profile(fn).is_flagged


def test_generator_is_never_flagged(analyzer: ReturnFlowAnalyzer) -> None:
    fn = _function(
        """
def gen(c):
    if c:
        return
    yield 1
    return None
"""
    )
    assert ReturnFlowAnalyzer.is_generator(fn)
    assert not analyzer.profile(fn).is_flagged


def test_lambda_body_is_its_single_return(analyzer: ReturnFlowAnalyzer) -> None:
    fn = astroid.extract_node("lambda: None if c else 'x'")
    profile = analyzer.profile(fn)
    assert profile.value_count == 1
    assert profile.is_flagged
    assert profile.inferred_label == "str"
