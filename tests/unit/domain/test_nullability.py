"""Unit tests for NullabilityAnalyzer."""

import astroid
import pytest

from typesafe.domain.nullability import NullabilityAnalyzer


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("None", True),
        ("'x' if flag else None", True),
        ("value or None", True),
        ("'x'", False),
        ("compute()", False),
        ("'a' if flag else 'b'", False),
    ],
)
def test_may_be_absent(text: str, expected: bool) -> None:
    assert NullabilityAnalyzer().may_be_absent(astroid.extract_node(text)) is expected


def test_missing_expression_is_not_absent() -> None:
    assert NullabilityAnalyzer().may_be_absent(None) is False


@pytest.mark.parametrize(
    ("text", "label"),
    [
        ("'v'", "str"),
        ("b'v'", "bytes"),
        ("True", "bool"),
        ("3", "int"),
        ("3.5", "float"),
        ("f'{x}'", "str"),
        ("None if flag else 4", "int"),
        ("None or 'x'", "str"),
        ("compute()", "T"),
        ("None", "T"),
    ],
)
def test_infer_label(text: str, label: str) -> None:
    assert NullabilityAnalyzer().infer_label(astroid.extract_node(text)) == label
