"""Unit tests for ContainmentGuard."""

import astroid

from typesafe.domain.constants import OPTIONAL_THUNK_CALLEES, OPTIONAL_VALUE_CALLEES, RESULT_THUNK_CALLEES
from typesafe.domain.containment import ContainmentGuard

OPTIONAL_EXEMPT = OPTIONAL_THUNK_CALLEES | OPTIONAL_VALUE_CALLEES


def _calls(source: str, name: str) -> list[astroid.nodes.Call]:
    module = astroid.parse(source)
    return [
        call
        for call in module.nodes_of_class(astroid.nodes.Call)
        if isinstance(call.func, astroid.nodes.Attribute) and call.func.attrname == name
    ]


def test_call_inside_thunk_is_exempt() -> None:
    guard = ContainmentGuard()
    (call,) = _calls("value = optional.wrap(lambda: d.get(k))\n", "get")
    assert guard.is_exempt(call, OPTIONAL_EXEMPT)


def test_sibling_argument_is_not_exempt() -> None:
    guard = ContainmentGuard()
    (call,) = _calls("value = optional.wrap(lambda: 1, d.get(k))\n", "get")
    assert not guard.is_exempt(call, OPTIONAL_EXEMPT)


def test_value_callee_argument_is_exempt() -> None:
    guard = ContainmentGuard(value_callees=OPTIONAL_VALUE_CALLEES)
    (call,) = _calls("value = optional.from_nullable(d.get(k))\n", "get")
    assert guard.is_exempt(call, OPTIONAL_EXEMPT)


def test_value_callee_needs_to_be_configured() -> None:
    guard = ContainmentGuard()
    (call,) = _calls("value = optional.from_nullable(d.get(k))\n", "get")
    assert not guard.is_exempt(call, OPTIONAL_EXEMPT)


def test_keyword_thunk_is_exempt() -> None:
    guard = ContainmentGuard()
    (call,) = _calls("value = result.wrap(fn=lambda: json.loads(s))\n", "loads")
    assert guard.is_exempt(call, RESULT_THUNK_CALLEES)


def test_named_thunk_passed_to_wrapper_is_exempt() -> None:
    source = """
def handler(s):
    def _guarded():
        json.loads(s)
    outcome = result.wrap(_guarded)
"""
    guard = ContainmentGuard()
    (call,) = _calls(source, "loads")
    assert guard.is_exempt(call, RESULT_THUNK_CALLEES)


def test_named_function_not_passed_is_not_exempt() -> None:
    source = """
def handler(s):
    def helper():
        json.loads(s)
    outcome = result.wrap(other)
"""
    guard = ContainmentGuard()
    (call,) = _calls(source, "loads")
    assert not guard.is_exempt(call, RESULT_THUNK_CALLEES)


def test_decorated_thunk_is_exempt() -> None:
    source = """
@result.wrap
def load():
    return json.loads(s)
"""
    guard = ContainmentGuard()
    (call,) = _calls(source, "loads")
    assert guard.is_exempt(call, RESULT_THUNK_CALLEES)


def test_wrapper_of_other_family_does_not_exempt() -> None:
    guard = ContainmentGuard()
    (call,) = _calls("value = optional.wrap(lambda: json.loads(s))\n", "loads")
    assert not guard.is_exempt(call, RESULT_THUNK_CALLEES)


def test_guarded_block_detection() -> None:
    source = """
try:
    json.loads(s)
except ValueError:
    pass
"""
    (call,) = _calls(source, "loads")
    assert ContainmentGuard.is_inside_guarded_block(call)
    assert isinstance(ContainmentGuard.enclosing_guarded_block(call), astroid.nodes.Try)


def test_try_finally_is_not_a_guarded_block() -> None:
    source = """
try:
    json.loads(s)
finally:
    cleanup()
"""
    (call,) = _calls(source, "loads")
    assert not ContainmentGuard.is_inside_guarded_block(call)
