"""Unit tests for RuleEngine dispatch and ordering."""

import pytest

from typesafe.domain.config import RuleConfiguration
from typesafe.domain.engine import RuleEngine
from typesafe.domain.entities import ViolationKind
from typesafe.domain.known_apis import KnownAPIRegistry
from typesafe.domain.node_kinds import NodeKind
from typesafe.domain.rules.optional_usage import OptionalUsageRule
from typesafe.domain.rules.result_usage import ResultUsageRule


class _IncompleteRule(OptionalUsageRule):
    def dispatch_table(self):
        table = dict(super().dispatch_table())
        del table[NodeKind.RAISE]
        del table[NodeKind.OTHER]
        return table


def test_missing_handler_fails_at_construction() -> None:
    with pytest.raises(ValueError, match="has no handler for node kinds: RAISE, OTHER"):
        RuleEngine(_IncompleteRule())


def test_every_rule_covers_every_kind() -> None:
    for rule in (OptionalUsageRule(), ResultUsageRule()):
        assert set(rule.dispatch_table()) == set(NodeKind)


def test_violations_are_ordered_by_family_then_position(parse) -> None:
    source = """\
def handler(payload):
    try:
        json.loads(payload)
    except ValueError:
        pass
    raise ValueError(payload)
    return json.loads(payload)
"""
    module, text = parse(source)
    violations = RuleEngine(ResultUsageRule()).run(module, text, "module.py")
    kinds = [v.kind for v in violations]
    assert kinds == [
        ViolationKind.USE_WRAP_SYNC,
        ViolationKind.NO_TRY_CATCH_BLOCK,
        ViolationKind.NO_THROW_STATEMENT,
    ]
    assert [v.line for v in violations] == [7, 2, 6]


def test_registry_is_injectable(parse) -> None:
    module, text = parse("value = explode(data)\n")
    registry = KnownAPIRegistry(throwing_names=frozenset({"explode"}))
    engine = RuleEngine(ResultUsageRule(), registry=registry)
    (violation,) = engine.run(module, text, "module.py")
    assert violation.code == "W9513"
    assert engine.registry is registry


def test_unrecognised_nodes_are_ignored(parse) -> None:
    module, text = parse("with open(p) as fh:\n    print(fh)\nmatch x:\n    case _:\n        pass\n")
    assert RuleEngine(OptionalUsageRule()).run(module, text, "module.py", RuleConfiguration()) == []
