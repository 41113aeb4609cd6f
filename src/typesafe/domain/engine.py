"""Rule engine: one traversal per detection family, closed NodeKind dispatch."""

from collections.abc import Iterator, Mapping

import astroid

from typesafe.domain.config import RuleConfiguration
from typesafe.domain.constants import OPTIONAL_VALUE_CALLEES
from typesafe.domain.containment import ContainmentGuard
from typesafe.domain.entities import Violation
from typesafe.domain.fixes import FixEmitter, SourceText
from typesafe.domain.known_apis import DEFAULT_REGISTRY, KnownAPIRegistry
from typesafe.domain.node_kinds import DETECTION_FAMILIES, NodeKind
from typesafe.domain.rules import Checkable, Handler, RuleContext


class RuleEngine:
    """
    Runs one rule over one module.

    Each rule must map every NodeKind to a handler. Construction fails with
    ValueError when a kind is missing, so adding a kind forces every rule to be
    revisited. Handlers return zero or one violation per node; the engine never
    revisits a node within a family and never raises for unrecognised shapes.
    """

    def __init__(self, rule: Checkable, registry: KnownAPIRegistry | None = None) -> None:
        table = dict(rule.dispatch_table())
        missing = [kind.name for kind in NodeKind if kind not in table]
        if missing:
            raise ValueError(
                f"Rule '{rule.name}' has no handler for node kinds: {', '.join(missing)}"
            )
        self._rule = rule
        self._table: Mapping[NodeKind, Handler] = table
        self._registry = registry or DEFAULT_REGISTRY
        self._guard = ContainmentGuard(value_callees=OPTIONAL_VALUE_CALLEES)
        self._fixes = FixEmitter(self._guard)

    @property
    def rule(self) -> Checkable:
        return self._rule

    @property
    def registry(self) -> KnownAPIRegistry:
        return self._registry

    def run(
        self,
        module: astroid.nodes.Module,
        source: str | SourceText,
        file_path: str = "",
        config: RuleConfiguration | None = None,
    ) -> list[Violation]:
        """Return the violations of one file, ordered by detection family then position."""
        config = config or RuleConfiguration()
        if not self._rule.applies_to(file_path, config):
            return []
        context = RuleContext(
            source=source if isinstance(source, SourceText) else SourceText(source),
            file_path=file_path,
            config=config,
            registry=self._registry,
            guard=self._guard,
            fixes=self._fixes,
        )
        violations: list[Violation] = []
        for family in DETECTION_FAMILIES:
            found: list[Violation] = []
            for node in self._walk(module):
                kind = NodeKind.of(node)
                if kind not in family:
                    continue
                violation = self._table[kind](node, context)
                if violation is not None:
                    found.append(violation)
            found.sort(key=self._position)
            violations.extend(found)
        return violations

    @staticmethod
    def _walk(module: astroid.nodes.NodeNG) -> Iterator[astroid.nodes.NodeNG]:
        stack = [module]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.get_children())))

    @staticmethod
    def _position(violation: Violation) -> tuple[int, int]:
        node = violation.node
        return (node.lineno or 0, node.col_offset or 0)
