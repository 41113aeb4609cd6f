"""Domain models for rules and violations."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol

import astroid

from typesafe.domain.config import RuleConfiguration
from typesafe.domain.constants import ANONYMOUS_FUNCTION, UNKNOWN_LABEL, VIOLATION_MESSAGES
from typesafe.domain.containment import ContainmentGuard
from typesafe.domain.entities import RuleFamily, Violation, ViolationKind
from typesafe.domain.fixes import FixEmitter, SourceText
from typesafe.domain.known_apis import KnownAPIRegistry
from typesafe.domain.node_kinds import NodeKind
from typesafe.domain.wildcard import WildcardMatcher

__all__ = [
    "Checkable",
    "Handler",
    "RuleContext",
    "UsageRule",
    "Violation",
]


@dataclass(frozen=True)
class RuleContext:
    """Everything a node handler may read during one pass over one file."""

    source: SourceText
    file_path: str
    config: RuleConfiguration
    registry: KnownAPIRegistry
    guard: ContainmentGuard
    fixes: FixEmitter


Handler = Callable[[astroid.nodes.NodeNG, RuleContext], Violation | None]


class Checkable(Protocol):
    """A rule configuration of the engine: one handler per NodeKind, no kind left out."""

    name: str
    family: RuleFamily
    description: str
    codes: Mapping[str, str]
    exempting_callees: frozenset[str]

    def applies_to(self, file_path: str, config: RuleConfiguration) -> bool:
        """False when the whole file is suppressed for this rule."""
        ...

    def dispatch_table(self) -> Mapping[NodeKind, Handler]:
        """Map every NodeKind to a handler; unsupported kinds map to an explicit no-op."""
        ...


class UsageRule:
    """Shared reporting and exemption helpers for the two rule families."""

    name: str = ""
    family: RuleFamily = RuleFamily.OPTIONAL
    description: str = ""
    codes: Mapping[str, str] = {}
    exempting_callees: frozenset[str] = frozenset()

    def applies_to(self, file_path: str, config: RuleConfiguration) -> bool:
        return True

    def ignore(self, node: astroid.nodes.NodeNG, context: RuleContext) -> None:
        """Explicit no-op handler for kinds this rule does not inspect."""
        return None

    def report(
        self,
        kind: ViolationKind,
        node: astroid.nodes.NodeNG,
        context: RuleContext,
        label: str = UNKNOWN_LABEL,
    ) -> Violation:
        fix, reason = context.fixes.emit(kind, node, context.source, context.config, self.family)
        return Violation.from_node(
            kind=kind,
            code=self.codes[kind.value],
            message=self.message_for(kind, label),
            node=node,
            label=label,
            fix=fix,
            fix_failure_reason=reason,
        )

    def message_for(self, kind: ViolationKind, label: str = UNKNOWN_LABEL) -> str:
        template = VIOLATION_MESSAGES.get(kind.value) or VIOLATION_MESSAGES.get(
            f"{self.family.value}.{kind.value}", kind.value
        )
        return template.format(label=label)

    @staticmethod
    def is_excepted(name: str | None, config: RuleConfiguration) -> bool:
        if not name or not config.allow_exceptions:
            return False
        return WildcardMatcher.matches(name, config.allow_exceptions)

    @staticmethod
    def function_name(node: astroid.nodes.NodeNG) -> str:
        """``def`` name, or the assignment target a lambda is bound to."""
        if isinstance(node, astroid.nodes.FunctionDef):
            return node.name
        parent = node.parent
        if isinstance(parent, astroid.nodes.Assign) and len(parent.targets) == 1:
            target = parent.targets[0]
        elif isinstance(parent, astroid.nodes.AnnAssign):
            target = parent.target
        else:
            return ANONYMOUS_FUNCTION
        if isinstance(target, astroid.nodes.AssignName):
            return target.name
        if isinstance(target, astroid.nodes.AssignAttr):
            return target.attrname
        return ANONYMOUS_FUNCTION

    @staticmethod
    def enclosing_function_name(node: astroid.nodes.NodeNG) -> str | None:
        scope = node.scope()
        if isinstance(scope, (astroid.nodes.FunctionDef, astroid.nodes.Lambda)):
            return UsageRule.function_name(scope)
        return None

    @staticmethod
    def callee_names(call: astroid.nodes.Call) -> list[str]:
        """Member name first, then the dotted name when it differs."""
        names: list[str] = []
        dotted = ContainmentGuard.callee_name(call)
        func = call.func
        if isinstance(func, astroid.nodes.Attribute):
            names.append(func.attrname)
        elif isinstance(func, astroid.nodes.Name):
            names.append(func.name)
        if dotted and dotted not in names:
            names.append(dotted)
        return names
