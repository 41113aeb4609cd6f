"""Optional usage rule (W9501-W9504): nullable returns, nullable annotations, absence-producing calls."""

from collections.abc import Mapping

import astroid

from typesafe.domain.constants import (
    OPTIONAL_CODES,
    OPTIONAL_RULE_NAME,
    OPTIONAL_THUNK_CALLEES,
    OPTIONAL_VALUE_CALLEES,
    UNKNOWN_LABEL,
)
from typesafe.domain.entities import RuleFamily, TypeKind, Violation, ViolationKind
from typesafe.domain.node_kinds import NodeKind
from typesafe.domain.return_flow import ReturnFlowAnalyzer
from typesafe.domain.rules import Handler, RuleContext, UsageRule
from typesafe.domain.type_classifier import TypeClassifier

_OVERLOAD_NAMES = frozenset({"overload", "typing.overload", "t.overload"})


class OptionalUsageRule(UsageRule):
    """Rule for W9501-W9504: values that may be None should travel as Optional instead."""

    name: str = OPTIONAL_RULE_NAME
    family: RuleFamily = RuleFamily.OPTIONAL
    description: str = "Enforce Optional instead of None-returning functions and nullable unions."
    codes: Mapping[str, str] = OPTIONAL_CODES
    exempting_callees: frozenset[str] = OPTIONAL_THUNK_CALLEES | OPTIONAL_VALUE_CALLEES

    def __init__(
        self,
        classifier: TypeClassifier | None = None,
        return_flow: ReturnFlowAnalyzer | None = None,
    ) -> None:
        self._classifier = classifier or TypeClassifier()
        self._return_flow = return_flow or ReturnFlowAnalyzer()

    def dispatch_table(self) -> Mapping[NodeKind, Handler]:
        return {
            NodeKind.FUNCTION: self.check_function,
            NodeKind.LAMBDA: self.check_function,
            NodeKind.ANNOTATED_DECLARATION: self.check_declaration,
            NodeKind.CALL: self.check_call,
            NodeKind.RAISE: self.ignore,
            NodeKind.GUARDED_BLOCK: self.ignore,
            NodeKind.OTHER: self.ignore,
        }

    def check_function(self, node: astroid.nodes.NodeNG, context: RuleContext) -> Violation | None:
        if context.guard.is_exempt(node, self.exempting_callees):
            return None
        if self.is_excepted(self.function_name(node), context.config):
            return None
        if isinstance(node, astroid.nodes.FunctionDef):
            if self._is_overload(node):
                return None
            if node.returns is not None:
                return self._check_annotation(node, node.returns, context)
        profile = self._return_flow.profile(node)
        if not profile.is_flagged:
            return None
        return self.report(
            ViolationKind.NO_NULLABLE_RETURN, node, context, profile.inferred_label
        )

    def _check_annotation(
        self,
        node: astroid.nodes.FunctionDef,
        returns: astroid.nodes.NodeNG,
        context: RuleContext,
    ) -> Violation | None:
        annotation = self._classifier.classify(returns)
        # "-> None" is the void spelling.
        if annotation.kind is TypeKind.STANDALONE_NULL:
            return None
        if not self._classifier.is_absence_capable(annotation):
            return None
        label = self._classifier.representative_label(annotation)
        return self.report(ViolationKind.NO_NULLABLE_RETURN, node, context, label)

    def check_declaration(self, node: astroid.nodes.NodeNG, context: RuleContext) -> Violation | None:
        if isinstance(node.parent, astroid.nodes.ClassDef):
            return None
        annotation = self._classifier.classify(node.annotation)
        if not self._classifier.is_absence_capable(annotation):
            return None
        target = node.target
        if isinstance(target, astroid.nodes.AssignName) and self.is_excepted(
            target.name, context.config
        ):
            return None
        label = self._classifier.representative_label(annotation)
        return self.report(ViolationKind.NO_NULLABLE_UNION, node, context, label)

    def check_call(self, node: astroid.nodes.NodeNG, context: RuleContext) -> Violation | None:
        if context.guard.callee_name(node) in self.exempting_callees:
            return None
        if not context.registry.returns_absent(node):
            return None
        if context.guard.is_exempt(node, self.exempting_callees):
            return None
        if any(self.is_excepted(name, context.config) for name in self.callee_names(node)):
            return None
        kind = (
            ViolationKind.USE_WRAP_ASYNC
            if context.registry.is_async_call(node)
            else ViolationKind.USE_WRAP_SYNC
        )
        return self.report(kind, node, context, UNKNOWN_LABEL)

    @staticmethod
    def _is_overload(node: astroid.nodes.FunctionDef) -> bool:
        if not node.decorators:
            return False
        return any(
            TypeClassifier.dotted_name(d) in _OVERLOAD_NAMES for d in node.decorators.nodes
        )
