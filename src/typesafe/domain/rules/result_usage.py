"""Result usage rule (W9511-W9514): raise statements, try/except blocks, raising calls."""

from collections.abc import Mapping

import astroid

from typesafe.domain.config import RuleConfiguration
from typesafe.domain.constants import (
    RESULT_CODES,
    RESULT_RULE_NAME,
    RESULT_THUNK_CALLEES,
    TEST_FILE_PATTERN,
)
from typesafe.domain.entities import RuleFamily, Violation, ViolationKind
from typesafe.domain.node_kinds import NodeKind
from typesafe.domain.rules import Handler, RuleContext, UsageRule


class ResultUsageRule(UsageRule):
    """Rule for W9511-W9514: failures should travel as Result values, not exceptions."""

    name: str = RESULT_RULE_NAME
    family: RuleFamily = RuleFamily.RESULT
    description: str = "Enforce Result instead of raise statements and try/except blocks."
    codes: Mapping[str, str] = RESULT_CODES
    exempting_callees: frozenset[str] = RESULT_THUNK_CALLEES

    def applies_to(self, file_path: str, config: RuleConfiguration) -> bool:
        if not config.allow_test_files:
            return True
        return not self.is_test_file(file_path)

    @staticmethod
    def is_test_file(file_path: str) -> bool:
        return TEST_FILE_PATTERN.search(file_path.replace("\\", "/")) is not None

    def dispatch_table(self) -> Mapping[NodeKind, Handler]:
        return {
            NodeKind.FUNCTION: self.ignore,
            NodeKind.LAMBDA: self.ignore,
            NodeKind.ANNOTATED_DECLARATION: self.ignore,
            NodeKind.CALL: self.check_call,
            NodeKind.RAISE: self.check_raise,
            NodeKind.GUARDED_BLOCK: self.check_guarded_block,
            NodeKind.OTHER: self.ignore,
        }

    def check_raise(self, node: astroid.nodes.NodeNG, context: RuleContext) -> Violation | None:
        if self.is_excepted(self.enclosing_function_name(node), context.config):
            return None
        # Raising inside a wrapped thunk is how the thunk reports failure.
        if context.guard.is_exempt(node, self.exempting_callees):
            return None
        return self.report(ViolationKind.NO_THROW_STATEMENT, node, context)

    def check_guarded_block(
        self, node: astroid.nodes.NodeNG, context: RuleContext
    ) -> Violation | None:
        if not node.handlers:
            return None
        if self.is_excepted(self.enclosing_function_name(node), context.config):
            return None
        return self.report(ViolationKind.NO_TRY_CATCH_BLOCK, node, context)

    def check_call(self, node: astroid.nodes.NodeNG, context: RuleContext) -> Violation | None:
        if context.guard.callee_name(node) in self.exempting_callees:
            return None
        parts = context.registry.callee_parts(node)
        if parts is None:
            return None
        owner, name, _ = parts
        if not context.registry.throws(name, owner):
            return None
        if context.guard.is_exempt(node, self.exempting_callees):
            return None
        if context.guard.is_inside_guarded_block(node):
            return None
        if any(self.is_excepted(n, context.config) for n in self.callee_names(node)):
            return None
        kind = (
            ViolationKind.USE_WRAP_ASYNC
            if context.registry.is_async_call(node)
            else ViolationKind.USE_WRAP_SYNC
        )
        return self.report(kind, node, context)
