"""Ancestor walks that decide whether a site is already handled by a wrapper or a guarded block."""

from collections.abc import Collection

import astroid

from typesafe.domain.type_classifier import TypeClassifier

_SCOPE_BOUNDARIES = (astroid.nodes.FunctionDef, astroid.nodes.Lambda, astroid.nodes.ClassDef)


class ContainmentGuard:
    """
    Exemption checks over ``node.parent`` back references.

    A site is exempt only when it lies inside the thunk handed to an exempting call,
    never when it is merely a sibling argument of that call. Callees listed in
    ``value_callees`` take the value itself, so their direct arguments are exempt too.
    """

    def __init__(self, value_callees: Collection[str] = ()) -> None:
        self._value_callees = frozenset(value_callees)

    def is_exempt(self, node: astroid.nodes.NodeNG, exempting_names: Collection[str]) -> bool:
        child: astroid.nodes.NodeNG = node
        current = node.parent
        while current is not None:
            if isinstance(current, astroid.nodes.Call) and self.callee_name(current) in exempting_names:
                if self._is_argument(current, child) and self._is_exempting_position(current, child):
                    return True
            if isinstance(child, astroid.nodes.FunctionDef) and self._is_named_thunk(
                child, exempting_names
            ):
                return True
            child = current
            current = current.parent
        return False

    @staticmethod
    def is_inside_guarded_block(node: astroid.nodes.NodeNG) -> bool:
        return ContainmentGuard.enclosing_guarded_block(node) is not None

    @staticmethod
    def enclosing_guarded_block(node: astroid.nodes.NodeNG) -> astroid.nodes.NodeNG | None:
        current = node.parent
        while current is not None:
            if isinstance(current, (astroid.nodes.Try, astroid.nodes.TryStar)) and current.handlers:
                return current
            current = current.parent
        return None

    @staticmethod
    def callee_name(call: astroid.nodes.Call) -> str | None:
        return TypeClassifier.dotted_name(call.func)

    def _is_exempting_position(self, call: astroid.nodes.Call, child: astroid.nodes.NodeNG) -> bool:
        value = child.value if isinstance(child, astroid.nodes.Keyword) else child
        if self.callee_name(call) in self._value_callees:
            return True
        return isinstance(value, astroid.nodes.Lambda) and not isinstance(
            value, astroid.nodes.FunctionDef
        )

    @staticmethod
    def _is_argument(call: astroid.nodes.Call, child: astroid.nodes.NodeNG) -> bool:
        if child in call.args:
            return True
        return isinstance(child, astroid.nodes.Keyword) and child in (call.keywords or [])

    def _is_named_thunk(
        self, fn: astroid.nodes.FunctionDef, exempting_names: Collection[str]
    ) -> bool:
        """Decorated with an exempting callee, or passed by name to one in the same block."""
        for decorator in fn.decorators.nodes if fn.decorators else []:
            target = decorator.func if isinstance(decorator, astroid.nodes.Call) else decorator
            if TypeClassifier.dotted_name(target) in exempting_names:
                return True
        scope = fn.parent
        if scope is None:
            return False
        for call in scope.nodes_of_class(astroid.nodes.Call, skip_klass=_SCOPE_BOUNDARIES):
            if self.callee_name(call) not in exempting_names:
                continue
            for arg in call.args:
                if isinstance(arg, astroid.nodes.Name) and arg.name == fn.name:
                    return True
        return False
