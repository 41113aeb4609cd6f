"""Shallow, syntactic nullability of expressions."""

import astroid

from typesafe.domain.constants import UNKNOWN_LABEL

_LITERAL_LABELS: tuple[tuple[type, str], ...] = (
    # bool before int: bool is an int subclass.
    (bool, "bool"),
    (str, "str"),
    (bytes, "bytes"),
    (int, "int"),
    (float, "float"),
)


class NullabilityAnalyzer:
    """Decides whether an expression may evaluate to None and infers its literal shape."""

    def may_be_absent(self, expr: astroid.nodes.NodeNG | None) -> bool:
        if expr is None:
            return False
        if isinstance(expr, astroid.nodes.Const):
            return expr.value is None
        if isinstance(expr, astroid.nodes.IfExp):
            return self.may_be_absent(expr.body) or self.may_be_absent(expr.orelse)
        if isinstance(expr, astroid.nodes.BoolOp):
            return any(self.may_be_absent(value) for value in expr.values)
        return False

    def infer_label(self, expr: astroid.nodes.NodeNG | None) -> str:
        """First non-absence literal shape, depth-first and left to right."""
        if expr is None:
            return UNKNOWN_LABEL
        if isinstance(expr, astroid.nodes.Const):
            if expr.value is None:
                return UNKNOWN_LABEL
            for kind, label in _LITERAL_LABELS:
                if isinstance(expr.value, kind):
                    return label
            return UNKNOWN_LABEL
        if isinstance(expr, astroid.nodes.JoinedStr):
            return "str"
        if isinstance(expr, astroid.nodes.IfExp):
            return self._first_label([expr.body, expr.orelse])
        if isinstance(expr, astroid.nodes.BoolOp):
            return self._first_label(expr.values)
        return UNKNOWN_LABEL

    def _first_label(self, exprs: list[astroid.nodes.NodeNG]) -> str:
        for expr in exprs:
            label = self.infer_label(expr)
            if label != UNKNOWN_LABEL:
                return label
        return UNKNOWN_LABEL
