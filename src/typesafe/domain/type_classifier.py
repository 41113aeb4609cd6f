"""Classifies annotation nodes into the TypeAnnotation shape vocabulary."""

import astroid

from typesafe.domain.constants import UNKNOWN_LABEL
from typesafe.domain.entities import TypeAnnotation, TypeKind

_UNION_NAMES = frozenset({"Union", "typing.Union", "t.Union"})
_OPTIONAL_NAMES = frozenset({"Optional", "typing.Optional", "t.Optional"})
_NONETYPE_NAMES = frozenset({"NoneType", "types.NoneType"})


class TypeClassifier:
    """
    Pure classification of annotations.

    Never raises: shapes it does not understand become OTHER with their source text
    as label.
    """

    NONE = TypeAnnotation(TypeKind.NONE)
    STANDALONE_NULL = TypeAnnotation(TypeKind.STANDALONE_NULL, "None")
    STANDALONE_UNDEFINED = TypeAnnotation(TypeKind.STANDALONE_UNDEFINED, "NoneType")

    def classify(self, annotation: astroid.nodes.NodeNG | None) -> TypeAnnotation:
        if annotation is None:
            return self.NONE
        if isinstance(annotation, astroid.nodes.Const):
            if annotation.value is None:
                return self.STANDALONE_NULL
            if isinstance(annotation.value, str):
                return self._classify_forward_reference(annotation.value)
            return self._other(annotation)
        if isinstance(annotation, astroid.nodes.BinOp) and annotation.op == "|":
            return self._union(
                [self.classify(annotation.left), self.classify(annotation.right)]
            )
        if isinstance(annotation, astroid.nodes.Subscript):
            return self._classify_subscript(annotation)
        dotted = self.dotted_name(annotation)
        if dotted is not None:
            if dotted in _NONETYPE_NAMES:
                return self.STANDALONE_UNDEFINED
            return TypeAnnotation(TypeKind.NAMED, dotted)
        return self._other(annotation)

    def is_absence_capable(self, annotation: TypeAnnotation) -> bool:
        if annotation.is_absence:
            return True
        if annotation.kind is TypeKind.UNION:
            return any(member.is_absence for member in annotation.members)
        return False

    def representative_label(self, annotation: TypeAnnotation) -> str:
        """Label of the single non-absence member of a union, when that member is named."""
        if annotation.kind is not TypeKind.UNION:
            return UNKNOWN_LABEL
        present = [m for m in annotation.members if not m.is_absence]
        if len(present) == 1 and present[0].kind is TypeKind.NAMED:
            return present[0].label
        return UNKNOWN_LABEL

    @staticmethod
    def dotted_name(node: astroid.nodes.NodeNG) -> str | None:
        """Return 'a.b.c' for Name/Attribute chains, None for anything else."""
        if isinstance(node, astroid.nodes.Name):
            return node.name
        if isinstance(node, astroid.nodes.Attribute):
            owner = TypeClassifier.dotted_name(node.expr)
            if owner is None:
                return None
            return f"{owner}.{node.attrname}"
        return None

    def _classify_subscript(self, node: astroid.nodes.Subscript) -> TypeAnnotation:
        head = self.dotted_name(node.value)
        if head in _UNION_NAMES:
            return self._union([self.classify(arg) for arg in self._subscript_args(node)])
        if head in _OPTIONAL_NAMES:
            args = self._subscript_args(node)
            if len(args) == 1:
                return self._union([self.classify(args[0]), self.STANDALONE_NULL])
        return self._other(node)

    @staticmethod
    def _subscript_args(node: astroid.nodes.Subscript) -> list[astroid.nodes.NodeNG]:
        if isinstance(node.slice, astroid.nodes.Tuple):
            return list(node.slice.elts)
        return [node.slice]

    def _union(self, members: list[TypeAnnotation]) -> TypeAnnotation:
        flat: list[TypeAnnotation] = []
        for member in members:
            if member.kind is TypeKind.UNION:
                flat.extend(member.members)
            else:
                flat.append(member)
        label = " | ".join(m.label for m in flat)
        return TypeAnnotation(TypeKind.UNION, label, tuple(flat))

    def _classify_forward_reference(self, text: str) -> TypeAnnotation:
        try:
            expr = astroid.extract_node(text)
        except (astroid.AstroidSyntaxError, ValueError):
            return TypeAnnotation(TypeKind.NAMED, text.strip() or UNKNOWN_LABEL)
        if isinstance(expr, astroid.nodes.Const) and isinstance(expr.value, str):
            # A nested string literal is not a type expression.
            return TypeAnnotation(TypeKind.NAMED, text)
        return self.classify(expr)

    @staticmethod
    def _other(node: astroid.nodes.NodeNG) -> TypeAnnotation:
        try:
            text = node.as_string()
        except (AttributeError, TypeError):
            text = UNKNOWN_LABEL
        return TypeAnnotation(TypeKind.OTHER, text or UNKNOWN_LABEL)
