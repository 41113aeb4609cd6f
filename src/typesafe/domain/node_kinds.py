"""Closed node vocabulary the rule engine dispatches on."""

from enum import Enum

import astroid


class NodeKind(Enum):
    FUNCTION = "function"
    LAMBDA = "lambda"
    ANNOTATED_DECLARATION = "annotated_declaration"
    CALL = "call"
    RAISE = "raise"
    GUARDED_BLOCK = "guarded_block"
    OTHER = "other"

    @classmethod
    def of(cls, node: astroid.nodes.NodeNG) -> "NodeKind":
        """Map an astroid node onto the closed vocabulary."""
        # FunctionDef subclasses Lambda in astroid; test it first.
        if isinstance(node, astroid.nodes.FunctionDef):
            return cls.FUNCTION
        if isinstance(node, astroid.nodes.Lambda):
            return cls.LAMBDA
        if isinstance(node, astroid.nodes.AnnAssign):
            return cls.ANNOTATED_DECLARATION
        if isinstance(node, astroid.nodes.Call):
            return cls.CALL
        if isinstance(node, astroid.nodes.Raise):
            return cls.RAISE
        if isinstance(node, (astroid.nodes.Try, astroid.nodes.TryStar)):
            return cls.GUARDED_BLOCK
        return cls.OTHER


DETECTION_FAMILIES: tuple[frozenset[NodeKind], ...] = (
    frozenset({NodeKind.FUNCTION, NodeKind.LAMBDA, NodeKind.ANNOTATED_DECLARATION}),
    frozenset({NodeKind.CALL}),
    frozenset({NodeKind.RAISE, NodeKind.GUARDED_BLOCK}),
)
"""Return-type detectors, call-expression detectors, statement detectors, in report order."""
