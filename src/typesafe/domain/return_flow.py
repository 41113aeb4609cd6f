"""Return-flow profiling scoped to a single function."""

import astroid

from typesafe.domain.constants import UNKNOWN_LABEL
from typesafe.domain.entities import FunctionReturnProfile, ReturnPoint
from typesafe.domain.nullability import NullabilityAnalyzer

_NESTED_SCOPES = (astroid.nodes.FunctionDef, astroid.nodes.Lambda, astroid.nodes.ClassDef)


class ReturnFlowAnalyzer:
    """
    Collects the return points owned by one function and classifies its return shape.

    Nested functions, lambdas and classes own their returns: the walk never descends
    into them. Naked returns alone never flag a function; mixing naked and valued
    returns always does.
    """

    def __init__(self, nullability: NullabilityAnalyzer | None = None) -> None:
        self._nullability = nullability or NullabilityAnalyzer()

    def collect(self, function: astroid.nodes.Lambda) -> list[ReturnPoint]:
        if not isinstance(function, astroid.nodes.FunctionDef):
            return [ReturnPoint(has_argument=True, argument=function.body)]
        points: list[ReturnPoint] = []
        for statement in function.body:
            if isinstance(statement, _NESTED_SCOPES):
                continue
            for ret in statement.nodes_of_class(astroid.nodes.Return, skip_klass=_NESTED_SCOPES):
                points.append(ReturnPoint(has_argument=ret.value is not None, argument=ret.value))
        return points

    def profile(self, function: astroid.nodes.Lambda) -> FunctionReturnProfile:
        if self.is_generator(function):
            return FunctionReturnProfile(naked_count=0, value_count=0)
        points = self.collect(function)
        valued = [p.argument for p in points if p.has_argument]
        naked_count = len(points) - len(valued)
        if not valued:
            return FunctionReturnProfile(naked_count=naked_count, value_count=0)
        return FunctionReturnProfile(
            naked_count=naked_count,
            value_count=len(valued),
            inferred_label=self._first_label(valued),
            may_be_absent=any(self._nullability.may_be_absent(v) for v in valued),
        )

    @staticmethod
    def is_generator(function: astroid.nodes.NodeNG) -> bool:
        if not isinstance(function, astroid.nodes.FunctionDef):
            return False
        for statement in function.body:
            if isinstance(statement, _NESTED_SCOPES):
                continue
            for _ in statement.nodes_of_class(
                (astroid.nodes.Yield, astroid.nodes.YieldFrom), skip_klass=_NESTED_SCOPES
            ):
                return True
        return False

    def _first_label(self, values: list[astroid.nodes.NodeNG | None]) -> str:
        for value in values:
            label = self._nullability.infer_label(value)
            if label != UNKNOWN_LABEL:
                return label
        return UNKNOWN_LABEL
