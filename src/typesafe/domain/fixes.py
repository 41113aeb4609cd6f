"""Text rewrites for violations. Fixes are pure values; nothing here touches the file system."""

import builtins
import re
from collections.abc import Iterator

import astroid

from typesafe.domain.config import RuleConfiguration
from typesafe.domain.constants import (
    CAPTURE_ERROR,
    GUARDED_OUTCOME_NAME,
    GUARDED_THUNK_NAME,
    MAKE_ERROR,
    RESULT_MODULE,
    WRAP,
    WRAP_ASYNC,
)
from typesafe.domain.containment import ContainmentGuard
from typesafe.domain.entities import Fix, RuleFamily, ViolationKind
from typesafe.domain.return_flow import ReturnFlowAnalyzer
from typesafe.domain.type_classifier import TypeClassifier

_LINE_SPLIT = re.compile(r"(?<=\r\n)|(?<=\r)(?!\n)|(?<=\n)")
_ERROR_SUFFIXES = ("Error", "Exception", "Warning", "Exit", "Interrupt")
_SCOPES = (astroid.nodes.FunctionDef, astroid.nodes.Lambda, astroid.nodes.ClassDef)
_LOOPS = (astroid.nodes.For, astroid.nodes.While)


class SourceText:
    """
    Character-offset view over a module's source.

    astroid reports ``col_offset`` in UTF-8 bytes of the line (as CPython does), so
    every position is converted through the encoded line before slicing.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.lines = [line for line in _LINE_SPLIT.split(text) if line] or [""]
        self._starts: list[int] = []
        offset = 0
        for line in self.lines:
            self._starts.append(offset)
            offset += len(line)

    def offset(self, lineno: int, col_offset: int) -> int:
        """Character offset of an astroid (1-based line, byte column) position."""
        if lineno < 1:
            return 0
        if lineno > len(self.lines):
            return len(self.text)
        line = self.lines[lineno - 1]
        prefix = line.encode("utf-8")[:col_offset].decode("utf-8", errors="ignore")
        return self._starts[lineno - 1] + len(prefix)

    def node_range(self, node: astroid.nodes.NodeNG) -> tuple[int, int] | None:
        if node.lineno is None or node.end_lineno is None:
            return None
        start = self.offset(node.lineno, node.col_offset or 0)
        end = self.offset(node.end_lineno, node.end_col_offset or 0)
        return start, end

    def node_text(self, node: astroid.nodes.NodeNG) -> str | None:
        span = self.node_range(node)
        if span is None:
            return None
        return self.text[span[0] : span[1]]

    def line_without_ending(self, lineno: int) -> str:
        return self.lines[lineno - 1].rstrip("\r\n")

    def line_ending(self, lineno: int) -> str:
        line = self.lines[lineno - 1]
        return line[len(line.rstrip("\r\n")) :] or "\n"

    def indentation(self, lineno: int) -> str:
        line = self.line_without_ending(lineno)
        return line[: len(line) - len(line.lstrip(" \t"))]


class FixEmitter:
    """
    Produces a Fix for a violation or declines with a reason.

    Declining never hides a violation; the host reports it with ``fix=None`` and the
    reason as manual-fix guidance.
    """

    def __init__(self, guard: ContainmentGuard | None = None) -> None:
        self._guard = guard or ContainmentGuard()

    def emit(
        self,
        kind: ViolationKind,
        node: astroid.nodes.NodeNG,
        source: SourceText,
        config: RuleConfiguration,
        family: RuleFamily = RuleFamily.RESULT,
    ) -> tuple[Fix | None, str | None]:
        if kind in (ViolationKind.NO_NULLABLE_RETURN, ViolationKind.NO_NULLABLE_UNION):
            return None, "Changing a declared type requires a manual fix"
        if not config.auto_fix:
            return None, "Auto-fix disabled"
        if kind is ViolationKind.USE_WRAP_SYNC:
            return self._wrap_call(node, source, f"{family.value}.{WRAP}")
        if kind is ViolationKind.USE_WRAP_ASYNC:
            if not isinstance(node.parent, astroid.nodes.Await):
                return None, "Call is not awaited; wrapping it would return a coroutine"
            return self._wrap_call(node, source, f"{family.value}.{WRAP_ASYNC}")
        if kind is ViolationKind.NO_THROW_STATEMENT:
            return self._raise_to_return(node, source)
        if kind is ViolationKind.NO_TRY_CATCH_BLOCK:
            return self._guarded_block(node, source)
        return None, f"No fix available for {kind.value}"

    def _wrap_call(
        self, call: astroid.nodes.NodeNG, source: SourceText, wrapper: str
    ) -> tuple[Fix | None, str | None]:
        reason = self.wrap_call_blocker(call)
        if reason is not None:
            return None, reason
        span = source.node_range(call)
        if span is None:
            return None, "Call position unknown"
        text = source.text[span[0] : span[1]]
        return Fix(span[0], span[1], f"{wrapper}(lambda: {text})"), None

    def wrap_call_blocker(self, call: astroid.nodes.NodeNG) -> str | None:
        """Why the call cannot move into a lambda, or None."""
        if isinstance(call.frame(), astroid.nodes.ClassDef):
            return "Class body names are not visible inside a lambda"
        for inner in self._walk([call]):
            if isinstance(inner, astroid.nodes.Await):
                return "Arguments await; a lambda cannot suspend"
            if isinstance(inner, (astroid.nodes.Yield, astroid.nodes.YieldFrom)):
                return "Arguments yield; the lambda would become a generator"
            if isinstance(inner, astroid.nodes.NamedExpr):
                return "Assignment expression would bind inside the lambda"
        return None

    def _raise_to_return(
        self, node: astroid.nodes.Raise, source: SourceText
    ) -> tuple[Fix | None, str | None]:
        if node.exc is None:
            return None, "Bare raise re-raises the active exception"
        if node.cause is not None:
            return None, "Raise with an explicit cause"
        function = node.scope()
        if not isinstance(function, astroid.nodes.FunctionDef):
            return None, "Raise outside a function cannot become a return"
        if ReturnFlowAnalyzer.is_generator(function):
            return None, "Return in a generator does not produce a value"
        block = self._guard.enclosing_guarded_block(node)
        if block is not None and block.scope() is function:
            return None, "Enclosed by a guarded block"
        span = source.node_range(node)
        exc_text = source.node_text(node.exc)
        if span is None or exc_text is None:
            return None, "Raise position unknown"
        if not self.is_error_shaped(node.exc):
            exc_text = f"{MAKE_ERROR}({exc_text})"
        return Fix(span[0], span[1], f"return {CAPTURE_ERROR}({exc_text})"), None

    @staticmethod
    def is_error_shaped(expr: astroid.nodes.NodeNG) -> bool:
        """A bare name, or a call constructing an exception."""
        if isinstance(expr, astroid.nodes.Name):
            return True
        if not isinstance(expr, astroid.nodes.Call):
            return False
        dotted = TypeClassifier.dotted_name(expr.func)
        if dotted is None:
            return False
        name = dotted.rsplit(".", 1)[-1]
        if name.endswith(_ERROR_SUFFIXES):
            return True
        candidate = getattr(builtins, name, None)
        return isinstance(candidate, type) and issubclass(candidate, BaseException)

    def _guarded_block(
        self, node: astroid.nodes.Try, source: SourceText
    ) -> tuple[Fix | None, str | None]:
        reason = self.guarded_block_blocker(node)
        if reason is not None:
            return None, reason
        span = source.node_range(node)
        if span is None or not node.body:
            return None, "Guarded block position unknown"
        newline = source.line_ending(node.lineno)
        prefix = source.indentation(node.lineno)
        body = self._body_text(node, source, prefix)
        if self.contains_suspension(node.body):
            header = f"async def {GUARDED_THUNK_NAME}():"
            call = f"await {RESULT_MODULE}.{WRAP_ASYNC}({GUARDED_THUNK_NAME})"
        else:
            header = f"def {GUARDED_THUNK_NAME}():"
            call = f"{RESULT_MODULE}.{WRAP}({GUARDED_THUNK_NAME})"
        replacement = f"{header}{newline}{body}{newline}{prefix}{GUARDED_OUTCOME_NAME} = {call}"
        return Fix(span[0], span[1], replacement), None

    def guarded_block_blocker(self, node: astroid.nodes.NodeNG) -> str | None:
        """Why the block cannot be moved into a nested function, or None."""
        if self._guard.is_inside_guarded_block(node):
            return "Nested guarded blocks cannot be rewritten safely"
        for part in (node.body, node.handlers):
            for child in part:
                for inner in child.nodes_of_class((astroid.nodes.Try, astroid.nodes.TryStar)):
                    if inner is not node and inner.handlers:
                        return "Nested guarded blocks cannot be rewritten safely"
        if node.orelse or node.finalbody:
            return "else/finally clauses need a manual rewrite"
        for inner in self._walk(node.body):
            if isinstance(inner, (astroid.nodes.Return, astroid.nodes.Yield, astroid.nodes.YieldFrom)):
                return "Body returns or yields from the enclosing function"
            if isinstance(inner, (astroid.nodes.Global, astroid.nodes.Nonlocal)):
                return "Body declares global or nonlocal names"
            if isinstance(inner, (astroid.nodes.Break, astroid.nodes.Continue)) and self._escapes(
                inner, node
            ):
                return "Body breaks out of an enclosing loop"
            if self._binds_name(inner):
                return "Body rebinds names of the enclosing scope"
        return None

    @staticmethod
    def contains_suspension(body: list[astroid.nodes.NodeNG]) -> bool:
        for inner in FixEmitter._walk(body):
            if isinstance(inner, (astroid.nodes.Await, astroid.nodes.AsyncFor, astroid.nodes.AsyncWith)):
                return True
            if isinstance(inner, astroid.nodes.Comprehension) and inner.is_async:
                return True
        return False

    @staticmethod
    def _walk(body: list[astroid.nodes.NodeNG]) -> Iterator[astroid.nodes.NodeNG]:
        """Every node of ``body``, yielding nested scopes without entering them."""
        stack = list(reversed(body))
        while stack:
            current = stack.pop()
            yield current
            if isinstance(current, _SCOPES):
                continue
            stack.extend(reversed(list(current.get_children())))

    @staticmethod
    def _binds_name(node: astroid.nodes.NodeNG) -> bool:
        if isinstance(node, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)):
            return True
        if isinstance(node, (astroid.nodes.Import, astroid.nodes.ImportFrom, astroid.nodes.DelName)):
            return True
        if not isinstance(node, astroid.nodes.AssignName):
            return False
        current = node.parent
        while current is not None and not isinstance(current, astroid.nodes.Try):
            if isinstance(current, astroid.nodes.Comprehension):
                # Comprehension targets are local to the comprehension.
                return isinstance(node.parent, astroid.nodes.NamedExpr)
            current = current.parent
        return True

    @staticmethod
    def _escapes(jump: astroid.nodes.NodeNG, block: astroid.nodes.NodeNG) -> bool:
        child = jump
        current = jump.parent
        while current is not None and current is not block:
            if isinstance(current, _LOOPS) and child in current.body:
                return False
            child = current
            current = current.parent
        return True

    @staticmethod
    def _body_text(node: astroid.nodes.Try, source: SourceText, prefix: str) -> str:
        first, last = node.body[0], node.body[-1]
        if first.lineno > node.lineno:
            lines = [source.lines[i - 1] for i in range(first.lineno, last.end_lineno + 1)]
            return "".join(lines).rstrip("\r\n")
        start = source.offset(first.lineno, first.col_offset)
        end = source.offset(last.end_lineno, last.end_col_offset)
        return f"{prefix}    {source.text[start:end]}"
