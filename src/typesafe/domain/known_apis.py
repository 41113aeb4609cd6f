"""Static table of external operations known to raise or to return None for "not found"."""

from dataclasses import dataclass

import astroid

from typesafe.domain.entities import RuleFamily
from typesafe.domain.type_classifier import TypeClassifier

DEFAULT_THROWING_NAMES: frozenset[str] = frozenset(
    {
        "loads",
        "literal_eval",
        "b64decode",
        "b32decode",
        "b16decode",
        "urlopen",
        "import_module",
        "strptime",
        "fromisoformat",
        "read_text",
        "read_bytes",
        "write_text",
        "write_bytes",
        "fetch",
    }
)

DEFAULT_THROWING_MEMBERS: frozenset[tuple[str, str]] = frozenset(
    {
        ("json", "load"),
        ("json", "loads"),
        ("pickle", "load"),
        ("pickle", "loads"),
        ("yaml", "safe_load"),
        ("yaml", "load"),
        ("tomllib", "load"),
        ("tomllib", "loads"),
        ("struct", "unpack"),
        ("struct", "pack"),
        ("ipaddress", "ip_address"),
        ("ipaddress", "ip_network"),
        ("uuid", "UUID"),
        ("datetime", "strptime"),
        ("os", "remove"),
        ("os", "rename"),
        ("os", "mkdir"),
        ("os", "rmdir"),
        ("shutil", "copyfile"),
        ("shutil", "move"),
        ("subprocess", "check_call"),
        ("subprocess", "check_output"),
        ("socket", "create_connection"),
        ("decimal", "Decimal"),
    }
)

DEFAULT_ABSENT_NAMES: frozenset[str] = frozenset(
    {"get", "getenv", "which", "find_spec", "getmodule", "match", "search", "fullmatch", "find"}
)

# Coroutine-returning names that the "async"/"fetch" naming hints miss.
DEFAULT_ASYNC_NAMES: frozenset[str] = frozenset(
    {"aget", "aread", "awrite", "aopen", "asend", "arecv", "open_connection"}
)

_REGEX_LOOKUPS = frozenset({"match", "search", "fullmatch"})


@dataclass(frozen=True)
class KnownAPIRegistry:
    """
    Injectable, immutable API table.

    Heuristic by nature: operations outside the tables, and async operations that do
    not follow the naming convention, are not detected. An awaited call is always
    treated as asynchronous regardless of its name.
    """

    throwing_names: frozenset[str] = DEFAULT_THROWING_NAMES
    throwing_members: frozenset[tuple[str, str]] = DEFAULT_THROWING_MEMBERS
    absent_names: frozenset[str] = DEFAULT_ABSENT_NAMES
    async_names: frozenset[str] = DEFAULT_ASYNC_NAMES

    def throws(self, name: str, owner: str | None = None) -> bool:
        if owner is not None:
            tail = owner.rsplit(".", 1)[-1]
            if (owner, name) in self.throwing_members or (tail, name) in self.throwing_members:
                return True
        return name in self.throwing_names

    def throws_or_absent(self, qualified_name: str) -> RuleFamily | None:
        """Family for a dotted callee name, ignoring call shape."""
        owner, _, name = qualified_name.rpartition(".")
        if self.throws(name, owner or None):
            return RuleFamily.RESULT
        if name in self.absent_names:
            return RuleFamily.OPTIONAL
        return None

    def returns_absent(self, call: astroid.nodes.Call) -> bool:
        parts = self.callee_parts(call)
        if parts is None:
            return False
        owner, name, is_method = parts
        if name not in self.absent_names:
            return False
        if name == "get":
            return is_method and len(call.args) == 1 and not call.keywords
        if name == "getenv":
            return len(call.args) == 1 and not call.keywords
        if name == "find":
            return is_method
        if name in _REGEX_LOOKUPS:
            return bool(call.args) and self._is_pattern_argument(call.args[0])
        return True

    def classify(self, call: astroid.nodes.Call) -> RuleFamily | None:
        parts = self.callee_parts(call)
        if parts is None:
            return None
        owner, name, _ = parts
        if self.throws(name, owner):
            return RuleFamily.RESULT
        if self.returns_absent(call):
            return RuleFamily.OPTIONAL
        return None

    def is_likely_async(self, name: str) -> bool:
        lowered = name.lower()
        return "async" in lowered or lowered.startswith("fetch") or name in self.async_names

    def is_async_call(self, call: astroid.nodes.Call) -> bool:
        if isinstance(call.parent, astroid.nodes.Await):
            return True
        parts = self.callee_parts(call)
        return parts is not None and self.is_likely_async(parts[1])

    @staticmethod
    def callee_parts(call: astroid.nodes.Call) -> tuple[str | None, str, bool] | None:
        """(owner dotted name or None, member name, is method call) for simple callees."""
        func = call.func
        if isinstance(func, astroid.nodes.Name):
            return None, func.name, False
        if isinstance(func, astroid.nodes.Attribute):
            return TypeClassifier.dotted_name(func.expr), func.attrname, True
        return None

    @staticmethod
    def _is_pattern_argument(node: astroid.nodes.NodeNG) -> bool:
        if isinstance(node, astroid.nodes.Const):
            return isinstance(node.value, (str, bytes))
        return isinstance(node, (astroid.nodes.Name, astroid.nodes.JoinedStr))


DEFAULT_REGISTRY = KnownAPIRegistry()
