"""Domain entities shared by the detection engine, the rules and the hosts."""

from dataclasses import dataclass, field
from enum import Enum

import astroid

from typesafe.domain.constants import UNKNOWN_LABEL


class RuleFamily(Enum):
    """The two configurations of the engine."""

    OPTIONAL = "optional"
    RESULT = "result"


class ViolationKind(Enum):
    """Stable violation kinds. Values are the message symbols."""

    NO_NULLABLE_RETURN = "no-nullable-return"
    NO_NULLABLE_UNION = "no-nullable-union"
    NO_THROW_STATEMENT = "no-throw-statement"
    NO_TRY_CATCH_BLOCK = "no-try-catch-block"
    USE_WRAP_SYNC = "use-wrap-sync"
    USE_WRAP_ASYNC = "use-wrap-async"


class TypeKind(Enum):
    """Shapes a type annotation can classify as."""

    NONE = "none"
    STANDALONE_NULL = "standalone_null"
    STANDALONE_UNDEFINED = "standalone_undefined"
    UNION = "union"
    NAMED = "named"
    OTHER = "other"


@dataclass(frozen=True)
class TypeAnnotation:
    """
    Classified annotation.

    ``members`` is only populated for unions and never contains another union.
    """

    kind: TypeKind
    label: str = UNKNOWN_LABEL
    members: tuple["TypeAnnotation", ...] = ()

    @property
    def is_absence(self) -> bool:
        return self.kind in (TypeKind.STANDALONE_NULL, TypeKind.STANDALONE_UNDEFINED)


@dataclass(frozen=True)
class ReturnPoint:
    """One return statement owned by the function being profiled."""

    has_argument: bool
    argument: astroid.nodes.NodeNG | None = None


@dataclass(frozen=True)
class FunctionReturnProfile:
    """Return-flow summary of a single function or lambda."""

    naked_count: int
    value_count: int
    inferred_label: str = UNKNOWN_LABEL
    may_be_absent: bool = False

    @property
    def is_void_like(self) -> bool:
        """No returns at all, or only naked ones."""
        return self.value_count == 0

    @property
    def is_mixed(self) -> bool:
        return self.naked_count > 0 and self.value_count > 0

    @property
    def is_flagged(self) -> bool:
        if self.is_void_like:
            return False
        return self.is_mixed or self.may_be_absent


@dataclass(frozen=True)
class Fix:
    """A pure text edit over character offsets of the analysed source."""

    range_start: int
    range_end: int
    replacement_text: str

    def overlaps(self, other: "Fix") -> bool:
        return self.range_start < other.range_end and other.range_start < self.range_end


@dataclass(frozen=True)
class Violation:
    """A rule violation with kind, label, location and an optional fix."""

    kind: ViolationKind
    code: str
    message: str
    location: str
    node: astroid.nodes.NodeNG
    label: str = UNKNOWN_LABEL
    fix: Fix | None = None
    fix_failure_reason: str | None = None
    """Reason why no fix was produced (e.g. 'Auto-fix disabled', 'Body rebinds names')."""
    message_args: tuple[str, ...] | None = None
    """Args for Pylint add_message."""

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    @property
    def line(self) -> int:
        return getattr(self.node, "lineno", 0) or 0

    @staticmethod
    def _location_from_node(node: astroid.nodes.NodeNG) -> str:
        """Compute path:lineno:col_offset from an astroid node. Used by from_node."""
        root = node.root()
        path = getattr(root, "file", "") or ""
        lineno = getattr(node, "lineno", 0)
        col_offset = getattr(node, "col_offset", 0)
        return f"{path}:{lineno}:{col_offset}"

    @classmethod
    def from_node(
        cls,
        *,
        kind: ViolationKind,
        code: str,
        message: str,
        node: astroid.nodes.NodeNG,
        label: str = UNKNOWN_LABEL,
        fix: Fix | None = None,
        fix_failure_reason: str | None = None,
    ) -> "Violation":
        """Build a Violation with location derived from node. Prefer over manual location=."""
        return cls(
            kind=kind,
            code=code,
            message=message,
            location=cls._location_from_node(node),
            node=node,
            label=label,
            fix=fix,
            fix_failure_reason=None if fix is not None else fix_failure_reason,
            message_args=(message,),
        )

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "location": self.location,
            "label": self.label,
            "fixable": self.fixable,
            "fix_failure_reason": self.fix_failure_reason,
        }


@dataclass(frozen=True)
class FileReport:
    """Violations found in one file by one or more rules."""

    path: str
    violations: list[Violation] = field(default_factory=list)
    skipped: bool = False

    def has_violations(self) -> bool:
        return bool(self.violations)


@dataclass(frozen=True)
class AuditResult:
    """Outcome of a check run over a path."""

    reports: list[FileReport] = field(default_factory=list)

    @property
    def violations(self) -> list[Violation]:
        return [v for report in self.reports for v in report.violations]

    @property
    def skipped_files(self) -> list[str]:
        return [report.path for report in self.reports if report.skipped]

    def has_violations(self) -> bool:
        return any(report.has_violations() for report in self.reports)

    def to_dict(self) -> dict[str, object]:
        return {
            "files": len(self.reports),
            "skipped": self.skipped_files,
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass
class FixSummary:
    """Outcome of a fix run: what was rewritten and what still needs a human."""

    files_modified: list[str] = field(default_factory=list)
    fixes_applied: int = 0
    manual: list[Violation] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
