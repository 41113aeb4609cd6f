"""Ports used by use cases. No infrastructure imports."""

from typing import Protocol

import astroid

from typesafe.domain.entities import Fix
from typesafe.domain.registry_types import RuleRegistryEntry


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        ...

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        ...

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory)."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content, keeping line endings as written."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...


class AstroidProtocol(Protocol):
    """Protocol for parsing source into astroid trees."""

    def parse_file(self, file_path: str) -> tuple[astroid.nodes.Module, str] | None:
        """Parse a file; return (module, source) or None when it cannot be read or parsed."""
        ...

    def parse_source(self, source: str, file_path: str = "") -> astroid.nodes.Module | None:
        """Parse source text keeping its original positions."""
        ...


class FixerGatewayProtocol(Protocol):
    """Protocol for applying text fixes to source."""

    def apply_fixes(self, source: str, fixes: list[Fix]) -> tuple[str, int]:
        """Apply non-overlapping fixes back to front; return (new source, applied count)."""
        ...

    def ensure_imports(self, source: str, modules: list[str]) -> str:
        """Add 'from typesafe import <module>' for each module not yet imported."""
        ...

    def validate(self, source: str, file_path: str = "<rewritten>") -> bool:
        """True when the source still parses and compiles."""
        ...


class GuidanceServiceProtocol(Protocol):
    """Protocol for the rule registry (messages, symbols, manual instructions)."""

    def get_registry(self) -> dict[str, RuleRegistryEntry]: ...

    def get_typesafe_entry(self, rule_code: str) -> RuleRegistryEntry | None: ...

    def get_manual_instructions(self, rule_code: str) -> str: ...

    def get_fixable_codes(self) -> list[str]: ...

    def get_display_name(self, rule_code: str) -> str: ...

    def iter_rules(self) -> list[tuple[str, RuleRegistryEntry]]: ...
