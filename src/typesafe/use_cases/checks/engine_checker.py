"""Shared pylint plumbing for the rule-engine checkers."""

from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

import astroid

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from typesafe.domain.config import ConfigurationLoader, RuleConfiguration
from typesafe.domain.engine import RuleEngine
from typesafe.domain.registry_types import RuleRegistryEntry
from typesafe.domain.rule_msgs import RuleMsgBuilder
from typesafe.domain.rules import Checkable


class EngineChecker(BaseChecker):
    """Thin: runs one RuleEngine per module and forwards its violations to add_message."""

    name: str = "typesafe"
    CODES: list[str] = []

    def __init__(
        self,
        linter: "PyLinter",
        rule: Checkable,
        config_loader: ConfigurationLoader,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        self.msgs = RuleMsgBuilder.build_msgs_for_codes(registry, self.CODES)  # type: ignore[assignment]
        super().__init__(linter)
        self.config_loader = config_loader
        self._engine = RuleEngine(rule)

    def rule_configuration(self) -> RuleConfiguration:
        """pyproject settings for this family, with the pylint options appended."""
        base = self.config_loader.for_family(self._engine.rule.family)
        extra = tuple(self._option("allow_exceptions") or ())
        # Fixes are never applied under pylint.
        return replace(base, allow_exceptions=base.allow_exceptions + extra, auto_fix=False)

    def visit_module(self, node: astroid.nodes.Module) -> None:
        """Delegate the whole module to the rule engine."""
        source = self._read_source(node)
        if source is None:
            return
        for v in self._engine.run(node, source, node.file or "", self.rule_configuration()):
            self.add_message(v.code, node=v.node, args=v.message_args or ())

    def _option(self, suffix: str) -> object:
        return getattr(self.linter.config, f"{self.name.replace('-', '_')}_{suffix}", None)

    @staticmethod
    def _read_source(node: astroid.nodes.Module) -> str | None:
        stream = node.stream()
        if stream is None:
            return None
        with stream:
            data = stream.read()
        try:
            return data.decode("utf-8") if isinstance(data, bytes) else data
        except UnicodeDecodeError:
            return None
