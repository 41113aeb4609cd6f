"""Result usage checks (W9511-W9514)."""

from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from typesafe.domain.config import ConfigurationLoader, RuleConfiguration
from typesafe.domain.registry_types import RuleRegistryEntry
from typesafe.domain.rules.result_usage import ResultUsageRule
from typesafe.use_cases.checks.engine_checker import EngineChecker


class ResultUsageChecker(EngineChecker):
    """W9511-W9514: raise statements, try/except blocks, raising calls."""

    name: str = "typesafe-result"
    CODES = ["W9511", "W9512", "W9513", "W9514"]
    options = (
        (
            "typesafe-result-allow-exceptions",
            {
                "default": (),
                "type": "csv",
                "metavar": "<patterns>",
                "help": "Function or callee names exempt from the result rule ('*' wildcards).",
            },
        ),
        (
            "typesafe-result-allow-test-files",
            {
                "default": True,
                "type": "yn",
                "metavar": "<y or n>",
                "help": "Skip test modules (test_*.py, *_test.py, conftest.py, tests/).",
            },
        ),
    )

    def __init__(
        self,
        linter: "PyLinter",
        config_loader: ConfigurationLoader,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        super().__init__(linter, ResultUsageRule(), config_loader, registry)

    def rule_configuration(self) -> RuleConfiguration:
        config = super().rule_configuration()
        allow_test_files = self._option("allow_test_files")
        if allow_test_files is False:
            return replace(config, allow_test_files=False)
        return config
