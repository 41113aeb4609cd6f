"""Optional usage checks (W9501-W9504)."""

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from typesafe.domain.config import ConfigurationLoader
from typesafe.domain.registry_types import RuleRegistryEntry
from typesafe.domain.rules.optional_usage import OptionalUsageRule
from typesafe.use_cases.checks.engine_checker import EngineChecker


class OptionalUsageChecker(EngineChecker):
    """W9501-W9504: nullable returns and annotations, None-returning calls."""

    name: str = "typesafe-optional"
    CODES = ["W9501", "W9502", "W9503", "W9504"]
    options = (
        (
            "typesafe-optional-allow-exceptions",
            {
                "default": (),
                "type": "csv",
                "metavar": "<patterns>",
                "help": "Function or callee names exempt from the optional rule ('*' wildcards).",
            },
        ),
    )

    def __init__(
        self,
        linter: "PyLinter",
        config_loader: ConfigurationLoader,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        super().__init__(linter, OptionalUsageRule(), config_loader, registry)
