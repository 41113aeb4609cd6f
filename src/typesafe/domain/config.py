"""Rule configuration. Immutable value objects created by Infrastructure."""

import logging
from dataclasses import dataclass

from typesafe.domain.entities import RuleFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleConfiguration:
    """Options for one pass of one rule. ``allow_test_files`` is only read by the result family."""

    allow_exceptions: tuple[str, ...] = ()
    auto_fix: bool = True
    allow_test_files: bool = True


class ConfigurationLoader:
    """
    Immutable view over the ``[tool.typesafe]`` table.

    Domain does not read the filesystem; Infrastructure calls
    ConfigFileLoader.load_config() and constructs ConfigurationLoader(config_dict)
    at the composition root. Per-family tables (``[tool.typesafe.result]``) override
    the global keys.
    """

    def __init__(self, config_dict: dict[str, object] | None = None) -> None:
        """Set config once at construction. No mutable state after init."""
        self._config: dict[str, object] = dict(config_dict or {})

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def allow_exceptions(self) -> tuple[str, ...]:
        return self._patterns(self._config, "allow-exceptions")

    @property
    def auto_fix(self) -> bool:
        return self._flag(self._config, "auto-fix", True)

    @property
    def allow_test_files(self) -> bool:
        return self._flag(self._config, "allow-test-files", True)

    def family_section(self, family: RuleFamily) -> dict[str, object]:
        raw = self._config.get(family.value, {})
        if not isinstance(raw, dict):
            logger.warning("Ignoring [tool.typesafe.%s]: expected a table", family.value)
            return {}
        return raw

    def for_family(self, family: RuleFamily) -> RuleConfiguration:
        """Build the RuleConfiguration for one rule family."""
        section = self.family_section(family)
        allow_exceptions = (
            self._patterns(section, "allow-exceptions")
            if "allow-exceptions" in section
            else self.allow_exceptions
        )
        return RuleConfiguration(
            allow_exceptions=allow_exceptions,
            auto_fix=self._flag(section, "auto-fix", self.auto_fix),
            allow_test_files=self._flag(section, "allow-test-files", self.allow_test_files),
        )

    @staticmethod
    def _patterns(section: dict[str, object], key: str) -> tuple[str, ...]:
        raw = section.get(key, [])
        if isinstance(raw, str):
            return tuple(p.strip() for p in raw.split(",") if p.strip())
        if isinstance(raw, list):
            return tuple(str(x) for x in raw if isinstance(x, str))
        logger.warning("Configuration Warning: '%s' must be a list of patterns", key)
        return ()

    @staticmethod
    def _flag(section: dict[str, object], key: str, default: bool) -> bool:
        raw = section.get(key, default)
        if isinstance(raw, bool):
            return raw
        logger.warning("Configuration Warning: '%s' must be true or false", key)
        return default
