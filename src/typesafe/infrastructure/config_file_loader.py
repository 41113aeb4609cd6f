"""Load [tool.typesafe] from pyproject.toml. Infrastructure I/O only."""

import logging
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)


class ConfigFileLoader:
    """Loads config from the nearest pyproject.toml, walking up from a start directory."""

    @staticmethod
    def find_pyproject(start: Path | None = None) -> Path | None:
        current_path = (start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if config_file.is_file():
                return config_file
        return None

    @staticmethod
    def load_config(start: Path | None = None) -> dict[str, object]:
        """Return the [tool.typesafe] table, or {} when there is none."""
        config_file = ConfigFileLoader.find_pyproject(start)
        if config_file is None:
            return {}
        try:
            with config_file.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Could not read %s: %s", config_file, exc)
            return {}
        tool_section = data.get("tool", {}) or {}
        config_dict = tool_section.get("typesafe", {}) if isinstance(tool_section, dict) else {}
        if not isinstance(config_dict, dict):
            logger.warning("Ignoring [tool.typesafe] in %s: expected a table", config_file)
            return {}
        logger.debug("Loaded [tool.typesafe] from %s", config_file)
        return config_dict
