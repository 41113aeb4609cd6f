import logging
from pathlib import Path

import astroid
from astroid.builder import AstroidBuilder

from typesafe.domain.protocols import AstroidProtocol, FileSystemProtocol
from typesafe.infrastructure.gateways.filesystem_gateway import FileSystemGateway

logger = logging.getLogger(__name__)


class AstroidGateway(AstroidProtocol):
    """Parses Python files into astroid trees for the rule engine."""

    def __init__(self, filesystem: FileSystemProtocol | None = None) -> None:
        self._filesystem = filesystem or FileSystemGateway()

    def parse_file(self, file_path: str) -> tuple[astroid.nodes.Module, str] | None:
        """Parse a file and return (module, source); None when unreadable or invalid."""
        if not Path(file_path).is_file():
            logger.warning("Skipping %s: not a file", file_path)
            return None
        try:
            source = self._filesystem.read_text(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            return None
        module = self.parse_source(source, file_path)
        if module is None:
            return None
        return module, source

    def parse_source(self, source: str, file_path: str = "") -> astroid.nodes.Module | None:
        """
        Parse source text without dedenting it.

        astroid.parse() dedents its input, which would shift every column the engine
        later converts into character offsets.
        """
        modname = Path(file_path).stem if file_path else ""
        try:
            return AstroidBuilder(astroid.MANAGER).string_build(source, modname, file_path or None)
        except astroid.AstroidSyntaxError as exc:
            logger.warning("Skipping %s: %s", file_path or "<string>", exc)
            return None
