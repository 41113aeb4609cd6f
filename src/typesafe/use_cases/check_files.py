"""Use Case: run the rule engines over every Python file of a path."""

import logging

from typesafe.domain.config import ConfigurationLoader
from typesafe.domain.engine import RuleEngine
from typesafe.domain.entities import AuditResult, FileReport, Violation
from typesafe.domain.protocols import AstroidProtocol, FileSystemProtocol, TelemetryPort

logger = logging.getLogger(__name__)


class CheckFilesUseCase:
    """Parse each file once and run every selected engine over it."""

    def __init__(
        self,
        astroid_gateway: AstroidProtocol,
        filesystem: FileSystemProtocol,
        telemetry: TelemetryPort,
        config_loader: ConfigurationLoader,
    ) -> None:
        self.astroid_gateway = astroid_gateway
        self.filesystem = filesystem
        self.telemetry = telemetry
        self.config_loader = config_loader

    def execute(self, engines: list[RuleEngine], target_path: str) -> AuditResult:
        files = self.filesystem.glob_python_files(target_path)
        self.telemetry.step(f"Checking {len(files)} file(s) under {target_path}")
        reports = [self.check_file(engines, file_path) for file_path in files]
        result = AuditResult(reports=reports)
        if result.skipped_files:
            self.telemetry.warning(
                f"Skipped {len(result.skipped_files)} file(s) that could not be parsed"
            )
        return result

    def check_file(self, engines: list[RuleEngine], file_path: str) -> FileReport:
        parsed = self.astroid_gateway.parse_file(file_path)
        if parsed is None:
            return FileReport(path=file_path, skipped=True)
        module, source = parsed
        violations: list[Violation] = []
        for engine in engines:
            config = self.config_loader.for_family(engine.rule.family)
            found = engine.run(module, source, file_path, config)
            logger.debug("%s: %d %s violation(s)", file_path, len(found), engine.rule.name)
            violations.extend(found)
        return FileReport(path=file_path, violations=violations)
