"""Use Case: Apply Fixes to Source Code."""

import logging

from typesafe.domain.config import ConfigurationLoader
from typesafe.domain.engine import RuleEngine
from typesafe.domain.entities import Fix, FixSummary, Violation
from typesafe.domain.protocols import (
    AstroidProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)

logger = logging.getLogger(__name__)


class ApplyFixesUseCase:
    """
    Rewrite files with the fixes the engines offer.

    Each pass re-parses the current text, collects the fixes of every engine and
    applies the non-overlapping ones. Passes repeat until nothing applies (fixes
    skipped for overlapping are regenerated against the rewritten text), bounded
    by ``max_passes``. A rewrite that no longer parses is discarded.
    """

    def __init__(
        self,
        fixer_gateway: FixerGatewayProtocol,
        filesystem: FileSystemProtocol,
        astroid_gateway: AstroidProtocol,
        telemetry: TelemetryPort,
        config_loader: ConfigurationLoader,
        max_passes: int = 5,
    ) -> None:
        self.fixer_gateway = fixer_gateway
        self.filesystem = filesystem
        self.astroid_gateway = astroid_gateway
        self.telemetry = telemetry
        self.config_loader = config_loader
        self.max_passes = max_passes

    def execute(
        self, engines: list[RuleEngine], target_path: str, dry_run: bool = False
    ) -> FixSummary:
        """Apply fixes to all files in target path."""
        self.telemetry.step(f"Starting fixes on {target_path}")
        summary = FixSummary()
        for file_path in self.filesystem.glob_python_files(target_path):
            self._execute_one_file(engines, file_path, summary, dry_run)

        verb = "would be rewritten" if dry_run else "rewritten"
        self.telemetry.step(
            f"Fixes applied: {summary.fixes_applied}. Files {verb}: {len(summary.files_modified)}"
        )
        if summary.failed:
            self.telemetry.warning(f"{len(summary.failed)} file(s) could not be fixed:")
            for failure in summary.failed:
                self.telemetry.error(f"  {failure}")
        return summary

    def fix_source(
        self, engines: list[RuleEngine], source: str, file_path: str = ""
    ) -> tuple[str, int, list[Violation]]:
        """
        Run the fix passes over one source text.

        Returns:
            (rewritten source, fixes applied, violations still needing a manual fix)
        """
        current = source
        applied_total = 0
        families_used: set[str] = set()
        remaining: list[Violation] = []
        for _ in range(self.max_passes):
            module = self.astroid_gateway.parse_source(current, file_path)
            if module is None:
                break
            fixes: list[Fix] = []
            remaining = []
            for engine in engines:
                config = self.config_loader.for_family(engine.rule.family)
                for violation in engine.run(module, current, file_path, config):
                    if violation.fix is None:
                        remaining.append(violation)
                        continue
                    fixes.append(violation.fix)
                    families_used.add(engine.rule.family.value)
            if not fixes:
                break
            current, applied = self.fixer_gateway.apply_fixes(current, fixes)
            applied_total += applied
            if applied == 0:
                break
        if applied_total:
            current = self.fixer_gateway.ensure_imports(current, sorted(families_used))
        return current, applied_total, remaining

    def _execute_one_file(
        self,
        engines: list[RuleEngine],
        file_path: str,
        summary: FixSummary,
        dry_run: bool,
    ) -> None:
        parsed = self.astroid_gateway.parse_file(file_path)
        if parsed is None:
            summary.failed.append(f"{file_path}: could not be parsed")
            return
        _, source = parsed
        rewritten, applied, remaining = self.fix_source(engines, source, file_path)
        summary.manual.extend(remaining)
        if not applied:
            return
        if not self.fixer_gateway.validate(rewritten, file_path):
            summary.failed.append(f"{file_path}: rewrite did not parse, file left unchanged")
            return
        summary.fixes_applied += applied
        summary.files_modified.append(file_path)
        if dry_run:
            logger.debug("Dry run: %d fix(es) for %s not written", applied, file_path)
            return
        self.filesystem.write_text(file_path, rewritten)
        self.telemetry.step(f"Fixed {file_path} ({applied} fix(es))")
