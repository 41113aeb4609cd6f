"""Renders check and fix results for the terminal."""

import json
from pathlib import Path

import typer

from typesafe.domain.entities import AuditResult, FixSummary, Violation
from typesafe.domain.protocols import GuidanceServiceProtocol


class ViolationReporter:
    """Text and JSON rendering of violations, one line per violation in text mode."""

    def __init__(self, guidance_service: GuidanceServiceProtocol) -> None:
        self._guidance = guidance_service

    def format_violation(self, violation: Violation) -> str:
        entry = self._guidance.get_typesafe_entry(violation.code) or {}
        symbol = entry.get("symbol", violation.kind.value)
        path, line, col = self._split_location(violation.location)
        marker = " [fixable]" if violation.fixable else ""
        return f"{path}:{line}:{col}: {violation.code} ({symbol}) {violation.message}{marker}"

    def report_audit(self, result: AuditResult, output_format: str = "text") -> None:
        if output_format == "json":
            typer.echo(json.dumps(result.to_dict(), indent=2))
            return
        for violation in result.violations:
            typer.echo(self.format_violation(violation))
        total = len(result.violations)
        fixable = sum(1 for v in result.violations if v.fixable)
        typer.echo(
            f"Found {total} violation(s) in {len(result.reports)} file(s); {fixable} fixable."
        )

    def report_fixes(self, summary: FixSummary, dry_run: bool = False) -> None:
        verb = "would rewrite" if dry_run else "rewrote"
        for path in summary.files_modified:
            typer.echo(f"{verb} {self._relative(path)}")
        if not summary.manual:
            return
        typer.echo(f"{len(summary.manual)} violation(s) need a manual fix:")
        for violation in summary.manual:
            typer.echo(f"  {self.format_violation(violation)}")
            reason = violation.fix_failure_reason
            if reason:
                typer.echo(f"    reason: {reason}")
            typer.echo(f"    how: {self._guidance.get_manual_instructions(violation.code)}")

    def report_rules(self) -> None:
        fixable_codes = set(self._guidance.get_fixable_codes())
        for code, entry in self._guidance.iter_rules():
            fix = "fixable" if code in fixable_codes else "manual"
            typer.echo(
                f"{code}  {entry.get('symbol', ''):<24} {entry.get('rule', ''):<15} {fix:<8} "
                f"{self._guidance.get_display_name(code)}: {entry.get('short_description', '')}"
            )

    @staticmethod
    def _split_location(location: str) -> tuple[str, str, str]:
        path, _, rest = location.rpartition(":")
        path, _, line = path.rpartition(":")
        return ViolationReporter._relative(path), line, rest

    @staticmethod
    def _relative(path: str) -> str:
        try:
            return str(Path(path).resolve().relative_to(Path.cwd()))
        except ValueError:
            return path
