"""CLI entry points for typesafe - Thin Controller using Typer."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import typer

from typesafe.domain.config import ConfigurationLoader
from typesafe.domain.engine import RuleEngine
from typesafe.domain.protocols import (
    AstroidProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)
from typesafe.interface.reporters import ViolationReporter
from typesafe.use_cases.apply_fixes import ApplyFixesUseCase
from typesafe.use_cases.check_files import CheckFilesUseCase

RULE_CHOICES = ("optional", "result", "all")
FORMAT_CHOICES = ("text", "json")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    astroid_gateway: AstroidProtocol
    filesystem: FileSystemProtocol
    fixer_gateway: FixerGatewayProtocol
    reporter: ViolationReporter
    engines: Mapping[str, RuleEngine]


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_target_path(path: Path | None) -> str:
        """Resolve target path: explicit path, else src/ if exists, else '.' (public API)."""
        if path and str(path) != ".":
            return str(path)
        src_dir = Path.cwd() / "src"
        if src_dir.exists() and src_dir.is_dir():
            return "src"
        return "."

    @staticmethod
    def select_engines(engines: Mapping[str, RuleEngine], rule: str) -> list[RuleEngine]:
        """Engines for --rule; raises typer.BadParameter for an unknown rule name."""
        if rule not in RULE_CHOICES:
            raise typer.BadParameter(
                f"unknown rule '{rule}', expected one of: {', '.join(RULE_CHOICES)}",
                param_hint="--rule",
            )
        if rule == "all":
            return [engines[name] for name in ("optional", "result")]
        return [engines[rule]]

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="typesafe",
            help="typesafe: flag None-returning and raising code, and rewrite it to Optional/Result.",
            add_completion=False,
        )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
        ) -> None:
            """Run 'typesafe check' to report; 'typesafe fix' to apply fixes."""
            if verbose:
                logging.getLogger().setLevel(logging.DEBUG)

        @app.command()
        def check(
            path: Path | None = typer.Argument(None, help="File or directory to check (default: src/ or .)"),  # noqa: B008
            rule: str = typer.Option("all", "--rule", "-r", help="optional, result or all"),
            output_format: str = typer.Option("text", "--format", "-f", help="text or json"),
        ) -> None:
            """Report violations. Exits with code 1 when any are found."""
            if output_format not in FORMAT_CHOICES:
                raise typer.BadParameter(
                    f"unknown format '{output_format}'", param_hint="--format"
                )
            engines = CLIAppFactory.select_engines(deps.engines, rule)
            use_case = CheckFilesUseCase(
                astroid_gateway=deps.astroid_gateway,
                filesystem=deps.filesystem,
                telemetry=deps.telemetry,
                config_loader=deps.config_loader,
            )
            result = use_case.execute(engines, CLIAppFactory.resolve_target_path(path))
            deps.reporter.report_audit(result, output_format)
            if result.has_violations():
                raise typer.Exit(code=1)

        @app.command()
        def fix(
            path: Path | None = typer.Argument(None, help="File or directory to fix (default: src/ or .)"),  # noqa: B008
            rule: str = typer.Option("all", "--rule", "-r", help="optional, result or all"),
            dry_run: bool = typer.Option(False, "--dry-run", help="Report what would change without writing"),
        ) -> None:
            """Apply the available fixes; list what still needs a manual fix."""
            engines = CLIAppFactory.select_engines(deps.engines, rule)
            use_case = ApplyFixesUseCase(
                fixer_gateway=deps.fixer_gateway,
                filesystem=deps.filesystem,
                astroid_gateway=deps.astroid_gateway,
                telemetry=deps.telemetry,
                config_loader=deps.config_loader,
            )
            summary = use_case.execute(
                engines, CLIAppFactory.resolve_target_path(path), dry_run=dry_run
            )
            deps.reporter.report_fixes(summary, dry_run=dry_run)

        @app.command()
        def rules() -> None:
            """List rule codes, symbols and fixability."""
            deps.reporter.report_rules()

        return app
