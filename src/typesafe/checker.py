"""
Pylint plugin entry point - composition root for the checker plugin.

Enable with ``pylint --load-plugins=typesafe.checker``.
"""

from pylint.lint import PyLinter

from typesafe.infrastructure.di.container import TypesafeContainer
from typesafe.use_cases.checks.optional_usage import OptionalUsageChecker
from typesafe.use_cases.checks.result_usage import ResultUsageChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = TypesafeContainer.get_instance()
    config_loader = container.get_config_loader()
    registry = container.get_guidance_service().get_registry()

    linter.register_checker(OptionalUsageChecker(linter, config_loader=config_loader, registry=registry))
    linter.register_checker(ResultUsageChecker(linter, config_loader=config_loader, registry=registry))
