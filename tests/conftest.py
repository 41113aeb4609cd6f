"""Pytest configuration and shared helpers.

pythonpath in pyproject.toml puts src/ on sys.path. Sources are parsed through
AstroidGateway (not astroid.parse) so that positions match the text the fixes
are applied to.
"""

import textwrap
from collections.abc import Callable

import astroid
import pytest

from typesafe.domain.config import RuleConfiguration
from typesafe.domain.engine import RuleEngine
from typesafe.domain.entities import Violation
from typesafe.domain.rules.optional_usage import OptionalUsageRule
from typesafe.domain.rules.result_usage import ResultUsageRule
from typesafe.infrastructure.gateways.astroid_gateway import AstroidGateway


def parse_source(source: str, file_path: str = "module.py") -> tuple[astroid.nodes.Module, str]:
    text = textwrap.dedent(source)
    module = AstroidGateway().parse_source(text, file_path)
    assert module is not None
    return module, text


@pytest.fixture
def parse() -> Callable[..., tuple[astroid.nodes.Module, str]]:
    return parse_source


@pytest.fixture
def optional_engine() -> RuleEngine:
    return RuleEngine(OptionalUsageRule())


@pytest.fixture
def result_engine() -> RuleEngine:
    return RuleEngine(ResultUsageRule())


@pytest.fixture
def run_engine() -> Callable[..., list[Violation]]:
    """run_engine(engine, source, file_path="module.py", config=None) -> violations."""

    def _run(
        engine: RuleEngine,
        source: str,
        file_path: str = "module.py",
        config: RuleConfiguration | None = None,
    ) -> list[Violation]:
        module, text = parse_source(source, file_path)
        return engine.run(module, text, file_path, config)

    return _run

