"""Unit tests for ApplyFixesUseCase: multi-pass rewriting and idempotence."""

import textwrap
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from typesafe.domain.config import ConfigurationLoader
from typesafe.domain.engine import RuleEngine
from typesafe.domain.rules.optional_usage import OptionalUsageRule
from typesafe.domain.rules.result_usage import ResultUsageRule
from typesafe.infrastructure.gateways.astroid_gateway import AstroidGateway
from typesafe.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from typesafe.infrastructure.gateways.source_fixer_gateway import SourceFixerGateway
from typesafe.use_cases.apply_fixes import ApplyFixesUseCase


@pytest.fixture
def use_case() -> ApplyFixesUseCase:
    filesystem = FileSystemGateway()
    return ApplyFixesUseCase(
        fixer_gateway=SourceFixerGateway(),
        filesystem=filesystem,
        astroid_gateway=AstroidGateway(filesystem),
        telemetry=MagicMock(),
        config_loader=ConfigurationLoader(),
    )


@pytest.fixture
def engines() -> list[RuleEngine]:
    return [RuleEngine(OptionalUsageRule()), RuleEngine(ResultUsageRule())]


def _fixable_kinds_after(use_case, engines, source: str) -> list[str]:
    rewritten, _, _ = use_case.fix_source(engines, source, "module.py")
    module = AstroidGateway().parse_source(rewritten, "module.py")
    return [
        v.kind.value
        for engine in engines
        for v in engine.run(module, rewritten, "module.py")
        if v.fix is not None
    ]


class TestFixSource:
    def test_wraps_absent_call_and_adds_import(self, use_case, engines) -> None:
        rewritten, applied, remaining = use_case.fix_source(
            engines, "x = items.get(key)\n", "module.py"
        )
        assert applied == 1
        assert remaining == []
        assert rewritten == "from typesafe import optional\nx = optional.wrap(lambda: items.get(key))\n"

    def test_raise_becomes_return(self, use_case, engines) -> None:
        source = 'def f():\n    raise "oops"\n'
        rewritten, applied, _ = use_case.fix_source(engines, source, "module.py")
        assert applied == 1
        assert 'return result.error(Exception("oops"))' in rewritten
        assert rewritten.startswith("from typesafe import result\n")

    def test_overlapping_fixes_land_over_several_passes(self, use_case, engines) -> None:
        source = "data = json.loads(items.get(key))\n"
        rewritten, applied, _ = use_case.fix_source(engines, source, "module.py")
        assert applied == 2
        assert "result.wrap(lambda: json.loads(optional.wrap(lambda: items.get(key))))" in rewritten
        assert "from typesafe import optional, result\n" in rewritten

    @pytest.mark.parametrize(
        "source",
        [
            "async def f(d):\n    value = d.get(await key())\n    return value\n",
            "class C:\n    RAW = '{}'\n    DATA = json.loads(RAW)\n",
            "def f(d):\n    v = d.get(k := 'a')\n    return k\n",
        ],
    )
    def test_calls_a_lambda_would_break_are_left_alone(self, use_case, engines, source: str) -> None:
        rewritten, applied, remaining = use_case.fix_source(engines, source, "module.py")
        assert (rewritten, applied) == (source, 0)
        assert len(remaining) == 1
        assert remaining[0].fix_failure_reason is not None

    def test_manual_violations_are_returned(self, use_case, engines) -> None:
        source = "def f() -> str | None:\n    return None\n"
        rewritten, applied, remaining = use_case.fix_source(engines, source, "module.py")
        assert applied == 0
        assert rewritten == source
        assert [v.code for v in remaining] == ["W9501"]

    @pytest.mark.parametrize(
        "source",
        [
            "x = items.get(key)\n",
            'def f():\n    raise "oops"\n',
            "def f():\n    try:\n        risky()\n    except Exception:\n        log()\n",
            "async def f():\n    try:\n        await risky()\n    except Exception:\n        log()\n",
            """\
            def handler(payload, cache):
                try:
                    consume(json.loads(payload))
                except ValueError:
                    pass
                if not payload:
                    raise ValueError("empty")
                return cache.get(payload)
            """,
        ],
    )
    def test_fixing_is_idempotent(self, use_case, engines, source: str) -> None:
        assert _fixable_kinds_after(use_case, engines, textwrap.dedent(source)) == []

    def test_guarded_block_rewrite_exempts_its_body(self, use_case, engines) -> None:
        source = textwrap.dedent(
            """\
            def handler(payload):
                try:
                    consume(json.loads(payload))
                    raise_if_empty(payload)
                except ValueError:
                    pass
            """
        )
        rewritten, _, _ = use_case.fix_source(engines, source, "module.py")
        assert "def _guarded():" in rewritten
        assert "json.loads(payload)" in rewritten
        assert "result.wrap(lambda: json.loads" not in rewritten


class TestExecute:
    def test_rewrites_files_and_reports_manual_fixes(self, use_case, engines, tmp_path: Path) -> None:
        target = tmp_path / "mod.py"
        target.write_text("x = items.get(key)\n\ndef f() -> int | None:\n    return None\n")
        summary = use_case.execute(engines, str(tmp_path))
        assert summary.fixes_applied == 1
        assert summary.files_modified == [str(target.resolve())]
        assert [v.code for v in summary.manual] == ["W9501"]
        assert "optional.wrap(lambda: items.get(key))" in target.read_text()

    def test_dry_run_leaves_files_untouched(self, use_case, engines, tmp_path: Path) -> None:
        target = tmp_path / "mod.py"
        target.write_text("x = items.get(key)\n")
        summary = use_case.execute(engines, str(tmp_path), dry_run=True)
        assert summary.fixes_applied == 1
        assert target.read_text() == "x = items.get(key)\n"

    def test_unparsable_file_is_reported(self, use_case, engines, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text("def broken(:\n")
        summary = use_case.execute(engines, str(tmp_path))
        assert len(summary.failed) == 1
        assert "could not be parsed" in summary.failed[0]
        use_case.telemetry.warning.assert_called_once()

    def test_rewrite_that_does_not_parse_is_discarded(self, engines, tmp_path: Path) -> None:
        target = tmp_path / "mod.py"
        target.write_text("x = items.get(key)\n")
        fixer = MagicMock(wraps=SourceFixerGateway())
        fixer.validate.return_value = False
        filesystem = FileSystemGateway()
        use_case = ApplyFixesUseCase(
            fixer_gateway=fixer,
            filesystem=filesystem,
            astroid_gateway=AstroidGateway(filesystem),
            telemetry=MagicMock(),
            config_loader=ConfigurationLoader(),
        )
        summary = use_case.execute(engines, str(target))
        assert summary.files_modified == []
        assert "did not parse" in summary.failed[0]
        assert target.read_text() == "x = items.get(key)\n"
