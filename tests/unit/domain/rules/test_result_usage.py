"""Unit tests for ResultUsageRule (W9511-W9514)."""

import pytest

from typesafe.domain.config import RuleConfiguration
from typesafe.domain.entities import ViolationKind
from typesafe.domain.rules.result_usage import ResultUsageRule


class TestRaise:
    """W9511: raise statements."""

    def test_raise_of_non_error_value(self, result_engine, run_engine) -> None:
        (violation,) = run_engine(result_engine, 'def f():\n    raise "oops"\n')
        assert violation.kind is ViolationKind.NO_THROW_STATEMENT
        assert violation.code == "W9511"
        assert violation.fix.replacement_text == 'return result.error(Exception("oops"))'

    def test_excepted_enclosing_function(self, result_engine, run_engine) -> None:
        config = RuleConfiguration(allow_exceptions=("main",))
        source = "def main():\n    raise SystemExit(1)\n"
        assert run_engine(result_engine, source, config=config) == []

    def test_raise_inside_named_thunk_is_how_it_fails(self, result_engine, run_engine) -> None:
        source = (
            "def f(v):\n"
            "    def _guarded():\n"
            "        raise ValueError(v)\n"
            "    outcome = result.wrap(_guarded)\n"
        )
        assert run_engine(result_engine, source) == []

    def test_bare_reraise_is_reported_without_fix(self, result_engine, run_engine) -> None:
        source = "def f():\n    try:\n        go()\n    except KeyError:\n        raise\n"
        violations = run_engine(result_engine, source)
        raises = [v for v in violations if v.kind is ViolationKind.NO_THROW_STATEMENT]
        assert len(raises) == 1
        assert raises[0].fix is None
        assert raises[0].fix_failure_reason == "Bare raise re-raises the active exception"


class TestGuardedBlock:
    """W9512: try/except blocks."""

    def test_sync_template(self, result_engine, run_engine) -> None:
        source = "def f():\n    try:\n        risky()\n    except Exception:\n        return None\n"
        (violation,) = run_engine(result_engine, source)
        assert violation.kind is ViolationKind.NO_TRY_CATCH_BLOCK
        assert violation.code == "W9512"
        assert violation.fix.replacement_text.startswith("def _guarded():")
        assert violation.fix.replacement_text.endswith("outcome = result.wrap(_guarded)")

    def test_async_template(self, result_engine, run_engine) -> None:
        source = (
            "async def f():\n"
            "    try:\n"
            "        await risky()\n"
            "    except Exception:\n"
            "        return None\n"
        )
        (violation,) = run_engine(result_engine, source)
        assert violation.fix.replacement_text.startswith("async def _guarded():")
        assert violation.fix.replacement_text.endswith("outcome = await result.wrap_async(_guarded)")

    def test_try_finally_is_not_reported(self, result_engine, run_engine) -> None:
        source = "def f():\n    try:\n        risky()\n    finally:\n        done()\n"
        assert run_engine(result_engine, source) == []


class TestThrowingCalls:
    """W9513/W9514: calls known to raise."""

    def test_json_loads(self, result_engine, run_engine) -> None:
        (violation,) = run_engine(result_engine, "data = json.loads(text)\n")
        assert violation.kind is ViolationKind.USE_WRAP_SYNC
        assert violation.code == "W9513"
        assert violation.fix.replacement_text == "result.wrap(lambda: json.loads(text))"

    def test_async_naming_hint(self, result_engine, run_engine) -> None:
        source = "async def f(url):\n    page = await fetch(url)\n    return page\n"
        (violation,) = run_engine(result_engine, source)
        assert violation.kind is ViolationKind.USE_WRAP_ASYNC
        assert violation.code == "W9514"
        assert violation.fix.replacement_text == "result.wrap_async(lambda: fetch(url))"

    def test_unawaited_async_hint_is_reported_without_fix(self, result_engine, run_engine) -> None:
        (violation,) = run_engine(result_engine, "def load(url):\n    return fetch(url)\n")
        assert violation.code == "W9514"
        assert violation.fix is None
        assert "not awaited" in violation.fix_failure_reason

    def test_call_inside_guarded_block_is_not_reported(self, result_engine, run_engine) -> None:
        source = "try:\n    data = json.loads(text)\nexcept ValueError:\n    data = {}\n"
        violations = run_engine(result_engine, source)
        assert [v.kind for v in violations] == [ViolationKind.NO_TRY_CATCH_BLOCK]

    def test_call_inside_thunk_is_not_reported(self, result_engine, run_engine) -> None:
        assert run_engine(result_engine, "data = result.wrap(lambda: json.loads(text))\n") == []

    def test_optional_thunk_does_not_exempt(self, result_engine, run_engine) -> None:
        violations = run_engine(result_engine, "data = optional.wrap(lambda: json.loads(text))\n")
        assert [v.code for v in violations] == ["W9513"]

    def test_excepted_callee(self, result_engine, run_engine) -> None:
        config = RuleConfiguration(allow_exceptions=("json.*",))
        assert run_engine(result_engine, "data = json.loads(text)\n", config=config) == []


class TestTestFiles:
    @pytest.mark.parametrize(
        "path",
        [
            "tests/unit/helpers.py",
            "pkg/test/helpers.py",
            "test_parser.py",
            "pkg/parser_test.py",
            "conftest.py",
            "C:\\repo\\tests\\helpers.py",
        ],
    )
    def test_is_test_file(self, path: str) -> None:
        assert ResultUsageRule.is_test_file(path)

    @pytest.mark.parametrize("path", ["src/pkg/parser.py", "src/contest.py", "src/latest/run.py"])
    def test_is_not_test_file(self, path: str) -> None:
        assert not ResultUsageRule.is_test_file(path)

    def test_test_files_are_skipped_by_default(self, result_engine, run_engine) -> None:
        source = "def f():\n    raise ValueError()\n"
        assert run_engine(result_engine, source, file_path="tests/test_f.py") == []

    def test_test_files_checked_when_disallowed(self, result_engine, run_engine) -> None:
        source = "def f():\n    raise ValueError()\n"
        config = RuleConfiguration(allow_test_files=False)
        violations = run_engine(result_engine, source, file_path="tests/test_f.py", config=config)
        assert len(violations) == 1
