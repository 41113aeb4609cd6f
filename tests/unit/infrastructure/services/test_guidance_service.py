"""Unit tests for GuidanceService over the packaged rule registry."""

import unittest
from pathlib import Path

from typesafe.domain.constants import OPTIONAL_CODES, RESULT_CODES
from typesafe.infrastructure.services.guidance_service import GuidanceService


class TestGuidanceService(unittest.TestCase):
    def setUp(self) -> None:
        self.service = GuidanceService()

    def test_registry_lists_every_code(self) -> None:
        codes = [code for code, _ in self.service.iter_rules()]
        self.assertEqual(codes, sorted([*OPTIONAL_CODES.values(), *RESULT_CODES.values()]))

    def test_symbols_are_unique(self) -> None:
        symbols = [entry["symbol"] for _, entry in self.service.iter_rules()]
        self.assertEqual(len(symbols), len(set(symbols)))

    def test_type_changes_are_not_fixable(self) -> None:
        fixable = self.service.get_fixable_codes()
        self.assertNotIn("W9501", fixable)
        self.assertNotIn("W9502", fixable)
        self.assertIn("W9503", fixable)
        self.assertIn("use-result-wrap", fixable)

    def test_lookup_by_symbol(self) -> None:
        entry = self.service.get_typesafe_entry("no-throw-statement")
        self.assertIsNotNone(entry)
        self.assertEqual(entry["message_template"], "%s")

    def test_manual_instructions_fallback(self) -> None:
        self.assertIn("optional.Optional", self.service.get_manual_instructions("W9501"))
        self.assertEqual(
            self.service.get_manual_instructions("W0000"),
            "See project docs. Fix the violation at the reported location.",
        )

    def test_display_name(self) -> None:
        self.assertEqual(self.service.get_display_name("W9501"), "Nullable return")
        self.assertEqual(self.service.get_display_name("unknown-rule"), "Unknown Rule")

    def test_missing_registry_file(self) -> None:
        service = GuidanceService(str(Path("does-not-exist.yaml")))
        self.assertEqual(service.get_registry(), {})
