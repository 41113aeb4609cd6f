"""LibCST based Fixer Gateway: applies engine text fixes and keeps the result parseable."""

import logging

import libcst as cst

from typesafe.domain.constants import TYPESAFE_PREFIX
from typesafe.domain.entities import Fix
from typesafe.domain.protocols import FixerGatewayProtocol
from typesafe.infrastructure.gateways.transformers import AddImportTransformer

logger = logging.getLogger(__name__)


class SourceFixerGateway(FixerGatewayProtocol):
    """Gateway for applying safe code modifications to source text."""

    def apply_fixes(self, source: str, fixes: list[Fix]) -> tuple[str, int]:
        """
        Apply fixes back to front so earlier offsets stay valid.

        A fix overlapping one already applied is skipped; the next pass of the use
        case picks it up again from the rewritten source.

        Returns:
            (rewritten source, number of fixes applied)
        """
        applied: list[Fix] = []
        text = source
        for fix in sorted(fixes, key=lambda f: (f.range_start, f.range_end), reverse=True):
            if fix.range_start < 0 or fix.range_end > len(source) or fix.range_start > fix.range_end:
                logger.debug("Dropping out-of-range fix %s", fix)
                continue
            if any(fix.overlaps(other) for other in applied):
                continue
            text = text[: fix.range_start] + fix.replacement_text + text[fix.range_end :]
            applied.append(fix)
        return text, len(applied)

    def ensure_imports(self, source: str, modules: list[str]) -> str:
        """Add 'from typesafe import ...' for the wrapper modules the fixes reference."""
        if not modules:
            return source
        try:
            module = cst.parse_module(source)
        except cst.ParserSyntaxError as exc:
            logger.warning("Skipping import insertion, source does not parse: %s", exc)
            return source
        transformer = AddImportTransformer(
            {"module": TYPESAFE_PREFIX.rstrip("."), "imports": sorted(set(modules))}
        )
        return module.visit(transformer).code

    def validate(self, source: str, file_path: str = "<rewritten>") -> bool:
        """libcst accepts some code CPython rejects (await outside async), so compile too."""
        try:
            cst.parse_module(source)
        except cst.ParserSyntaxError as exc:
            logger.warning("Rewritten source does not parse: %s", exc)
            return False
        try:
            compile(source, file_path, "exec", dont_inherit=True)
        except (SyntaxError, ValueError) as exc:
            logger.warning("Rewritten source does not compile: %s", exc)
            return False
        return True
