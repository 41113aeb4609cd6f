"""LibCST Transformers for code fixes."""

import libcst as cst


class AddImportTransformer(cst.CSTTransformer):
    """Adds 'from <module> import <names>' for the names not imported from it yet."""

    def __init__(self, context: dict) -> None:
        self.module: str = context.get("module", "")
        self.imports: list[str] = list(context.get("imports", []))
        self.existing: set[str] = set()
        self.added = False

    def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
        if node.relative or node.module is None:
            return
        if self._dotted(node.module) != self.module or isinstance(node.names, cst.ImportStar):
            return
        for alias in node.names:
            bound = alias.asname.name if alias.asname else alias.name
            if isinstance(bound, cst.Name) and isinstance(alias.name, cst.Name):
                if bound.value == alias.name.value:
                    self.existing.add(alias.name.value)

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        missing = [n for n in self.imports if n not in self.existing]
        if self.added or not missing:
            return updated_node
        names = [cst.ImportAlias(name=cst.Name(n)) for n in missing]

        # Support dotted module paths like "a.b.c"
        parts = self.module.split(".")
        module_expr: cst.Name | cst.Attribute = cst.Name(parts[0])
        for part in parts[1:]:
            module_expr = cst.Attribute(value=module_expr, attr=cst.Name(part))

        import_stmt = cst.ImportFrom(
            module=module_expr,
            names=names,
            whitespace_after_import=cst.SimpleWhitespace(" "),
        )

        new_body = list(updated_node.body)
        insert_idx: int = 1 if new_body and self._is_docstring(new_body[0]) else 0
        for i, stmt in enumerate(new_body):
            if self._is_import_line(stmt):
                insert_idx = i + 1

        new_body.insert(insert_idx, cst.SimpleStatementLine(body=[import_stmt]))
        self.added = True
        return updated_node.with_changes(body=new_body)

    @staticmethod
    def _dotted(expr: cst.BaseExpression) -> str:
        if isinstance(expr, cst.Name):
            return expr.value
        if isinstance(expr, cst.Attribute):
            return f"{AddImportTransformer._dotted(expr.value)}.{expr.attr.value}"
        return ""

    @staticmethod
    def _is_import_line(stmt: cst.CSTNode) -> bool:
        return isinstance(stmt, cst.SimpleStatementLine) and any(
            isinstance(s, (cst.Import, cst.ImportFrom)) for s in stmt.body
        )

    @staticmethod
    def _is_docstring(stmt: cst.CSTNode) -> bool:
        return (
            isinstance(stmt, cst.SimpleStatementLine)
            and len(stmt.body) == 1
            and isinstance(stmt.body[0], cst.Expr)
            and isinstance(stmt.body[0].value, (cst.SimpleString, cst.ConcatenatedString))
        )
