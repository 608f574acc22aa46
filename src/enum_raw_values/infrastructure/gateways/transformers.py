"""LibCST Transformers for structural rewrites."""

from typing import Iterable, Optional, Union

import libcst as cst


def _root_name(node: cst.BaseExpression) -> Optional[str]:
    """`a` for `a`, `a.b.c`, `a.b(...)` and `a[T]`."""
    while isinstance(node, (cst.Attribute, cst.Call, cst.Subscript)):
        if isinstance(node, cst.Attribute):
            node = node.value
        elif isinstance(node, cst.Call):
            node = node.func
        else:
            node = node.value
    return node.value if isinstance(node, cst.Name) else None


def _decorator_name(decorator: cst.Decorator) -> Optional[str]:
    """Last name of `@name`, `@pkg.name`, `@name[T]` or `@name(...)`."""
    node = decorator.decorator
    if isinstance(node, cst.Call):
        node = node.func
    if isinstance(node, cst.Subscript):
        node = node.value
    if isinstance(node, cst.Attribute):
        return node.attr.value
    if isinstance(node, cst.Name):
        return node.value
    return None


def _dotted(module: str) -> Union[cst.Name, cst.Attribute]:
    parts = module.split(".")
    expr: Union[cst.Name, cst.Attribute] = cst.Name(parts[0])
    for part in parts[1:]:
        expr = cst.Attribute(value=expr, attr=cst.Name(part))
    return expr


class ModuleBindingsVisitor(cst.CSTVisitor):
    """Collects names bound at module level, not descending into functions or classes."""

    def __init__(self) -> None:
        self.names: set[str] = set()
        self.star_modules: set[str] = set()

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        self.names.add(node.name.value)
        return False

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        self.names.add(node.name.value)
        return False

    def visit_Lambda(self, node: cst.Lambda) -> bool:
        return False

    def visit_Import(self, node: cst.Import) -> None:
        for alias in node.names:
            bound = alias.asname.name if alias.asname else alias.name
            name = _root_name(bound)
            if name:
                self.names.add(name)

    def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
        if isinstance(node.names, cst.ImportStar):
            if node.module is not None:
                self.star_modules.add(cst.Module(body=[]).code_for_node(node.module))
            return
        for alias in node.names:
            bound = alias.asname.name if alias.asname else alias.name
            if isinstance(bound, cst.Name):
                self.names.add(bound.value)

    def visit_AssignTarget(self, node: cst.AssignTarget) -> None:
        if isinstance(node.target, cst.Name):
            self.names.add(node.target.value)

    def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
        if isinstance(node.target, cst.Name) and node.value is not None:
            self.names.add(node.target.value)


class AddImportTransformer(cst.CSTTransformer):
    """
    Transformer to add `from module import names` (or `import module`) to a module.

    The statement goes after the last top-level import that precedes the first
    statement decorated with one of anchor_names, else after the module
    docstring, else first (below any leading comments, which LibCST keeps in
    the module header). Names already bound at module level are not imported
    again.
    """

    def __init__(self, context: dict) -> None:
        self.module = context["module"]
        self.imports = list(context.get("imports", []))
        self.anchor_names = frozenset(context.get("anchor_names", ()))

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        bindings = ModuleBindingsVisitor()
        updated_node.visit(bindings)
        if self.module in bindings.star_modules:
            return updated_node
        if self.imports:
            missing = [name for name in self.imports if name not in bindings.names]
            if not missing:
                return updated_node
            statement: Union[cst.Import, cst.ImportFrom] = cst.ImportFrom(
                module=_dotted(self.module),
                names=[cst.ImportAlias(name=cst.Name(name)) for name in missing],
                whitespace_after_import=cst.SimpleWhitespace(" "),
            )
        else:
            if self.module.split(".")[0] in bindings.names:
                return updated_node
            statement = cst.Import(names=[cst.ImportAlias(name=_dotted(self.module))])

        body = list(updated_node.body)
        body.insert(self._insert_index(body), cst.SimpleStatementLine(body=[statement]))
        return updated_node.with_changes(body=body)

    def _insert_index(self, body: list[cst.CSTNode]) -> int:
        insert_idx = 0
        if body and self._is_docstring(body[0]):
            insert_idx = 1
        for i, stmt in enumerate(body):
            if self._is_anchored(stmt):
                break
            if isinstance(stmt, cst.SimpleStatementLine) and any(
                isinstance(item, (cst.Import, cst.ImportFrom)) for item in stmt.body
            ):
                insert_idx = i + 1
        return insert_idx

    @staticmethod
    def _is_docstring(stmt: cst.CSTNode) -> bool:
        return (
            isinstance(stmt, cst.SimpleStatementLine)
            and len(stmt.body) == 1
            and isinstance(stmt.body[0], cst.Expr)
            and isinstance(stmt.body[0].value, (cst.SimpleString, cst.ConcatenatedString))
        )

    def _is_anchored(self, stmt: cst.CSTNode) -> bool:
        """True when stmt, or a definition nested in it, carries an anchor decorator."""
        finder = _DecoratorFinder(self.anchor_names)
        stmt.visit(finder)
        return finder.found


class _DecoratorFinder(cst.CSTVisitor):
    def __init__(self, names: Iterable[str]) -> None:
        self.names = frozenset(names)
        self.found = False

    def visit_Decorator(self, node: cst.Decorator) -> bool:
        if _decorator_name(node) in self.names:
            self.found = True
        return False


class AddBaseClassTransformer(cst.CSTTransformer):
    """Transformer to add a base to classes decorated with one of attribute_names."""

    def __init__(self, context: dict) -> None:
        self.class_name = context["class_name"]
        self.base = context["base"]
        self.first = bool(context.get("first", False))
        self.attribute_names = frozenset(context.get("attribute_names", ()))

    def leave_ClassDef(
        self, original_node: cst.ClassDef, updated_node: cst.ClassDef
    ) -> cst.ClassDef:
        if original_node.name.value != self.class_name:
            return updated_node
        if not any(_decorator_name(d) in self.attribute_names for d in original_node.decorators):
            return updated_node
        code_for = cst.Module(body=[]).code_for_node
        if any(code_for(arg.value) == self.base for arg in updated_node.bases):
            return updated_node

        new_base = cst.Arg(value=cst.parse_expression(self.base))
        bases = list(updated_node.bases)
        # Positional bases always precede keywords such as metaclass=...
        bases.insert(0 if self.first else len(bases), new_base)
        return updated_node.with_changes(bases=bases)
