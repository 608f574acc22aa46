"""Enum raw value checks (E9701-E9703, I9704, W9705-W9706)."""

from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]
from pylint.checkers import BaseChecker

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from enum_raw_values.domain.entities import Diagnostic
from enum_raw_values.domain.messages import MessageCatalog
from enum_raw_values.domain.syntax import SourceText
from enum_raw_values.infrastructure.gateways.astroid_gateway import AstroidDeclarationGateway
from enum_raw_values.use_cases.expand import EnumRawValuesExpander


class EnumRawValuesChecker(BaseChecker):
    """Reports @enum_raw_values diagnostics while pylint walks a module."""

    name: str = "enum-raw-values"
    msgs = MessageCatalog.pylint_msgs()

    def __init__(
        self,
        linter: "PyLinter",
        reader: Optional[AstroidDeclarationGateway] = None,
        expander: Optional[EnumRawValuesExpander] = None,
    ) -> None:
        super().__init__(linter)
        self._expander = expander or EnumRawValuesExpander()
        self._reader = reader or AstroidDeclarationGateway(self._expander.options)
        self._source: Optional[SourceText] = None

    def visit_module(self, node: astroid.nodes.Module) -> None:
        """Keep the module text; fragments are sliced from it."""
        self._source = None
        stream = node.stream()
        if stream is None:
            return
        with stream:
            self._source = SourceText(stream.read().decode("utf-8", errors="replace"))

    def visit_classdef(self, node: astroid.nodes.ClassDef) -> None:
        self._check(node)

    def visit_functiondef(self, node: astroid.nodes.FunctionDef) -> None:
        self._check(node)

    visit_asyncfunctiondef = visit_functiondef

    def _check(self, node: astroid.nodes.ClassDef | astroid.nodes.FunctionDef) -> None:
        if self._source is None or not node.decorators:
            return
        for invocation in self._reader.read_invocations(node, self._source):
            result = self._expander.expand(
                invocation.attribute,
                invocation.declaration,
                invocation.target_type_name,
                indent=invocation.indent,
            )
            for diagnostic in result.diagnostics:
                self._report(node, diagnostic)

    def _report(self, node: astroid.nodes.NodeNG, diagnostic: Diagnostic) -> None:
        symbol = MessageCatalog.pylint_symbol(diagnostic.message)
        if symbol is None:
            return
        span = diagnostic.anchor.span
        text = diagnostic.message.text
        if diagnostic.fixes:
            text += " (fix: " + diagnostic.fixes[0].message.text.splitlines()[0] + ")"
        self.add_message(
            symbol,
            line=span.line if span else None,
            node=node,
            args=(text,),
            col_offset=span.column if span else None,
            end_lineno=span.end_line if span else None,
            end_col_offset=span.end_column if span else None,
        )
