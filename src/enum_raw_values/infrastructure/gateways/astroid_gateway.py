"""Astroid front end: reads decorated declarations into domain fragments."""

import logging
import re
from typing import Optional

import astroid  # type: ignore[import-untyped]
from astroid import nodes
from astroid.exceptions import AstroidBuildingError, AstroidError

from enum_raw_values.domain.config import ExpansionOptions
from enum_raw_values.domain.declarations import (
    AttributeInvocation,
    ClassDeclaration,
    CompanionName,
    Declaration,
    EnumCase,
    EnumDeclaration,
    FunctionDeclaration,
    InheritedType,
)
from enum_raw_values.domain.entities import Invocation, ModuleScan
from enum_raw_values.domain.errors import SourceParseError
from enum_raw_values.domain.protocols import DeclarationReaderProtocol
from enum_raw_values.domain.syntax import Fragment, SourceText

logger = logging.getLogger(__name__)

_LOOSE_NODES = (nodes.Compare, nodes.BoolOp, nodes.IfExp, nodes.Lambda, nodes.NamedExpr)
_FUNCTION_KEYWORD = re.compile(r"(?:async\s+)?def\b")


class AstroidDeclarationGateway(DeclarationReaderProtocol):
    """Finds `@enum_raw_values` usages with astroid and converts them to domain values."""

    def __init__(self, options: Optional[ExpansionOptions] = None) -> None:
        self._options = options or ExpansionOptions()

    def parse(self, source: str, path: Optional[str] = None) -> nodes.Module:
        try:
            return astroid.parse(source, path=path)
        except AstroidBuildingError as exc:
            raise SourceParseError(path or "<string>", str(exc)) from exc

    def scan_source(self, source: SourceText, path: Optional[str] = None) -> ModuleScan:
        return self.scan_module(self.parse(source.text, path), source)

    def scan_module(self, module: nodes.Module, source: SourceText) -> ModuleScan:
        invocations: list[Invocation] = []
        for node in module.nodes_of_class((nodes.ClassDef, nodes.FunctionDef)):
            invocations.extend(self.read_invocations(node, source))
        return ModuleScan(tuple(invocations))

    def read_invocations(
        self, node: nodes.ClassDef | nodes.FunctionDef, source: SourceText
    ) -> tuple[Invocation, ...]:
        """One Invocation per matching decorator on node."""
        if not node.decorators:
            return ()
        found = []
        for decorator in node.decorators.nodes:
            attribute = self.read_attribute(decorator, source)
            if attribute is not None:
                found.append(self._invocation(node, attribute, source))
        return tuple(found)

    def read_attribute(
        self, decorator: nodes.NodeNG, source: SourceText
    ) -> Optional[AttributeInvocation]:
        """Parse `name`, `name[T]`, `name(...)` or `name[T](...)`; None if not ours."""
        call = decorator if isinstance(decorator, nodes.Call) else None
        callee = call.func if call is not None else decorator
        subscript = callee if isinstance(callee, nodes.Subscript) else None
        name_node = subscript.value if subscript is not None else callee
        if not self._is_attribute_name(name_node):
            return None

        subscript_fragment = type_argument = None
        if subscript is not None:
            subscript_fragment = self._fragment(subscript.slice, source)
            first = subscript.slice
            if isinstance(first, nodes.Tuple) and first.elts:
                first = first.elts[0]
            type_argument = self._fragment(first, source)

        arguments: tuple[Fragment, ...] = ()
        if call is not None:
            if call.keywords or any(isinstance(arg, nodes.Starred) for arg in call.args):
                logger.warning(
                    "Line %s: keyword and starred decorator arguments are ignored",
                    decorator.lineno,
                )
            arguments = tuple(
                self._fragment(arg, source)
                for arg in call.args
                if not isinstance(arg, nodes.Starred)
            )

        return AttributeInvocation(
            name=self._fragment(name_node, source),
            expression=self._fragment(decorator, source),
            line=source.lines_fragment(decorator.lineno, decorator.end_lineno),
            subscript=subscript_fragment,
            type_argument=type_argument,
            arguments=arguments,
            indent=source.indentation(decorator.lineno),
        )

    def read_declaration(
        self, node: nodes.ClassDef | nodes.FunctionDef, source: SourceText
    ) -> Declaration:
        keyword = self._keyword(node, source)
        if isinstance(node, nodes.FunctionDef):
            return FunctionDeclaration(node.name, keyword)
        bases = tuple(self._inherited_type(base, source) for base in node.bases)
        if not any(base.is_enumeration for base in bases):
            return ClassDeclaration(node.name, keyword, bases)
        return EnumDeclaration(
            name=node.name,
            keyword=keyword,
            bases=bases,
            cases=self._cases(node, source),
            auto_call=self._auto_call(node),
        )

    def _invocation(
        self,
        node: nodes.ClassDef | nodes.FunctionDef,
        attribute: AttributeInvocation,
        source: SourceText,
    ) -> Invocation:
        target_type_name, anchor_node = self._target(node)
        return Invocation(
            attribute=attribute,
            declaration=self.read_declaration(node, source),
            target_type_name=target_type_name,
            anchor=source.lines_fragment(self._first_line(anchor_node), anchor_node.end_lineno),
            indent=source.indentation(anchor_node.lineno),
            existing_companion=self._existing_companion(
                anchor_node, CompanionName.for_target(target_type_name), source
            ),
        )

    def _is_attribute_name(self, node: nodes.NodeNG) -> bool:
        if isinstance(node, nodes.Name):
            return node.name in self._options.attribute_names
        if isinstance(node, nodes.Attribute):
            return node.attrname in self._options.attribute_names
        return False

    @staticmethod
    def _fragment(node: nodes.NodeNG, source: SourceText) -> Fragment:
        loose = isinstance(node, _LOOSE_NODES) or (
            isinstance(node, nodes.UnaryOp) and node.op == "not"
        )
        return source.node_fragment(
            node.lineno, node.col_offset, node.end_lineno, node.end_col_offset, loose
        )

    @staticmethod
    def _first_line(node: nodes.ClassDef | nodes.FunctionDef) -> int:
        if node.decorators:
            return node.decorators.lineno
        return node.lineno

    @staticmethod
    def _target(node: nodes.ClassDef | nodes.FunctionDef) -> tuple[str, nodes.NodeNG]:
        """Dotted name through enclosing classes, and the outermost such class."""
        names = [node.name]
        anchor = node
        frame = node.parent.frame()
        while isinstance(frame, nodes.ClassDef):
            names.insert(0, frame.name)
            anchor = frame
            frame = frame.parent.frame()
        return ".".join(names), anchor

    def _existing_companion(
        self, anchor: nodes.NodeNG, companion_name: str, source: SourceText
    ) -> Optional[Fragment]:
        sibling = anchor.next_sibling()
        while sibling is not None:
            if isinstance(sibling, nodes.ClassDef) and sibling.name == companion_name:
                return source.lines_fragment(self._first_line(sibling), sibling.end_lineno)
            sibling = sibling.next_sibling()
        return None

    @staticmethod
    def _keyword(node: nodes.ClassDef | nodes.FunctionDef, source: SourceText) -> Fragment:
        start = source.offset(node.lineno, node.col_offset)
        if isinstance(node, nodes.FunctionDef):
            match = _FUNCTION_KEYWORD.match(source.text, start)
            length = len(match.group(0)) if match else len("def")
        else:
            length = len("class")
        return source.fragment(start, start + length)

    def _inherited_type(self, base: nodes.NodeNG, source: SourceText) -> InheritedType:
        name = self._simple_name(base)
        is_enumeration = name in self._options.enum_bases if name else False
        implied = self._options.implied_raw_types.get(name) if name else None
        if not is_enumeration:
            enum_class = self._inferred_enum_class(base)
            if enum_class is not None:
                is_enumeration = True
                implied = implied or self._implied_from_ancestors(enum_class)
        return InheritedType(self._fragment(base, source), is_enumeration, implied)

    @staticmethod
    def _simple_name(node: nodes.NodeNG) -> Optional[str]:
        if isinstance(node, nodes.Name):
            return node.name
        if isinstance(node, nodes.Attribute):
            return node.attrname
        return None

    @staticmethod
    def _inferred_enum_class(base: nodes.NodeNG) -> Optional[nodes.ClassDef]:
        try:
            for inferred in base.infer():
                if isinstance(inferred, nodes.ClassDef) and inferred.is_subtype_of("enum.Enum"):
                    return inferred
        except AstroidError:
            return None
        return None

    def _implied_from_ancestors(self, enum_class: nodes.ClassDef) -> Optional[str]:
        for klass in (enum_class, *enum_class.ancestors()):
            if klass.qname().startswith("enum.") and klass.name in self._options.implied_raw_types:
                return self._options.implied_raw_types[klass.name]
        return None

    def _cases(self, node: nodes.ClassDef, source: SourceText) -> tuple[EnumCase, ...]:
        """Public single-target assignments, annotated or not, in the class body, in order."""
        cases = []
        for statement in node.body:
            if isinstance(statement, nodes.Assign) and len(statement.targets) == 1:
                target = statement.targets[0]
            elif isinstance(statement, nodes.AnnAssign) and statement.value is not None:
                target = statement.target
            else:
                continue
            if not isinstance(target, nodes.AssignName) or target.name.startswith("_"):
                continue
            value = statement.value
            if isinstance(value, nodes.Lambda) or self._is_call_to(value, "nonmember"):
                continue
            fragment = self._fragment(value, source)
            is_auto = self._is_call_to(value, "auto") and not value.args and not value.keywords
            cases.append(
                EnumCase(
                    name=target.name,
                    value=fragment,
                    raw_value=None if is_auto else fragment,
                    integer_value=self._integer_literal(value),
                )
            )
        return tuple(cases)

    @staticmethod
    def _is_call_to(node: nodes.NodeNG, name: str) -> bool:
        if not isinstance(node, nodes.Call):
            return False
        func = node.func
        if isinstance(func, nodes.Name):
            return func.name == name
        return isinstance(func, nodes.Attribute) and func.attrname == name

    @staticmethod
    def _integer_literal(node: nodes.NodeNG) -> Optional[int]:
        sign = 1
        if isinstance(node, nodes.UnaryOp) and node.op in ("-", "+"):
            sign = -1 if node.op == "-" else 1
            node = node.operand
        if isinstance(node, nodes.Const) and type(node.value) is int:
            return sign * node.value
        return None

    @staticmethod
    def _auto_call(node: nodes.ClassDef) -> str:
        module_names = node.root().locals
        if "auto" not in module_names and "enum" in module_names:
            return "enum.auto()"
        return "auto()"

