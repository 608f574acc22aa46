"""Declarations the expansion is attached to, modelled as a closed sum type."""

from dataclasses import dataclass
from typing import Optional, Union

from enum_raw_values.domain.syntax import Fragment


@dataclass(frozen=True)
class AttributeInvocation:
    """The parsed `@enum_raw_values[Type](arg, ...)` decorator."""

    name: Fragment
    expression: Fragment
    line: Fragment
    subscript: Optional[Fragment] = None
    type_argument: Optional[Fragment] = None
    arguments: tuple[Fragment, ...] = ()
    indent: str = ""


@dataclass(frozen=True)
class EnumCase:
    """
    One enumeration member in declaration order.

    raw_value is None when the member is assigned `auto()`; otherwise it is the
    inline value as written. integer_value is set for plain integer literals.
    """

    name: str
    value: Fragment
    raw_value: Optional[Fragment] = None
    integer_value: Optional[int] = None


@dataclass(frozen=True)
class InheritedType:
    """A class base, tagged by whether it is itself an enumeration base."""

    expression: Fragment
    is_enumeration: bool = False
    implied_raw_type: Optional[str] = None


@dataclass(frozen=True)
class EnumDeclaration:
    name: str
    keyword: Fragment
    bases: tuple[InheritedType, ...] = ()
    cases: tuple[EnumCase, ...] = ()
    auto_call: str = "auto()"

    @property
    def has_inline_raw_values(self) -> bool:
        return any(case.raw_value is not None for case in self.cases)


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    keyword: Fragment
    bases: tuple[InheritedType, ...] = ()


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    keyword: Fragment


Declaration = Union[EnumDeclaration, ClassDeclaration, FunctionDeclaration]


class CompanionName:
    """Name of the generated companion class for a (possibly dotted) target."""

    @staticmethod
    def for_target(target_type_name: str) -> str:
        return f"_{target_type_name.replace('.', '_')}RawRepresentable"
