"""Type Resolver: find the raw value type of an enumeration."""

from typing import Optional

from enum_raw_values.domain.config import ExpansionOptions
from enum_raw_values.domain.declarations import AttributeInvocation, EnumDeclaration
from enum_raw_values.domain.entities import (
    Diagnostic,
    FixIt,
    Outcome,
    RawValueKind,
    RawValueType,
    TransformationPlan,
)
from enum_raw_values.domain.messages import Message, MessageKind
from enum_raw_values.domain.syntax import Fragment, Placeholder

RAW_VALUE_TYPE_PLACEHOLDER = "RawValueType"


class RawValueTypeResolver:
    """
    Resolution order:

    1. explicit subscript on the decorator: `@enum_raw_values[int](...)`
    2. first base that is not an enumeration: `class Planet(int, Enum)`
    3. type implied by the enumeration base: `class Planet(IntEnum)`
    """

    def __init__(self, options: ExpansionOptions) -> None:
        self._options = options

    def resolve(
        self, attribute: AttributeInvocation, enumeration: EnumDeclaration
    ) -> Outcome[RawValueType]:
        expression = self._find_type_expression(attribute, enumeration)
        if expression is not None:
            return Outcome(RawValueType(expression, self.kind_of(expression)))
        diagnostic = Diagnostic(
            Message.missing_raw_value_type(),
            attribute.name,
            (
                self._generic_placeholder_fix(attribute),
                self._enum_placeholder_fix(enumeration),
            ),
        )
        return Outcome(None, (diagnostic,))

    def kind_of(self, expression: Fragment) -> RawValueKind:
        type_name = "".join(expression.trimmed.split())
        if type_name in self._options.string_types:
            return RawValueKind.STRING
        if self._options.is_numeric_type(type_name):
            return RawValueKind.NUMERIC
        return RawValueKind.OTHER

    @staticmethod
    def _find_type_expression(
        attribute: AttributeInvocation, enumeration: EnumDeclaration
    ) -> Optional[Fragment]:
        if attribute.type_argument is not None:
            return attribute.type_argument
        for base in enumeration.bases:
            if not base.is_enumeration:
                return base.expression
        for base in enumeration.bases:
            if base.implied_raw_type:
                return Fragment(base.implied_raw_type)
        return None

    @staticmethod
    def _generic_placeholder_fix(attribute: AttributeInvocation) -> FixIt:
        placeholder = Placeholder.expression(RAW_VALUE_TYPE_PLACEHOLDER)
        return FixIt.replace(
            Message.fix(MessageKind.INSERT_GENERIC_TYPE_PLACEHOLDER),
            attribute.name,
            Fragment(f"{attribute.name.trimmed}[{placeholder.code}]"),
        )

    @staticmethod
    def _enum_placeholder_fix(enumeration: EnumDeclaration) -> FixIt:
        placeholder = Placeholder.expression(RAW_VALUE_TYPE_PLACEHOLDER)
        return FixIt(
            Message.fix(MessageKind.INSERT_ENUM_TYPE_PLACEHOLDER),
            (),
            (TransformationPlan.add_base_class(enumeration.name, placeholder.code, first=True),),
        )
