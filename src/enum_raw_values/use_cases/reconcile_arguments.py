"""Argument/Variant Reconciler: pair decorator arguments with enum members."""

from enum_raw_values.domain.config import ExpansionOptions
from enum_raw_values.domain.declarations import AttributeInvocation, EnumCase, EnumDeclaration
from enum_raw_values.domain.entities import (
    Change,
    Diagnostic,
    FixIt,
    Outcome,
    Pairing,
    RawValueKind,
    RawValueType,
    TransformationPlan,
)
from enum_raw_values.domain.messages import Message, MessageKind
from enum_raw_values.domain.syntax import Fragment, Placeholder


class AttributeRenderer:
    """Renders a decorator expression with a new argument list."""

    def __init__(self, line_length: int) -> None:
        self._line_length = line_length

    def render(self, attribute: AttributeInvocation, arguments: tuple[Fragment, ...]) -> Fragment:
        head = attribute.name.trimmed
        if attribute.subscript is not None:
            head += f"[{attribute.subscript.trimmed}]"
        if not arguments:
            return Fragment(head)
        values = [argument.as_value() for argument in arguments]
        single = f"{head}({', '.join(values)})"
        # +1 for the "@"
        if "\n" not in single and len(attribute.indent) + 1 + len(single) <= self._line_length:
            return Fragment(single)
        inner = attribute.indent + "    "
        body = "".join(f"{inner}{value},\n" for value in values)
        return Fragment(f"{head}(\n{body}{attribute.indent})")


class ArgumentReconciler:
    """
    Compares A supplied arguments with E enum members.

    A == E is balanced (an overlap warning is added when members also carry
    inline values). A == 0 with inline values is recoverable. Any other
    mismatch is an error whose fix rebuilds the argument list from the
    implicit raw value candidates.
    """

    def __init__(self, options: ExpansionOptions) -> None:
        self._options = options
        self._renderer = AttributeRenderer(options.line_length)

    def reconcile(
        self,
        attribute: AttributeInvocation,
        enumeration: EnumDeclaration,
        raw_type: RawValueType,
    ) -> Outcome[Pairing]:
        arguments = attribute.arguments
        cases = enumeration.cases
        supplied, expected = len(arguments), len(cases)

        if supplied == expected:
            pairing = Pairing.zip(cases, arguments)
            diagnostics = []
            if supplied > 0 and enumeration.has_inline_raw_values:
                diagnostics.append(self._overlap_warning(attribute, enumeration, raw_type))
            diagnostics.extend(self.find_duplicates(attribute, pairing))
            return Outcome(pairing, tuple(diagnostics))

        if supplied == 0:
            return self._reconcile_missing_arguments(attribute, enumeration, raw_type)

        message = Message.unequal_argument_number(supplied, expected)
        if supplied < expected:
            fix = FixIt(
                Message.fix(MessageKind.COMPLETE_ARGUMENTS),
                (self._attribute_change(attribute, enumeration, raw_type, overwrite=False),),
            )
            return Outcome(None, (Diagnostic(message, attribute.expression, (fix,)),))

        fix = FixIt(
            Message.fix(MessageKind.REMOVE_REDUNDANT_ARGUMENTS),
            (self._attribute_change(attribute, enumeration, raw_type, overwrite=False),),
        )
        anchor = arguments[expected] if expected else attribute.expression
        return Outcome(None, (Diagnostic(message, anchor, (fix,)),))

    def implicit_raw_values(
        self, cases: tuple[EnumCase, ...], raw_type: RawValueType
    ) -> tuple[Fragment, ...]:
        """One candidate per member: its inline value, else a value derived from the type."""
        candidates = []
        index = 0
        for case in cases:
            if case.raw_value is not None:
                if raw_type.kind is RawValueKind.NUMERIC and case.integer_value is not None:
                    index = case.integer_value
                candidates.append(case.raw_value)
            elif raw_type.kind is RawValueKind.STRING:
                candidates.append(Fragment(f'"{case.name}"'))
            elif raw_type.kind is RawValueKind.NUMERIC:
                candidates.append(Fragment(str(index)))
            else:
                candidates.append(
                    Placeholder.expression(f"{case.name}: {raw_type.expression.trimmed}")
                )
            index += 1
        return tuple(candidates)

    def rebuilt_arguments(
        self,
        attribute: AttributeInvocation,
        enumeration: EnumDeclaration,
        raw_type: RawValueType,
        overwrite: bool,
    ) -> tuple[Fragment, ...]:
        """
        Exactly one argument per member.

        Without overwrite existing arguments win over candidates; with overwrite
        a member's inline value wins over the existing argument.
        """
        candidates = self.implicit_raw_values(enumeration.cases, raw_type)
        existing = attribute.arguments
        rebuilt = []
        for position, case in enumerate(enumeration.cases):
            keep_existing = not overwrite or case.raw_value is None
            if keep_existing and position < len(existing):
                rebuilt.append(existing[position])
            else:
                rebuilt.append(candidates[position])
        return tuple(rebuilt)

    def find_duplicates(
        self, attribute: AttributeInvocation, pairing: Pairing
    ) -> tuple[Diagnostic, ...]:
        """Warn on raw value expressions that repeat an earlier one token for token."""
        if not self._options.check_duplicates:
            return ()
        first_seen: dict[str, str] = {}
        diagnostics = []
        for case, expression in pairing:
            key = expression.trimmed
            if key not in first_seen:
                first_seen[key] = case.name
                continue
            anchor = expression if expression.span is not None else attribute.name
            diagnostics.append(
                Diagnostic(Message.duplicate_raw_value(key, case.name, first_seen[key]), anchor)
            )
        return tuple(diagnostics)

    def _reconcile_missing_arguments(
        self,
        attribute: AttributeInvocation,
        enumeration: EnumDeclaration,
        raw_type: RawValueType,
    ) -> Outcome[Pairing]:
        cases = enumeration.cases
        recoverable = enumeration.has_inline_raw_values and (
            raw_type.kind is not RawValueKind.OTHER
            or all(case.raw_value is not None for case in cases)
        )
        diagnostic = Diagnostic(
            Message.unequal_argument_number(0, len(cases), recoverable=recoverable),
            attribute.expression,
            (self._import_fix(attribute, enumeration, raw_type),),
        )
        if not recoverable:
            return Outcome(None, (diagnostic,))
        pairing = Pairing.zip(cases, self.implicit_raw_values(cases, raw_type))
        return Outcome(pairing, (diagnostic, *self.find_duplicates(attribute, pairing)))

    def _overlap_warning(
        self,
        attribute: AttributeInvocation,
        enumeration: EnumDeclaration,
        raw_type: RawValueType,
    ) -> Diagnostic:
        strip = FixIt(
            Message.fix(MessageKind.REMOVE_RAW_VALUES),
            self._strip_changes(enumeration),
            self._auto_import(enumeration),
        )
        return Diagnostic(
            Message.overlapping_raw_values(),
            attribute.name,
            (self._import_fix(attribute, enumeration, raw_type), strip),
        )

    def _import_fix(
        self,
        attribute: AttributeInvocation,
        enumeration: EnumDeclaration,
        raw_type: RawValueType,
    ) -> FixIt:
        changes = (
            self._attribute_change(attribute, enumeration, raw_type, overwrite=True),
            *self._strip_changes(enumeration),
        )
        return FixIt(
            Message.fix(MessageKind.IMPORT_RAW_VALUES), changes, self._auto_import(enumeration)
        )

    def _attribute_change(
        self,
        attribute: AttributeInvocation,
        enumeration: EnumDeclaration,
        raw_type: RawValueType,
        overwrite: bool,
    ) -> Change:
        arguments = self.rebuilt_arguments(attribute, enumeration, raw_type, overwrite)
        return Change(attribute.expression, self._renderer.render(attribute, arguments))

    @staticmethod
    def _strip_changes(enumeration: EnumDeclaration) -> tuple[Change, ...]:
        return tuple(
            Change(case.value, Fragment(enumeration.auto_call))
            for case in enumeration.cases
            if case.raw_value is not None
        )

    @staticmethod
    def _auto_import(enumeration: EnumDeclaration) -> tuple[TransformationPlan, ...]:
        """Stripped members become `auto()`, which the module may not import yet."""
        if not enumeration.has_inline_raw_values or "." in enumeration.auto_call:
            return ()
        return (TransformationPlan.add_import("enum", ["auto"]),)
