"""Tests for ArgumentReconciler and AttributeRenderer."""

from typing import Callable

import pytest

from enum_raw_values.domain.config import ExpansionOptions
from enum_raw_values.domain.declarations import AttributeInvocation
from enum_raw_values.domain.entities import Invocation, Outcome, Pairing, TransformationPlan
from enum_raw_values.domain.messages import MessageKind, Severity
from enum_raw_values.domain.syntax import Fragment, SourceText
from enum_raw_values.use_cases.reconcile_arguments import ArgumentReconciler, AttributeRenderer
from enum_raw_values.use_cases.resolve_raw_value_type import RawValueTypeResolver


@pytest.fixture
def reconcile(
    invocation: Callable[[str], Invocation], options: ExpansionOptions
) -> Callable[[str], Outcome[Pairing]]:
    def run(snippet: str) -> Outcome[Pairing]:
        found = invocation(snippet)
        raw_type = RawValueTypeResolver(options).resolve(found.attribute, found.declaration).value
        return ArgumentReconciler(options).reconcile(found.attribute, found.declaration, raw_type)

    return run


class TestBalanced:
    def test_pairs_in_declaration_order(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values(1, 2, earth_index, 4, 5)
            class Planet(int, Enum):
                mercury = auto()
                venus = auto()
                earth = auto()
                mars = auto()
                jupiter = auto()
            """
        )
        assert outcome.diagnostics == ()
        assert [(case.name, value.code) for case, value in outcome.value] == [
            ("mercury", "1"),
            ("venus", "2"),
            ("earth", "earth_index"),
            ("mars", "4"),
            ("jupiter", "5"),
        ]

    def test_empty_enum_without_arguments(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values
            class Nothing(int, Enum):
                pass
            """
        )
        assert len(outcome.value) == 0
        assert outcome.diagnostics == ()

    def test_overlap_warning_offers_import_and_strip(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values("a", "B")
            class Letter(str, Enum):
                a = auto()
                b = "X"
            """
        )
        assert [value.code for _, value in outcome.value] == ['"a"', '"B"']
        (diagnostic,) = outcome.diagnostics
        assert diagnostic.message.kind is MessageKind.OVERLAPPING_RAW_VALUES
        assert diagnostic.severity is Severity.WARNING
        assert diagnostic.anchor.code == "enum_raw_values"
        imported, stripped = diagnostic.fixes
        assert [(c.old.code, c.new.code) for c in imported.changes] == [
            ('enum_raw_values("a", "B")', 'enum_raw_values("a", "X")'),
            ('"X"', "auto()"),
        ]
        assert [(c.old.code, c.new.code) for c in stripped.changes] == [('"X"', "auto()")]
        auto_import = (TransformationPlan.add_import("enum", ["auto"]),)
        assert imported.plans == auto_import
        assert stripped.plans == auto_import

    def test_qualified_auto_needs_no_import(self, reader, options: ExpansionOptions) -> None:
        source = SourceText(
            "import enum\n"
            "\n"
            "from enum_raw_values.runtime import enum_raw_values\n"
            "\n"
            '@enum_raw_values("F")\n'
            "class Mode(str, enum.Enum):\n"
            '    fast = "f"\n'
        )
        found = reader.scan_source(source).invocations[0]
        raw_type = RawValueTypeResolver(options).resolve(found.attribute, found.declaration).value
        outcome = ArgumentReconciler(options).reconcile(found.attribute, found.declaration, raw_type)
        _imported, stripped = outcome.diagnostics[0].fixes
        assert [c.new.code for c in stripped.changes] == ["enum.auto()"]
        assert stripped.plans == ()

    def test_duplicate_raw_values_warn(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values(1, 2, 1)
            class Dup(int, Enum):
                a = auto()
                b = auto()
                c = auto()
            """
        )
        (diagnostic,) = outcome.diagnostics
        assert diagnostic.message.kind is MessageKind.DUPLICATE_RAW_VALUE
        assert "'c'" in diagnostic.message.text and "'a'" in diagnostic.message.text
        assert diagnostic.anchor.span.column == len("@enum_raw_values(1, 2, ")
        assert outcome.value is not None

    def test_duplicates_can_be_disabled(self, invocation) -> None:
        options = ExpansionOptions(check_duplicates=False)
        found = invocation(
            """
            @enum_raw_values(1, 1)
            class Dup(int, Enum):
                a = auto()
                b = auto()
            """
        )
        raw_type = RawValueTypeResolver(options).resolve(found.attribute, found.declaration).value
        outcome = ArgumentReconciler(options).reconcile(found.attribute, found.declaration, raw_type)
        assert outcome.diagnostics == ()


class TestMismatch:
    def test_too_few_arguments_completes_the_tail(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values(1)
            class Three(int, Enum):
                a = auto()
                b = auto()
                c = auto()
            """
        )
        assert outcome.value is None
        (diagnostic,) = outcome.diagnostics
        assert diagnostic.message.text == (
            "Number of raw value arguments (1) must be equal to number of enum members (3)"
        )
        assert diagnostic.anchor.code == "enum_raw_values(1)"
        (fix,) = diagnostic.fixes
        assert fix.message.kind is MessageKind.COMPLETE_ARGUMENTS
        assert fix.changes[0].new.code == "enum_raw_values(1, 1, 2)"

    def test_too_many_arguments_anchor_on_first_redundant(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values("a", "b", "c")
            class Two(str, Enum):
                a = auto()
                b = auto()
            """
        )
        (diagnostic,) = outcome.diagnostics
        assert diagnostic.anchor.code == '"c"'
        (fix,) = diagnostic.fixes
        assert fix.message.kind is MessageKind.REMOVE_REDUNDANT_ARGUMENTS
        assert fix.changes[0].new.code == 'enum_raw_values("a", "b")'

    def test_arguments_on_empty_enum(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values[int](1, 2)
            class Empty(Enum):
                pass
            """
        )
        (diagnostic,) = outcome.diagnostics
        assert diagnostic.anchor.code == "enum_raw_values[int](1, 2)"
        assert diagnostic.fixes[0].changes[0].new.code == "enum_raw_values[int]"

    def test_missing_arguments_without_inline_values(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values
            class Pair(int, Enum):
                a = auto()
                b = auto()
            """
        )
        assert outcome.value is None
        (diagnostic,) = outcome.diagnostics
        assert diagnostic.severity is Severity.ERROR
        (fix,) = diagnostic.fixes
        assert fix.message.kind is MessageKind.IMPORT_RAW_VALUES
        assert [c.new.code for c in fix.changes] == ["enum_raw_values(0, 1)"]
        assert fix.plans == ()

    def test_inline_values_are_recoverable(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values
            class Numbers(int, Enum):
                a = auto()
                c = 4
                d = auto()
            """
        )
        assert [value.code for _, value in outcome.value] == ["0", "4", "5"]
        (diagnostic,) = outcome.diagnostics
        assert diagnostic.severity is Severity.REMARK
        assert [(c.old.code, c.new.code) for c in diagnostic.fixes[0].changes] == [
            ("enum_raw_values", "enum_raw_values(0, 4, 5)"),
            ("4", "auto()"),
        ]

    def test_partial_inline_values_of_other_type_are_not_recoverable(self, reconcile) -> None:
        outcome = reconcile(
            """
            @enum_raw_values[Decimal]
            class Money(Enum):
                a = Decimal("1.5")
                b = auto()
            """
        )
        assert outcome.value is None
        change = outcome.diagnostics[0].fixes[0].changes[0]
        assert change.new.code == 'enum_raw_values[Decimal](Decimal("1.5"), "<#b: Decimal#>")'


class TestImplicitRawValues:
    def test_numeric_index_restarts_at_inline_integers(
        self, invocation, options: ExpansionOptions
    ) -> None:
        found = invocation(
            """
            @enum_raw_values
            class Letters(int, Enum):
                a = auto()
                b = auto()
                c = 4
                d = auto()
                e = auto()
            """
        )
        reconciler = ArgumentReconciler(options)
        raw_type = RawValueTypeResolver(options).resolve(found.attribute, found.declaration).value
        candidates = reconciler.implicit_raw_values(found.declaration.cases, raw_type)
        assert [c.code for c in candidates] == ["0", "1", "4", "5", "6"]

    def test_strings_use_member_names(self, invocation, options: ExpansionOptions) -> None:
        found = invocation(
            """
            @enum_raw_values
            class Rocket(str, Enum):
                falcon = auto()
                starship = "ship"
            """
        )
        raw_type = RawValueTypeResolver(options).resolve(found.attribute, found.declaration).value
        candidates = ArgumentReconciler(options).implicit_raw_values(
            found.declaration.cases, raw_type
        )
        assert [c.code for c in candidates] == ['"falcon"', '"ship"']


class TestAttributeRenderer:
    def _attribute(self, indent: str = "") -> AttributeInvocation:
        name = Fragment("enum_raw_values")
        return AttributeInvocation(name=name, expression=name, line=name, indent=indent)

    def test_single_line(self) -> None:
        rendered = AttributeRenderer(88).render(self._attribute(), (Fragment("1"), Fragment("2")))
        assert rendered.code == "enum_raw_values(1, 2)"

    def test_long_argument_lists_wrap(self) -> None:
        arguments = tuple(Fragment(f'"value_{i}"') for i in range(3))
        rendered = AttributeRenderer(30).render(self._attribute("    "), arguments)
        assert rendered.code == (
            "enum_raw_values(\n"
            '        "value_0",\n'
            '        "value_1",\n'
            '        "value_2",\n'
            "    )"
        )

    def test_multiline_arguments_are_parenthesized(self) -> None:
        rendered = AttributeRenderer(88).render(self._attribute(), (Fragment("1 +\n2"),))
        assert rendered.code == "enum_raw_values(\n    (1 +\n2),\n)"
