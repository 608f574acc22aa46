"""Unit tests for LibCSTEditorGateway."""

import pytest

from enum_raw_values.domain.entities import Change, TransformationPlan, TransformationType
from enum_raw_values.domain.errors import (
    InvalidEditError,
    OverlappingChangesError,
    StaleChangeError,
)
from enum_raw_values.domain.syntax import Fragment, SourceText
from enum_raw_values.infrastructure.gateways.libcst_editor_gateway import LibCSTEditorGateway

SOURCE = "alpha = 1\nbeta = 2\n"


def _change(text: SourceText, start: int, end: int, new: str) -> Change:
    return Change(text.fragment(start, end), Fragment(new))


class TestApply:
    def test_changes_are_applied_in_offset_order(self) -> None:
        text = SourceText(SOURCE)
        changes = [_change(text, 17, 18, "20"), _change(text, 0, 5, "gamma")]
        assert LibCSTEditorGateway().apply(SOURCE, changes) == "gamma = 1\nbeta = 20\n"

    def test_insertions_at_one_offset_keep_their_order(self) -> None:
        text = SourceText(SOURCE)
        changes = [
            Change(text.insertion_point(10), Fragment("x = 0\n")),
            Change(text.insertion_point(10), Fragment("y = 0\n")),
        ]
        assert LibCSTEditorGateway().apply(SOURCE, changes) == (
            "alpha = 1\nx = 0\ny = 0\nbeta = 2\n"
        )

    def test_stale_change_is_rejected(self) -> None:
        stale = Change(Fragment("omega", SourceText(SOURCE).span(0, 5)), Fragment("x"))
        with pytest.raises(StaleChangeError):
            LibCSTEditorGateway().apply(SOURCE, [stale])

    def test_overlapping_changes_are_rejected(self) -> None:
        text = SourceText(SOURCE)
        with pytest.raises(OverlappingChangesError):
            LibCSTEditorGateway().apply(
                SOURCE, [_change(text, 0, 7, "a"), _change(text, 5, 9, "b")]
            )

    def test_edit_that_breaks_the_module_is_rejected(self) -> None:
        text = SourceText(SOURCE)
        with pytest.raises(InvalidEditError):
            LibCSTEditorGateway().apply(SOURCE, [_change(text, 6, 7, "(")])

    def test_no_changes_round_trips(self) -> None:
        source = "# comment\r\nx = (1,\r\n     2)\r\n"
        assert LibCSTEditorGateway().apply(source, []) == source


class TestPlans:
    def test_import_and_base_plans_run_after_changes(self) -> None:
        source = (
            "from enum_raw_values.runtime import enum_raw_values\n"
            "\n"
            "@enum_raw_values(1)\n"
            "class Point:\n"
            "    x = 10\n"
        )
        text = SourceText(source)
        start = source.index("10")
        plans = [
            TransformationPlan.add_base_class("Point", "Enum"),
            TransformationPlan.add_import("enum", ["Enum"]),
        ]
        result = LibCSTEditorGateway().apply(source, [_change(text, start, start + 2, "1")], plans)
        assert result == (
            "from enum_raw_values.runtime import enum_raw_values\n"
            "from enum import Enum\n"
            "\n"
            "@enum_raw_values(1)\n"
            "class Point(Enum):\n"
            "    x = 1\n"
        )

    def test_configured_attribute_names_select_the_class(self) -> None:
        source = "@raw\nclass Point:\n    x = 1\n\n@other\nclass Point:\n    x = 1\n"
        plan = TransformationPlan.add_base_class("Point", "Enum")
        result = LibCSTEditorGateway({"raw"}).apply(source, [], [plan])
        assert result == "@raw\nclass Point(Enum):\n    x = 1\n\n@other\nclass Point:\n    x = 1\n"

    def test_unknown_plan_type_raises(self) -> None:
        plan = TransformationPlan(TransformationType.ADD_IMPORT, {})
        object.__setattr__(plan, "transformation_type", "rename")
        with pytest.raises(ValueError, match="Unknown transformation type"):
            LibCSTEditorGateway().apply("x = 1\n", [], [plan])
