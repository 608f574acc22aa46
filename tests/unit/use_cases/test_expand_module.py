"""Tests for ExpandModuleUseCase."""

import textwrap
from unittest.mock import MagicMock

import pytest

from enum_raw_values.domain.errors import SourceParseError
from enum_raw_values.use_cases.expand_module import ExpandModuleUseCase

PLANETS = textwrap.dedent(
    """\
    from enum import Enum, auto

    from enum_raw_values.runtime import enum_raw_values


    @enum_raw_values(1, 2)
    class Planet(int, Enum):
        mercury = auto()
        venus = auto()


    def describe(planet: Planet) -> str:
        return planet.name
    """
)


class TestExpandSource:
    def test_companion_follows_the_enum(self, module_expander: ExpandModuleUseCase) -> None:
        expansion = module_expander.expand_source(PLANETS)
        assert expansion.changed
        expanded = expansion.expanded_source
        assert expanded.index("class Planet") < expanded.index("@extension(Planet)")
        assert expanded.index("@extension(Planet)") < expanded.index("def describe")
        assert "    venus = auto()\n\n\n@extension(Planet)\n" in expanded

    def test_missing_imports_are_added_after_existing_ones(
        self, module_expander: ExpandModuleUseCase
    ) -> None:
        expanded = module_expander.expand_source(PLANETS).expanded_source
        assert (
            "from enum_raw_values.runtime import enum_raw_values\n"
            "from enum_raw_values.runtime import RawRepresentable, extension\n"
            "from typing import assert_never\n"
        ) in expanded

    def test_expansion_is_idempotent(self, module_expander: ExpandModuleUseCase) -> None:
        once = module_expander.expand_source(PLANETS).expanded_source
        twice = module_expander.expand_source(once)
        assert not twice.changed
        assert twice.expanded_source == once

    def test_changed_arguments_refresh_the_companion(
        self, module_expander: ExpandModuleUseCase
    ) -> None:
        once = module_expander.expand_source(PLANETS).expanded_source
        edited = once.replace("@enum_raw_values(1, 2)", "@enum_raw_values(10, 20)")
        refreshed = module_expander.expand_source(edited).expanded_source
        assert refreshed.count("@extension(Planet)") == 1
        assert "if raw_value == 10:" in refreshed
        assert "if raw_value == 1:" not in refreshed

    def test_strip_attribute(self, module_expander: ExpandModuleUseCase) -> None:
        expanded = module_expander.expand_source(PLANETS, strip_attribute=True).expanded_source
        assert "@enum_raw_values(1, 2)" not in expanded
        assert "@extension(Planet)" in expanded

    def test_errors_leave_the_module_unchanged(
        self, module_expander: ExpandModuleUseCase
    ) -> None:
        source = PLANETS.replace("(1, 2)", "(1, 2, 3)")
        expansion = module_expander.expand_source(source)
        assert not expansion.changed
        assert expansion.diagnostics[0].message.payload == (3, 2)

    def test_nested_enum_companion_after_outer_class(
        self, module_expander: ExpandModuleUseCase
    ) -> None:
        source = textwrap.dedent(
            """\
            from enum import Enum, auto

            from enum_raw_values.runtime import enum_raw_values


            class TISInputSource:
                @enum_raw_values[str]("layout", "method")
                class InputSourceType(Enum):
                    keyboard_layout = auto()
                    keyboard_input_method = auto()
            """
        )
        expanded = module_expander.expand_source(source).expanded_source
        assert "\n\n\n@extension(TISInputSource.InputSourceType)\n" in expanded
        assert "return TISInputSource.InputSourceType.keyboard_layout" in expanded

    def test_enum_inside_function_keeps_indentation(
        self, module_expander: ExpandModuleUseCase
    ) -> None:
        source = textwrap.dedent(
            """\
            from enum import Enum, auto

            from enum_raw_values.runtime import enum_raw_values


            def build():
                @enum_raw_values("on", "off")
                class Switch(str, Enum):
                    on = auto()
                    off = auto()
                return Switch
            """
        )
        expanded = module_expander.expand_source(source).expanded_source
        assert "        off = auto()\n\n    @extension(Switch)\n" in expanded
        assert "\n    return Switch\n" in expanded


class TestExecute:
    def test_writes_changed_files(self, module_expander: ExpandModuleUseCase) -> None:
        filesystem = MagicMock()
        filesystem.glob_python_files.return_value = ["planets.py", "empty.py"]
        filesystem.read_text.side_effect = [PLANETS, "x = 1\n"]
        telemetry = MagicMock()
        use_case = ExpandModuleUseCase(
            module_expander.reader,
            module_expander.expander,
            module_expander.editor,
            filesystem,
            telemetry,
        )

        reports = use_case.execute(["src"])

        assert [r.changed for r in reports] == [True, False]
        filesystem.write_text.assert_called_once()
        assert filesystem.write_text.call_args[0][0] == "planets.py"
        telemetry.step.assert_called_once_with("Expanded planets.py")

    def test_check_mode_does_not_write(self, module_expander: ExpandModuleUseCase) -> None:
        filesystem = MagicMock()
        filesystem.glob_python_files.return_value = ["planets.py"]
        filesystem.read_text.return_value = PLANETS
        use_case = ExpandModuleUseCase(
            module_expander.reader, module_expander.expander, module_expander.editor, filesystem
        )
        (report,) = use_case.execute(["planets.py"], write=False)
        assert report.changed
        filesystem.write_text.assert_not_called()

    def test_unparsable_files_are_reported(self, module_expander: ExpandModuleUseCase) -> None:
        filesystem = MagicMock()
        filesystem.glob_python_files.return_value = ["broken.py"]
        filesystem.read_text.return_value = "class (:\n"
        use_case = ExpandModuleUseCase(
            module_expander.reader, module_expander.expander, module_expander.editor, filesystem
        )
        (report,) = use_case.execute(["broken.py"])
        assert report.error is not None
        assert report.has_errors

    def test_requires_filesystem(self, module_expander: ExpandModuleUseCase) -> None:
        with pytest.raises(ValueError):
            module_expander.execute(["src"])

    def test_parse_errors_propagate_from_expand_source(
        self, module_expander: ExpandModuleUseCase
    ) -> None:
        with pytest.raises(SourceParseError):
            module_expander.expand_source("def (:\n", "bad.py")
