"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.

    [tool.pylint.main]
    load-plugins = ["enum_raw_values.infrastructure.checker"]
"""

from pylint.lint import PyLinter

from enum_raw_values.infrastructure.di.container import EnumRawValuesContainer
from enum_raw_values.use_cases.checks.raw_values import EnumRawValuesChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = EnumRawValuesContainer.get_instance()
    linter.register_checker(
        EnumRawValuesChecker(
            linter,
            reader=container.get_declaration_reader(),
            expander=container.get_expander(),
        )
    )
