"""Shared fixtures: real gateways over in-memory sources.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/ on
the import path.
"""

import textwrap
from typing import Callable

import pytest

from enum_raw_values.domain.config import ExpansionOptions
from enum_raw_values.domain.entities import Invocation
from enum_raw_values.domain.syntax import SourceText
from enum_raw_values.infrastructure.gateways.astroid_gateway import AstroidDeclarationGateway
from enum_raw_values.infrastructure.gateways.libcst_editor_gateway import LibCSTEditorGateway
from enum_raw_values.use_cases.expand import EnumRawValuesExpander
from enum_raw_values.use_cases.expand_module import ExpandModuleUseCase

ENUM_HEADER = "from enum import Enum, IntEnum, StrEnum, auto\n\nfrom enum_raw_values.runtime import enum_raw_values\n\n"


@pytest.fixture
def options() -> ExpansionOptions:
    return ExpansionOptions()


@pytest.fixture
def reader(options: ExpansionOptions) -> AstroidDeclarationGateway:
    return AstroidDeclarationGateway(options)


@pytest.fixture
def expander(options: ExpansionOptions) -> EnumRawValuesExpander:
    return EnumRawValuesExpander(options)


@pytest.fixture
def module_expander(
    reader: AstroidDeclarationGateway, expander: EnumRawValuesExpander, options: ExpansionOptions
) -> ExpandModuleUseCase:
    return ExpandModuleUseCase(reader, expander, LibCSTEditorGateway(options.attribute_names))


@pytest.fixture
def invocations(reader: AstroidDeclarationGateway) -> Callable[[str], tuple[Invocation, ...]]:
    """Parse a dedented snippet (enum imports prepended) and return its invocations."""

    def scan(snippet: str) -> tuple[Invocation, ...]:
        source = SourceText(ENUM_HEADER + textwrap.dedent(snippet))
        return reader.scan_source(source).invocations

    return scan


@pytest.fixture
def invocation(invocations: Callable[[str], tuple[Invocation, ...]]) -> Callable[[str], Invocation]:
    """The single invocation of a snippet."""

    def first(snippet: str) -> Invocation:
        found = invocations(snippet)
        assert len(found) == 1, found
        return found[0]

    return first
