"""Unit tests for ConfigurationLoader and ExpansionOptions."""

import logging

import pytest

from enum_raw_values.domain.config import ConfigurationLoader, ExpansionOptions


class TestExpansionOptions:
    @pytest.mark.parametrize(
        "type_name", ["int", "float", "np.int32", "numpy.uint8", "np.float16", "numpy.float64"]
    )
    def test_numeric_types(self, type_name: str) -> None:
        assert ExpansionOptions().is_numeric_type(type_name)

    @pytest.mark.parametrize("type_name", ["str", "Decimal", "np.int128", "integer", "numpy.bool_"])
    def test_non_numeric_types(self, type_name: str) -> None:
        assert not ExpansionOptions().is_numeric_type(type_name)

    def test_extra_numeric_types(self) -> None:
        assert ExpansionOptions(numeric_types=frozenset({"Decimal"})).is_numeric_type("Decimal")


class TestConfigurationLoader:
    def test_defaults_when_empty(self) -> None:
        options = ConfigurationLoader({}).options
        assert options == ExpansionOptions()
        assert "IntEnum" in options.enum_bases

    def test_values_are_read(self) -> None:
        loader = ConfigurationLoader(
            {
                "attribute_names": ["raw_values", "enum_raw_values"],
                "string_types": ["str", "Text"],
                "numeric_types": ["Decimal"],
                "check_duplicates": False,
                "line_length": 100,
                "enum_base": "enum.Enum",
            }
        )
        options = loader.options
        assert options.attribute_names == frozenset({"raw_values", "enum_raw_values"})
        assert options.string_types == frozenset({"str", "Text"})
        assert options.is_numeric_type("Decimal")
        assert options.check_duplicates is False
        assert options.line_length == 100
        assert options.enum_base == "enum.Enum"
        assert loader.config["line_length"] == 100

    def test_wrong_types_fall_back_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            options = ConfigurationLoader(
                {"attribute_names": "enum_raw_values", "line_length": True}
            ).options
        assert options.attribute_names == frozenset({"enum_raw_values"})
        assert options.line_length == 88
        assert "attribute_names" in caplog.text
        assert "line_length" in caplog.text
