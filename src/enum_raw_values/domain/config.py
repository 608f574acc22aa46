"""Expansion options and the loader that builds them from [tool.enum-raw-values]."""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTE_NAMES = ("enum_raw_values",)
DEFAULT_ENUM_BASES = ("Enum", "IntEnum", "StrEnum", "Flag", "IntFlag", "ReprEnum")
DEFAULT_STRING_TYPES = ("str",)
NUMERIC_TYPE_PATTERN = re.compile(
    r"^(?:int|float|(?:numpy|np)\.(?:u?int(?:8|16|32|64)|float(?:16|32|64)))$"
)
DEFAULT_IMPLIED_RAW_TYPES = {
    "IntEnum": "int",
    "IntFlag": "int",
    "StrEnum": "str",
}


@dataclass(frozen=True)
class ExpansionOptions:
    """Immutable knobs shared by every pipeline stage."""

    attribute_names: frozenset[str] = frozenset(DEFAULT_ATTRIBUTE_NAMES)
    enum_bases: frozenset[str] = frozenset(DEFAULT_ENUM_BASES)
    string_types: frozenset[str] = frozenset(DEFAULT_STRING_TYPES)
    numeric_types: frozenset[str] = frozenset()
    implied_raw_types: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_IMPLIED_RAW_TYPES), hash=False
    )
    check_duplicates: bool = True
    line_length: int = 88
    enum_base: str = "Enum"

    def is_numeric_type(self, type_name: str) -> bool:
        return type_name in self.numeric_types or NUMERIC_TYPE_PATTERN.match(type_name) is not None


class ConfigurationLoader:
    """
    Immutable configuration for enum-raw-values.

    Created by Infrastructure from the [tool.enum-raw-values] table; the domain
    never reads the filesystem. Unknown keys are ignored and values of the wrong
    type fall back to defaults with a warning.
    """

    def __init__(self, config_dict: dict[str, object]) -> None:
        self._config = config_dict
        self._options = ExpansionOptions(
            attribute_names=self._get_names("attribute_names", DEFAULT_ATTRIBUTE_NAMES),
            enum_bases=self._get_names("enum_bases", DEFAULT_ENUM_BASES),
            string_types=self._get_names("string_types", DEFAULT_STRING_TYPES),
            numeric_types=self._get_names("numeric_types", ()),
            check_duplicates=self._get_typed("check_duplicates", bool, True),
            line_length=self._get_typed("line_length", int, 88),
            enum_base=self._get_typed("enum_base", str, "Enum"),
        )

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def options(self) -> ExpansionOptions:
        return self._options

    def _get_names(self, key: str, default: tuple[str, ...]) -> frozenset[str]:
        raw = self._config.get(key)
        if raw is None:
            return frozenset(default)
        if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
            logger.warning("Configuration Warning: '%s' must be a list of strings; using defaults.", key)
            return frozenset(default)
        return frozenset(raw)

    def _get_typed(self, key: str, expected: type, default):
        raw = self._config.get(key)
        if raw is None:
            return default
        # bool is an int subclass; do not accept it where a number is expected.
        if not isinstance(raw, expected) or (expected is int and isinstance(raw, bool)):
            logger.warning(
                "Configuration Warning: '%s' must be of type %s; using %r.",
                key,
                expected.__name__,
                default,
            )
            return default
        return raw
