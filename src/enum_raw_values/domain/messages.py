"""Diagnostic and fix message catalog."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

ATTRIBUTE_DISPLAY_NAME = "@enum_raw_values"

TRAILING_POSITION_WARNING = (
    "WARNING: Manually insert raw values at correct positions "
    "if new members were not appended to the end of the enum"
)


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    REMARK = "remark"


class MessageKind(Enum):
    # Diagnostics
    WRONG_DECLARATION_TYPE = "wrongDeclarationType"
    MISSING_RAW_VALUE_TYPE = "missingRawValueType"
    UNEQUAL_ARGUMENT_NUMBER = "unequalArgumentNumber"
    OVERLAPPING_RAW_VALUES = "overlappingRawValues"
    DUPLICATE_RAW_VALUE = "duplicateRawValue"
    # Fixes
    CONVERT_TO_ENUM = "convertToEnum"
    REMOVE_ATTRIBUTE = "removeAttribute"
    INSERT_GENERIC_TYPE_PLACEHOLDER = "insertGenericTypePlaceholder"
    INSERT_ENUM_TYPE_PLACEHOLDER = "insertEnumTypePlaceholder"
    IMPORT_RAW_VALUES = "importRawValues"
    COMPLETE_ARGUMENTS = "completeArguments"
    REMOVE_REDUNDANT_ARGUMENTS = "removeRedundantArguments"
    REMOVE_RAW_VALUES = "removeRawValues"


@dataclass(frozen=True)
class Message:
    """One catalog case plus its payload (e.g. the two counts of a mismatch)."""

    kind: MessageKind
    payload: tuple[object, ...] = ()
    recoverable: bool = False

    @property
    def text(self) -> str:
        return MessageCatalog.text(self)

    @property
    def severity(self) -> Severity:
        return MessageCatalog.severity(self)

    @property
    def message_id(self) -> str:
        return f"EnumRawValues.{self.kind.value}"

    @classmethod
    def wrong_declaration_type(cls, name: str) -> "Message":
        return cls(MessageKind.WRONG_DECLARATION_TYPE, (name,))

    @classmethod
    def missing_raw_value_type(cls) -> "Message":
        return cls(MessageKind.MISSING_RAW_VALUE_TYPE)

    @classmethod
    def unequal_argument_number(
        cls, supplied: int, expected: int, recoverable: bool = False
    ) -> "Message":
        return cls(MessageKind.UNEQUAL_ARGUMENT_NUMBER, (supplied, expected), recoverable)

    @classmethod
    def overlapping_raw_values(cls) -> "Message":
        return cls(MessageKind.OVERLAPPING_RAW_VALUES)

    @classmethod
    def duplicate_raw_value(cls, expression: str, case: str, first_case: str) -> "Message":
        return cls(MessageKind.DUPLICATE_RAW_VALUE, (expression, case, first_case))

    @classmethod
    def fix(cls, kind: MessageKind, *payload: object) -> "Message":
        return cls(kind, payload)


class MessageCatalog:
    """Pure mappings from a Message to its text, severity and pylint message."""

    _TEXTS: dict[MessageKind, str] = {
        MessageKind.WRONG_DECLARATION_TYPE: (
            f"{ATTRIBUTE_DISPLAY_NAME} can only be applied to an 'Enum' class, not '{{0}}'"
        ),
        MessageKind.MISSING_RAW_VALUE_TYPE: (
            f"{ATTRIBUTE_DISPLAY_NAME} requires an explicit raw value type annotation"
        ),
        MessageKind.UNEQUAL_ARGUMENT_NUMBER: (
            "Number of raw value arguments ({0}) must be equal to number of enum members ({1})"
        ),
        MessageKind.OVERLAPPING_RAW_VALUES: (
            "Enum member values are overridden by the decorator arguments"
        ),
        MessageKind.DUPLICATE_RAW_VALUE: (
            "Raw value {0} of '{1}' repeats the raw value of '{2}'; "
            "from_raw_value always returns '{2}'"
        ),
        MessageKind.CONVERT_TO_ENUM: "Make '{0}' an 'Enum' subclass",
        MessageKind.REMOVE_ATTRIBUTE: f"Remove {ATTRIBUTE_DISPLAY_NAME} from '{{0}}'",
        MessageKind.INSERT_GENERIC_TYPE_PLACEHOLDER: "Specify a type argument for the decorator",
        MessageKind.INSERT_ENUM_TYPE_PLACEHOLDER: "Specify a raw value type for the enum",
        MessageKind.IMPORT_RAW_VALUES: "Populate decorator arguments with enum raw values",
        MessageKind.COMPLETE_ARGUMENTS: (
            "Complete the decorator with missing trailing arguments from enum raw values\n"
            + TRAILING_POSITION_WARNING
        ),
        MessageKind.REMOVE_REDUNDANT_ARGUMENTS: (
            "Remove redundant trailing arguments from the decorator\n" + TRAILING_POSITION_WARNING
        ),
        MessageKind.REMOVE_RAW_VALUES: "Remove raw values from the enum member declarations",
    }

    _ERRORS = frozenset(
        {
            MessageKind.WRONG_DECLARATION_TYPE,
            MessageKind.MISSING_RAW_VALUE_TYPE,
            MessageKind.UNEQUAL_ARGUMENT_NUMBER,
        }
    )
    _WARNINGS = frozenset({MessageKind.OVERLAPPING_RAW_VALUES, MessageKind.DUPLICATE_RAW_VALUE})

    # msgid -> (symbol, description); the message text is passed as the only argument.
    _PYLINT: dict[str, tuple[str, str]] = {
        "E9701": (
            "enum-raw-values-wrong-declaration",
            "@enum_raw_values decorates something that is not an Enum class.",
        ),
        "E9702": (
            "enum-raw-values-missing-type",
            "Neither the decorator nor the enum bases name a raw value type.",
        ),
        "E9703": (
            "enum-raw-values-argument-count",
            "The decorator must supply exactly one raw value per enum member.",
        ),
        "I9704": (
            "enum-raw-values-importable",
            "Inline member values can be moved into the decorator arguments.",
        ),
        "W9705": (
            "enum-raw-values-overlapping",
            "Inline member values are shadowed by the decorator arguments.",
        ),
        "W9706": (
            "enum-raw-values-duplicate",
            "Two members share the same raw value expression.",
        ),
    }

    @staticmethod
    def text(message: Message) -> str:
        return MessageCatalog._TEXTS[message.kind].format(*message.payload)

    @staticmethod
    def severity(message: Message) -> Severity:
        if message.kind in MessageCatalog._ERRORS:
            if message.kind is MessageKind.UNEQUAL_ARGUMENT_NUMBER and message.recoverable:
                return Severity.REMARK
            return Severity.ERROR
        if message.kind in MessageCatalog._WARNINGS:
            return Severity.WARNING
        return Severity.REMARK

    @staticmethod
    def pylint_symbol(message: Message) -> Optional[str]:
        """Pylint symbol for a diagnostic message; None for fix messages."""
        kind = message.kind
        if kind is MessageKind.UNEQUAL_ARGUMENT_NUMBER and message.recoverable:
            return MessageCatalog._PYLINT["I9704"][0]
        by_kind = {
            MessageKind.WRONG_DECLARATION_TYPE: "E9701",
            MessageKind.MISSING_RAW_VALUE_TYPE: "E9702",
            MessageKind.UNEQUAL_ARGUMENT_NUMBER: "E9703",
            MessageKind.OVERLAPPING_RAW_VALUES: "W9705",
            MessageKind.DUPLICATE_RAW_VALUE: "W9706",
        }
        msgid = by_kind.get(kind)
        return MessageCatalog._PYLINT[msgid][0] if msgid else None

    @staticmethod
    def pylint_msgs() -> dict[str, tuple[str, str, str]]:
        """Message definitions in the shape pylint's BaseChecker.msgs expects."""
        return {
            msgid: ("%s", symbol, description)
            for msgid, (symbol, description) in MessageCatalog._PYLINT.items()
        }
