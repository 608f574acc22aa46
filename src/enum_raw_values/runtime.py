"""
Runtime support imported by annotated and expanded modules.

`enum_raw_values` is a marker: it returns the decorated class unchanged and only
tells the expander where to generate a companion. The companion uses
`RawRepresentable` and `extension` to attach `from_raw_value` and `raw_value`
to the enum.
"""

import inspect
from enum import Enum
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

RawValueT = TypeVar("RawValueT")
ClassT = TypeVar("ClassT", bound=type)


@runtime_checkable
class RawRepresentable(Protocol[RawValueT]):
    """A type convertible to and from a raw value."""

    @classmethod
    def from_raw_value(cls, raw_value: RawValueT) -> Any: ...

    @property
    def raw_value(self) -> RawValueT: ...


class _EnumRawValuesMarker:
    """
    Supports `@enum_raw_values`, `@enum_raw_values(1, 2)`, `@enum_raw_values[int]`
    and `@enum_raw_values[int](1, 2)`. Raw value arguments are not evaluated for
    any purpose beyond being passed here.
    """

    def __getitem__(self, raw_value_type: object) -> "_EnumRawValuesMarker":
        return self

    def __call__(self, *raw_values: object) -> Any:
        # Bare usage receives the Enum class itself; any other single value is a raw value.
        if len(raw_values) == 1 and _is_enum_class(raw_values[0]):
            return raw_values[0]
        return _return_unchanged

    def __repr__(self) -> str:
        return "enum_raw_values"


def _is_enum_class(value: object) -> bool:
    return inspect.isclass(value) and issubclass(value, Enum)


def _return_unchanged(cls: ClassT) -> ClassT:
    return cls


enum_raw_values = _EnumRawValuesMarker()


def extension(target: type) -> Callable[[ClassT], ClassT]:
    """
    Class decorator copying the decorated class's public members onto target.

    Works on Enum classes: only non-member names are assigned.
    """

    def attach(companion: ClassT) -> ClassT:
        for name, member in vars(companion).items():
            if name.startswith("_"):
                continue
            setattr(target, name, member)
        return companion

    return attach
