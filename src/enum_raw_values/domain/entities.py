"""Domain entities produced and consumed by the expansion pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Iterator, Optional, TypeVar

from enum_raw_values.domain.declarations import AttributeInvocation, Declaration, EnumCase
from enum_raw_values.domain.messages import Message, Severity
from enum_raw_values.domain.syntax import Fragment

T = TypeVar("T")


@dataclass(frozen=True)
class Change:
    """Replace `old` (which must carry a span) with `new`."""

    old: Fragment
    new: Fragment

    def __post_init__(self) -> None:
        if self.old.span is None:
            raise ValueError("Change.old must be anchored to a span")


class TransformationType(Enum):
    """Structural rewrites the editor applies through a CST after the textual changes."""

    ADD_IMPORT = "add_import"
    ADD_BASE_CLASS = "add_base_class"


@dataclass(frozen=True)
class TransformationPlan:
    """
    Pure data structure describing a structural rewrite.

    The editor gateway turns each plan into a LibCST transformer.
    """

    transformation_type: TransformationType
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def add_import(cls, module: str, imports: list[str]) -> "TransformationPlan":
        """`from module import name, ...`; an empty list means `import module`."""
        return cls(TransformationType.ADD_IMPORT, {"module": module, "imports": imports})

    @classmethod
    def add_base_class(
        cls, class_name: str, base: str, first: bool = False
    ) -> "TransformationPlan":
        """Add base to the decorated class, first or after the other positional bases."""
        return cls(
            TransformationType.ADD_BASE_CLASS,
            {"class_name": class_name, "base": base, "first": first},
        )

    @classmethod
    def import_for(cls, expression: str) -> "TransformationPlan":
        """Plan binding the root name of a `name` or `package.name` expression from `enum`."""
        if "." in expression:
            return cls.add_import(expression.rsplit(".", 1)[0], [])
        return cls.add_import("enum", [expression])


@dataclass(frozen=True)
class FixIt:
    message: Message
    changes: tuple[Change, ...]
    plans: tuple[TransformationPlan, ...] = ()

    @classmethod
    def replace(cls, message: Message, old: Fragment, new: Fragment) -> "FixIt":
        return cls(message, (Change(old, new),))


@dataclass(frozen=True)
class Diagnostic:
    message: Message
    anchor: Fragment
    fixes: tuple[FixIt, ...] = ()

    @property
    def severity(self) -> Severity:
        return self.message.severity

    @property
    def line(self) -> int:
        return self.anchor.span.line if self.anchor.span else 1

    @property
    def column(self) -> int:
        return self.anchor.span.column if self.anchor.span else 0


class RawValueKind(Enum):
    """How implicit raw values can be derived for a raw value type."""

    STRING = "string"
    NUMERIC = "numeric"
    OTHER = "other"


@dataclass(frozen=True)
class RawValueType:
    expression: Fragment
    kind: RawValueKind = RawValueKind.OTHER


@dataclass(frozen=True)
class Pairing:
    """Ordered one-to-one association of enum members with raw value expressions."""

    entries: tuple[tuple[EnumCase, Fragment], ...] = ()

    @classmethod
    def zip(cls, cases: tuple[EnumCase, ...], expressions: tuple[Fragment, ...]) -> "Pairing":
        if len(cases) != len(expressions):
            raise ValueError(
                f"Cannot pair {len(cases)} members with {len(expressions)} raw values"
            )
        return cls(tuple(zip(cases, expressions)))

    def __iter__(self) -> Iterator[tuple[EnumCase, Fragment]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of one pipeline stage: a value (None on abort) and its diagnostics."""

    value: Optional[T] = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)


@dataclass(frozen=True)
class ExpansionResult:
    """Companion declarations (empty on error) and every diagnostic raised."""

    declarations: tuple[Fragment, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)


@dataclass(frozen=True)
class Invocation:
    """One decorated declaration found in a module, ready to expand."""

    attribute: AttributeInvocation
    declaration: Declaration
    target_type_name: str
    anchor: Fragment
    indent: str = ""
    existing_companion: Optional[Fragment] = None


@dataclass(frozen=True)
class ModuleScan:
    invocations: tuple[Invocation, ...] = ()


@dataclass(frozen=True)
class InvocationReport:
    invocation: Invocation
    result: ExpansionResult


@dataclass(frozen=True)
class ModuleExpansion:
    """A module's text before and after splicing in the companions."""

    source: str
    expanded_source: str
    reports: tuple[InvocationReport, ...] = ()

    @property
    def changed(self) -> bool:
        return self.source != self.expanded_source

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(d for report in self.reports for d in report.result.diagnostics)


@dataclass(frozen=True)
class FileReport:
    """Per-file outcome of a CLI run. `error` is set when the file could not be processed."""

    path: str
    diagnostics: tuple[Diagnostic, ...] = ()
    changed: bool = False
    applied_fixes: tuple[FixIt, ...] = ()
    error: Optional[str] = None
    output: Optional[str] = field(default=None, compare=False)

    @property
    def has_errors(self) -> bool:
        return self.error is not None or any(
            d.severity is Severity.ERROR for d in self.diagnostics
        )
