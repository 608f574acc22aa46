"""LibCST based source editor."""

import logging
from typing import Iterable, Sequence

import libcst as cst

from enum_raw_values.domain.entities import Change, TransformationPlan, TransformationType
from enum_raw_values.domain.errors import (
    InvalidEditError,
    OverlappingChangesError,
    StaleChangeError,
)
from enum_raw_values.domain.protocols import SourceEditorProtocol
from enum_raw_values.infrastructure.gateways.transformers import (
    AddBaseClassTransformer,
    AddImportTransformer,
)

logger = logging.getLogger(__name__)

# Generated companions are decorated with this; new imports must precede them.
COMPANION_DECORATOR = "extension"


class LibCSTEditorGateway(SourceEditorProtocol):
    """Gateway for applying fixes and expansions: span substitutions, then LibCST transformers."""

    def __init__(self, attribute_names: Iterable[str] = ("enum_raw_values",)) -> None:
        self.attribute_names = frozenset(attribute_names)

    def _plan_to_transformer(self, plan: TransformationPlan) -> cst.CSTTransformer:
        """Convert a TransformationPlan to a LibCST transformer."""
        params = plan.params
        t = plan.transformation_type
        if t == TransformationType.ADD_IMPORT:
            return AddImportTransformer(
                {**params, "anchor_names": self.attribute_names | {COMPANION_DECORATOR}}
            )
        elif t == TransformationType.ADD_BASE_CLASS:
            return AddBaseClassTransformer({**params, "attribute_names": self.attribute_names})
        else:
            raise ValueError(f"Unknown transformation type: {plan.transformation_type}")

    def apply(
        self, source: str, changes: list[Change], plans: Sequence[TransformationPlan] = ()
    ) -> str:
        """
        Apply changes in offset order, then every plan to the parsed result.

        Insertions (empty spans) at the same offset keep their given order and
        may touch, but not enter, a replaced range.

        Raises:
            StaleChangeError: the text under a change differs from change.old.code
            OverlappingChangesError: two changes replace intersecting ranges
            InvalidEditError: the edited text does not parse
        """
        edited = self.substitute(source, changes)
        try:
            module = cst.parse_module(edited)
        except cst.ParserSyntaxError as exc:
            raise InvalidEditError(f"Edited source does not parse: {exc.message}") from exc

        for plan in plans:
            module = module.visit(self._plan_to_transformer(plan))
        if plans:
            logger.debug("Applied %d change(s) and %d plan(s)", len(changes), len(plans))
        return module.code

    @staticmethod
    def substitute(source: str, changes: list[Change]) -> str:
        """Replace each change's old span by its new text."""
        ordered = sorted(changes, key=lambda change: (change.old.span.start, change.old.span.end))
        pieces: list[str] = []
        cursor = 0
        for change in ordered:
            span = change.old.span
            if source[span.start:span.end] != change.old.code:
                raise StaleChangeError(
                    f"Line {span.line}: expected {change.old.code!r}, "
                    f"found {source[span.start:span.end]!r}"
                )
            if span.start < cursor:
                raise OverlappingChangesError(
                    f"Line {span.line}: change overlaps a previous change"
                )
            pieces.append(source[cursor:span.start])
            pieces.append(change.new.code)
            cursor = span.end
        pieces.append(source[cursor:])
        return "".join(pieces)
