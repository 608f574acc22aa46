"""The expansion pipeline: classify, resolve, reconcile, synthesize."""

import logging
from typing import Optional

from enum_raw_values.domain.config import ExpansionOptions
from enum_raw_values.domain.declarations import AttributeInvocation, Declaration
from enum_raw_values.domain.entities import Diagnostic, ExpansionResult
from enum_raw_values.use_cases.classify_declaration import DeclarationClassifier
from enum_raw_values.use_cases.reconcile_arguments import ArgumentReconciler
from enum_raw_values.use_cases.resolve_raw_value_type import RawValueTypeResolver
from enum_raw_values.use_cases.synthesize_companion import CompanionSynthesizer

logger = logging.getLogger(__name__)


class EnumRawValuesExpander:
    """
    Expands one decorated declaration.

    Pure per call: the stages only hold immutable options, so one expander may
    serve concurrent callers. Failures never raise; they come back as error
    diagnostics with an empty declaration list.
    """

    def __init__(self, options: Optional[ExpansionOptions] = None) -> None:
        self.options = options or ExpansionOptions()
        self._classifier = DeclarationClassifier(self.options)
        self._resolver = RawValueTypeResolver(self.options)
        self._reconciler = ArgumentReconciler(self.options)
        self._synthesizer = CompanionSynthesizer()

    def expand(
        self,
        attribute: AttributeInvocation,
        declaration: Declaration,
        target_type_name: str,
        indent: str = "",
    ) -> ExpansionResult:
        """
        Args:
            attribute: The decorator, with its unevaluated argument expressions.
            declaration: The declaration the decorator is attached to.
            target_type_name: Dotted name the companion refers to the enum by.
            indent: Indentation prefixed to every generated line.

        Returns:
            The companion declaration (or nothing on error) and all diagnostics.
        """
        diagnostics: list[Diagnostic] = []

        classified = self._classifier.classify(attribute, declaration)
        diagnostics.extend(classified.diagnostics)
        if classified.value is None:
            return self._aborted(target_type_name, diagnostics)
        enumeration = classified.value

        resolved = self._resolver.resolve(attribute, enumeration)
        diagnostics.extend(resolved.diagnostics)
        if resolved.value is None:
            return self._aborted(target_type_name, diagnostics)
        raw_type = resolved.value

        reconciled = self._reconciler.reconcile(attribute, enumeration, raw_type)
        diagnostics.extend(reconciled.diagnostics)
        if reconciled.value is None or reconciled.has_errors:
            return self._aborted(target_type_name, diagnostics)

        companion = self._synthesizer.synthesize(
            reconciled.value, raw_type, target_type_name, indent
        )
        logger.debug("Expanded %s with %d members", target_type_name, len(reconciled.value))
        return ExpansionResult((companion,), tuple(diagnostics))

    @staticmethod
    def _aborted(target_type_name: str, diagnostics: list[Diagnostic]) -> ExpansionResult:
        logger.debug(
            "Expansion of %s aborted: %s",
            target_type_name,
            ", ".join(d.message.message_id for d in diagnostics),
        )
        return ExpansionResult((), tuple(diagnostics))
