"""Declaration Classifier: the decorator only applies to Enum classes."""

from enum_raw_values.domain.config import ExpansionOptions
from enum_raw_values.domain.declarations import (
    AttributeInvocation,
    ClassDeclaration,
    Declaration,
    EnumDeclaration,
    FunctionDeclaration,
)
from enum_raw_values.domain.entities import Diagnostic, FixIt, Outcome, TransformationPlan
from enum_raw_values.domain.messages import Message, MessageKind
from enum_raw_values.domain.syntax import Fragment


class DeclarationClassifier:
    """Accepts EnumDeclaration; anything else gets wrongDeclarationType and one fix."""

    def __init__(self, options: ExpansionOptions) -> None:
        self._options = options

    def classify(
        self, attribute: AttributeInvocation, declaration: Declaration
    ) -> Outcome[EnumDeclaration]:
        match declaration:
            case EnumDeclaration():
                return Outcome(declaration)
            case ClassDeclaration(name=name, keyword=keyword):
                enum_base = self._options.enum_base
                fix = FixIt(
                    Message.fix(MessageKind.CONVERT_TO_ENUM, name),
                    (),
                    (
                        TransformationPlan.add_base_class(name, enum_base),
                        TransformationPlan.import_for(enum_base),
                    ),
                )
                return Outcome(None, (Diagnostic(Message.wrong_declaration_type(name), keyword, (fix,)),))
            case FunctionDeclaration(name=name, keyword=keyword):
                fix = FixIt.replace(
                    Message.fix(MessageKind.REMOVE_ATTRIBUTE, name), attribute.line, Fragment("")
                )
                return Outcome(None, (Diagnostic(Message.wrong_declaration_type(name), keyword, (fix,)),))
