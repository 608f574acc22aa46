"""Declaration Synthesizer: render the companion class for a balanced pairing."""

from enum_raw_values.domain.declarations import CompanionName
from enum_raw_values.domain.entities import Pairing, RawValueType
from enum_raw_values.domain.syntax import Fragment

INDENT = "    "


class CompanionSynthesizer:
    """
    Renders::

        @extension(Planet)
        class _PlanetRawRepresentable(RawRepresentable[int]):
            @classmethod
            def from_raw_value(cls, raw_value: int) -> "Planet | None":
                if raw_value == 1:
                    return Planet.mercury
                return None

            @property
            def raw_value(self) -> int:
                match self:
                    case Planet.mercury:
                        return 1
                    case _:
                        assert_never(self)

    Raw value expressions are spliced verbatim, in declaration order.
    """

    def synthesize(
        self,
        pairing: Pairing,
        raw_type: RawValueType,
        target_type_name: str,
        indent: str = "",
    ) -> Fragment:
        target = target_type_name
        raw = raw_type.expression.as_value()
        lines: list[tuple[int, str]] = [
            (0, f"@extension({target})"),
            (0, f"class {CompanionName.for_target(target)}(RawRepresentable[{raw}]):"),
            (1, "@classmethod"),
            (1, f'def from_raw_value(cls, raw_value: {raw}) -> "{target} | None":'),
        ]
        for case, expression in pairing:
            lines.append((2, f"if raw_value == {expression.as_operand()}:"))
            lines.append((3, f"return {target}.{case.name}"))
        lines.append((2, "return None"))
        lines.append((0, ""))
        lines.extend(
            [
                (1, "@property"),
                (1, f"def raw_value(self) -> {raw}:"),
                (2, "match self:"),
            ]
        )
        for case, expression in pairing:
            lines.append((3, f"case {target}.{case.name}:"))
            lines.append((4, f"return {expression.as_value()}"))
        lines.append((3, "case _:"))
        lines.append((4, "assert_never(self)"))
        return Fragment(
            "\n".join(indent + INDENT * level + text if text else "" for level, text in lines)
        )
