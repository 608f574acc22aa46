"""Immutable source fragments, spans and offset bookkeeping."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Span:
    """Half-open character range [start, end) with 1-based lines and 0-based columns."""

    start: int
    end: int
    line: int = 1
    column: int = 0
    end_line: int = 1
    end_column: int = 0

    def overlaps(self, other: "Span") -> bool:
        """True when the ranges share a character; empty spans never overlap."""
        return self.start < other.end and other.start < self.end

    @classmethod
    def at(cls, offset: int, line: int = 1, column: int = 0) -> "Span":
        """Zero-width span used for insertions."""
        return cls(offset, offset, line, column, line, column)


@dataclass(frozen=True)
class Fragment:
    """
    A piece of program text, optionally tied to where it came from.

    Fragments are values: every edit produces a new Fragment. `loose` marks an
    expression that binds looser than `==` (comparisons, `not`, lambdas, ...).
    """

    code: str
    span: Optional[Span] = None
    loose: bool = False

    @property
    def trimmed(self) -> str:
        return self.code.strip()

    @property
    def is_multiline(self) -> bool:
        return "\n" in self.trimmed

    def as_value(self) -> str:
        """Text usable after `return` or inside brackets."""
        if self.is_multiline:
            return f"({self.trimmed})"
        return self.trimmed

    def as_operand(self) -> str:
        """Text usable as the right operand of `==`."""
        if self.loose or self.is_multiline:
            return f"({self.trimmed})"
        return self.trimmed


class Placeholder:
    """Editable marker text for values the user still has to supply."""

    OPEN = "<#"
    CLOSE = "#>"

    @staticmethod
    def expression(text: str) -> Fragment:
        """A string literal holding the marker, valid wherever an expression is."""
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return Fragment(f'"{Placeholder.OPEN}{escaped}{Placeholder.CLOSE}"')

    @staticmethod
    def contains(code: str) -> bool:
        start = code.find(Placeholder.OPEN)
        return start != -1 and code.find(Placeholder.CLOSE, start) != -1


class SourceText:
    """
    A module's text with line bookkeeping.

    Converts parser positions (1-based line, UTF-8 byte column) into character
    offsets and Spans. Lines are split on "\\n" only, as the tokenizer does.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._line_starts = [0]
        position = text.find("\n")
        while position != -1:
            self._line_starts.append(position + 1)
            position = text.find("\n", position + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_start(self, lineno: int) -> int:
        index = min(max(lineno, 1), self.line_count) - 1
        return self._line_starts[index]

    def line_end(self, lineno: int) -> int:
        """Offset just past the line's newline (or end of text on the last line)."""
        if lineno >= self.line_count:
            return len(self.text)
        return self._line_starts[lineno]

    def line_text(self, lineno: int) -> str:
        return self.text[self.line_start(lineno):self.line_end(lineno)]

    def indentation(self, lineno: int) -> str:
        line = self.line_text(lineno)
        return line[: len(line) - len(line.lstrip(" \t"))]

    def offset(self, lineno: int, byte_column: int) -> int:
        """Character offset of a (line, byte column) position."""
        start = self.line_start(lineno)
        line = self.line_text(lineno)
        if line.isascii():
            return start + min(byte_column, len(line))
        prefix = line.encode("utf-8")[:byte_column].decode("utf-8", errors="ignore")
        return start + len(prefix)

    def position(self, offset: int) -> tuple[int, int]:
        """(1-based line, character column) of an offset."""
        low, high = 0, self.line_count - 1
        while low < high:
            middle = (low + high + 1) // 2
            if self._line_starts[middle] <= offset:
                low = middle
            else:
                high = middle - 1
        return (low + 1, offset - self._line_starts[low])

    def span(self, start: int, end: int) -> Span:
        line, column = self.position(start)
        end_line, end_column = self.position(end)
        return Span(start, end, line, column, end_line, end_column)

    def fragment(self, start: int, end: int, loose: bool = False) -> Fragment:
        return Fragment(self.text[start:end], self.span(start, end), loose)

    def node_fragment(
        self,
        lineno: int,
        col_offset: int,
        end_lineno: int,
        end_col_offset: int,
        loose: bool = False,
    ) -> Fragment:
        """Fragment for a parser node position."""
        start = self.offset(lineno, col_offset)
        end = self.offset(end_lineno, end_col_offset)
        return self.fragment(start, end, loose)

    def lines_fragment(self, first_line: int, last_line: int) -> Fragment:
        """Whole lines first_line..last_line, including the final newline."""
        return self.fragment(self.line_start(first_line), self.line_end(last_line))

    def insertion_point(self, offset: int) -> Fragment:
        line, column = self.position(offset)
        return Fragment("", Span.at(offset, line, column))
