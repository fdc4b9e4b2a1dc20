"""
kelp.reader.scanner - Lexeme scanner

Splits a complete text buffer into lexeme spans. Spans are half-open index
ranges into the buffer; the buffer itself is shared by every span and never
copied. Text is only materialized when a span is classified.
"""

from dataclasses import dataclass
from typing import Iterator, TextIO


@dataclass
class SourceLocation:
    """Holds source location information for error messages."""

    line: int = 0  # 1-based line number
    col: int = 0  # 0-based column offset

    def __repr__(self):
        return f"SourceLocation({self.line}:{self.col})"


@dataclass
class Span:
    """A lexeme: the half-open range ``[start, end)`` of ``buffer``."""

    start: int
    end: int
    buffer: str

    def __repr__(self):
        return f"Span({self.text!r}, {self.start}:{self.end})"

    @property
    def text(self) -> str:
        return self.buffer[self.start : self.end]

    @property
    def location(self) -> SourceLocation:
        line_start = self.buffer.rfind("\n", 0, self.start) + 1
        line = self.buffer.count("\n", 0, self.start) + 1
        return SourceLocation(line, self.start - line_start)


class Scanner:
    """
    Lazy iterator of lexeme spans over a text buffer.

    Rules, checked in order at each position after skipping whitespace:

    1. ``(`` and ``)`` are single-character lexemes
    2. a lone ``'`` is a single-character lexeme (quote prefix)
    3. ``#'`` is a two-character lexeme (function-quote prefix)
    4. ``"`` starts a string running to the matching unescaped ``"``
    5. ``;`` starts a comment running to the end of the line
    6. anything else is an atom running to whitespace or an unescaped paren

    A backslash inside a string or atom always consumes the character after
    it. Unterminated strings run to the end of the buffer; whether they are
    valid is decided by the classifier.
    """

    def __init__(self, buffer: str):
        self.buffer = buffer
        self.i = 0

    def __iter__(self) -> "Scanner":
        return self

    def __next__(self) -> Span:
        self.skip_whitespace()
        if self.at_end():
            raise StopIteration

        start = self.i
        c = self.buffer[self.i]
        if c in "()'":
            self.i += 1
        elif c == "#" and self.peek(1) == "'":
            self.i += 2
        elif c == '"':
            self.skip_string()
        elif c == ";":
            self.skip_line()
        else:
            self.skip_atom()
        return Span(start, self.i, self.buffer)

    def at_end(self) -> bool:
        return self.i >= len(self.buffer)

    def peek(self, offset: int = 0) -> str:
        """Return the character ``offset`` past the cursor, or "" past the end."""
        j = self.i + offset
        return self.buffer[j] if j < len(self.buffer) else ""

    def skip_whitespace(self) -> None:
        n = len(self.buffer)
        while self.i < n and self.buffer[self.i].isspace():
            self.i += 1

    def skip_string(self) -> None:
        assert self.buffer[self.i] == '"'
        n = len(self.buffer)
        self.i += 1
        while self.i < n:
            c = self.buffer[self.i]
            if c == '"':
                self.i += 1
                return
            self.i += 2 if c == "\\" else 1
        # Unterminated: stop at the end, never past it
        self.i = n

    def skip_line(self) -> None:
        n = len(self.buffer)
        while self.i < n and self.buffer[self.i] not in "\r\n":
            self.i += 1

    def skip_atom(self) -> None:
        n = len(self.buffer)
        while self.i < n:
            c = self.buffer[self.i]
            if c.isspace() or c in "()":
                return
            self.i += 2 if c == "\\" else 1
        self.i = n


def scan(src: str) -> Scanner:
    """Return a scanner over ``src``."""
    return Scanner(src)


def scan_stream(stream: TextIO) -> Scanner:
    """Read ``stream`` to the end, then return a scanner over its contents."""
    return Scanner(stream.read())


__all__ = [
    "SourceLocation",
    "Span",
    "Scanner",
    "scan",
    "scan_stream",
]
