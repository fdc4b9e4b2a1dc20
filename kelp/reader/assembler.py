"""
kelp.reader.assembler - Recursive descent list assembler

Consumes classified lexemes and folds parenthesized groups into cons chains.

Grammar:

    forms     := form*
    form      := atom | cons_list | "'" form | "#'" form
    cons_list := "(" form* [ "." form ] ")"

A list is folded right to left onto its dotted tail (or onto EmptyList), so
``(1 2 . (3 4))`` reads the same as ``(1 2 3 4)``. Any failure aborts the
whole read; no partial result is ever returned.
"""

from typing import Iterable, Optional, TextIO

from kelp.reader.classifier import classify_span
from kelp.reader.reader_macros import quote_form
from kelp.reader.scanner import Span, scan
from kelp.types import (
    Comment,
    Dot,
    ListEnd,
    ListStart,
    QuotePrefix,
    StructuralParseError,
    Token,
    make_list,
)

DEFAULT_MAX_DEPTH = 256


class Reader:
    """
    Reader that assembles scanned spans into token trees.

    Spans are classified lazily, one token of lookahead at a time. Comments
    are dropped unless ``keep_comments`` is set, in which case comments at
    the top level are returned in place. Comments inside lists are always
    dropped.
    """

    def __init__(
        self,
        spans: Iterable[Span],
        keep_comments: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.spans = iter(spans)
        self.keep_comments = keep_comments
        self.max_depth = max_depth
        self.depth = 0
        self._peeked: Optional[tuple[Token, Span]] = None

    def peek(self) -> Optional[tuple[Token, Span]]:
        if self._peeked is None:
            span = next(self.spans, None)
            if span is not None:
                self._peeked = (classify_span(span), span)
        return self._peeked

    def next(self) -> Optional[tuple[Token, Span]]:
        item = self.peek()
        self._peeked = None
        return item

    def eof(self) -> bool:
        return self.peek() is None

    def read(self) -> list[Token]:
        """Read all forms until the input is exhausted."""
        forms = []
        while not self.eof():
            form = self.read_form()
            if isinstance(form, Comment) and not self.keep_comments:
                continue
            forms.append(form)
        return forms

    def read_form(self) -> Token:
        """Read a single form. Comments are returned as-is."""
        item = self.next()
        if item is None:
            raise StructuralParseError("unexpected end of input")
        tok, span = item

        if isinstance(tok, ListStart):
            return self.read_list(span)
        if isinstance(tok, ListEnd):
            raise _error("unexpected ')'", span)
        if isinstance(tok, Dot):
            raise _error("unexpected '.' outside of a list", span)
        if isinstance(tok, QuotePrefix):
            self._enter(span)
            inner = self.read_datum(span, f"expected a form after {span.text!r}")
            self.depth -= 1
            return quote_form(tok.operator, inner)
        return tok

    def read_datum(self, span: Span, eof_message: str) -> Token:
        """Read the next form that is not a comment."""
        self.skip_comments()
        if self.eof():
            raise _error(eof_message, span)
        return self.read_form()

    def read_list(self, open_span: Span) -> Token:
        """Read the rest of a list whose ``(`` has been consumed."""
        self._enter(open_span)
        items: list[Token] = []
        tail: Optional[Token] = None
        while True:
            item = self.peek()
            if item is None:
                raise _error("unterminated list, expected ')'", open_span)
            tok, span = item
            if isinstance(tok, ListEnd):
                self.next()
                break
            if isinstance(tok, Dot):
                self.next()
                if not items:
                    raise _error("malformed dotted pair: no form before '.'", span)
                tail = self.read_dotted_tail(span, open_span)
                break
            form = self.read_form()
            if not isinstance(form, Comment):
                items.append(form)
        self.depth -= 1
        return make_list(items, tail)

    def read_dotted_tail(self, dot_span: Span, open_span: Span) -> Token:
        """Read the single form after ``.`` and the ``)`` that must follow it."""
        self.skip_comments()
        item = self.peek()
        if item is None:
            raise _error("unterminated list, expected ')'", open_span)
        if isinstance(item[0], ListEnd):
            raise _error("malformed dotted pair: no form after '.'", dot_span)
        tail = self.read_form()

        self.skip_comments()
        item = self.peek()
        if item is None:
            raise _error("unterminated list, expected ')'", open_span)
        tok, span = item
        if not isinstance(tok, ListEnd):
            raise _error("malformed dotted pair: more than one form after '.'", span)
        self.next()
        return tail

    def skip_comments(self) -> None:
        while True:
            item = self.peek()
            if item is None or not isinstance(item[0], Comment):
                return
            self.next()

    def _enter(self, span: Span) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise _error(f"forms nested deeper than {self.max_depth} levels", span)


def _error(message: str, span: Span) -> StructuralParseError:
    loc = span.location
    return StructuralParseError(message, loc.line, loc.col)


# =============================================================================
# Convenience Functions
# =============================================================================


def read_str(
    src: str, keep_comments: bool = False, max_depth: int = DEFAULT_MAX_DEPTH
) -> list[Token]:
    """Scan and assemble ``src`` into its top-level forms."""
    return Reader(scan(src), keep_comments, max_depth).read()


def read_lisp(
    stream: TextIO, keep_comments: bool = False, max_depth: int = DEFAULT_MAX_DEPTH
) -> list[Token]:
    """Read ``stream`` to the end, then read every form in it."""
    return read_str(stream.read(), keep_comments, max_depth)


def read_token(src: str) -> Token:
    """
    Read exactly one form from ``src``.

    Raises:
        StructuralParseError: If ``src`` holds no form, or more than one.
    """
    reader = Reader(scan(src))
    reader.skip_comments()
    if reader.eof():
        raise StructuralParseError("no form to read")
    form = reader.read_form()
    reader.skip_comments()
    item = reader.peek()
    if item is not None:
        raise _error("unexpected trailing input", item[1])
    return form


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Reader",
    "read_str",
    "read_lisp",
    "read_token",
]
