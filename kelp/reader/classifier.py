"""
kelp.reader.classifier - Lexeme classification

Turns the text of one lexeme into a single Token. Classification is an
ordered choice: each rule is an independent attempt that either returns a
Token or None, and the first rule to succeed wins. The order matters because
later forms are textual supersets of earlier ones (every integer is a valid
symbol, for example).
"""

import math
import re
from typing import Callable, Optional

from kelp.reader.reader_macros import QUOTE_OPERATORS, quote_form
from kelp.reader.scanner import Span
from kelp.types import (
    INT64_MAX,
    INT64_MIN,
    Comment,
    Dot,
    Float,
    Integer,
    ListEnd,
    ListStart,
    Nil,
    QuotePrefix,
    Rational,
    String,
    Symbol,
    Token,
    TokenClassificationError,
)

_RATIONAL_RE = re.compile(r"([+-]?[0-9]+)/([0-9]+)")
_FLOAT_RE = re.compile(r"[+-]?[0-9]+\.[0-9]+(?:[eE][+-]?[0-9]+)?")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_MARKERS: dict[str, Callable[[], Token]] = {
    "(": ListStart,
    ")": ListEnd,
    ".": Dot,
    "nil": Nil,
}

_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def _int64(text: str, literal: str) -> int:
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        raise TokenClassificationError(
            f"integer out of 64-bit range in {literal!r}", literal
        )
    return value


# =============================================================================
# Rules
# =============================================================================


def _comment(text: str) -> Optional[Token]:
    if not text.startswith(";"):
        return None
    depth = len(text) - len(text.lstrip(";"))
    rest = text[depth:].splitlines()
    return Comment(depth, rest[0] if rest else "")


def _marker(text: str) -> Optional[Token]:
    factory = _MARKERS.get(text)
    return factory() if factory is not None else None


def _rational(text: str) -> Optional[Token]:
    m = _RATIONAL_RE.fullmatch(text)
    if m is None:
        return None
    return Rational(_int64(m.group(1), text), _int64(m.group(2), text))


def _float(text: str) -> Optional[Token]:
    if _FLOAT_RE.fullmatch(text) is None:
        return None
    value = float(text)
    if not math.isfinite(value):
        raise TokenClassificationError(f"float out of range in {text!r}", text)
    return Float(value)


def _integer(text: str) -> Optional[Token]:
    if _INTEGER_RE.fullmatch(text) is None:
        return None
    return Integer(_int64(text, text))


def _string(text: str) -> Optional[Token]:
    # A leading quote commits the lexeme to being a string
    if not text.startswith('"'):
        return None
    buf = []
    i = 1
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            if i + 1 >= n:
                break
            esc = text[i + 1]
            if esc not in _ESCAPES:
                raise TokenClassificationError(
                    f"unknown escape sequence \\{esc} in string {text!r}", text
                )
            buf.append(_ESCAPES[esc])
            i += 2
        elif c == '"':
            if i != n - 1:
                raise TokenClassificationError(
                    f"unexpected characters after string {text!r}", text
                )
            return String("".join(buf))
        else:
            buf.append(c)
            i += 1
    raise TokenClassificationError(f"unterminated string {text!r}", text)


def _desugar(text: str, prefix: str) -> Optional[Token]:
    if not text.startswith(prefix):
        return None
    operator = QUOTE_OPERATORS[prefix]
    rest = text[len(prefix) :]
    if not rest:
        return QuotePrefix(operator)
    form = classify(rest)
    if form.structural:
        raise TokenClassificationError(f"nothing to {operator} in {text!r}", text)
    return quote_form(operator, form)


def _sharp_quote(text: str) -> Optional[Token]:
    return _desugar(text, "#'")


def _quote(text: str) -> Optional[Token]:
    return _desugar(text, "'")


def _symbol(text: str) -> Optional[Token]:
    if text[0] in '."':
        return None
    if any(c.isspace() or c in "()" for c in text):
        return None
    return Symbol(text)


# Tried in order; the first rule that returns a token wins
RULES: tuple[Callable[[str], Optional[Token]], ...] = (
    _comment,
    _marker,
    _rational,
    _float,
    _integer,
    _string,
    _sharp_quote,
    _quote,
    _symbol,
)


# =============================================================================
# Entry points
# =============================================================================


def classify(text: str) -> Token:
    """
    Classify one lexeme.

    Raises:
        TokenClassificationError: If ``text`` is empty or matches no rule.
    """
    if not text:
        raise TokenClassificationError("empty lexeme", text)
    for rule in RULES:
        token = rule(text)
        if token is not None:
            return token
    raise TokenClassificationError(f"token parsing error on {text!r}", text)


def classify_span(span: Span) -> Token:
    """Classify a scanned span, attaching its location to any error."""
    try:
        return classify(span.text)
    except TokenClassificationError as e:
        loc = span.location
        raise TokenClassificationError(e.message, e.lexeme, loc.line, loc.col) from None


__all__ = [
    "RULES",
    "classify",
    "classify_span",
]
