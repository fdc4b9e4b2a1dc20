"""
kelp.reader.reader_macros - Reader macro sugar

Prefix characters that desugar into ordinary lists at read time:

- 'form   -> (quote form)
- #'form  -> (function form)
"""

from kelp.types import Cons, EmptyList, Symbol, Token

QUOTE_OPERATORS: dict[str, str] = {
    "#'": "function",
    "'": "quote",
}


def quote_form(operator: str, form: Token) -> Cons:
    """Build ``(operator form)``."""
    return Cons(Symbol(operator), Cons(form, EmptyList()))


__all__ = [
    "QUOTE_OPERATORS",
    "quote_form",
]
