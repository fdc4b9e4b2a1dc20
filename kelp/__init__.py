"""
kelp - A reader for a small Lisp

Reads source text into cons-cell token trees:

    >>> from kelp import read_str
    >>> read_str("(13 . 42)")
    [Cons(head=Integer(value=13), tail=Integer(value=42))]
"""

from kelp.reader import (
    Reader,
    classify,
    read_lisp,
    read_str,
    read_token,
    scan,
)
from kelp.types import (
    Comment,
    Cons,
    EmptyList,
    Float,
    Integer,
    InvalidTreeOperation,
    Nil,
    Rational,
    ReaderError,
    String,
    StructuralParseError,
    Symbol,
    Token,
    TokenClassificationError,
    make_list,
    to_token,
)

__version__ = "0.1.0"

__all__ = [
    "Reader",
    "classify",
    "read_lisp",
    "read_str",
    "read_token",
    "scan",
    "Token",
    "Integer",
    "Float",
    "Rational",
    "String",
    "Symbol",
    "Nil",
    "EmptyList",
    "Cons",
    "Comment",
    "make_list",
    "to_token",
    "ReaderError",
    "TokenClassificationError",
    "StructuralParseError",
    "InvalidTreeOperation",
]
