"""
kelp.types - Core type definitions for kelp

This module contains the token tree produced by the reader:
- Token: Base class of every syntactic form
- Integer, Float, Rational, String, Symbol, Nil: Leaf literals
- EmptyList, Cons: List structure (proper and dotted lists)
- ListStart, ListEnd, Dot, Comment, QuotePrefix: Structural markers that
  only live inside the reader
- ReaderError and its subclasses: Failures raised while reading

Helpers for building trees by hand:
- make_list: Fold a Python sequence into a cons chain
- to_token: Coerce plain Python values into tokens
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


# =============================================================================
# Errors
# =============================================================================


class ReaderError(Exception):
    """Base class for every failure raised while reading source text."""

    def __init__(
        self, message: str, line: Optional[int] = None, col: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.col = col

    def __str__(self):
        if self.line is None:
            return self.message
        return f"{self.message} (line: {self.line}, col: {self.col})"


class TokenClassificationError(ReaderError):
    """Raised when a lexeme matches none of the classifier rules."""

    def __init__(
        self,
        message: str,
        lexeme: str = "",
        line: Optional[int] = None,
        col: Optional[int] = None,
    ):
        super().__init__(message, line, col)
        self.lexeme = lexeme


class StructuralParseError(ReaderError):
    """Raised on grammar-level mismatches (unbalanced lists, bad dots)."""


class InvalidTreeOperation(ReaderError):
    """Raised when a tail splice is attempted on an unsuitable token."""


# =============================================================================
# Tokens
# =============================================================================


class Token:
    """
    Base class for every syntactic form produced by the reader.

    Subclasses are dataclasses, so equality is structural. The ``structural``
    flag marks the transient values that exist only while a list is being
    assembled.
    """

    structural = False

    @property
    def type_name(self) -> str:
        """The discriminator used when the token is serialized."""
        return type(self).__name__

    def is_proper_list(self) -> bool:
        return False

    def set_tail(self, new_tail: "Token") -> None:
        raise InvalidTreeOperation(f"cannot set the tail of {self.type_name}")

    def set_last_tail(self, new_tail: "Token") -> None:
        raise InvalidTreeOperation(f"cannot set the last tail of {self.type_name}")


@dataclass
class Integer(Token):
    """A 64-bit signed integer literal."""

    value: int


@dataclass
class Float(Token):
    """A 64-bit floating point literal."""

    value: float


@dataclass
class Rational(Token):
    """
    A ratio literal such as ``2/3``.

    The fraction is stored exactly as written; ``2/4`` is not reduced.
    """

    numerator: int
    denominator: int


@dataclass
class String(Token):
    """A string literal with its escape sequences already resolved."""

    value: str


@dataclass
class Symbol(Token):
    """Any atom that does not match a more specific literal form."""

    value: str

    def __repr__(self):
        return f"Symbol({self.value!r})"


@dataclass
class Nil(Token):
    """The ``nil`` atom. Distinct from the empty list."""


@dataclass
class EmptyList(Token):
    """The empty list ``()``, also the terminator of every proper list."""

    def is_proper_list(self) -> bool:
        return True


@dataclass(eq=False)
class Cons(Token):
    """
    A cons cell.

    ``head`` and ``tail`` are owned by this node alone; cons trees never share
    nodes and never contain cycles. A chain whose final tail is EmptyList is a
    proper list, anything else ends a dotted list.

    Attributes:
        head: The first slot (the list element)
        tail: The second slot (the rest of the list, or a dotted tail)
    """

    head: Token
    tail: Token

    def __iter__(self) -> Iterator[Token]:
        node: Token = self
        while isinstance(node, Cons):
            yield node.head
            node = node.tail

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cons):
            return NotImplemented
        left: Token = self
        right: Token = other
        while isinstance(left, Cons) and isinstance(right, Cons):
            if left.head != right.head:
                return False
            left, right = left.tail, right.tail
        return left == right

    def __repr__(self) -> str:
        opened = []
        node: Token = self
        while isinstance(node, Cons):
            opened.append(f"Cons(head={node.head!r}, tail=")
            node = node.tail
        return "".join(opened) + repr(node) + ")" * len(opened)

    def items(self) -> list[Token]:
        """Return the heads of the chain, in order."""
        return list(self)

    @property
    def last_tail(self) -> Token:
        """The first tail in the chain that is not itself a Cons."""
        node: Token = self
        while isinstance(node, Cons):
            node = node.tail
        return node

    def is_proper_list(self) -> bool:
        return isinstance(self.last_tail, EmptyList)

    def set_tail(self, new_tail: Token) -> None:
        self.tail = new_tail

    def set_last_tail(self, new_tail: Token) -> None:
        """Replace the EmptyList that terminates this chain with ``new_tail``."""
        node = self
        while True:
            if isinstance(node.tail, Cons):
                node = node.tail
            elif isinstance(node.tail, EmptyList):
                node.tail = new_tail
                return
            else:
                raise InvalidTreeOperation(
                    f"cons chain ends in {node.tail.type_name}, not EmptyList"
                )


# Structural markers


@dataclass
class ListStart(Token):
    structural = True


@dataclass
class ListEnd(Token):
    structural = True


@dataclass
class Dot(Token):
    structural = True


@dataclass
class Comment(Token):
    """
    A ``;`` comment.

    Attributes:
        depth: Number of leading semicolons
        text: The rest of the line after the semicolons
    """

    structural = True

    depth: int
    text: str


@dataclass
class QuotePrefix(Token):
    """A scanned ``'`` or ``#'`` waiting for the form it applies to."""

    structural = True

    operator: str


# =============================================================================
# Construction helpers
# =============================================================================


def make_list(items: Iterable[Token], tail: Optional[Token] = None) -> Token:
    """
    Fold ``items`` right to left into a cons chain ending in ``tail``.

    With no tail the result is a proper list; an empty ``items`` returns the
    tail itself (EmptyList by default).
    """
    result: Token = EmptyList() if tail is None else tail
    for item in reversed(list(items)):
        result = Cons(item, result)
    return result


def to_token(value: Any) -> Token:
    """
    Coerce a plain Python value into a Token.

    - Token -> itself
    - None -> Nil
    - int -> Integer
    - float -> Float
    - (int, int) -> Rational
    - str -> String
    - list -> proper list of coerced items
    """
    if isinstance(value, Token):
        return value
    if value is None:
        return Nil()
    if isinstance(value, bool):
        raise TypeError("cannot convert bool to a token")
    if isinstance(value, int):
        return Integer(value)
    if isinstance(value, float):
        return Float(value)
    if isinstance(value, tuple):
        if len(value) == 2 and all(
            isinstance(v, int) and not isinstance(v, bool) for v in value
        ):
            return Rational(value[0], value[1])
        raise TypeError(f"cannot convert tuple {value!r} to a token")
    if isinstance(value, str):
        return String(value)
    if isinstance(value, list):
        return make_list([to_token(item) for item in value])
    raise TypeError(f"cannot convert {type(value).__name__} to a token")


__all__ = [
    "INT64_MIN",
    "INT64_MAX",
    # Errors
    "ReaderError",
    "TokenClassificationError",
    "StructuralParseError",
    "InvalidTreeOperation",
    # Tokens
    "Token",
    "Integer",
    "Float",
    "Rational",
    "String",
    "Symbol",
    "Nil",
    "EmptyList",
    "Cons",
    "ListStart",
    "ListEnd",
    "Dot",
    "Comment",
    "QuotePrefix",
    # Helpers
    "make_list",
    "to_token",
]
