"""
kelp.json - JSON serialization support for kelp tokens.

Every token serializes to a tagged record: a JSON object whose "type" field
names the variant, followed by the variant's own fields. Cons cells nest:

    {"type": "Cons", "head": {"type": "Integer", "value": 13},
     "tail": {"type": "Integer", "value": 42}}

Usage:
    from kelp.json import dumps, dump_lines

    dumps(token)                  # one record as a string
    dump_lines(tokens, sys.stdout)  # one record per line
"""

import json
from dataclasses import fields
from typing import Any, Iterable, Iterator, TextIO

from kelp.types import (
    Comment,
    Cons,
    Dot,
    EmptyList,
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
    make_list,
)

_TOKEN_TYPES: dict[str, type[Token]] = {
    cls.__name__: cls
    for cls in (
        Integer,
        Float,
        Rational,
        String,
        Symbol,
        Nil,
        EmptyList,
        Cons,
        ListStart,
        ListEnd,
        Dot,
        Comment,
        QuotePrefix,
    )
}


def to_record(token: Token) -> dict[str, Any]:
    """
    Return the tagged record for ``token``.

    Child tokens (the head and tail of a Cons) are left as tokens; the
    encoder turns them into records as it walks the tree.
    """
    record: dict[str, Any] = {"type": token.type_name}
    for f in fields(token):  # type: ignore[arg-type]
        record[f.name] = getattr(token, f.name)
    return record


class TokenJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that handles kelp tokens.

    A token passed as the top-level object is encoded with an explicit
    stack, so a long cons chain does not hit the recursion limit even
    though its record nests one level per cell. Tokens found inside other
    containers go through ``default``. ``indent`` is only honored for
    non-token objects.

    Example:
        >>> import json
        >>> from kelp.types import Integer
        >>> json.dumps(Integer(42), cls=TokenJSONEncoder)
        '{"type": "Integer", "value": 42}'
    """

    def default(self, o: Any) -> Any:
        if isinstance(o, Token):
            return to_record(o)
        return super().default(o)

    def iterencode(self, o: Any, _one_shot: bool = False) -> Iterator[str]:
        if isinstance(o, Token) and self.indent is None:
            return self._iterencode_token(o)
        return super().iterencode(o, _one_shot)

    def _iterencode_token(self, token: Token) -> Iterator[str]:
        scalar = json.JSONEncoder(
            ensure_ascii=self.ensure_ascii, allow_nan=self.allow_nan
        )
        # Text fragments and tokens still to be encoded, last one on top
        stack: list[Any] = [token]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                yield item
                continue
            pending: list[Any] = []
            for i, (key, value) in enumerate(to_record(item).items()):
                prefix = "{" if i == 0 else self.item_separator
                pending.append(prefix + scalar.encode(key) + self.key_separator)
                if isinstance(value, Token):
                    pending.append(value)
                else:
                    pending.append(scalar.encode(value))
            pending.append("}")
            stack.extend(reversed(pending))


def dumps(token: Token, **kwargs: Any) -> str:
    """Serialize a token to a JSON string using TokenJSONEncoder."""
    kwargs.setdefault("cls", TokenJSONEncoder)
    return json.dumps(token, **kwargs)


def dump(token: Token, fp: TextIO, **kwargs: Any) -> None:
    """Serialize a token to a JSON stream using TokenJSONEncoder."""
    kwargs.setdefault("cls", TokenJSONEncoder)
    json.dump(token, fp, **kwargs)


def dump_lines(tokens: Iterable[Token], fp: TextIO) -> int:
    """
    Write one JSON record per line. Returns the number of lines written.

    Every token is serialized before anything is written, so a failure
    leaves ``fp`` untouched.
    """
    lines = [dumps(token) for token in tokens]
    for line in lines:
        fp.write(line)
        fp.write("\n")
    return len(lines)


def _record_type(record: Any) -> tuple[type[Token], dict[str, Any]]:
    if not isinstance(record, dict):
        raise ValueError(f"token record must be an object, got {type(record).__name__}")
    name = record.get("type")
    cls = _TOKEN_TYPES.get(name)  # type: ignore[arg-type]
    if cls is None:
        raise ValueError(f"unknown token type: {name!r}")
    return cls, {key: value for key, value in record.items() if key != "type"}


def from_record(record: Any) -> Token:
    """
    Rebuild a token from its tagged record.

    Cons chains are followed along their tails with a loop.

    Raises:
        ValueError: If the record is not a dict or names an unknown type.
    """
    heads: list[Token] = []
    cls, values = _record_type(record)
    while cls is Cons:
        heads.append(from_record(values.get("head")))
        cls, values = _record_type(values.get("tail"))
    try:
        tail = cls(**values)
    except TypeError as e:
        raise ValueError(f"invalid {cls.__name__} record: {e}") from e
    return make_list(heads, tail)


def loads_token(s: str) -> Token:
    """Parse one JSON record into a token."""
    return from_record(json.loads(s))


__all__ = [
    "TokenJSONEncoder",
    "to_record",
    "dumps",
    "dump",
    "dump_lines",
    "from_record",
    "loads_token",
]
