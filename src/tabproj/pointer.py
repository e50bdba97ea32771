"""JSON pointers (RFC 6901) identifying locations inside a document.

A :class:`Pointer` is an immutable tuple of tokens.  Each token is one of:

- ``str``: an object property name
- ``int``: an array index
- :data:`NEXT_INDEX`: the ``-`` marker, meaning "append to the array"

Pointers compare, hash and sort structurally over their tokens, so they can
be used as dict keys and sorted deterministically.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Iterator, Union


class _NextIndex(Enum):
    NEXT_INDEX = "-"

    def __repr__(self) -> str:
        return "NEXT_INDEX"


NEXT_INDEX = _NextIndex.NEXT_INDEX

Token = Union[str, int, _NextIndex]

_INDEX_RE = re.compile(r"0|[1-9][0-9]*")


def parse_token(raw: str) -> Token:
    """Parse one unescaped pointer segment into a token."""
    if raw == "-":
        return NEXT_INDEX
    if _INDEX_RE.fullmatch(raw):
        return int(raw)
    return raw


def render_token(token: Token) -> str:
    """Render a token as plain text (no pointer escaping)."""
    if token is NEXT_INDEX:
        return "-"
    return str(token)


def _escape(text: str) -> str:
    return text.replace("~", "~0").replace("/", "~1")


def _unescape(text: str) -> str:
    return text.replace("~1", "/").replace("~0", "~")


def _token_key(token: Token) -> tuple:
    # indices < append marker < properties
    if isinstance(token, int):
        return (0, token, "")
    if token is NEXT_INDEX:
        return (1, 0, "")
    return (2, 0, token)


@total_ordering
@dataclass(frozen=True)
class Pointer:
    """An immutable, structurally-compared JSON pointer."""

    tokens: tuple[Token, ...] = ()

    @classmethod
    def from_str(cls, text: str) -> Pointer:
        """Parse an RFC 6901 pointer string.

        Raises:
            ValueError: If a non-empty pointer does not start with ``/``.
        """
        if text == "":
            return cls()
        if not text.startswith("/"):
            raise ValueError(f"invalid JSON pointer {text!r}: must be empty or start with '/'")
        return cls(tuple(parse_token(_unescape(part)) for part in text[1:].split("/")))

    def child(self, token: Token) -> Pointer:
        """Return a new pointer with *token* appended."""
        return Pointer(self.tokens + (token,))

    @property
    def is_root(self) -> bool:
        return not self.tokens

    def __str__(self) -> str:
        return "".join("/" + _escape(render_token(t)) for t in self.tokens)

    def __repr__(self) -> str:
        return f"Pointer({str(self)!r})"

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Pointer):
            return NotImplemented
        return [_token_key(t) for t in self.tokens] < [_token_key(t) for t in other.tokens]
