"""JSON value type sets."""

from __future__ import annotations

from enum import Flag
from typing import Any


class JsonType(Flag):
    """Set of JSON value types a location may hold.

    ``NUMBER`` is the union of ``INTEGER`` and ``FRACTIONAL``, so that
    ``{"type": "number"}`` intersected with ``{"type": "integer"}`` narrows to
    integers only.
    """

    NONE = 0
    ARRAY = 1
    BOOLEAN = 2
    FRACTIONAL = 4
    INTEGER = 8
    NULL = 16
    OBJECT = 32
    STRING = 64
    NUMBER = 12
    ANY = 127

    @classmethod
    def from_name(cls, name: str) -> JsonType:
        """Map a JSON Schema ``type`` keyword value to a type set."""
        try:
            return _BY_NAME[name]
        except KeyError:
            raise ValueError(f"unknown JSON type {name!r}") from None

    @classmethod
    def of_value(cls, value: Any) -> JsonType:
        """Return the type of a concrete JSON value (as loaded by :mod:`json`)."""
        if value is None:
            return cls.NULL
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            return cls.INTEGER if value.is_integer() else cls.FRACTIONAL
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, (list, tuple)):
            return cls.ARRAY
        if isinstance(value, dict):
            return cls.OBJECT
        raise TypeError(f"not a JSON value: {value!r}")

    def overlaps(self, other: JsonType) -> bool:
        return bool(self & other)

    def names(self) -> list[str]:
        """Sorted type names, with ``number`` standing for integer + fractional."""
        out: list[str] = []
        for name, member in _RENDER_ORDER:
            if member in self and member:
                out.append(name)
        if "number" in out:
            out = [n for n in out if n not in ("integer", "fractional")]
        return sorted(out)


_BY_NAME: dict[str, JsonType] = {
    "any": JsonType.ANY,
    "array": JsonType.ARRAY,
    "boolean": JsonType.BOOLEAN,
    "integer": JsonType.INTEGER,
    "null": JsonType.NULL,
    "number": JsonType.NUMBER,
    "object": JsonType.OBJECT,
    "string": JsonType.STRING,
}

_RENDER_ORDER: list[tuple[str, JsonType]] = [
    ("array", JsonType.ARRAY),
    ("boolean", JsonType.BOOLEAN),
    ("fractional", JsonType.FRACTIONAL),
    ("integer", JsonType.INTEGER),
    ("null", JsonType.NULL),
    ("number", JsonType.NUMBER),
    ("object", JsonType.OBJECT),
    ("string", JsonType.STRING),
]
