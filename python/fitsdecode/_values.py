# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Classification and parsing of the value field of a header card.

A value field is the text after the ``= `` value indicator (card columns
11-80).  Its kind is decided purely by syntax, starting from the first
non-blank character:

- ``T`` or ``F`` alone is a logical value;
- ``'`` opens a string, in which ``''`` stands for a single quote;
- ``(`` opens a complex value holding two comma-separated numbers;
- a digit, sign, or ``.`` starts an integer or real number;
- a blank field (possibly followed by a comment) is undefined.

Anything after a ``/`` that is not inside a string is the card's comment.
"""

from __future__ import annotations

__all__ = (
    "INTEGER_MAX",
    "INTEGER_MIN",
    "Value",
    "ValueKind",
    "parse_value",
)

import dataclasses
import enum
import re
from typing import TypeAlias, cast

from ._errors import MalformedValueError

PythonValue: TypeAlias = bool | int | float | complex | str | None

INTEGER_MIN = -(2**63)
"""Smallest integer kept as `ValueKind.INTEGER`; smaller ones become reals."""

INTEGER_MAX = 2**63 - 1
"""Largest integer kept as `ValueKind.INTEGER`; larger ones become reals."""

_INTEGER_RE = re.compile(r"[-+]?[0-9]+")
_REAL_RE = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[EeDd][-+]?[0-9]+)?")
_NUMBER_START = frozenset("0123456789+-.")


class ValueKind(enum.StrEnum):
    """The kinds of value a FITS header card may hold."""

    LOGICAL = "LOGICAL"
    INTEGER = "INTEGER"
    REAL = "REAL"
    COMPLEX = "COMPLEX"
    STRING = "STRING"
    UNDEFINED = "UNDEFINED"


@dataclasses.dataclass(frozen=True)
class Value:
    """A typed header value.

    Use the `logical`, `integer`, `real`, `complex`, `string`, and
    `undefined` factory methods rather than the constructor, so the kind
    and the Python type of `data` always agree.
    """

    kind: ValueKind
    """Kind of the value."""

    data: PythonValue = None
    """Python representation: `bool`, `int`, `float`, `complex`, `str`, or
    `None` for `ValueKind.UNDEFINED`.
    """

    @classmethod
    def logical(cls, data: bool) -> Value:
        return cls(ValueKind.LOGICAL, bool(data))

    @classmethod
    def integer(cls, data: int) -> Value:
        return cls(ValueKind.INTEGER, int(data))

    @classmethod
    def real(cls, data: float) -> Value:
        return cls(ValueKind.REAL, float(data))

    @classmethod
    def complex(cls, real: float, imag: float) -> Value:
        return cls(ValueKind.COMPLEX, complex(real, imag))

    @classmethod
    def string(cls, data: str) -> Value:
        return cls(ValueKind.STRING, str(data))

    @classmethod
    def undefined(cls) -> Value:
        return cls(ValueKind.UNDEFINED, None)

    @property
    def is_defined(self) -> bool:
        """Whether this value holds anything at all."""
        return self.kind is not ValueKind.UNDEFINED

    def __str__(self) -> str:
        match self.kind:
            case ValueKind.LOGICAL:
                return "T" if self.data else "F"
            case ValueKind.STRING:
                escaped = cast(str, self.data).replace("'", "''")
                return f"'{escaped}'"
            case ValueKind.COMPLEX:
                data = cast(complex, self.data)
                return f"({data.real!r}, {data.imag!r})"
            case ValueKind.UNDEFINED:
                return ""
        return repr(self.data)


def parse_value(field: str) -> tuple[Value, int | None]:
    """Parse the value field of a card.

    Parameters
    ----------
    field
        Text of the card after the value indicator, i.e. card columns
        11-80 (possibly shorter).

    Returns
    -------
    value
        The parsed value.
    comment_start
        Index into ``field`` of the ``/`` that introduces the comment, or
        `None` if there is no comment.

    Raises
    ------
    MalformedValueError
        Raised if the field is not blank and does not match any recognized
        value syntax, or if a quoted string is not terminated.
    """
    start = _skip_blanks(field, 0)
    if start == len(field):
        return Value.undefined(), None
    if field[start] == "/":
        return Value.undefined(), start
    if field[start] == "'":
        return _parse_string(field, start)
    slash = field.find("/", start)
    stop = len(field) if slash == -1 else slash
    comment_start = None if slash == -1 else slash
    token = field[start:stop].rstrip(" ")
    if token in ("T", "F"):
        return Value.logical(token == "T"), comment_start
    if token.startswith("("):
        return _parse_complex(token), comment_start
    if token[0] in _NUMBER_START:
        return _parse_number(token), comment_start
    raise MalformedValueError(f"Unrecognized value syntax {token!r}.")


def _skip_blanks(field: str, index: int) -> int:
    while index < len(field) and field[index] == " ":
        index += 1
    return index


def _parse_string(field: str, start: int) -> tuple[Value, int | None]:
    pieces: list[str] = []
    index = start + 1
    while True:
        close = field.find("'", index)
        if close == -1:
            raise MalformedValueError(f"Unterminated string in value field {field.rstrip()!r}.")
        pieces.append(field[index:close])
        if field.startswith("''", close):
            pieces.append("'")
            index = close + 2
        else:
            break
    # Trailing blanks inside the quotes are not significant; leading ones are.
    text = "".join(pieces).rstrip(" ")
    rest = _skip_blanks(field, close + 1)
    if rest == len(field):
        return Value.string(text), None
    if field[rest] == "/":
        return Value.string(text), rest
    raise MalformedValueError(
        f"Unexpected text {field[rest:].rstrip()!r} after string value {text!r}."
    )


def _parse_number(token: str) -> Value:
    if _INTEGER_RE.fullmatch(token):
        number = int(token)
        if INTEGER_MIN <= number <= INTEGER_MAX:
            return Value.integer(number)
        return Value.real(float(number))
    if _REAL_RE.fullmatch(token):
        return Value.real(_to_float(token))
    raise MalformedValueError(f"Invalid numeric value {token!r}.")


def _parse_complex(token: str) -> Value:
    if not token.endswith(")"):
        raise MalformedValueError(f"Unterminated complex value {token!r}.")
    parts = token[1:-1].split(",")
    if len(parts) != 2:
        raise MalformedValueError(f"Complex value {token!r} must have exactly two parts.")
    real, imag = (part.strip(" ") for part in parts)
    for part in (real, imag):
        if not _REAL_RE.fullmatch(part):
            raise MalformedValueError(f"Invalid number {part!r} in complex value {token!r}.")
    return Value.complex(_to_float(real), _to_float(imag))


def _to_float(token: str) -> float:
    # FITS allows 'D' as a double-precision exponent marker.
    return float(token.replace("D", "E").replace("d", "e"))
