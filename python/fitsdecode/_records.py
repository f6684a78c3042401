# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("KeywordRecord", "parse_record")

import dataclasses
import re

from ._cards import CARD_SIZE
from ._errors import MalformedKeywordError, MalformedValueError, TruncatedInputError
from ._keywords import COMMENTARY_KEYWORDS, StandardKeyword
from ._values import Value, ValueKind, parse_value

_KEYWORD_RE = re.compile(r"[A-Z0-9_-]*")

_VALUE_INDICATOR = "= "


@dataclasses.dataclass(frozen=True)
class KeywordRecord:
    """A single parsed header card."""

    keyword: str
    """Keyword name with trailing blanks removed (``""`` for blank cards)."""

    value: Value = dataclasses.field(default_factory=Value.undefined)
    """Typed value; `ValueKind.UNDEFINED` for commentary records."""

    comment: str | None = None
    """Text after the ``/`` of a valued card, or the free text of a
    commentary card (``COMMENT``, ``HISTORY``, blank keyword, or any other
    keyword without a value indicator).
    """

    commentary: bool = False
    """Whether the card had no value indicator, so `value` is not
    meaningful.
    """

    @property
    def standard_keyword(self) -> StandardKeyword | None:
        """The structural keyword this record holds, if any."""
        return StandardKeyword.lookup(self.keyword)

    def __str__(self) -> str:
        if self.commentary:
            return f"{self.keyword:8}{self.comment or ''}".rstrip()
        indicator = "  " if self.keyword == StandardKeyword.CONTINUE else _VALUE_INDICATOR
        text = f"{self.keyword:8}{indicator}{self.value!s}"
        if self.comment is not None:
            text = f"{text} / {self.comment}"
        return text


def parse_record(card: bytes) -> KeywordRecord:
    """Parse one card image into a `KeywordRecord`.

    Parameters
    ----------
    card
        Exactly `~fitsdecode.CARD_SIZE` bytes.

    Returns
    -------
    record
        The parsed record.  ``CONTINUE`` cards are returned as records of
        their own; joining them onto the preceding string is done when the
        whole header is assembled.

    Raises
    ------
    MalformedKeywordError
        Raised if the keyword field holds anything but upper-case letters,
        digits, hyphens, and underscores followed by blanks.
    MalformedValueError
        Raised if the card has a value indicator but the value cannot be
        parsed.
    """
    if len(card) != CARD_SIZE:
        raise TruncatedInputError(f"Card must be {CARD_SIZE} bytes, not {len(card)}.")
    keyword = _parse_keyword(card[:8])
    try:
        text = card.decode("ascii")
    except UnicodeDecodeError as err:
        raise MalformedValueError(f"Card for keyword {keyword!r} contains non-ASCII bytes.") from err
    if keyword == StandardKeyword.END:
        return KeywordRecord(keyword, commentary=True)
    if keyword == StandardKeyword.CONTINUE:
        return _parse_continue(text[10:])
    if keyword not in COMMENTARY_KEYWORDS and text[8:10] == _VALUE_INDICATOR:
        field = text[10:]
        try:
            value, comment_start = parse_value(field)
        except MalformedValueError as err:
            err.message = f"{err.message} [keyword {keyword!r}]"
            raise
        return KeywordRecord(keyword, value, _comment(field, comment_start))
    return KeywordRecord(keyword, comment=text[8:].rstrip(" "), commentary=True)


def _parse_keyword(raw: bytes) -> str:
    try:
        keyword = raw.decode("ascii").rstrip(" ")
    except UnicodeDecodeError:
        raise MalformedKeywordError(f"Keyword field {raw!r} contains non-ASCII bytes.") from None
    if not _KEYWORD_RE.fullmatch(keyword):
        if _KEYWORD_RE.fullmatch(keyword.upper()):
            raise MalformedKeywordError(f"Keyword {keyword!r} is not upper case.")
        raise MalformedKeywordError(f"Keyword field {keyword!r} contains invalid characters.")
    return keyword


def _parse_continue(field: str) -> KeywordRecord:
    value, comment_start = parse_value(field)
    if value.kind is not ValueKind.STRING and value.is_defined:
        raise MalformedValueError(f"CONTINUE card holds a {value.kind.lower()} value, not a string.")
    return KeywordRecord(StandardKeyword.CONTINUE.value, value, _comment(field, comment_start))


def _comment(field: str, comment_start: int | None) -> str | None:
    if comment_start is None:
        return None
    return field[comment_start + 1 :].strip(" ")
