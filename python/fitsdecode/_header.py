# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("VALID_BITPIX", "Header", "fold_continuations", "read_header")

import dataclasses
import math
from collections.abc import Iterable, Iterator
from functools import cached_property
from logging import getLogger
from typing import Any, cast

from ._cards import CARD_SIZE, CARDS_PER_BLOCK, Buffer, read_card
from ._errors import FitsDecodeError, MalformedFileError, MissingMandatoryKeywordError
from ._keywords import StandardKeyword
from ._options import DecodeOptions
from ._records import KeywordRecord, parse_record
from ._values import Value, ValueKind

_LOG = getLogger(__name__)

VALID_BITPIX = frozenset({8, 16, 32, 64, -32, -64})
"""BITPIX values allowed by the FITS standard."""

_BLANK_CARD = b" " * CARD_SIZE


@dataclasses.dataclass(frozen=True)
class Header:
    """An ordered, read-only sequence of keyword records.

    Indexing a header with a keyword returns the Python value of the last
    record with that keyword, since later cards override earlier ones.
    Iterating yields the `KeywordRecord` objects in file order.

    Notes
    -----
    ``records`` ends with the ``END`` record; the blank cards that pad the
    header out to a whole number of blocks are not kept, but they are
    counted in `card_count`.
    """

    records: tuple[KeywordRecord, ...]
    """Records in file order, through ``END``."""

    card_count: int = 0
    """Number of cards the header occupied in the file, including padding
    (a multiple of `~fitsdecode.CARDS_PER_BLOCK` for any parsed header).
    """

    @cached_property
    def _index(self) -> dict[str, int]:
        return {record.keyword: n for n, record in enumerate(self.records) if not record.commentary}

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[KeywordRecord]:
        return iter(self.records)

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._index

    def __getitem__(self, keyword: str) -> Any:
        return self.record(keyword).value.data

    def get(self, keyword: str, default: Any = None) -> Any:
        """Return the value of a keyword, or ``default`` if it is absent."""
        try:
            return self[keyword]
        except KeyError:
            return default

    def record(self, keyword: str) -> KeywordRecord:
        """Return the last valued record with the given keyword.

        Raises
        ------
        KeyError
            Raised if there is no such record.
        """
        return self.records[self._index[keyword]]

    def values(self, keyword: str) -> list[Any]:
        """Return the values of all valued records with the given keyword,
        in file order.
        """
        return [r.value.data for r in self.records if r.keyword == keyword and not r.commentary]

    @property
    def comments(self) -> list[str]:
        """Text of all ``COMMENT`` cards."""
        return self._commentary(StandardKeyword.COMMENT)

    @property
    def history(self) -> list[str]:
        """Text of all ``HISTORY`` cards."""
        return self._commentary(StandardKeyword.HISTORY)

    def _commentary(self, keyword: str) -> list[str]:
        return [r.comment or "" for r in self.records if r.keyword == keyword and r.commentary]

    @property
    def is_primary(self) -> bool:
        """Whether this header starts with ``SIMPLE``."""
        return bool(self.records) and self.records[0].keyword == StandardKeyword.SIMPLE

    @property
    def xtension(self) -> str | None:
        """The extension type (e.g. ``IMAGE``, ``BINTABLE``), or `None` for a
        primary header.
        """
        if self.is_primary:
            return None
        return self._require(StandardKeyword.XTENSION, ValueKind.STRING)

    @property
    def extname(self) -> str | None:
        """The ``EXTNAME`` value, if present."""
        value = self.get(StandardKeyword.EXTNAME)
        return value if isinstance(value, str) else None

    @cached_property
    def bitpix(self) -> int:
        """Signed number of bits per data element."""
        bitpix = self._require(StandardKeyword.BITPIX, ValueKind.INTEGER)
        if bitpix not in VALID_BITPIX:
            raise MissingMandatoryKeywordError(
                StandardKeyword.BITPIX, f"BITPIX={bitpix} is not one of {sorted(VALID_BITPIX)}."
            )
        return bitpix

    @cached_property
    def naxis(self) -> int:
        """Number of data axes."""
        naxis = self._require(StandardKeyword.NAXIS, ValueKind.INTEGER)
        if not 0 <= naxis <= 999:
            raise MissingMandatoryKeywordError(
                StandardKeyword.NAXIS, f"NAXIS={naxis} is outside the range 0-999."
            )
        return naxis

    @cached_property
    def axes(self) -> tuple[int, ...]:
        """Lengths of the data axes, ``(NAXIS1, NAXIS2, ...)``."""
        result = []
        for n in range(1, self.naxis + 1):
            keyword = StandardKeyword.naxis(n)
            size = self._require(keyword, ValueKind.INTEGER)
            if size < 0:
                raise MissingMandatoryKeywordError(keyword, f"{keyword}={size} is negative.")
            result.append(size)
        return tuple(result)

    @property
    def pcount(self) -> int:
        """Number of bytes following the main data array (0 if absent)."""
        return self._optional_count(StandardKeyword.PCOUNT, 0)

    @property
    def gcount(self) -> int:
        """Number of groups in the data (1 if absent)."""
        return self._optional_count(StandardKeyword.GCOUNT, 1)

    @property
    def data_size(self) -> int:
        """Size of the data segment in bytes, not including block padding.

        For a primary header this is ``|BITPIX| * NAXIS1 * ... * NAXISn / 8``.
        Extensions also account for ``PCOUNT`` and ``GCOUNT``, which reduces
        to the same thing when those have their default values.
        """
        if self.naxis == 0:
            return 0
        elements = math.prod(self.axes)
        if self.is_primary:
            return abs(self.bitpix) * elements // 8
        return abs(self.bitpix) * self.gcount * (self.pcount + elements) // 8

    def _require(self, keyword: str, kind: ValueKind) -> Any:
        try:
            record = self.record(keyword)
        except KeyError:
            raise MissingMandatoryKeywordError(keyword, f"Mandatory keyword {keyword} is missing.") from None
        if record.value.kind is not kind:
            raise MissingMandatoryKeywordError(
                keyword, f"Keyword {keyword} has a {record.value.kind.lower()} value, not {kind.lower()}."
            )
        return record.value.data

    def _optional_count(self, keyword: str, default: int) -> int:
        if keyword not in self:
            return default
        count = self._require(keyword, ValueKind.INTEGER)
        if count < 0:
            raise MissingMandatoryKeywordError(keyword, f"{keyword}={count} is negative.")
        return count


def fold_continuations(records: Iterable[KeywordRecord]) -> list[KeywordRecord]:
    """Join ``CONTINUE`` records onto the string value before them.

    A string value that ends with ``&`` continues in the immediately
    following ``CONTINUE`` record: the ``&`` is dropped and the continuation
    text appended.  Comments of the continuation records are appended to the
    comment of the original record.  ``CONTINUE`` records that do not follow
    such a string are kept unchanged.
    """
    result: list[KeywordRecord] = []
    for record in records:
        if record.keyword == StandardKeyword.CONTINUE and not record.commentary:
            previous = result[-1] if result else None
            if previous is not None and _is_continued(previous):
                result[-1] = _join(previous, record)
                continue
            _LOG.warning("CONTINUE card does not follow a string ending in '&'; keeping it as-is.")
        result.append(record)
    return result


def _is_continued(record: KeywordRecord) -> bool:
    return (
        not record.commentary
        and record.value.kind is ValueKind.STRING
        and isinstance(record.value.data, str)
        and record.value.data.endswith("&")
    )


def _join(previous: KeywordRecord, continuation: KeywordRecord) -> KeywordRecord:
    head = cast(str, previous.value.data)
    tail = continuation.value.data if isinstance(continuation.value.data, str) else ""
    comments = [c for c in (previous.comment, continuation.comment) if c]
    return dataclasses.replace(
        previous,
        value=Value.string(head[:-1] + tail),
        comment=" ".join(comments) if comments else previous.comment,
    )


def read_header(
    buffer: Buffer,
    offset: int,
    *,
    primary: bool,
    options: DecodeOptions = DecodeOptions.DEFAULT,
) -> tuple[Header, int]:
    """Parse the header that starts at ``offset``.

    Parameters
    ----------
    buffer
        Complete FITS file contents.
    offset
        Byte offset of the header's first card.
    primary
        Whether this is the primary header (which must start with
        ``SIMPLE``) or an extension header (which must start with
        ``XTENSION``).
    options, optional
        Decoding options.

    Returns
    -------
    header
        The parsed header, with its mandatory keywords validated.
    offset
        Offset of the first byte after the header's last block.

    Raises
    ------
    TruncatedInputError
        Raised if the buffer ends before the ``END`` card or the end of the
        header's last block.
    MalformedKeywordError
        Raised if a card's keyword is invalid.
    MalformedValueError
        Raised if a card's value is invalid.
    MissingMandatoryKeywordError
        Raised if a structural keyword is missing or has an invalid value.
    MalformedFileError
        Raised if ``options.strict_end_padding`` is set and a card after
        ``END`` is not blank.
    """
    start = offset
    records: list[KeywordRecord] = []
    n_cards = 0
    while True:
        card_offset = offset
        card, offset = read_card(buffer, offset)
        n_cards += 1
        if n_cards == 1:
            _check_discriminator(card, primary, start)
        try:
            record = parse_record(card)
        except FitsDecodeError as err:
            if err.offset is None:
                err.offset = card_offset
            raise
        records.append(record)
        if record.keyword == StandardKeyword.END:
            break
    warned = False
    while n_cards % CARDS_PER_BLOCK:
        card_offset = offset
        card, offset = read_card(buffer, offset)
        n_cards += 1
        if card != _BLANK_CARD:
            if options.strict_end_padding:
                raise MalformedFileError("Non-blank card after END.", card_offset)
            if not warned:
                _LOG.warning("Ignoring non-blank card(s) after END in header at byte %d.", start)
                warned = True
    if options.fold_continue:
        records = fold_continuations(records)
    header = Header(tuple(records), card_count=n_cards)
    try:
        _check_mandatory(header, primary)
    except MissingMandatoryKeywordError as err:
        err.offset = start
        raise
    _LOG.debug(
        "Parsed %s header at byte %d: %d records in %d cards.",
        "primary" if primary else f"{header.xtension} extension",
        start,
        len(header),
        n_cards,
    )
    return header, offset


def _check_discriminator(card: bytes, primary: bool, offset: int) -> None:
    # Checked on the raw keyword field, before the card itself is parsed.
    expected = StandardKeyword.SIMPLE if primary else StandardKeyword.XTENSION
    keyword = card[:8].decode("ascii", errors="replace").rstrip(" ")
    if keyword != expected:
        raise MissingMandatoryKeywordError(
            expected, f"Header starts with {keyword!r}, not {expected.value!r}.", offset
        )


def _check_mandatory(header: Header, primary: bool) -> None:
    if primary:
        header._require(StandardKeyword.SIMPLE, ValueKind.LOGICAL)
    else:
        header._require(StandardKeyword.XTENSION, ValueKind.STRING)
    # Accessing these validates them.
    _ = header.bitpix, header.axes, header.pcount, header.gcount
