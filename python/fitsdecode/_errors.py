# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = (
    "FitsDecodeError",
    "MalformedFileError",
    "MalformedKeywordError",
    "MalformedValueError",
    "MissingMandatoryKeywordError",
    "TruncatedInputError",
)


class FitsDecodeError(RuntimeError):
    """Base class for all errors raised while decoding a FITS byte buffer.

    Parameters
    ----------
    message
        Description of the problem.
    offset, optional
        Byte offset into the buffer at which the problem was detected, if
        known.

    Notes
    -----
    Parsers that work on a single card or value field do not know where that
    card lives in the file, so they raise with ``offset=None``; the header
    parser fills in the offset of the card before re-raising.
    """

    def __init__(self, message: str, offset: int | None = None):
        super().__init__(message)
        self.message = message
        self.offset = offset

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} (at byte {self.offset})"


class TruncatedInputError(FitsDecodeError):
    """The buffer ended before a card, block, or data segment was complete."""


class MalformedKeywordError(FitsDecodeError):
    """The keyword field of a card contains characters FITS does not allow."""


class MalformedValueError(FitsDecodeError):
    """The value field of a card does not match any FITS value syntax."""


class MissingMandatoryKeywordError(FitsDecodeError):
    """A structural keyword is absent from a header, or present with an
    unusable value.

    Parameters
    ----------
    keyword
        The keyword that is missing or invalid.
    message
        Description of the problem.
    offset, optional
        Byte offset of the header that lacks the keyword.
    """

    def __init__(self, keyword: str, message: str, offset: int | None = None):
        super().__init__(message, offset)
        self.keyword = keyword


class MalformedFileError(FitsDecodeError):
    """The sequence of HDUs does not form a valid FITS file."""
