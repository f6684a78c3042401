# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("Fits", "decode")

import dataclasses
from collections.abc import Iterator
from logging import getLogger

from ._cards import BLOCK_SIZE, Buffer
from ._errors import MalformedFileError, MissingMandatoryKeywordError, TruncatedInputError
from ._hdu import HDU, read_hdu
from ._keywords import StandardKeyword
from ._options import DecodeOptions

_LOG = getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Fits:
    """A decoded FITS file: a primary HDU followed by extension HDUs.

    Indexing with an `int` returns an HDU by position (0 is the primary);
    indexing with a `str` returns the first HDU with that ``EXTNAME``.
    """

    primary_hdu: HDU
    """The primary HDU."""

    extensions: tuple[HDU, ...] = ()
    """Extension HDUs, in file order."""

    def __len__(self) -> int:
        return 1 + len(self.extensions)

    def __iter__(self) -> Iterator[HDU]:
        yield self.primary_hdu
        yield from self.extensions

    def __getitem__(self, key: int | str) -> HDU:
        match key:
            case int():
                hdus = list(self)
                try:
                    return hdus[key]
                except IndexError:
                    raise IndexError(
                        f"HDU index {key} out of range for a file with {len(hdus)} HDUs."
                    ) from None
            case str():
                for hdu in self:
                    if hdu.header.extname == key:
                        return hdu
                raise KeyError(f"No HDU with EXTNAME={key!r}.")
        raise TypeError(f"Invalid HDU key {key!r}.")

    @classmethod
    def from_bytes(cls, buffer: Buffer, options: DecodeOptions = DecodeOptions.DEFAULT) -> Fits:
        """Decode a complete in-memory FITS file; see `decode`."""
        return decode(buffer, options)


def decode(buffer: Buffer, options: DecodeOptions = DecodeOptions.DEFAULT) -> Fits:
    """Decode a complete in-memory FITS file.

    Parameters
    ----------
    buffer
        The entire contents of a FITS file.
    options, optional
        Decoding options.

    Returns
    -------
    fits
        The decoded file.

    Raises
    ------
    FitsDecodeError
        Raised (as one of its subclasses) if the buffer is not a well-formed
        FITS file.  No partial result is ever returned.
    """
    if len(buffer) == 0:
        raise TruncatedInputError("Buffer is empty.", 0)
    primary, offset = _read_hdu_or_reject(buffer, 0, primary=True, options=options)
    if primary.header[StandardKeyword.SIMPLE] is not True:
        raise MalformedFileError("Primary header has SIMPLE = F; the file does not conform to FITS.", 0)
    extensions: list[HDU] = []
    while offset < len(buffer):
        if options.max_extensions is not None and len(extensions) >= options.max_extensions:
            _LOG.debug(
                "Stopping after %d extensions; %d bytes not examined.", len(extensions), len(buffer) - offset
            )
            break
        if len(buffer) - offset < BLOCK_SIZE:
            raise MalformedFileError(
                f"{len(buffer) - offset} trailing bytes do not form a complete block.", offset
            )
        hdu, offset = _read_hdu_or_reject(buffer, offset, primary=False, options=options)
        extensions.append(hdu)
    _LOG.debug("Decoded primary HDU and %d extension(s) from %d bytes.", len(extensions), len(buffer))
    return Fits(primary, tuple(extensions))


def _read_hdu_or_reject(
    buffer: Buffer, offset: int, *, primary: bool, options: DecodeOptions
) -> tuple[HDU, int]:
    try:
        return read_hdu(buffer, offset, primary=primary, options=options)
    except MissingMandatoryKeywordError as err:
        if err.keyword in (StandardKeyword.SIMPLE, StandardKeyword.XTENSION):
            kind = "primary" if primary else "extension"
            raise MalformedFileError(f"Not a valid {kind} header: {err.message}", offset) from err
        raise
