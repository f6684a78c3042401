# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("BITPIX_DTYPES", "HDU", "read_data", "read_hdu")

import dataclasses
from logging import getLogger

import numpy as np

from ._cards import Buffer, padded_size
from ._errors import MalformedFileError, TruncatedInputError
from ._header import Header, read_header
from ._options import DecodeOptions

_LOG = getLogger(__name__)

BITPIX_DTYPES: dict[int, np.dtype] = {
    8: np.dtype(">u1"),
    16: np.dtype(">i2"),
    32: np.dtype(">i4"),
    64: np.dtype(">i8"),
    -32: np.dtype(">f4"),
    -64: np.dtype(">f8"),
}
"""Big-endian numpy data types for each valid BITPIX value."""


@dataclasses.dataclass(frozen=True)
class HDU:
    """A header and the raw bytes of the data segment that follows it."""

    header: Header
    """The parsed header."""

    data: bytes = b""
    """The data segment, without its block padding."""

    offset: int = 0
    """Byte offset of the first header card within the file."""

    @property
    def is_primary(self) -> bool:
        """Whether this is a primary HDU."""
        return self.header.is_primary

    @property
    def shape(self) -> tuple[int, ...]:
        """Data shape in numpy (C) order, i.e. ``(..., NAXIS2, NAXIS1)``."""
        return self.header.axes[::-1]

    @property
    def dtype(self) -> np.dtype:
        """Big-endian numpy data type of a single data element."""
        return BITPIX_DTYPES[self.header.bitpix]

    def as_array(self) -> np.ndarray:
        """Return a read-only numpy view of the data.

        Returns
        -------
        array
            Array with `dtype` and `shape`; one-dimensional and empty if the
            HDU has no data axes.

        Raises
        ------
        ValueError
            Raised if the data is not a simple array, i.e. ``PCOUNT`` is not
            zero or ``GCOUNT`` is not one (binary tables with a heap, random
            groups).
        """
        if self.header.pcount != 0 or self.header.gcount != 1:
            raise ValueError(
                f"HDU at byte {self.offset} has PCOUNT={self.header.pcount}, GCOUNT={self.header.gcount}; "
                "its data is not a simple array."
            )
        shape = self.shape if self.header.naxis else (0,)
        if not self.data:
            array = np.empty(shape, dtype=self.dtype)
            array.flags.writeable = False
            return array
        return np.frombuffer(self.data, dtype=self.dtype).reshape(shape)

    def __str__(self) -> str:
        kind = "PRIMARY" if self.is_primary else self.header.xtension
        return f"HDU({kind}, axes={self.header.axes}, {len(self.data)} bytes)"


def read_data(buffer: Buffer, offset: int, header: Header) -> tuple[bytes, int]:
    """Read the data segment described by a header.

    Parameters
    ----------
    buffer
        Complete FITS file contents.
    offset
        Byte offset of the first byte after the header.
    header
        Parsed header that determines the data size.

    Returns
    -------
    data
        The data segment, copied out of ``buffer``, without padding.
    offset
        Offset of the first byte after the data segment's padding.

    Raises
    ------
    TruncatedInputError
        Raised if the buffer ends inside the data segment.
    MalformedFileError
        Raised if the buffer ends inside the padding after the data segment.
    """
    size = header.data_size
    end = offset + size
    if end > len(buffer):
        raise TruncatedInputError(
            f"Data segment needs {size} bytes but only {len(buffer) - offset} remain.", offset
        )
    padded_end = offset + padded_size(size)
    if padded_end > len(buffer):
        raise MalformedFileError(
            f"Buffer ends {padded_end - len(buffer)} bytes short of the data segment's block boundary.",
            len(buffer),
        )
    return bytes(buffer[offset:end]), padded_end


def read_hdu(
    buffer: Buffer,
    offset: int,
    *,
    primary: bool,
    options: DecodeOptions = DecodeOptions.DEFAULT,
) -> tuple[HDU, int]:
    """Read the header and data segment of one HDU.

    Parameters
    ----------
    buffer
        Complete FITS file contents.
    offset
        Byte offset of the HDU's first header card.
    primary
        Whether this is the primary HDU.
    options, optional
        Decoding options.

    Returns
    -------
    hdu
        The HDU.
    offset
        Offset of the first byte after the HDU (always a block boundary
        relative to ``offset``).
    """
    header, data_offset = read_header(buffer, offset, primary=primary, options=options)
    data, end = read_data(buffer, data_offset, header)
    _LOG.debug("Read %d data bytes at byte %d (%d with padding).", len(data), data_offset, end - data_offset)
    return HDU(header, data, offset), end
