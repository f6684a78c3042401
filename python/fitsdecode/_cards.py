# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Fixed-width slicing of a FITS byte buffer into cards and blocks."""

from __future__ import annotations

__all__ = (
    "BLOCK_SIZE",
    "CARDS_PER_BLOCK",
    "CARD_SIZE",
    "Buffer",
    "padded_size",
    "read_block",
    "read_card",
)

from typing import TypeAlias

from ._errors import TruncatedInputError

Buffer: TypeAlias = bytes | bytearray | memoryview

CARD_SIZE = 80
"""Width of a header card image, in bytes."""

BLOCK_SIZE = 2880
"""Size of a FITS logical record; headers and data are padded to this."""

CARDS_PER_BLOCK = BLOCK_SIZE // CARD_SIZE


def padded_size(size: int) -> int:
    """Round a byte count up to the next multiple of `BLOCK_SIZE`."""
    return -(-size // BLOCK_SIZE) * BLOCK_SIZE


def read_card(buffer: Buffer, offset: int) -> tuple[bytes, int]:
    """Slice the card that starts at ``offset``.

    Parameters
    ----------
    buffer
        Complete FITS file contents.
    offset
        Byte offset of the first byte of the card.

    Returns
    -------
    card
        Exactly `CARD_SIZE` bytes, copied out of ``buffer``.
    offset
        Offset of the first byte after the card.

    Raises
    ------
    TruncatedInputError
        Raised if fewer than `CARD_SIZE` bytes remain.
    """
    if offset < 0:
        raise ValueError(f"Negative buffer offset {offset}.")
    end = offset + CARD_SIZE
    if end > len(buffer):
        raise TruncatedInputError(
            f"Expected a {CARD_SIZE}-byte card but only {max(len(buffer) - offset, 0)} bytes remain.",
            offset,
        )
    return bytes(buffer[offset:end]), end


def read_block(buffer: Buffer, index: int) -> bytes:
    """Return the ``index``-th (zero-indexed) `BLOCK_SIZE` block of a buffer.

    Raises
    ------
    TruncatedInputError
        Raised if the buffer does not contain a complete block at that index.
    """
    start = index * BLOCK_SIZE
    if index < 0 or start + BLOCK_SIZE > len(buffer):
        raise TruncatedInputError(f"Buffer does not contain a complete block {index}.", max(start, 0))
    return bytes(buffer[start : start + BLOCK_SIZE])
