# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("DecodeOptions",)

import dataclasses
from typing import ClassVar


@dataclasses.dataclass(frozen=True)
class DecodeOptions:
    """Configuration options for decoding a FITS buffer.

    The card and block sizes are fixed by the FITS standard and are not
    configurable.
    """

    fold_continue: bool = True
    """Whether to join ``CONTINUE`` cards onto the preceding string value
    (the FITS long-string convention).

    When `False`, ``CONTINUE`` cards are kept as records of their own.
    """

    strict_end_padding: bool = False
    """Whether non-blank cards between ``END`` and the end of the header's
    last block are an error.

    By default they are ignored (with a warning).
    """

    max_extensions: int | None = None
    """Maximum number of extension HDUs to decode.

    Any bytes after the last decoded extension are not examined.  `None`
    (default) decodes all of them.
    """

    DEFAULT: ClassVar[DecodeOptions]
    """Default options."""

    def __post_init__(self) -> None:
        if self.max_extensions is not None and self.max_extensions < 0:
            raise ValueError(f"max_extensions must be nonnegative; got {self.max_extensions}.")


DecodeOptions.DEFAULT = DecodeOptions()
