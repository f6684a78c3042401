# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("COMMENTARY_KEYWORDS", "StandardKeyword")

import enum
import re

_NAXIS_N_RE = re.compile(r"NAXIS([1-9][0-9]{0,2})")


class StandardKeyword(enum.StrEnum):
    """Header keywords with structural meaning to the decoder.

    Members compare equal to the keyword strings themselves, so they can be
    used directly to index a `Header`.  The ``NAXISn`` member stands for the
    whole ``NAXIS1`` ... ``NAXIS999`` family; use `naxis` to build a
    specific one.
    """

    SIMPLE = "SIMPLE"
    XTENSION = "XTENSION"
    BITPIX = "BITPIX"
    NAXIS = "NAXIS"
    NAXISn = "NAXISn"
    EXTEND = "EXTEND"
    PCOUNT = "PCOUNT"
    GCOUNT = "GCOUNT"
    EXTNAME = "EXTNAME"
    EXTVER = "EXTVER"
    CONTINUE = "CONTINUE"
    COMMENT = "COMMENT"
    HISTORY = "HISTORY"
    END = "END"

    @classmethod
    def lookup(cls, keyword: str) -> StandardKeyword | None:
        """Return the member for a keyword, or `None` if it has no
        structural meaning.

        Trailing blanks are ignored, so raw 8-character keyword fields may
        be passed directly.
        """
        keyword = keyword.rstrip(" ")
        if _NAXIS_N_RE.fullmatch(keyword):
            return cls.NAXISn
        if keyword == cls.NAXISn.value:
            return None
        try:
            return cls(keyword)
        except ValueError:
            return None

    @staticmethod
    def naxis(n: int) -> str:
        """Return the keyword for the length of (one-indexed) axis ``n``."""
        if not 1 <= n <= 999:
            raise ValueError(f"Axis number {n} is outside the range 1-999.")
        return f"NAXIS{n}"


COMMENTARY_KEYWORDS = frozenset({StandardKeyword.COMMENT.value, StandardKeyword.HISTORY.value, ""})
"""Keywords whose cards never carry a value, even if columns 9-10 hold
``= ``.
"""
