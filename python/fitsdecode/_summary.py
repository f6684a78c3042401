# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Pydantic models that summarize a decoded file as JSON."""

from __future__ import annotations

__all__ = ("FitsSummaryModel", "HDUSummaryModel", "KeywordRecordModel")

import pydantic

from ._fits import Fits
from ._hdu import HDU
from ._records import KeywordRecord
from ._values import ValueKind


class KeywordRecordModel(pydantic.BaseModel):
    """Serialized form of a `KeywordRecord`."""

    model_config = pydantic.ConfigDict(frozen=True)

    keyword: str
    """Keyword name."""

    kind: ValueKind | None = None
    """Value kind, or `None` for commentary records."""

    value: bool | int | float | str | tuple[float, float] | None = None
    """Value; complex numbers are ``[real, imag]`` pairs."""

    comment: str | None = None
    """Comment or commentary text."""

    @classmethod
    def from_record(cls, record: KeywordRecord) -> KeywordRecordModel:
        """Construct from a decoded record."""
        if record.commentary:
            return cls(keyword=record.keyword, comment=record.comment)
        data = record.value.data
        value: bool | int | float | str | tuple[float, float] | None
        if isinstance(data, complex):
            value = (data.real, data.imag)
        else:
            value = data
        return cls(keyword=record.keyword, kind=record.value.kind, value=value, comment=record.comment)


class HDUSummaryModel(pydantic.BaseModel):
    """Serialized summary of one HDU."""

    index: int
    """Position of the HDU in the file (0 is the primary)."""

    offset: int
    """Byte offset of the HDU's header."""

    xtension: str | None = None
    """Extension type, or `None` for the primary HDU."""

    extname: str | None = None
    """``EXTNAME`` value, if any."""

    bitpix: int
    """Signed bits per data element."""

    axes: list[int]
    """``NAXISn`` values in header order."""

    data_size: int
    """Size of the data segment in bytes, without padding."""

    records: list[KeywordRecordModel] | None = None
    """All header records, if requested."""

    @classmethod
    def from_hdu(cls, index: int, hdu: HDU, *, with_records: bool = False) -> HDUSummaryModel:
        """Construct from a decoded HDU.

        Parameters
        ----------
        index
            Position of the HDU in the file.
        hdu
            The HDU to summarize.
        with_records, optional
            Whether to include every header record.
        """
        header = hdu.header
        return cls(
            index=index,
            offset=hdu.offset,
            xtension=header.xtension,
            extname=header.extname,
            bitpix=header.bitpix,
            axes=list(header.axes),
            data_size=len(hdu.data),
            records=[KeywordRecordModel.from_record(r) for r in header] if with_records else None,
        )


class FitsSummaryModel(pydantic.BaseModel):
    """Serialized summary of a decoded file."""

    hdus: list[HDUSummaryModel]

    @classmethod
    def from_fits(cls, fits: Fits, *, with_records: bool = False) -> FitsSummaryModel:
        """Construct from a decoded file."""
        return cls(
            hdus=[HDUSummaryModel.from_hdu(n, hdu, with_records=with_records) for n, hdu in enumerate(fits)]
        )
