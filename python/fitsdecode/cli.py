# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Command-line tools for inspecting FITS files."""

from __future__ import annotations

__all__ = ("main",)

import logging

import click

from lsst.resources import ResourcePath

from ._cards import BLOCK_SIZE, CARD_SIZE, read_block
from ._errors import FitsDecodeError
from ._fits import Fits, decode
from ._summary import FitsSummaryModel, HDUSummaryModel


def _read(path: str) -> bytes:
    return ResourcePath(path).read()


def _decode(path: str) -> Fits:
    try:
        return decode(_read(path))
    except FitsDecodeError as err:
        raise click.ClickException(f"{type(err).__name__}: {err}") from err


@click.group("fitsdecode")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level for the decoder.",
)
def main(log_level: str) -> None:
    """Inspect the structure of FITS files."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@main.command("headers")
@click.argument("path")
@click.option(
    "--hdu",
    "index",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="HDU index (0 is primary).",
)
@click.option("--json", "as_json", is_flag=True, help="Print a JSON summary instead of cards.")
def headers(path: str, index: int, as_json: bool) -> None:
    """Print the keyword records of one HDU, one per line."""
    fits = _decode(path)
    try:
        hdu = fits[index]
    except IndexError as err:
        raise click.BadParameter(str(err), param_hint="--hdu") from None
    if as_json:
        click.echo(HDUSummaryModel.from_hdu(index, hdu, with_records=True).model_dump_json(indent=2))
        return
    for record in hdu.header:
        click.echo(str(record))


@main.command("info")
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON summary instead of a table.")
def info(path: str, as_json: bool) -> None:
    """Print one line per HDU."""
    summary = FitsSummaryModel.from_fits(_decode(path))
    if as_json:
        click.echo(summary.model_dump_json(indent=2, exclude_none=True))
        return
    for hdu in summary.hdus:
        axes = "x".join(str(n) for n in hdu.axes) or "-"
        click.echo(
            f"{hdu.index:3d}  {hdu.xtension or 'PRIMARY':10s}  {hdu.extname or '':16s}  "
            f"BITPIX={hdu.bitpix:<3d}  {axes:16s}  {hdu.data_size} bytes"
        )


@main.command("blocks")
@click.argument("path")
@click.argument("start", type=click.IntRange(min=0))
@click.argument("stop", type=click.IntRange(min=0))
def blocks(path: str, start: int, stop: int) -> None:
    """Print the raw text of blocks [START, STOP), one card per line."""
    buffer = _read(path)
    for index in range(start, stop):
        try:
            block = read_block(buffer, index)
        except FitsDecodeError as err:
            raise click.ClickException(str(err)) from err
        click.echo(f"# block {index} (byte {index * BLOCK_SIZE})")
        for offset in range(0, BLOCK_SIZE, CARD_SIZE):
            click.echo(block[offset : offset + CARD_SIZE].decode("ascii", errors="replace"))
