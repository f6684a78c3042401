# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Tests that decode files written by Astropy, as an independent reference
implementation of the format.
"""

from __future__ import annotations

import io
import unittest
from typing import Any

import numpy as np

from fitsdecode import BLOCK_SIZE, Header, decode

try:
    import astropy.io.fits

    HAVE_ASTROPY = True
except ImportError:
    HAVE_ASTROPY = False


def write(*hdus: Any) -> bytes:
    stream = io.BytesIO()
    astropy.io.fits.HDUList(list(hdus)).writeto(stream)
    return stream.getvalue()


@unittest.skipUnless(HAVE_ASTROPY, "astropy could not be imported.")
class AstropyInteropTestCase(unittest.TestCase):
    """Tests for decoding files written by astropy.io.fits."""

    def assert_header_matches(self, header: Header, reference: astropy.io.fits.Header) -> None:
        """Check that every valued card Astropy wrote decodes to the same
        value.
        """
        for card in reference.cards:
            if card.keyword in ("", "COMMENT", "HISTORY"):
                continue
            with self.subTest(keyword=card.keyword):
                self.assertEqual(header[card.keyword], card.value)
                if card.comment:
                    self.assertEqual(header.record(card.keyword).comment, card.comment)

    def test_images(self) -> None:
        """Test a primary image and a floating-point image extension."""
        primary_array = np.arange(6, dtype=np.int16).reshape(2, 3)
        primary = astropy.io.fits.PrimaryHDU(primary_array)
        primary.header["OBJECT"] = ("M31", "target name")
        primary.header["EXPTIME"] = (1.5, "seconds")
        primary.header["FLAG"] = False
        primary.header["QUOTED"] = "it's"
        primary.header["COMMENT"] = "a comment"
        primary.header["HISTORY"] = "did a thing"
        sci_array = np.linspace(0.0, 1.0, 35, dtype=np.float32).reshape(5, 7)
        sci = astropy.io.fits.ImageHDU(sci_array, name="SCI")
        buffer = write(primary, sci)
        fits = decode(buffer)
        self.assertEqual(len(fits), 2)
        header = fits.primary_hdu.header
        self.assert_header_matches(header, primary.header)
        self.assertEqual(header.axes, (3, 2))
        self.assertIn("a comment", header.comments)
        self.assertIn("did a thing", header.history)
        np.testing.assert_array_equal(fits.primary_hdu.as_array(), primary_array)
        self.assert_header_matches(fits["SCI"].header, sci.header)
        self.assertEqual(fits["SCI"].header.bitpix, -32)
        np.testing.assert_array_equal(fits["SCI"].as_array(), sci_array)
        # Each header and each data segment fits in a single block.
        self.assertEqual(len(buffer), 4 * BLOCK_SIZE)

    def test_long_string(self) -> None:
        """Test that strings Astropy splits with CONTINUE are rejoined."""
        primary = astropy.io.fits.PrimaryHDU()
        value = "x" * 50 + " and " + "y" * 60 + " the end"
        primary.header["LONGSTR"] = value
        primary.header["AFTER"] = 3
        fits = decode(write(primary))
        self.assertEqual(fits.primary_hdu.header["LONGSTR"], value)
        self.assertEqual(fits.primary_hdu.header["AFTER"], 3)
        self.assertNotIn("CONTINUE", fits.primary_hdu.header)

    def test_tables(self) -> None:
        """Test a fixed-width binary table, one with a heap, and an image
        after them.
        """
        fixed = astropy.io.fits.BinTableHDU.from_columns(
            [
                astropy.io.fits.Column(name="a", format="J", array=np.array([1, 2, 3], dtype=np.int32)),
                astropy.io.fits.Column(name="b", format="D", array=np.array([0.5, 1.5, 2.5])),
            ],
            name="FIXED",
        )
        variable = astropy.io.fits.BinTableHDU.from_columns(
            [
                astropy.io.fits.Column(
                    name="v",
                    format="PJ()",
                    array=np.array(
                        [np.array([1, 2, 3], dtype=np.int32), np.array([4], dtype=np.int32)],
                        dtype=object,
                    ),
                )
            ],
            name="VARIABLE",
        )
        after = astropy.io.fits.ImageHDU(np.ones((2, 2), dtype=np.int64), name="AFTER")
        buffer = write(astropy.io.fits.PrimaryHDU(), fixed, variable, after)
        fits = decode(buffer)
        self.assertEqual([hdu.header.extname for hdu in fits.extensions], ["FIXED", "VARIABLE", "AFTER"])
        table = fits["FIXED"]
        self.assertEqual(table.header.xtension, "BINTABLE")
        self.assertEqual(table.header["TFIELDS"], 2)
        self.assertEqual(table.header.axes, (12, 3))
        self.assertEqual(len(table.data), 36)
        rows = table.as_array()
        self.assertEqual(rows.shape, (3, 12))
        np.testing.assert_array_equal(rows[:, :4].copy().view(">i4").ravel(), [1, 2, 3])
        heap = fits["VARIABLE"]
        naxis1, naxis2 = heap.header.axes
        self.assertGreater(heap.header.pcount, 0)
        self.assertEqual(len(heap.data), naxis1 * naxis2 + heap.header.pcount)
        with self.assertRaises(ValueError):
            heap.as_array()
        np.testing.assert_array_equal(fits["AFTER"].as_array(), np.ones((2, 2)))
        self.assertEqual(fits["AFTER"].header.bitpix, 64)


if __name__ == "__main__":
    unittest.main()
