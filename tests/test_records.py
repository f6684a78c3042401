# This file is part of fits-decode.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

import unittest

from fitsdecode import (
    KeywordRecord,
    MalformedKeywordError,
    MalformedValueError,
    StandardKeyword,
    TruncatedInputError,
    Value,
    ValueKind,
    parse_record,
)
from fitsdecode.tests import blank_card, commentary_card, value_card


class ParseRecordTestCase(unittest.TestCase):
    """Tests for parse_record and KeywordRecord."""

    def test_valued(self) -> None:
        """Test cards with a value indicator."""
        record = parse_record(value_card("NAXIS", "2", "number of axes"))
        self.assertEqual(record, KeywordRecord("NAXIS", Value.integer(2), "number of axes"))
        self.assertFalse(record.commentary)
        record = parse_record(value_card("OBJECT", "'M31'"))
        self.assertEqual(record.value, Value.string("M31"))
        self.assertIsNone(record.comment)
        record = parse_record(value_card("DATE-OBS", "'2020-01-01'", ""))
        self.assertEqual(record.keyword, "DATE-OBS")
        self.assertEqual(record.comment, "")
        record = parse_record(value_card("UNDEF", "", "no value"))
        self.assertEqual(record.value.kind, ValueKind.UNDEFINED)
        self.assertEqual(record.comment, "no value")
        self.assertFalse(record.commentary)

    def test_commentary(self) -> None:
        """Test COMMENT, HISTORY, blank, and indicator-less cards."""
        record = parse_record(commentary_card("COMMENT", "hello world"))
        self.assertEqual(record, KeywordRecord("COMMENT", comment="hello world", commentary=True))
        record = parse_record(commentary_card("HISTORY", "  indented"))
        self.assertEqual(record.comment, "  indented")
        record = parse_record(blank_card())
        self.assertEqual(record.keyword, "")
        self.assertTrue(record.commentary)
        self.assertEqual(record.comment, "")
        # COMMENT never has a value, even if it looks like it does.
        record = parse_record(value_card("COMMENT", "'x'"))
        self.assertTrue(record.commentary)
        self.assertEqual(record.comment, "= 'x'")
        record = parse_record(commentary_card("MYKEY", "  free text"))
        self.assertTrue(record.commentary)
        self.assertEqual(record.value.kind, ValueKind.UNDEFINED)

    def test_end(self) -> None:
        """Test that END cards ignore anything after the keyword."""
        record = parse_record(commentary_card("END"))
        self.assertEqual(record.keyword, "END")
        self.assertTrue(record.commentary)
        record = parse_record(commentary_card("END", "  ignored junk '"))
        self.assertEqual(record.keyword, "END")
        self.assertIsNone(record.comment)

    def test_continue(self) -> None:
        """Test that CONTINUE cards are parsed as string records."""
        record = parse_record(commentary_card("CONTINUE", "  'more text&' / more"))
        self.assertEqual(record.keyword, "CONTINUE")
        self.assertEqual(record.value, Value.string("more text&"))
        self.assertEqual(record.comment, "more")
        self.assertFalse(record.commentary)
        with self.assertRaises(MalformedValueError):
            parse_record(commentary_card("CONTINUE", "  42"))

    def test_malformed_keyword(self) -> None:
        """Test keyword fields with invalid characters."""
        with self.assertRaises(MalformedKeywordError):
            parse_record(value_card("simple", "T"))
        with self.assertRaises(MalformedKeywordError):
            parse_record(value_card("BAD KEY", "T"))
        with self.assertRaises(MalformedKeywordError):
            parse_record(value_card("KEY.1", "T"))
        with self.assertRaises(MalformedKeywordError):
            parse_record(b"\xffKEY    = T".ljust(80))

    def test_malformed_value(self) -> None:
        """Test that value errors name the keyword."""
        with self.assertRaises(MalformedValueError) as cm:
            parse_record(value_card("EXPTIME", "'30"))
        self.assertIn("EXPTIME", str(cm.exception))
        self.assertIsNone(cm.exception.offset)
        with self.assertRaises(MalformedValueError):
            parse_record("OBJECT  = 'café'".ljust(80, " ").encode("utf-8")[:80])

    def test_wrong_length(self) -> None:
        """Test that cards must be exactly 80 bytes."""
        with self.assertRaises(TruncatedInputError):
            parse_record(b"SIMPLE  =                    T")

    def test_str(self) -> None:
        """Test the one-line rendering used by the command-line tools."""
        self.assertEqual(str(parse_record(value_card("NAXIS", "2", "axes"))), "NAXIS   = 2 / axes")
        self.assertEqual(str(parse_record(value_card("XTENSION", "'IMAGE   '"))), "XTENSION= 'IMAGE'")
        self.assertEqual(str(parse_record(commentary_card("COMMENT", "hi"))), "COMMENT hi")
        self.assertEqual(str(parse_record(commentary_card("END"))), "END")
        self.assertEqual(
            str(parse_record(commentary_card("CONTINUE", "  'abc'"))),
            "CONTINUE  'abc'",
        )

    def test_standard_keyword(self) -> None:
        """Test StandardKeyword lookups."""
        self.assertEqual(parse_record(value_card("BITPIX", "8")).standard_keyword, StandardKeyword.BITPIX)
        self.assertEqual(parse_record(value_card("NAXIS3", "8")).standard_keyword, StandardKeyword.NAXISn)
        self.assertIsNone(parse_record(value_card("OBJECT", "'x'")).standard_keyword)
        self.assertEqual(StandardKeyword.lookup("END     "), StandardKeyword.END)
        self.assertIsNone(StandardKeyword.lookup("NAXISn"))
        self.assertIsNone(StandardKeyword.lookup("NAXIS0"))
        self.assertEqual(StandardKeyword.naxis(12), "NAXIS12")
        with self.assertRaises(ValueError):
            StandardKeyword.naxis(0)


if __name__ == "__main__":
    unittest.main()
