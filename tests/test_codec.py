import unittest
from datetime import date, datetime, time

from paradox.pxlib.codec import (PaddedText, PxDate, PxLogical, PxLong, PxShort, PxTime, PxTimestamp, Unsupported,
    civil_from_days, decode_alpha, decode_float, decode_int, decode_value)
from pxbuild import encode_date, encode_float, encode_int, encode_time, encode_timestamp

class SignBiasedIntegerTestCase(unittest.TestCase):
    def test_positive_long(self):
        self.assertEqual(decode_int(bytes([0x80, 0x00, 0x00, 0x05])), 5)

    def test_negative_long(self):
        self.assertEqual(decode_int(bytes([0x7f, 0xff, 0xff, 0xfb])), -5)

    def test_zero_is_not_null(self):
        self.assertEqual(decode_int(bytes([0x80, 0x00, 0x00, 0x00])), 0)

    def test_all_zero_is_null(self):
        self.assertIsNone(decode_int(bytes(4)))
        self.assertIsNone(decode_value("long", bytes(4)))
        self.assertIsNone(decode_value("short", bytes(2)))

    def test_short_limits(self):
        self.assertEqual(decode_int(bytes([0xff, 0xff])), 32767)
        self.assertEqual(decode_int(bytes([0x00, 0x01])), -32767)
        self.assertEqual(decode_value("short", encode_int(-1234, 2)), -1234)

    def test_raw_order_matches_value_order(self):
        values = [-70000, -5, -1, 0, 1, 5, 70000]
        encoded = [encode_int(v, 4) for v in values]
        self.assertEqual(sorted(encoded), encoded)
        self.assertEqual([decode_int(e) for e in encoded], values)

    def test_build(self):
        self.assertEqual(PxLong.build(5), bytes([0x80, 0x00, 0x00, 0x05]))
        self.assertEqual(PxLong.build(-5), bytes([0x7f, 0xff, 0xff, 0xfb]))
        self.assertEqual(PxShort.build(None), bytes(2))
        self.assertEqual(PxShort.parse(PxShort.build(-32767)), -32767)

    def test_autoinc(self):
        self.assertEqual(decode_value("autoinc", encode_int(42, 4)), 42)

class LogicalTestCase(unittest.TestCase):
    def test_logical(self):
        self.assertIs(PxLogical.parse(b"\x81"), True)
        self.assertIs(PxLogical.parse(b"\x80"), False)
        self.assertIsNone(PxLogical.parse(b"\x00"))
        self.assertEqual(PxLogical.build(True), b"\x81")

class FloatTestCase(unittest.TestCase):
    def test_positive_number(self):
        self.assertEqual(decode_float(encode_float(3.25)), 3.25)
        self.assertEqual(decode_value("number", encode_float(1e100)), 1e100)

    def test_negative_currency(self):
        self.assertEqual(decode_value("currency", encode_float(-19.99)), -19.99)

    def test_zero_and_null(self):
        self.assertEqual(decode_float(bytes([0x80]) + bytes(7)), 0.0)
        self.assertIsNone(decode_float(bytes(8)))

    def test_wrong_width(self):
        with self.assertRaises(ValueError):
            decode_value("number", bytes(4))

class CalendarTestCase(unittest.TestCase):
    def test_civil_from_days(self):
        self.assertEqual(civil_from_days(0), (1970, 1, 1))
        self.assertEqual(civil_from_days(-1), (1969, 12, 31))
        self.assertEqual(civil_from_days(11016), (2000, 2, 29))

    def test_day_two(self):
        # the day count starts with 0001-01-01 as day 1
        self.assertEqual(PxDate.parse(encode_int(2, 4)), date(1, 1, 2))

    def test_dates(self):
        self.assertEqual(PxDate.parse(encode_int(730120, 4)), date(2000, 1, 1))
        for day in (date(1899, 12, 30), date(1970, 1, 1), date(2024, 2, 29), date(9999, 12, 31)):
            self.assertEqual(decode_value("date", encode_date(day)), day)

    def test_null_date(self):
        self.assertIsNone(PxDate.parse(bytes(4)))

    def test_time(self):
        self.assertEqual(PxTime.parse(encode_time(13, 37, 42, 999)), time(13, 37, 42))
        self.assertEqual(decode_value("time", encode_time(0, 0, 0)), time(0, 0, 0))
        self.assertIsNone(PxTime.parse(bytes(4)))

    def test_timestamp(self):
        moment = datetime(2003, 7, 14, 18, 30, 5)
        self.assertEqual(PxTimestamp.parse(encode_timestamp(moment)), moment)
        self.assertEqual(decode_value("timestamp", encode_timestamp(datetime(1970, 1, 1))), datetime(1970, 1, 1))
        self.assertIsNone(PxTimestamp.parse(bytes(8)))

class AlphaTestCase(unittest.TestCase):
    def test_alpha(self):
        self.assertEqual(decode_alpha(b"M\xfcller\x00\x00\x00", "cp1252"), "Müller")
        self.assertEqual(decode_alpha(b"ab\x00cd", "cp437"), "ab")
        self.assertIsNone(decode_alpha(bytes(5), "cp437"))

    def test_padded_text(self):
        self.assertEqual(PaddedText(8, "cp437").parse(b"ORDERS\x00\x00"), "ORDERS")
        self.assertEqual(PaddedText(4, "cp437").parse(b"full"), "full")
        self.assertEqual(PaddedText(8, "cp437").build("ab"), b"ab" + bytes(6))

    def test_undecodable_bytes_are_replaced(self):
        self.assertEqual(decode_alpha(b"a\x81b", "ascii"), "a\ufffdb")

class UnsupportedTestCase(unittest.TestCase):
    def test_bcd_is_unsupported(self):
        value = decode_value("bcd", b"\x01\x02")
        self.assertIsInstance(value, Unsupported)
        self.assertEqual(value.data, b"\x01\x02")

    def test_unknown_tag_is_unsupported(self):
        self.assertEqual(decode_value(0x42, b"\x00"), Unsupported(0x42, b"\x00"))
