#!/usr/bin/env python3
import unittest
from datetime import datetime, timedelta, timezone

from smsproxy.utils import (
    find_and_replace_labels,
    format_rfc1123,
    parse_receivers,
    parse_rfc3339,
    truncate_message,
)


class TestParseReceivers(unittest.TestCase):
    def test_split_and_trim(self):
        self.assertEqual(parse_receivers("+1111, +2222 ,+3333"), ["+1111", "+2222", "+3333"])

    def test_empty_values_dropped(self):
        self.assertEqual(parse_receivers(" , +1111,,"), ["+1111"])
        self.assertEqual(parse_receivers(""), [])
        self.assertEqual(parse_receivers(None), [])


class TestFindAndReplaceLabels(unittest.TestCase):
    def test_replaces_known_labels(self):
        labels = {'instance': 'host-1:9100', 'job': 'node'}
        out = find_and_replace_labels("Down: $labels.instance ($labels.job)", labels)
        self.assertEqual(out, "Down: host-1:9100 (node)")

    def test_missing_label_becomes_empty(self):
        self.assertEqual(find_and_replace_labels("host=$labels.nope!", {}), "host=!")

    def test_text_without_placeholder_is_unchanged(self):
        text = "Nothing to see at $ labels or $labels"
        self.assertEqual(find_and_replace_labels(text, {'labels': 'x'}), text)

    def test_all_occurrences_replaced(self):
        out = find_and_replace_labels("$labels.a-$labels.a-$labels.a", {'a': '1'})
        self.assertEqual(out, "1-1-1")

    def test_longer_name_is_not_clobbered_by_prefix(self):
        out = find_and_replace_labels("$labels.foo $labels.foobar", {'foo': 'A', 'foobar': 'B'})
        self.assertEqual(out, "A B")

    def test_replacement_is_not_rescanned(self):
        out = find_and_replace_labels("$labels.a", {'a': '$labels.b', 'b': 'oops'})
        self.assertEqual(out, "$labels.b")

    def test_identifier_rules(self):
        # nomes começando com dígito ou com ponto/hífen não casam por inteiro
        self.assertEqual(find_and_replace_labels("$labels.1abc", {'1abc': 'x'}), "$labels.1abc")
        self.assertEqual(find_and_replace_labels("$labels.a.b", {'a': 'X'}), "X.b")
        self.assertEqual(find_and_replace_labels("$labels.a-b", {'a': 'X', 'a-b': 'Y'}), "X-b")


class TestTruncateMessage(unittest.TestCase):
    def test_short_message_unchanged(self):
        self.assertEqual(truncate_message("hello", 10), "hello")

    def test_exact_length_unchanged(self):
        self.assertEqual(truncate_message("hello", 5), "hello")

    def test_long_message_gets_ellipsis(self):
        out = truncate_message("hello world", 8)
        self.assertEqual(out, "hello...")
        self.assertEqual(len(out), 8)

    def test_very_short_max_len_has_no_suffix(self):
        self.assertEqual(truncate_message("hello", 3), "hel")
        self.assertEqual(truncate_message("hello", 1), "h")
        self.assertEqual(truncate_message("hello", 0), "")

    def test_empty_message(self):
        self.assertEqual(truncate_message("", 5), "")

    def test_idempotent_and_bounded(self):
        text = "x" * 40
        for n in range(1, 50):
            once = truncate_message(text, n)
            self.assertEqual(truncate_message(once, n), once)
            self.assertLessEqual(len(once), n)
            if len(text) > n:
                self.assertEqual(len(once), n)

    def test_counts_bytes_not_characters(self):
        text = "é" * 10  # 20 bytes
        out = truncate_message(text, 10)
        self.assertTrue(out.endswith("..."))
        self.assertLessEqual(len(out.encode("utf-8")), 10)

    def test_split_multibyte_character_is_dropped(self):
        # "aé" = 3 bytes; cortar em 2 bytes parte o "é"
        self.assertEqual(truncate_message("aébc", 2), "a")


class TestTimestamps(unittest.TestCase):
    def test_parse_utc(self):
        dt = parse_rfc3339("2024-01-15T10:30:00Z")
        self.assertEqual(dt, datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))

    def test_parse_nanoseconds_and_offset(self):
        dt = parse_rfc3339("2025-10-08T16:29:55.933582749+02:00")
        self.assertEqual(dt.microsecond, 933582)
        self.assertEqual(dt.utcoffset(), timedelta(hours=2))

    def test_invalid_values(self):
        for value in (None, "", "not-a-date", "2024-01-15", "2024-01-15T10:30:00",
                      "2024-13-45T10:30:00Z", "15/01/2024 10:30", 12345):
            self.assertIsNone(parse_rfc3339(value), value)

    def test_surrounding_whitespace_is_rejected(self):
        for value in (" 2024-01-15T10:30:00Z", "2024-01-15T10:30:00Z ", "2024-01-15T10:30:00Z\n"):
            self.assertIsNone(parse_rfc3339(value), repr(value))

    def test_format_rfc1123_utc(self):
        dt = parse_rfc3339("2024-01-15T10:30:00Z")
        self.assertEqual(format_rfc1123(dt), "Mon, 15 Jan 2024 10:30:00 UTC")

    def test_format_rfc1123_offset(self):
        dt = parse_rfc3339("2024-01-15T10:30:00-03:00")
        self.assertEqual(format_rfc1123(dt), "Mon, 15 Jan 2024 10:30:00 -0300")


if __name__ == '__main__':
    unittest.main()
