#!/usr/bin/env python3
import unittest

from smsproxy.config import Config
from smsproxy.formatters import MessageFormatError, format_message
from smsproxy.models import Alert


def make_alert(annotations=None, labels=None, starts_at="2024-01-15T10:30:00Z"):
    raw = {'annotations': annotations or {}, 'labels': labels or {}}
    if starts_at is not None:
        raw['startsAt'] = starts_at
    return Alert.from_dict(raw)


def make_config(**overrides):
    values = {'account_sid': 'AC1', 'auth_token': 't', 'sender': '+1', 'receivers': [],
              'max_message_length': 150, 'message_prefix': ''}
    values.update(overrides)
    return Config(**values)


class TestFormatMessage(unittest.TestCase):
    def test_firing_summary_with_timestamp(self):
        body = format_message(make_alert({'summary': 'Test alert'}), 'firing', make_config())
        self.assertEqual(body, '"Test alert" alert starts at Mon, 15 Jan 2024 10:30:00 UTC')

    def test_resolved_prefix(self):
        body = format_message(make_alert({'summary': 'Test alert'}), 'resolved', make_config())
        self.assertEqual(body, 'RESOLVED: "Test alert" alert starts at Mon, 15 Jan 2024 10:30:00 UTC')

    def test_missing_starts_at_leaves_text_untouched(self):
        body = format_message(make_alert({'summary': 'Test alert'}, starts_at=None), 'firing', make_config())
        self.assertEqual(body, 'Test alert')

    def test_invalid_starts_at_leaves_text_untouched(self):
        alert = make_alert({'summary': 'Test alert'}, starts_at='yesterday at noon')
        self.assertEqual(format_message(alert, 'firing', make_config()), 'Test alert')

    def test_padded_starts_at_leaves_text_untouched(self):
        alert = make_alert({'summary': 'Test alert'}, starts_at=' 2024-01-15T10:30:00Z')
        self.assertEqual(format_message(alert, 'firing', make_config()), 'Test alert')

    def test_description_fallback(self):
        alert = make_alert({'description': 'From description'}, starts_at=None)
        self.assertEqual(format_message(alert, 'firing', make_config()), 'From description')

    def test_summary_preferred_over_description(self):
        alert = make_alert({'summary': 'Summary', 'description': 'Description'}, starts_at=None)
        self.assertEqual(format_message(alert, 'firing', make_config()), 'Summary')

    def test_whitespace_summary_uses_description(self):
        alert = make_alert({'summary': '   \t', 'description': 'Description'}, starts_at=None)
        self.assertEqual(format_message(alert, 'firing', make_config()), 'Description')

    def test_missing_summary_and_description_fails(self):
        for annotations in ({}, {'summary': ''}, {'summary': ' ', 'description': '\n'}):
            with self.assertRaises(MessageFormatError):
                format_message(make_alert(annotations), 'firing', make_config())

    def test_alert_name_prefix(self):
        alert = make_alert({'summary': 'Disk full'}, labels={'alertname': 'DiskFull'}, starts_at=None)
        self.assertEqual(format_message(alert, 'firing', make_config()), '[DiskFull] Disk full')

    def test_blank_alert_name_is_skipped(self):
        alert = make_alert({'summary': 'Disk full'}, labels={'alertname': '  '}, starts_at=None)
        self.assertEqual(format_message(alert, 'firing', make_config()), 'Disk full')

    def test_full_prefix_order(self):
        alert = make_alert({'summary': 'Down on $labels.instance'},
                           labels={'alertname': 'HostDown', 'instance': 'web-1'})
        body = format_message(alert, 'resolved', make_config(message_prefix='[PROD]', max_message_length=500))
        self.assertEqual(
            body,
            '[PROD] RESOLVED: [HostDown] "Down on web-1" alert starts at Mon, 15 Jan 2024 10:30:00 UTC',
        )

    def test_truncation_is_last(self):
        alert = make_alert({'summary': 'x' * 300}, starts_at=None)
        body = format_message(alert, 'firing', make_config(message_prefix='[PROD]', max_message_length=20))
        self.assertEqual(body, '[PROD] xxxxxxxxxx...')
        self.assertEqual(len(body), 20)

    def test_long_prefix_consumes_budget(self):
        alert = make_alert({'summary': 'important'}, starts_at=None)
        body = format_message(alert, 'firing', make_config(message_prefix='P' * 30, max_message_length=10))
        self.assertEqual(body, 'PPPPPPP...')

    def test_default_max_length(self):
        alert = make_alert({'summary': 'y' * 400}, starts_at=None)
        for max_len in (0, -5):
            body = format_message(alert, 'firing', make_config(max_message_length=max_len))
            self.assertEqual(len(body), 150)
            self.assertTrue(body.endswith('...'))


if __name__ == '__main__':
    unittest.main()
