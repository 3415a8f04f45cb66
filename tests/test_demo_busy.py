"""
Tests for io_layer/demo_busy.py
"""

import unittest
from datetime import date, datetime, timedelta

from dateutil import tz

from fair_scheduler.config import DEFAULT_CONFIG
from fair_scheduler.io_layer.demo_busy import DemoFallbackProvider, monday_of

UTC = tz.UTC
CFG = DEFAULT_CONFIG.demo


def utc(*args):
    return datetime(*args, tzinfo=UTC)


class TestDemoFallbackProvider(unittest.TestCase):

    provider = DemoFallbackProvider(base_week=date(2026, 1, 14))
    two_weeks = (utc(2026, 1, 12), utc(2026, 1, 26))

    def test_monday_of(self):
        self.assertEqual(monday_of(date(2026, 1, 14)), date(2026, 1, 12))
        self.assertEqual(monday_of(date(2026, 1, 12)), date(2026, 1, 12))
        self.assertEqual(monday_of(date(2026, 1, 18)), date(2026, 1, 12))

    def test_deterministic(self):
        first = self.provider.busy_blocks("alice", *self.two_weeks)
        second = DemoFallbackProvider(base_week=date(2026, 1, 12)).busy_blocks("alice", *self.two_weeks)
        self.assertEqual(first, second)

    def test_one_block_per_pattern_per_week(self):
        blocks = self.provider.busy_blocks("alice", *self.two_weeks)
        self.assertEqual(len(blocks), CFG.week_spread * len(CFG.patterns))
        for week in range(CFG.week_spread):
            for i, pattern in enumerate(CFG.patterns):
                b = blocks[week * len(CFG.patterns) + i]
                day = date(2026, 1, 12) + timedelta(weeks=week, days=pattern.day_offset)
                self.assertEqual(b.start_utc.date(), day)
                self.assertEqual(b.end_utc - b.start_utc, timedelta(minutes=pattern.duration_minutes))
                start_minute = b.start_utc.hour * 60 + b.start_utc.minute
                self.assertLessEqual(abs(start_minute - pattern.base_start_minute), CFG.max_shift_minutes)
                self.assertGreaterEqual(start_minute, CFG.earliest_minute)
                self.assertLessEqual(start_minute + pattern.duration_minutes, CFG.latest_minute)
                self.assertEqual(b.created_at, b.start_utc)
                self.assertEqual(b.user_id, "alice")

    def test_users_get_different_blocks(self):
        alice = [b.start_utc for b in self.provider.busy_blocks("alice", *self.two_weeks)]
        bob = [b.start_utc for b in self.provider.busy_blocks("bob", *self.two_weeks)]
        self.assertNotEqual(alice, bob)

    def test_range_filter(self):
        blocks = self.provider.busy_blocks("alice", utc(2026, 1, 19), utc(2026, 1, 20))
        self.assertEqual(len(blocks), 1)
        self.assertEqual(blocks[0].start_utc.date(), date(2026, 1, 19))
        self.assertEqual(self.provider.busy_blocks("alice", utc(2026, 2, 1), utc(2026, 2, 8)), [])

    def test_missing_user(self):
        self.assertEqual(self.provider.busy_blocks("", *self.two_weeks), [])
        self.assertEqual(self.provider.busy_blocks(None, *self.two_weeks), [])
