"""
Tests for domain/intervals.py

Normalization, union, subtraction and coverage of minute-of-day intervals.
"""

import unittest

from fair_scheduler.domain.intervals import clamp_minute, covers, normalize, subtract, union
from fair_scheduler.domain.models import Interval


def iv(*pairs):
    return [Interval(s, e) for s, e in pairs]


class TestNormalize(unittest.TestCase):
    """Tests for normalize()."""

    def test_merges_overlapping_and_touching(self):
        result = normalize(iv((600, 660), (540, 610), (660, 720)))
        self.assertEqual(result, iv((540, 720)))

    def test_keeps_separate_intervals_sorted(self):
        result = normalize(iv((780, 840), (540, 600)))
        self.assertEqual(result, iv((540, 600), (780, 840)))

    def test_drops_empty_inverted_and_short(self):
        result = normalize(iv((600, 600), (700, 650), (800, 810), (900, 960)))
        self.assertEqual(result, iv((900, 960)))

    def test_min_size_one_keeps_short_intervals(self):
        result = normalize(iv((800, 810)), min_size=1)
        self.assertEqual(result, iv((800, 810)))

    def test_clamps_to_day(self):
        result = normalize(iv((-30, 60), (1400, 1500)))
        self.assertEqual(result, iv((0, 60), (1400, 1440)))

    def test_clamp_minute_truncates_and_handles_nan(self):
        self.assertEqual(clamp_minute(90.7), 90)
        self.assertEqual(clamp_minute(float("nan")), 0)
        self.assertEqual(clamp_minute(5000), 1440)

    def test_idempotent(self):
        samples = [
            iv((600, 660), (540, 610), (660, 720)),
            iv((0, 10), (5, 30), (100, 90), (1430, 1500)),
            iv(),
            iv((60, 120), (121, 180), (300, 301)),
        ]
        for sample in samples:
            for min_size in (1, 15):
                once = normalize(sample, min_size=min_size)
                self.assertEqual(normalize(once, min_size=min_size), once)


class TestUnionSubtract(unittest.TestCase):
    """Tests for union() and subtract()."""

    def test_union_merges(self):
        self.assertEqual(union(iv((540, 600)), iv((590, 700))), iv((540, 700)))

    def test_subtract_no_overlap(self):
        self.assertEqual(subtract(iv((540, 720)), iv((800, 900))), iv((540, 720)))

    def test_subtract_covers_all(self):
        self.assertEqual(subtract(iv((600, 660)), iv((540, 720))), [])

    def test_subtract_start_and_end(self):
        self.assertEqual(subtract(iv((540, 720)), iv((480, 600))), iv((600, 720)))
        self.assertEqual(subtract(iv((540, 720)), iv((660, 780))), iv((540, 660)))

    def test_subtract_middle_splits(self):
        self.assertEqual(subtract(iv((540, 720)), iv((600, 660))), iv((540, 600), (660, 720)))

    def test_subtract_several_removals_from_one_base(self):
        result = subtract(iv((540, 720)), iv((570, 600), (630, 660)))
        self.assertEqual(result, iv((540, 570), (600, 630), (660, 720)))

    def test_subtract_adjacent_removals(self):
        result = subtract(iv((540, 720)), iv((600, 630), (630, 660)))
        self.assertEqual(result, iv((540, 600), (660, 720)))

    def test_subtract_drops_fragments_below_min_size(self):
        result = subtract(iv((540, 720)), iv((550, 710)), min_size=15)
        self.assertEqual(result, [])
        result = subtract(iv((540, 720)), iv((550, 710)), min_size=1)
        self.assertEqual(result, iv((540, 550), (710, 720)))

    def test_subtract_union_restores_disjoint_set(self):
        a = iv((60, 120), (300, 400))
        for b in (iv((500, 600)), iv((120, 180)), iv((0, 30), (1000, 1100))):
            self.assertEqual(subtract(union(a, b), b), normalize(a))


class TestCovers(unittest.TestCase):
    """Tests for covers()."""

    def test_full_coverage_required(self):
        effective = iv((540, 600), (660, 720))
        self.assertTrue(covers(effective, 540, 600))
        self.assertTrue(covers(effective, 670, 700))
        self.assertFalse(covers(effective, 570, 690))
        self.assertFalse(covers([], 540, 600))
