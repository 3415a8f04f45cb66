"""
Tests for validation/validator.py
"""

import unittest
from dataclasses import replace
from datetime import date, datetime

from dateutil import tz

from fair_scheduler.domain.models import (
    AVAILABLE,
    AttendeeAvailabilityInput,
    Override,
    SuggestionRequest,
    WeeklyWindow,
)
from fair_scheduler.validation.validator import ValidationError, validate_attendees, validate_request

UTC = tz.UTC


def utc(*args):
    return datetime(*args, tzinfo=UTC)


def person(user_id, **kw):
    kw.setdefault("time_zone", "America/New_York")
    kw.setdefault("windows", [WeeklyWindow(2, 540, 1020)])
    return AttendeeAvailabilityInput(user_id=user_id, **kw)


GOOD = SuggestionRequest(
    time_zone="America/New_York",
    range_start=date(2026, 1, 12),
    range_end=date(2026, 1, 16),
    duration_minutes=30,
    step_minutes=15,
    day_start_minute=480,
    day_end_minute=1200,
    attendees=[person("a"), person("b")],
)


class TestValidateRequest(unittest.TestCase):

    def assertRejected(self, request, fragment):
        with self.assertRaises(ValidationError) as ctx:
            validate_request(request)
        self.assertIn(fragment, ctx.exception.message)

    def test_good_request(self):
        self.assertIsNone(validate_request(GOOD))
        self.assertIsNone(validate_request(replace(GOOD, max_candidates=1)))

    def test_attendees(self):
        self.assertRejected(replace(GOOD, attendees=[]), "attendee")
        self.assertRejected(replace(GOOD, attendees=[person("a"), person("b"), person("a")]), "Duplicate attendee ids: a")

    def test_time_zone(self):
        self.assertRejected(replace(GOOD, time_zone="Mars/Base"), "Unknown time zone")

    def test_day_bounds(self):
        self.assertRejected(replace(GOOD, day_start_minute=1200, day_end_minute=480), "dayStart must be before dayEnd")
        self.assertRejected(replace(GOOD, day_start_minute=600, day_end_minute=600), "dayStart must be before dayEnd")
        self.assertRejected(replace(GOOD, day_end_minute=1500), "00:00-24:00")
        self.assertIsNone(validate_request(replace(GOOD, day_start_minute=0, day_end_minute=1440)))

    def test_date_range(self):
        self.assertRejected(replace(GOOD, range_start=date(2026, 1, 17)), "rangeStart is after rangeEnd")
        self.assertRejected(replace(GOOD, range_end=date(2026, 3, 1)), "the limit is 31")
        self.assertIsNone(validate_request(replace(GOOD, range_end=date(2026, 2, 11))))

    def test_duration_and_step(self):
        self.assertRejected(replace(GOOD, duration_minutes=10), "durationMinutes")
        self.assertRejected(replace(GOOD, duration_minutes=241), "durationMinutes")
        self.assertRejected(replace(GOOD, step_minutes=4), "stepMinutes")
        self.assertRejected(replace(GOOD, step_minutes=90), "stepMinutes")

    def test_max_candidates(self):
        self.assertRejected(replace(GOOD, max_candidates=0), "maxCandidates")


class TestValidateAttendees(unittest.TestCase):

    def test_clean(self):
        self.assertEqual(validate_attendees([person("a")]), [])

    def test_warnings(self):
        attendees = [
            person("tz", time_zone="Nowhere/Land"),
            person("empty", windows=[]),
            person("dow", windows=[WeeklyWindow(8, 540, 600)]),
            person("inverted", windows=[WeeklyWindow(2, 600, 540)]),
            person("kind", overrides=[Override(utc(2026, 1, 13, 15), utc(2026, 1, 13, 16), "MAYBE")]),
            person("backwards", overrides=[Override(utc(2026, 1, 13, 16), utc(2026, 1, 13, 15), AVAILABLE)]),
        ]
        messages = [w.message for w in validate_attendees(attendees)]
        self.assertEqual(len(messages), 6)
        for uid, fragment in zip(
            ["tz", "empty", "dow", "inverted", "kind", "backwards"],
            ["unknown time zone", "no weekly windows", "expected 1-7", "empty window", "unknown kind", "ending before"],
        ):
            self.assertTrue(any(f"Attendee {uid} " in m and fragment in m for m in messages), (uid, messages))
