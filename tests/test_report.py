"""
Tests for reporting/report.py and reporting/export_xlsx.py
"""

import os
import tempfile
import unittest
from datetime import date

import pandas as pd

from fair_scheduler.domain.models import AttendeeAvailabilityInput, SuggestionRequest, WeeklyWindow
from fair_scheduler.ranking.engine import generate_suggestions
from fair_scheduler.reporting.export_xlsx import export_result_xlsx
from fair_scheduler.reporting.report import CANDIDATE_COLUMNS, build_attendee_summary, build_candidate_table


def suggestions():
    attendees = [
        AttendeeAvailabilityInput("a", "America/New_York", [WeeklyWindow(2, 420, 1020)]),
        AttendeeAvailabilityInput("b", "America/New_York", [WeeklyWindow(2, 540, 600)]),
    ]
    request = SuggestionRequest(
        time_zone="America/New_York",
        range_start=date(2026, 1, 13),
        range_end=date(2026, 1, 13),
        duration_minutes=30,
        step_minutes=30,
        day_start_minute=480,
        day_end_minute=600,
        attendees=attendees,
    )
    return generate_suggestions(request)


class TestReport(unittest.TestCase):

    def test_candidate_table(self):
        candidates = suggestions()
        df = build_candidate_table(candidates)
        self.assertEqual(list(df.columns), CANDIDATE_COLUMNS)
        self.assertEqual(list(df["rank"]), [1, 2, 3, 4])
        first = df.iloc[0]
        self.assertEqual(first["start_utc"], "2026-01-13T14:00:00.000Z")
        self.assertEqual(first["available_user_ids"], "a,b")
        self.assertEqual(first["worst_user_id"], "")
        last = df.iloc[-1]
        self.assertEqual(last["missing_user_ids"], "b")
        self.assertEqual(last["worst_user_id"], "a")
        self.assertEqual(last["worst_penalty"], 0.25)

    def test_empty_table(self):
        df = build_candidate_table([])
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), CANDIDATE_COLUMNS)

    def test_attendee_summary(self):
        df = build_attendee_summary(suggestions(), ["a", "b"])
        self.assertEqual(list(df["user_id"]), ["b", "a"])
        b = df.iloc[0]
        self.assertEqual((b["available_count"], b["missing_count"]), (2, 2))
        self.assertEqual(b["coverage"], 0.5)
        a = df.iloc[1]
        self.assertEqual((a["available_count"], a["worst_local_time_count"]), (4, 2))

    def test_export(self):
        candidates = suggestions()
        with tempfile.TemporaryDirectory() as tmp:
            out = os.path.join(tmp, "nested", "result.xlsx")
            export_result_xlsx(out, build_candidate_table(candidates), build_attendee_summary(candidates, ["a", "b"]))
            sheets = pd.read_excel(out, sheet_name=None, engine="openpyxl")
        self.assertEqual(sorted(sheets), ["attendee_summary", "candidates"])
        self.assertEqual(len(sheets["candidates"]), 4)
