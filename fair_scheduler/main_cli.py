# fair_scheduler/main_cli.py
from __future__ import annotations

import argparse
import logging
from datetime import date

from fair_scheduler.config import DEFAULT_CONFIG
from fair_scheduler.domain.localtime import parse_hhmm
from fair_scheduler.domain.models import SuggestionRequest
from fair_scheduler.fingerprint import request_key_for
from fair_scheduler.io_layer.demo_busy import DemoFallbackProvider
from fair_scheduler.io_layer.paths import InputPaths
from fair_scheduler.io_layer.snapshot import build_attendee_inputs, load_snapshot, request_range_utc
from fair_scheduler.io_layer.xlsx_reader import XlsxReader
from fair_scheduler.ranking.engine import generate_suggestions
from fair_scheduler.reporting.export_xlsx import export_result_xlsx
from fair_scheduler.reporting.report import build_attendee_summary, build_candidate_table
from fair_scheduler.validation.validator import ValidationError, validate_attendees, validate_request


def parse_args(argv=None):
    lim = DEFAULT_CONFIG.limits
    p = argparse.ArgumentParser(description="Rank fair meeting slots for a group of attendees.")
    p.add_argument("--input", required=True, help="availability workbook (xlsx)")
    p.add_argument("--time-zone", required=True, help="request time zone, e.g. America/New_York")
    p.add_argument("--range-start", required=True, help="first local date (YYYY-MM-DD)")
    p.add_argument("--range-end", required=True, help="last local date (YYYY-MM-DD)")
    p.add_argument("--duration", type=int, required=True, help="meeting length in minutes")
    p.add_argument("--step", type=int, default=lim.default_step_minutes, help="start-time step in minutes")
    p.add_argument("--day-start", default=lim.default_day_start, help="earliest start (HH:MM)")
    p.add_argument("--day-end", default=lim.default_day_end, help="latest end (HH:MM)")
    p.add_argument("--max-candidates", type=int, default=lim.max_candidates)
    p.add_argument("--attendees", nargs="*", default=[], help="attendee ids (default: workbook attendees)")
    p.add_argument("--demo-fallback", action="store_true", help="synthesize busy time for users without a calendar")
    p.add_argument("--base-week", default=None, help="Monday anchoring demo busy blocks (default: this week)")
    p.add_argument("--out", default=None, help="output xlsx")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    cfg = DEFAULT_CONFIG
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        day_start_minute = parse_hhmm(args.day_start)
        day_end_minute = parse_hhmm(args.day_end)
        range_start = date.fromisoformat(args.range_start)
        range_end = date.fromisoformat(args.range_end)
        base_week = date.fromisoformat(args.base_week) if args.base_week else date.today()
        range_start_utc, range_end_utc = request_range_utc(range_start, range_end, args.time_zone)
    except ValueError as e:
        print(f"[ERROR] {e}")
        return 1

    paths = InputPaths(availability_file=args.input, out_file=args.out)
    try:
        workbook = XlsxReader(paths=paths, cfg=cfg).build_input()
    except ValueError as e:
        print(f"[ERROR] {e}")
        return 1

    attendee_ids = args.attendees or workbook.attendee_user_ids or [t.user_id for t in workbook.templates]
    attendee_ids = sorted(set(attendee_ids))

    snapshot = load_snapshot(
        attendee_user_ids=attendee_ids,
        templates=workbook.templates,
        overrides=workbook.overrides,
        busy_blocks=workbook.busy_blocks,
        range_start_utc=range_start_utc,
        range_end_utc=range_end_utc,
        connected_user_ids=workbook.connected_user_ids,
        demo_provider=DemoFallbackProvider(base_week=base_week, cfg=cfg.demo) if args.demo_fallback else None,
    )

    request = SuggestionRequest(
        time_zone=args.time_zone,
        range_start=range_start,
        range_end=range_end,
        duration_minutes=args.duration,
        step_minutes=args.step,
        day_start_minute=day_start_minute,
        day_end_minute=day_end_minute,
        attendees=build_attendee_inputs(attendee_ids, snapshot, args.time_zone),
        max_candidates=args.max_candidates,
    )

    try:
        validate_request(request, cfg)
    except ValidationError as e:
        print(f"[ERROR] {e.message}")
        return 1
    for w in validate_attendees(request.attendees, cfg):
        print(f"[WARN] {w.message}")

    print(f"[INFO] request key: {request_key_for(request)}")
    print(f"[INFO] data fingerprint: {snapshot.data_fingerprint}")

    candidates = generate_suggestions(request, cfg)
    if not candidates:
        print("[RESULT] no slot has any available attendee")
        return 2

    candidate_df = build_candidate_table(candidates)
    attendee_df = build_attendee_summary(candidates, attendee_ids)
    print(candidate_df[["rank", "start_utc", "attendance_ratio", "score_total", "score_fairness"]].to_string(index=False))

    if args.out:
        out_path = export_result_xlsx(args.out, candidate_df, attendee_df)
        print(f"[RESULT] OK: {out_path}")
    else:
        print(f"[RESULT] OK: {len(candidates)} candidates")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
