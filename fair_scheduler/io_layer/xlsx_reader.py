# fair_scheduler/io_layer/xlsx_reader.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Dict, List, Optional

import pandas as pd
from openpyxl import load_workbook

from fair_scheduler.config import AppConfig, DEFAULT_CONFIG
from fair_scheduler.domain.localtime import as_utc, parse_hhmm
from fair_scheduler.domain.models import (
    OVERRIDE_KINDS,
    AvailabilityTemplate,
    BusyInterval,
    OverrideRecord,
    WeeklyWindow,
)
from fair_scheduler.io_layer.paths import InputPaths


@dataclass
class WorkbookInput:
    templates: List[AvailabilityTemplate]
    overrides: List[OverrideRecord]
    busy_blocks: List[BusyInterval]
    connected_user_ids: List[str] = field(default_factory=list)
    attendee_user_ids: List[str] = field(default_factory=list)  # empty = everyone with a template


def _require_columns(df: pd.DataFrame, cols: List[str], where: str) -> None:
    for c in cols:
        if c not in df.columns:
            raise ValueError(f"{where} is missing column {c}.")


def _cell_minutes(value) -> int:
    """'09:30', a time cell or a datetime cell -> minutes since midnight"""
    if isinstance(value, (time, datetime)):
        return value.hour * 60 + value.minute
    text = str(value).strip()
    if text in ("24:00", "24:00:00"):
        return 1440
    if text.count(":") == 2:
        text = text.rsplit(":", 1)[0]
    return parse_hhmm(text)


def _cell_instant(value) -> Optional[datetime]:
    if value is None or not pd.notna(value):
        return None
    # naive cells are read as UTC
    return as_utc(pd.to_datetime(value, utc=True).to_pydatetime())


def _required_instant(row, col: str, sheet: str, i: int) -> datetime:
    value = _cell_instant(row[col])
    if value is None:
        # i is the DataFrame index; sheet row numbers count the header as 1
        raise ValueError(f"sheet {sheet} row {i + 2}: missing {col}")
    return value


@dataclass(frozen=True)
class XlsxReader:
    paths: InputPaths
    cfg: AppConfig = DEFAULT_CONFIG

    def _sheetnames(self) -> List[str]:
        wb = load_workbook(self.paths.availability_file, read_only=True, data_only=True)
        try:
            return list(wb.sheetnames)
        finally:
            wb.close()

    def _read(self, sheet: str) -> pd.DataFrame:
        return pd.read_excel(self.paths.availability_file, sheet_name=sheet, engine="openpyxl")

    def read_templates(self) -> List[AvailabilityTemplate]:
        """
        templates: user_id, time_zone, (optional) updated_at
        windows:   user_id, day_of_week (1=Mon..7=Sun), start, end  ("HH:MM")
        """
        p = self.paths
        tdf = self._read(p.templates_sheet_name)
        _require_columns(tdf, ["user_id", "time_zone"], f"sheet {p.templates_sheet_name}")
        wdf = self._read(p.windows_sheet_name)
        _require_columns(wdf, ["user_id", "day_of_week", "start", "end"], f"sheet {p.windows_sheet_name}")

        windows_by_user: Dict[str, List[WeeklyWindow]] = {}
        for _, row in wdf.iterrows():
            uid = str(row["user_id"]).strip()
            windows_by_user.setdefault(uid, []).append(WeeklyWindow(
                day_of_week=int(row["day_of_week"]),
                start_minute=_cell_minutes(row["start"]),
                end_minute=_cell_minutes(row["end"]),
            ))

        out: List[AvailabilityTemplate] = []
        for _, row in tdf.iterrows():
            uid = str(row["user_id"]).strip()
            out.append(AvailabilityTemplate(
                user_id=uid,
                time_zone=str(row["time_zone"]).strip(),
                windows=windows_by_user.get(uid, []),
                updated_at=_cell_instant(row.get("updated_at")),
            ))

        orphans = sorted(set(windows_by_user) - {t.user_id for t in out})
        if orphans:
            raise ValueError(f"Windows reference users without a template row: {', '.join(orphans)}")
        return out

    def read_overrides(self) -> List[OverrideRecord]:
        """overrides: user_id, start_at, end_at (UTC), kind, (optional) updated_at"""
        sheet = self.paths.overrides_sheet_name
        df = self._read(sheet)
        _require_columns(df, ["user_id", "start_at", "end_at", "kind"], f"sheet {sheet}")
        out = []
        for i, row in df.iterrows():
            kind = str(row["kind"]).strip().upper()
            if kind not in OVERRIDE_KINDS:
                raise ValueError(f"Override kind must be AVAILABLE or UNAVAILABLE: {row['kind']}")
            out.append(OverrideRecord(
                user_id=str(row["user_id"]).strip(),
                start_at=_required_instant(row, "start_at", sheet, i),
                end_at=_required_instant(row, "end_at", sheet, i),
                kind=kind,
                updated_at=_cell_instant(row.get("updated_at")),
            ))
        return out

    def read_busy(self) -> List[BusyInterval]:
        """busy: user_id, start_utc, end_utc, (optional) created_at"""
        sheet = self.paths.busy_sheet_name
        df = self._read(sheet)
        _require_columns(df, ["user_id", "start_utc", "end_utc"], f"sheet {sheet}")
        return [
            BusyInterval(
                user_id=str(row["user_id"]).strip(),
                start_utc=_required_instant(row, "start_utc", sheet, i),
                end_utc=_required_instant(row, "end_utc", sheet, i),
                created_at=_cell_instant(row.get("created_at")),
            )
            for i, row in df.iterrows()
        ]

    def _read_user_ids(self, sheet: str) -> List[str]:
        df = self._read(sheet)
        _require_columns(df, ["user_id"], f"sheet {sheet}")
        return [str(v).strip() for v in df["user_id"] if pd.notna(v)]

    def build_input(self) -> WorkbookInput:
        p = self.paths
        names = self._sheetnames()
        for required in (p.templates_sheet_name, p.windows_sheet_name):
            if required not in names:
                raise ValueError(f"{p.availability_file} has no '{required}' sheet.")

        return WorkbookInput(
            templates=self.read_templates(),
            overrides=self.read_overrides() if p.overrides_sheet_name in names else [],
            busy_blocks=self.read_busy() if p.busy_sheet_name in names else [],
            connected_user_ids=self._read_user_ids(p.connections_sheet_name) if p.connections_sheet_name in names else [],
            attendee_user_ids=self._read_user_ids(p.attendees_sheet_name) if p.attendees_sheet_name in names else [],
        )
