# fair_scheduler/reporting/export_xlsx.py
from __future__ import annotations

from pathlib import Path

import pandas as pd


def export_result_xlsx(
    out_path: str,
    candidate_df: pd.DataFrame,
    attendee_df: pd.DataFrame,
) -> str:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(out_path, engine="openpyxl") as w:
        candidate_df.to_excel(w, sheet_name="candidates", index=False)
        attendee_df.to_excel(w, sheet_name="attendee_summary", index=False)
    return out_path
