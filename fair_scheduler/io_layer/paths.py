# fair_scheduler/io_layer/paths.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InputPaths:
    """
    availability_file: workbook holding templates/windows/overrides/busy sheets
    out_file: optional xlsx report destination
    """
    availability_file: str
    out_file: Optional[str] = None

    # sheet names (change here only if the workbook layout changes)
    attendees_sheet_name: str = "attendees"
    templates_sheet_name: str = "templates"
    windows_sheet_name: str = "windows"
    overrides_sheet_name: str = "overrides"
    busy_sheet_name: str = "busy"
    connections_sheet_name: str = "connections"
