from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from .model import AttendanceRecord

COLUMNS = ["Date", "Employee", "Position", "Clock in", "Clock out", "Method", "Late"]


def attendance_frame(records: Iterable[AttendanceRecord]) -> pd.DataFrame:
    rows = [
        (
            r.work_date,
            r.employee_name,
            r.position or "",
            r.clock_in,
            r.clock_out,
            r.method.value,
            "yes" if r.is_late else "no",
        )
        for r in records
    ]
    df = pd.DataFrame(rows, columns=COLUMNS)
    df["Clock in"] = pd.to_datetime(df["Clock in"]).dt.strftime("%H:%M:%S")
    df["Clock out"] = pd.to_datetime(df["Clock out"]).dt.strftime("%H:%M:%S").fillna("")
    return df


def build_attendance_xlsx(records: Iterable[AttendanceRecord]) -> bytes:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        attendance_frame(records).to_excel(writer, index=False, sheet_name="Attendance")
    return out.getvalue()
