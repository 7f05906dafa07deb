from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .model import AttendanceReportRow

ATTENDANCE_CSV_FIELDS = [
    "date",
    "time",
    "employee_name",
    "username",
    "type",
    "location",
    "qr_code",
]


def attendance_csv_rows(rows: Iterable[AttendanceReportRow]) -> List[Dict[str, Any]]:
    return [
        {
            "date": r.timestamp.strftime("%Y-%m-%d"),
            "time": r.timestamp.strftime("%H:%M:%S"),
            "employee_name": r.employee_name,
            "username": r.employee_username,
            "type": r.type.value,
            "location": r.location or "",
            "qr_code": r.qr_code_name or "",
        }
        for r in rows
    ]
