from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .service import EmployeeStats

EMPLOYEE_STATS_CSV_FIELDS = [
    "employee_name",
    "username",
    "total_days",
    "average_hours",
    "late_count",
    "check_ins",
    "check_outs",
]


def employee_stats_csv_rows(stats: Iterable[EmployeeStats]) -> List[Dict[str, Any]]:
    return [
        {
            "employee_name": s.employee_name,
            "username": s.username,
            "total_days": s.total_days,
            "average_hours": f"{s.average_hours:.1f}",
            "late_count": s.late_count,
            "check_ins": s.check_ins,
            "check_outs": s.check_outs,
        }
        for s in stats
    ]
