from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence

from ..attendance.model import AttendanceEvent
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_window, days_in_month, format_hour, month_window, now_local, parse_month, week_days
from ..core.constants import (
    ASSUMED_WORK_HOURS,
    DEFAULT_CHECK_IN_HOUR,
    DEFAULT_CHECK_OUT_HOUR,
    LATE_AFTER_HOUR,
)
from ..core.enums import AttendanceType
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..qrcodes.repository import QrCodeRepository

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass(frozen=True)
class MonthlyStats:
    month: str
    total_days: int
    average_check_in: str
    average_check_out: str
    total_hours: int


@dataclass(frozen=True)
class DayStats:
    day: str
    date: date
    check_ins: int
    check_outs: int
    total_hours: int


@dataclass(frozen=True)
class EmployeeStats:
    employee_id: int
    employee_name: str
    username: str
    total_days: int
    average_hours: float
    late_count: int
    check_ins: int
    check_outs: int


@dataclass(frozen=True)
class CompanyStats:
    total_employees: int
    total_attendances: int
    today_check_ins: int
    today_check_outs: int
    monthly_stats: Optional[MonthlyStats]
    weekly_stats: List[DayStats]
    employee_stats: List[EmployeeStats]


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    active_employees: int
    today_attendances: int
    qr_codes: int


def _average_hour(events: Sequence[AttendanceEvent], default: int) -> float:
    if not events:
        return float(default)
    return sum(e.timestamp.hour for e in events) / len(events)


class StatisticsService:
    """Attendance statistics.

    Hours are estimates: every check-in counts as one standard workday.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository, qr_codes: QrCodeRepository):
        self._attendance = attendance
        self._employees = employees
        self._qr_codes = qr_codes

    def _month_events(self, company_id: int, year: int, month: int) -> Sequence[AttendanceEvent]:
        start, end = month_window(year, month)
        return self._attendance.list_for_company_between(company_id=int(company_id), start=start, end=end)

    def monthly(self, *, company_id: int, month: str) -> MonthlyStats:
        year, month_no = parse_month(month)
        events = self._month_events(company_id, year, month_no)
        check_ins = [e for e in events if e.type == AttendanceType.CHECK_IN]
        check_outs = [e for e in events if e.type == AttendanceType.CHECK_OUT]
        return MonthlyStats(
            month=f"{year:04d}-{month_no:02d}",
            total_days=days_in_month(year, month_no),
            average_check_in=format_hour(_average_hour(check_ins, DEFAULT_CHECK_IN_HOUR)),
            average_check_out=format_hour(_average_hour(check_outs, DEFAULT_CHECK_OUT_HOUR)),
            total_hours=len(check_ins) * ASSUMED_WORK_HOURS,
        )

    def weekly(self, *, company_id: int, reference: date) -> List[DayStats]:
        days = week_days(reference)
        start = datetime.combine(days[0], time.min)
        events = self._attendance.list_for_company_between(
            company_id=int(company_id), start=start, end=start + timedelta(days=7)
        )
        counts: Dict[date, Dict[AttendanceType, int]] = defaultdict(lambda: defaultdict(int))
        for e in events:
            counts[e.timestamp.date()][e.type] += 1

        return [
            DayStats(
                day=WEEKDAY_LABELS[i],
                date=d,
                check_ins=counts[d][AttendanceType.CHECK_IN],
                check_outs=counts[d][AttendanceType.CHECK_OUT],
                total_hours=counts[d][AttendanceType.CHECK_IN] * ASSUMED_WORK_HOURS,
            )
            for i, d in enumerate(days)
        ]

    def per_employee(self, *, company_id: int, month: str) -> List[EmployeeStats]:
        year, month_no = parse_month(month)
        by_employee: Dict[int, List[AttendanceEvent]] = defaultdict(list)
        for e in self._month_events(company_id, year, month_no):
            by_employee[e.employee_id].append(e)

        result: List[EmployeeStats] = []
        for emp in self._employees.list_for_company(int(company_id), active_only=True):
            events = by_employee.get(emp.employee_id, [])
            check_ins = [e for e in events if e.type == AttendanceType.CHECK_IN]
            check_outs = [e for e in events if e.type == AttendanceType.CHECK_OUT]
            total_days = len(check_ins)
            result.append(
                EmployeeStats(
                    employee_id=emp.employee_id,
                    employee_name=emp.name,
                    username=emp.username,
                    total_days=total_days,
                    average_hours=(len(check_outs) * ASSUMED_WORK_HOURS) / total_days if total_days else 0.0,
                    late_count=sum(1 for e in check_ins if e.timestamp.hour > LATE_AFTER_HOUR),
                    check_ins=len(check_ins),
                    check_outs=len(check_outs),
                )
            )
        return result

    def company_stats(
        self,
        *,
        company_id: int,
        period: str = "month",
        month: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CompanyStats:
        period = (period or "month").lower()
        if period not in {"month", "week"}:
            raise ValidationError("period must be 'month' or 'week'")
        now = now or now_local()
        month = month or now.strftime("%Y-%m")
        today_start, today_end = day_window(now)

        return CompanyStats(
            total_employees=self._employees.count_for_company(int(company_id), active_only=True),
            total_attendances=self._attendance.count_for_company(int(company_id)),
            today_check_ins=self._attendance.count_for_company(
                int(company_id), start=today_start, end=today_end, type=AttendanceType.CHECK_IN
            ),
            today_check_outs=self._attendance.count_for_company(
                int(company_id), start=today_start, end=today_end, type=AttendanceType.CHECK_OUT
            ),
            monthly_stats=self.monthly(company_id=company_id, month=month) if period == "month" else None,
            weekly_stats=self.weekly(company_id=company_id, reference=now.date()) if period == "week" else [],
            employee_stats=self.per_employee(company_id=company_id, month=month),
        )

    def dashboard(self, *, company_id: int, now: Optional[datetime] = None) -> DashboardStats:
        start, end = day_window(now or now_local())
        return DashboardStats(
            total_employees=self._employees.count_for_company(int(company_id)),
            active_employees=self._attendance.count_distinct_employees(
                int(company_id), start=start, end=end, type=AttendanceType.CHECK_IN
            ),
            today_attendances=self._attendance.count_for_company(int(company_id), start=start, end=end),
            qr_codes=self._qr_codes.count_for_company(int(company_id)),
        )
