from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from math import ceil
from typing import Any, Optional, Sequence

from ..common.datetime_utils import day_window, month_window, now_local, parse_iso_date, parse_month
from ..common.validators import optional_str, parse_enum
from ..companies.repository import CompanyRepository
from ..core.constants import RECENT_LIMIT
from ..core.enums import AttendanceType, WriteAction
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..qrcodes.payload import parse_payload
from ..qrcodes.repository import QrCodeRepository
from .model import AttendanceEvent, AttendanceFilter, AttendanceReportRow
from .repository import AttendanceRepository
from .strategies.alternating_strategy import AlternatingOverwriteStrategy
from .strategies.base import AttendanceStrategy, ScanDecision

logger = logging.getLogger(__name__)

TYPE_LABELS = {
    AttendanceType.CHECK_IN: "Check-in",
    AttendanceType.CHECK_OUT: "Check-out",
}


@dataclass(frozen=True)
class ScanResult:
    event: AttendanceEvent
    decision: ScanDecision
    message: str


@dataclass(frozen=True)
class DayHistory:
    day: date
    events: Sequence[AttendanceEvent]
    next_type: AttendanceType


@dataclass(frozen=True)
class AttendancePage:
    rows: Sequence[AttendanceReportRow]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


class AttendanceService:
    """Records scans and manual check-ins, and serves admin attendance queries.

    Both entry points share one strategy, so a scan and a manual check-in made
    on the same day always agree about what comes next.

    Consistency is best-effort: the read of today's events and the write are
    separate units of work, so two simultaneous scans by one employee may both
    decide the same type.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        companies: CompanyRepository,
        qr_codes: QrCodeRepository,
        *,
        strategy: Optional[AttendanceStrategy] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._companies = companies
        self._qr_codes = qr_codes
        self._strategy = strategy or AlternatingOverwriteStrategy()

    def _active_employee(self, *, employee_id: int, company_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp or emp.company_id != int(company_id) or not emp.is_active:
            raise NotFoundError("Employee not found or inactive")
        return emp

    def _decide(self, employee_id: int, now: datetime) -> ScanDecision:
        start, end = day_window(now)
        day_events = self._attendance.list_for_employee_between(employee_id=employee_id, start=start, end=end)
        return self._strategy.decide(day_events)

    def _persist(
        self,
        *,
        employee: Employee,
        decision: ScanDecision,
        now: datetime,
        qr_code_id: Optional[int],
        location: Optional[str],
    ) -> AttendanceEvent:
        if decision.action == WriteAction.UPDATE and decision.target_event_id is not None:
            event_id = decision.target_event_id
            self._attendance.overwrite(attendance_id=event_id, timestamp=now, qr_code_id=qr_code_id, location=location)
        else:
            event_id = self._attendance.create(
                employee_id=employee.employee_id,
                company_id=employee.company_id,
                type=decision.decided_type,
                timestamp=now,
                qr_code_id=qr_code_id,
                location=location,
            )

        event = self._attendance.get_by_id(event_id)
        if not event:
            raise NotFoundError("Attendance record disappeared while saving")
        logger.info(
            "Attendance %s %s: employee=%s event=%s qr=%s",
            decision.action.value,
            decision.decided_type.value,
            employee.employee_id,
            event_id,
            qr_code_id,
        )
        return event

    @staticmethod
    def _message(employee: Employee, decided: AttendanceType) -> str:
        return f"{TYPE_LABELS[decided]} recorded for {employee.name} ({employee.username})."

    def record_scan(self, *, employee_id: int, company_id: int, qr_data: Any, now: Optional[datetime] = None) -> ScanResult:
        if qr_data is None or qr_data == "":
            raise ValidationError("QR data is required")
        payload = parse_payload(qr_data)

        company = self._companies.get_by_code(payload.company_code)
        if not company:
            raise NotFoundError("Company not found")
        if company.company_id != int(company_id):
            raise AuthorizationError("This QR code belongs to another company")
        if not company.is_active:
            raise AuthorizationError("Company account is inactive")

        employee = self._active_employee(employee_id=employee_id, company_id=company.company_id)

        qr = self._qr_codes.get_by_id(payload.qr_code_id)
        if not qr or qr.company_id != company.company_id or not qr.is_active:
            raise NotFoundError("QR code not found or inactive")

        now = now or now_local()
        decision = self._decide(employee.employee_id, now)
        event = self._persist(employee=employee, decision=decision, now=now, qr_code_id=qr.qr_code_id, location=qr.place)
        return ScanResult(event=event, decision=decision, message=self._message(employee, decision.decided_type))

    def record_manual(
        self,
        *,
        employee_id: int,
        company_id: int,
        company_code: Optional[str] = None,
        requested_type: Any = None,
        now: Optional[datetime] = None,
    ) -> ScanResult:
        """Check in/out without a QR code.

        A requested type is only a confirmation: it must match what the shared
        strategy decides, otherwise nothing is written.
        """
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("Company not found")
        if company_code and company_code.strip().upper() != company.code:
            raise AuthorizationError("Company does not match your account")

        employee = self._active_employee(employee_id=employee_id, company_id=company.company_id)
        now = now or now_local()
        decision = self._decide(employee.employee_id, now)

        if requested_type:
            requested = parse_enum(AttendanceType, requested_type, "type")
            if requested != decision.decided_type:
                raise ValidationError(
                    f"{TYPE_LABELS[requested]} is not expected now; next action is {TYPE_LABELS[decision.decided_type]}"
                )

        event = self._persist(employee=employee, decision=decision, now=now, qr_code_id=None, location=None)
        return ScanResult(event=event, decision=decision, message=self._message(employee, decision.decided_type))

    def day_history(
        self, *, employee_id: int, day: Optional[date] = None, now: Optional[datetime] = None
    ) -> DayHistory:
        now = now or now_local()
        day = day or now.date()
        start, end = day_window(datetime.combine(day, time.min))
        newest_first = self._attendance.list_for_employee_between(employee_id=int(employee_id), start=start, end=end)
        return DayHistory(
            day=day,
            events=sorted(newest_first, key=lambda e: (e.timestamp, e.attendance_id)),
            next_type=self._strategy.decide(newest_first).decided_type,
        )

    @staticmethod
    def build_filter(
        *,
        company_id: int,
        search: Optional[str] = None,
        day: Optional[str] = None,
        month: Optional[str] = None,
        type: Optional[str] = None,
    ) -> AttendanceFilter:
        start = end = None
        if optional_str(day):
            parsed = parse_iso_date(str(day))
            start, end = day_window(datetime.combine(parsed, time.min))
        elif optional_str(month):
            start, end = month_window(*parse_month(str(month)))

        type_filter = None
        if optional_str(type) and str(type).strip().upper() != "ALL":
            type_filter = parse_enum(AttendanceType, type, "type")

        return AttendanceFilter(
            company_id=int(company_id),
            search=optional_str(search),
            start=start,
            end=end,
            type=type_filter,
        )

    def search(self, criteria: AttendanceFilter, *, page: int, limit: int) -> AttendancePage:
        rows, total = self._attendance.search(criteria, offset=(int(page) - 1) * int(limit), limit=int(limit))
        return AttendancePage(rows=rows, total=total, page=int(page), limit=int(limit))

    def export_rows(self, criteria: AttendanceFilter) -> Sequence[AttendanceReportRow]:
        rows, _ = self._attendance.search(criteria)
        return rows

    def recent(self, company_id: int, *, limit: int = RECENT_LIMIT) -> Sequence[AttendanceReportRow]:
        rows, _ = self._attendance.search(AttendanceFilter(company_id=int(company_id)), limit=int(limit))
        return rows

    def delete(self, *, company_id: int, attendance_id: int) -> None:
        if not self._attendance.delete(attendance_id=int(attendance_id), company_id=int(company_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("Deleted attendance id=%s in company id=%s", attendance_id, company_id)
