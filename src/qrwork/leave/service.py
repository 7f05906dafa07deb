from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, List, Optional, Sequence, Tuple

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_str, parse_enum, require_non_empty
from ..core.constants import DEFAULT_LEAVE_DAYS
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def _positive_days(value: Any) -> float:
    try:
        days = float(value)
    except (TypeError, ValueError):
        raise ValidationError("days must be a number")
    if days <= 0:
        raise ValidationError("days must be greater than zero")
    return days


@dataclass(frozen=True)
class LeaveInfo:
    balance: LeaveBalance
    pending_count: int
    approved_count: int


class LeaveService:
    def __init__(self, leave: LeaveRepository, employees: EmployeeRepository):
        self._leave = leave
        self._employees = employees

    def _employee(self, *, company_id: int, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp or emp.company_id != int(company_id):
            raise NotFoundError("Employee not found")
        return emp

    @staticmethod
    def _default_balance(emp: Employee, year: int) -> LeaveBalance:
        return LeaveBalance(
            employee_id=emp.employee_id,
            company_id=emp.company_id,
            year=year,
            total_days=float(DEFAULT_LEAVE_DAYS),
            used_days=0.0,
            remaining_days=float(DEFAULT_LEAVE_DAYS),
        )

    def _ensure_balance(self, emp: Employee, year: int) -> LeaveBalance:
        balance = self._leave.get_balance(employee_id=emp.employee_id, year=year)
        if balance:
            return balance
        balance = self._default_balance(emp, year)
        self._leave.save_balance(balance)
        return balance

    def request_leave(
        self,
        *,
        company_id: int,
        employee_id: int,
        type: Any,
        start_date: Any,
        end_date: Any,
        days: Any,
        reason: str,
        today: Optional[date] = None,
    ) -> LeaveRequest:
        leave_type = parse_enum(LeaveType, type, "type")
        start = start_date if isinstance(start_date, date) else parse_iso_date(require_non_empty(start_date, "startDate")[:10])
        end = end_date if isinstance(end_date, date) else parse_iso_date(require_non_empty(end_date, "endDate")[:10])
        days_f = _positive_days(days)
        reason = require_non_empty(reason, "Reason")

        today = today or now_local().date()
        if end < start:
            raise ValidationError("End date cannot be before the start date")
        if start < today:
            raise ValidationError("Leave cannot start in the past")

        emp = self._employee(company_id=company_id, employee_id=employee_id)
        balance = self._ensure_balance(emp, start.year)
        if days_f > balance.remaining_days:
            raise ValidationError(f"Not enough leave days remaining ({balance.remaining_days:g} left)")
        if self._leave.has_overlap(employee_id=emp.employee_id, start_date=start, end_date=end):
            raise ValidationError("There is already a leave request for these dates")

        request_id = self._leave.create_request(
            employee_id=emp.employee_id,
            company_id=emp.company_id,
            type=leave_type,
            start_date=start,
            end_date=end,
            days=days_f,
            reason=reason,
        )
        logger.info("Leave request id=%s created by employee id=%s (%s days)", request_id, emp.employee_id, days_f)
        created = self._leave.get_request(request_id)
        if not created:
            raise NotFoundError("Leave request not found")
        return created

    def list_own(self, *, company_id: int, employee_id: int) -> Sequence[LeaveRequest]:
        return self._leave.list_requests(company_id=int(company_id), employee_id=int(employee_id))

    def info(self, *, company_id: int, employee_id: int, year: Optional[int] = None) -> LeaveInfo:
        emp = self._employee(company_id=company_id, employee_id=employee_id)
        year = year or now_local().year
        balance = self._ensure_balance(emp, year)
        requests = self._leave.list_requests(company_id=emp.company_id, employee_id=emp.employee_id)
        in_year = [r for r in requests if r.start_date.year == year]
        return LeaveInfo(
            balance=balance,
            pending_count=sum(1 for r in in_year if r.status == RequestStatus.PENDING),
            approved_count=sum(1 for r in in_year if r.status == RequestStatus.APPROVED),
        )

    def list_for_company(self, *, company_id: int, status: Optional[str] = None) -> Sequence[LeaveRequest]:
        status_filter = None
        if optional_str(status) and str(status).upper() != "ALL":
            status_filter = parse_enum(RequestStatus, status, "status")
        return self._leave.list_requests(company_id=int(company_id), status=status_filter)

    def decide(
        self,
        *,
        company_id: int,
        admin_id: int,
        request_id: int,
        status: Any,
        admin_note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        decision = parse_enum(RequestStatus, status, "status")
        if decision == RequestStatus.PENDING:
            raise ValidationError("status must be APPROVED or REJECTED")

        req = self._leave.get_request(int(request_id))
        if not req or req.company_id != int(company_id):
            raise NotFoundError("Leave request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("This request has already been processed")

        consumed = None
        if decision == RequestStatus.APPROVED:
            emp = self._employee(company_id=company_id, employee_id=req.employee_id)
            balance = self._leave.get_balance(
                employee_id=emp.employee_id, year=req.start_date.year
            ) or self._default_balance(emp, req.start_date.year)
            used = balance.used_days + req.days
            consumed = replace(balance, used_days=used, remaining_days=balance.total_days - used)

        if not self._leave.decide(
            request_id=req.request_id,
            status=decision,
            decided_by=int(admin_id),
            admin_note=optional_str(admin_note),
            decided_at=now or now_local(),
            balance=consumed,
        ):
            raise ValidationError("This request has already been processed")

        logger.info("Leave request id=%s %s by admin id=%s", req.request_id, decision.value, admin_id)
        decided = self._leave.get_request(req.request_id)
        if not decided:
            raise NotFoundError("Leave request not found")
        return decided

    def get_balance(self, *, company_id: int, employee_id: int, year: Optional[int] = None) -> LeaveBalance:
        emp = self._employee(company_id=company_id, employee_id=employee_id)
        year = year or now_local().year
        balance = self._leave.get_balance(employee_id=emp.employee_id, year=year)
        if balance:
            return balance
        return LeaveBalance(
            employee_id=emp.employee_id,
            company_id=emp.company_id,
            year=year,
            total_days=0.0,
            used_days=0.0,
            remaining_days=0.0,
        )

    def set_total_days(
        self, *, company_id: int, employee_id: int, total_days: Any, year: Optional[int] = None
    ) -> LeaveBalance:
        try:
            total = float(total_days)
        except (TypeError, ValueError):
            raise ValidationError("totalDays must be a number")
        if total < 0:
            raise ValidationError("totalDays cannot be negative")

        emp = self._employee(company_id=company_id, employee_id=employee_id)
        year = year or now_local().year
        current = self._leave.get_balance(employee_id=emp.employee_id, year=year)
        used = current.used_days if current else 0.0
        balance = LeaveBalance(
            employee_id=emp.employee_id,
            company_id=emp.company_id,
            year=year,
            total_days=total,
            used_days=used,
            remaining_days=total - used,
            balance_id=current.balance_id if current else None,
        )
        self._leave.save_balance(balance)
        logger.info("Leave allowance of employee id=%s set to %s for %s", emp.employee_id, total, year)
        return balance

    def employee_balances(
        self, *, company_id: int, year: Optional[int] = None
    ) -> List[Tuple[Employee, Optional[LeaveBalance]]]:
        year = year or now_local().year
        balances = self._leave.list_balances(company_id=int(company_id), year=year)
        return [
            (emp, balances.get(emp.employee_id))
            for emp in self._employees.list_for_company(int(company_id), active_only=True)
        ]
