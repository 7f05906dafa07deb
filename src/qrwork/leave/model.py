from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    company_id: int
    type: LeaveType
    start_date: date
    end_date: date
    days: float
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    admin_note: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    employee_name: Optional[str] = None


@dataclass(frozen=True)
class LeaveBalance:
    """Yearly leave allowance of one employee; remaining = total - used."""

    employee_id: int
    company_id: int
    year: int
    total_days: float
    used_days: float
    remaining_days: float
    balance_id: Optional[int] = None
