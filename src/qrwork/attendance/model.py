from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceType


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one check-in or check-out of an employee."""

    attendance_id: int
    employee_id: int
    company_id: int
    type: AttendanceType
    timestamp: datetime
    qr_code_id: Optional[int] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for admin listings and exports (joined with employee/QR names)."""

    attendance_id: int
    employee_id: int
    employee_name: str
    employee_username: str
    type: AttendanceType
    timestamp: datetime
    location: Optional[str] = None
    qr_code_id: Optional[int] = None
    qr_code_name: Optional[str] = None


@dataclass(frozen=True)
class AttendanceFilter:
    """Admin search criteria; the time range is half-open [start, end)."""

    company_id: int
    search: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    type: Optional[AttendanceType] = None
