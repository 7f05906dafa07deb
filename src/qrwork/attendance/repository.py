from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceType
from .model import AttendanceEvent, AttendanceFilter, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def list_for_employee_between(
        self, *, employee_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceEvent]:
        """Events with start <= timestamp < end, newest created first."""

        raise NotImplementedError

    def get_latest_for_employee(self, employee_id: int) -> Optional[AttendanceEvent]:
        """Latest by event time, so an overwritten event counts at its new timestamp."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        company_id: int,
        type: AttendanceType,
        timestamp: datetime,
        qr_code_id: Optional[int] = None,
        location: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def overwrite(
        self,
        *,
        attendance_id: int,
        timestamp: datetime,
        qr_code_id: Optional[int],
        location: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, *, attendance_id: int, company_id: int) -> bool:
        raise NotImplementedError

    def search(
        self, criteria: AttendanceFilter, *, offset: int = 0, limit: Optional[int] = None
    ) -> Tuple[Sequence[AttendanceReportRow], int]:
        """Matching rows newest first plus the total match count."""

        raise NotImplementedError

    def list_for_company_between(
        self, *, company_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def count_for_company(
        self,
        company_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        type: Optional[AttendanceType] = None,
    ) -> int:
        raise NotImplementedError

    def count_distinct_employees(
        self, company_id: int, *, start: datetime, end: datetime, type: AttendanceType
    ) -> int:
        raise NotImplementedError

    def count_by_qr_code(self, company_id: int) -> Dict[int, int]:
        raise NotImplementedError
