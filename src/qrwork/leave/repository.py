from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveBalance, LeaveRequest


class LeaveRepository(Protocol):
    def create_request(
        self,
        *,
        employee_id: int,
        company_id: int,
        type: LeaveType,
        start_date: date,
        end_date: date,
        days: float,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        company_id: int,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest first, joined with the employee name."""

        raise NotImplementedError

    def has_overlap(self, *, employee_id: int, start_date: date, end_date: date) -> bool:
        """True when a PENDING or APPROVED request intersects [start_date, end_date]."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_note: Optional[str],
        decided_at: datetime,
        balance: Optional[LeaveBalance] = None,
    ) -> bool:
        """Apply a decision only while the request is still PENDING.

        When `balance` is given it is saved in the same transaction as the status change.
        """

        raise NotImplementedError

    def get_balance(self, *, employee_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_balances(self, *, company_id: int, year: int) -> Dict[int, LeaveBalance]:
        raise NotImplementedError

    def save_balance(self, balance: LeaveBalance) -> None:
        """Insert or update the (employee, year) balance."""

        raise NotImplementedError
