from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRepository

_REQUEST_SELECT = """
    SELECT r.request_id, r.employee_id, r.company_id, r.type, r.start_date, r.end_date, r.days, r.reason,
           r.status, r.admin_note, r.approved_by, r.approved_at, r.created_at, e.name AS employee_name
    FROM leave_requests r
    JOIN employees e ON e.employee_id = r.employee_id
"""


def _row_to_request(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        type=LeaveType(r["type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=float(r["days"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r.get("created_at"),
        admin_note=r.get("admin_note"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=r.get("approved_at"),
        employee_name=r.get("employee_name"),
    )


def _row_to_balance(r: Dict[str, Any]) -> LeaveBalance:
    return LeaveBalance(
        balance_id=int(r["employee_leave_id"]),
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        year=int(r["year"]),
        total_days=float(r["total_days"]),
        used_days=float(r["used_days"]),
        remaining_days=float(r["remaining_days"]),
    )


def _upsert_balance(cur, balance: LeaveBalance) -> None:
    cur.execute(
        """
        INSERT INTO employee_leaves(employee_id, company_id, year, total_days, used_days, remaining_days)
        VALUES(%s,%s,%s,%s,%s,%s)
        ON DUPLICATE KEY UPDATE
            total_days=VALUES(total_days),
            used_days=VALUES(used_days),
            remaining_days=VALUES(remaining_days)
        """,
        (
            int(balance.employee_id),
            int(balance.company_id),
            int(balance.year),
            balance.total_days,
            balance.used_days,
            balance.remaining_days,
        ),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, company_id, type, start_date, end_date, days, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(company_id),
                    type.value,
                    start_date,
                    end_date,
                    days,
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_REQUEST_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        company_id: int,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        sql = _REQUEST_SELECT + " WHERE r.company_id=%s"
        params: List[Any] = [int(company_id)]
        if employee_id is not None:
            sql += " AND r.employee_id=%s"
            params.append(int(employee_id))
        if status is not None:
            sql += " AND r.status=%s"
            params.append(status.value)
        sql += " ORDER BY r.created_at DESC, r.request_id DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_request(r) for r in fetchall(cur)]

    def has_overlap(self, *, employee_id: int, start_date: date, end_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM leave_requests
                WHERE employee_id=%s AND status IN (%s,%s) AND start_date <= %s AND end_date >= %s
                LIMIT 1
                """,
                (
                    int(employee_id),
                    RequestStatus.PENDING.value,
                    RequestStatus.APPROVED.value,
                    end_date,
                    start_date,
                ),
            )
            return fetchone(cur) is not None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, admin_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, admin_note, int(request_id), RequestStatus.PENDING.value),
            )
            if cur.rowcount == 0:
                return False
            if balance is not None:
                _upsert_balance(cur, balance)
            return True

    def get_balance(self, *, employee_id: int, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_leave_id, employee_id, company_id, year, total_days, used_days, remaining_days
                FROM employee_leaves
                WHERE employee_id=%s AND year=%s
                """,
                (int(employee_id), int(year)),
            )
            r = fetchone(cur)
            return _row_to_balance(r) if r else None

    def list_balances(self, *, company_id: int, year: int) -> Dict[int, LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_leave_id, employee_id, company_id, year, total_days, used_days, remaining_days
                FROM employee_leaves
                WHERE company_id=%s AND year=%s
                """,
                (int(company_id), int(year)),
            )
            return {int(r["employee_id"]): _row_to_balance(r) for r in fetchall(cur)}

    def save_balance(self, balance: LeaveBalance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            _upsert_balance(cur, balance)
