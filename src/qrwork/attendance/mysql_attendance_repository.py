from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.enums import AttendanceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent, AttendanceFilter, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, company_id, qr_code_id, type, timestamp, location, created_at"


def _row_to_event(r: Dict[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        type=AttendanceType(r["type"]),
        timestamp=r["timestamp"],
        qr_code_id=int(r["qr_code_id"]) if r.get("qr_code_id") is not None else None,
        location=r.get("location"),
        created_at=r.get("created_at"),
    )


def _filter_clause(criteria: AttendanceFilter) -> Tuple[str, List[Any]]:
    where = ["a.company_id=%s"]
    params: List[Any] = [int(criteria.company_id)]
    if criteria.search:
        # utf8mb4_unicode_ci collation makes LIKE case-insensitive
        where.append("(e.name LIKE %s OR e.username LIKE %s)")
        pattern = f"%{criteria.search}%"
        params.extend([pattern, pattern])
    if criteria.start is not None:
        where.append("a.timestamp >= %s")
        params.append(criteria.start)
    if criteria.end is not None:
        where.append("a.timestamp < %s")
        params.append(criteria.end)
    if criteria.type is not None:
        where.append("a.type=%s")
        params.append(criteria.type.value)
    return " AND ".join(where), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendances WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def list_for_employee_between(
        self, *, employee_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE employee_id=%s AND timestamp >= %s AND timestamp < %s
                ORDER BY created_at DESC, attendance_id DESC
                """,
                (int(employee_id), start, end),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def get_latest_for_employee(self, employee_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE employee_id=%s
                ORDER BY timestamp DESC, attendance_id DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendances(employee_id, company_id, qr_code_id, type, timestamp, location, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), int(company_id), qr_code_id, type.value, timestamp, location, timestamp),
            )
            return int(cur.lastrowid)

    def overwrite(
        self,
        *,
        attendance_id: int,
        timestamp: datetime,
        qr_code_id: Optional[int],
        location: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendances
                SET timestamp=%s, qr_code_id=%s, location=%s
                WHERE attendance_id=%s
                """,
                (timestamp, qr_code_id, location, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, attendance_id: int, company_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendances WHERE attendance_id=%s AND company_id=%s",
                (int(attendance_id), int(company_id)),
            )
            return cur.rowcount > 0

    def search(
        self, criteria: AttendanceFilter, *, offset: int = 0, limit: Optional[int] = None
    ) -> Tuple[Sequence[AttendanceReportRow], int]:
        where, params = _filter_clause(criteria)
        base = f"""
            FROM attendances a
            JOIN employees e ON e.employee_id = a.employee_id
            LEFT JOIN qr_codes q ON q.qr_code_id = a.qr_code_id
            WHERE {where}
        """
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total {base}", tuple(params))
            total_row = fetchone(cur)
            total = int(total_row["total"]) if total_row else 0

            sql = f"""
                SELECT a.attendance_id, a.employee_id, e.name AS employee_name, e.username AS employee_username,
                       a.type, a.timestamp, a.location, a.qr_code_id, q.name AS qr_code_name
                {base}
                ORDER BY a.timestamp DESC, a.attendance_id DESC
            """
            page_params = list(params)
            if limit is not None:
                sql += " LIMIT %s OFFSET %s"
                page_params.extend([int(limit), int(offset)])
            cur.execute(sql, tuple(page_params))
            rows = [
                AttendanceReportRow(
                    attendance_id=int(r["attendance_id"]),
                    employee_id=int(r["employee_id"]),
                    employee_name=r["employee_name"],
                    employee_username=r["employee_username"],
                    type=AttendanceType(r["type"]),
                    timestamp=r["timestamp"],
                    location=r.get("location"),
                    qr_code_id=int(r["qr_code_id"]) if r.get("qr_code_id") is not None else None,
                    qr_code_name=r.get("qr_code_name"),
                )
                for r in fetchall(cur)
            ]
            return rows, total

    def list_for_company_between(
        self, *, company_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE company_id=%s AND timestamp >= %s AND timestamp < %s
                ORDER BY timestamp
                """,
                (int(company_id), start, end),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def count_for_company(
        self,
        company_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        type: Optional[AttendanceType] = None,
    ) -> int:
        sql = "SELECT COUNT(*) AS total FROM attendances WHERE company_id=%s"
        params: List[Any] = [int(company_id)]
        if start is not None:
            sql += " AND timestamp >= %s"
            params.append(start)
        if end is not None:
            sql += " AND timestamp < %s"
            params.append(end)
        if type is not None:
            sql += " AND type=%s"
            params.append(type.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def count_distinct_employees(
        self, company_id: int, *, start: datetime, end: datetime, type: AttendanceType
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT employee_id) AS total
                FROM attendances
                WHERE company_id=%s AND type=%s AND timestamp >= %s AND timestamp < %s
                """,
                (int(company_id), type.value, start, end),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def count_by_qr_code(self, company_id: int) -> Dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT qr_code_id, COUNT(*) AS total
                FROM attendances
                WHERE company_id=%s AND qr_code_id IS NOT NULL
                GROUP BY qr_code_id
                """,
                (int(company_id),),
            )
            return {int(r["qr_code_id"]): int(r["total"]) for r in fetchall(cur)}
