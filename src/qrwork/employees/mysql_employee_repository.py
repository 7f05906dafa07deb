from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, load_json
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, company_id, name, username, password_hash, email, phone, custom_fields,
    is_active, last_login_at, created_at
"""


def _row_to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        username=r["username"],
        password_hash=r["password_hash"],
        email=r.get("email"),
        phone=r.get("phone"),
        custom_fields=load_json(r.get("custom_fields"), {}),
        is_active=as_bool(r["is_active"]),
        last_login_at=r.get("last_login_at"),
        created_at=r.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_by_username(self, *, company_id: int, username: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE company_id=%s AND username=%s",
                (int(company_id), username),
            )
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def username_taken(self, *, company_id: int, username: str, exclude_id: Optional[int] = None) -> bool:
        sql = "SELECT 1 AS found FROM employees WHERE company_id=%s AND username=%s"
        params: list[Any] = [int(company_id), username]
        if exclude_id is not None:
            sql += " AND employee_id<>%s"
            params.append(int(exclude_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return fetchone(cur) is not None

    def list_for_company(self, company_id: int, *, active_only: bool = False) -> Sequence[Employee]:
        sql = f"SELECT {_COLUMNS} FROM employees WHERE company_id=%s"
        if active_only:
            sql += " AND is_active=1"
        sql += " ORDER BY created_at DESC, employee_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(company_id),))
            return [_row_to_employee(r) for r in fetchall(cur)]

    def count_for_company(self, company_id: int, *, active_only: bool = False) -> int:
        sql = "SELECT COUNT(*) AS total FROM employees WHERE company_id=%s"
        if active_only:
            sql += " AND is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(company_id),))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def create(
        self,
        *,
        company_id: int,
        name: str,
        username: str,
        password_hash: str,
        email: Optional[str],
        phone: Optional[str],
        custom_fields: Dict[str, Any],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(company_id, name, username, password_hash, email, phone, custom_fields, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (int(company_id), name, username, password_hash, email, phone, json.dumps(custom_fields)),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        username: str,
        email: Optional[str],
        phone: Optional[str],
        custom_fields: Dict[str, Any],
        is_active: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=%s, username=%s, email=%s, phone=%s, custom_fields=%s, is_active=%s
                WHERE employee_id=%s
                """,
                (name, username, email, phone, json.dumps(custom_fields), 1 if is_active else 0, int(employee_id)),
            )
            return cur.rowcount > 0

    def update_password(self, *, employee_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET password_hash=%s WHERE employee_id=%s",
                (password_hash, int(employee_id)),
            )
            return cur.rowcount > 0

    def touch_login(self, *, employee_id: int, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET last_login_at=%s WHERE employee_id=%s", (at, int(employee_id)))

    def delete(self, *, employee_id: int, company_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM employees WHERE employee_id=%s AND company_id=%s",
                (int(employee_id), int(company_id)),
            )
            return cur.rowcount > 0
