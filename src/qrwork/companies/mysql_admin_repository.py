from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Admin
from .repository import AdminRepository

_COLUMNS = "admin_id, company_id, name, email, password_hash, role, is_active, last_login_at, created_at"


def _row_to_admin(r: Dict[str, Any]) -> Admin:
    return Admin(
        admin_id=int(r["admin_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=r.get("role") or "ADMIN",
        is_active=as_bool(r["is_active"]),
        last_login_at=r.get("last_login_at"),
        created_at=r.get("created_at"),
    )


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM admins WHERE admin_id=%s", (int(admin_id),))
            r = fetchone(cur)
            return _row_to_admin(r) if r else None

    def email_exists(self, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM admins WHERE email=%s", (email,))
            return fetchone(cur) is not None

    def get_in_company(self, *, email: str, company_id: int) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM admins WHERE email=%s AND company_id=%s",
                (email, int(company_id)),
            )
            r = fetchone(cur)
            return _row_to_admin(r) if r else None

    def list_for_company(self, company_id: int) -> Sequence[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM admins WHERE company_id=%s ORDER BY created_at",
                (int(company_id),),
            )
            return [_row_to_admin(r) for r in fetchall(cur)]

    def touch_login(self, *, admin_id: int, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE admins SET last_login_at=%s WHERE admin_id=%s", (at, int(admin_id)))

    def update_password(self, *, admin_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE admins SET password_hash=%s WHERE admin_id=%s", (password_hash, int(admin_id)))
            return cur.rowcount > 0
