from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchone
from .model import SuperAdmin
from .repository import SuperAdminRepository

_COLUMNS = "super_admin_id, name, email, password_hash, is_active, last_login_at, created_at"


def _row_to_super_admin(r: Dict[str, Any]) -> SuperAdmin:
    return SuperAdmin(
        super_admin_id=int(r["super_admin_id"]),
        name=r["name"],
        email=r["email"],
        password_hash=r["password_hash"],
        is_active=as_bool(r["is_active"]),
        last_login_at=r.get("last_login_at"),
        created_at=r.get("created_at"),
    )


class MySQLSuperAdminRepository(SuperAdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, super_admin_id: int) -> Optional[SuperAdmin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM super_admins WHERE super_admin_id=%s", (int(super_admin_id),))
            r = fetchone(cur)
            return _row_to_super_admin(r) if r else None

    def get_by_email(self, email: str) -> Optional[SuperAdmin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM super_admins WHERE email=%s", (email,))
            r = fetchone(cur)
            return _row_to_super_admin(r) if r else None

    def create(self, *, name: str, email: str, password_hash: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO super_admins(name, email, password_hash, is_active) VALUES(%s,%s,%s,1)",
                (name, email, password_hash),
            )
            return int(cur.lastrowid)

    def touch_login(self, *, super_admin_id: int, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE super_admins SET last_login_at=%s WHERE super_admin_id=%s",
                (at, int(super_admin_id)),
            )
