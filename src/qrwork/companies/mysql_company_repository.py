from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from ..core.enums import SubscriptionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Company, CompanyUpdate
from .repository import CompanyRepository

_COLUMNS = """
    company_id, name, code, phone, trial_end_date, max_employees, is_active, is_approved,
    subscription_status, subscription_end_date, created_at
"""


def row_to_company(r: Dict[str, Any]) -> Company:
    return Company(
        company_id=int(r["company_id"]),
        name=r["name"],
        code=r["code"],
        phone=r.get("phone"),
        trial_end_date=r["trial_end_date"],
        max_employees=int(r["max_employees"]),
        is_active=as_bool(r["is_active"]),
        is_approved=as_bool(r["is_approved"]),
        subscription_status=SubscriptionStatus(r["subscription_status"]),
        subscription_end_date=r.get("subscription_end_date"),
        created_at=r.get("created_at"),
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE company_id=%s", (int(company_id),))
            r = fetchone(cur)
            return row_to_company(r) if r else None

    def get_by_code(self, code: str) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE code=%s", (code,))
            r = fetchone(cur)
            return row_to_company(r) if r else None

    def code_exists(self, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM companies WHERE code=%s", (code,))
            return fetchone(cur) is not None

    def create_with_admin(
        self,
        *,
        name: str,
        code: str,
        phone: Optional[str],
        trial_end_date: datetime,
        max_employees: int,
        admin_name: str,
        admin_email: str,
        admin_password_hash: str,
    ) -> Tuple[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO companies(name, code, phone, trial_end_date, max_employees, is_active, is_approved, subscription_status)
                VALUES(%s,%s,%s,%s,%s,1,0,%s)
                """,
                (name, code, phone, trial_end_date, int(max_employees), SubscriptionStatus.TRIAL.value),
            )
            company_id = int(cur.lastrowid)
            cur.execute(
                """
                INSERT INTO admins(company_id, name, email, password_hash, role, is_active)
                VALUES(%s,%s,%s,%s,'ADMIN',1)
                """,
                (company_id, admin_name, admin_email, admin_password_hash),
            )
            return company_id, int(cur.lastrowid)

    def update_profile(self, *, company_id: int, name: str, phone: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE companies SET name=%s, phone=%s WHERE company_id=%s",
                (name, phone, int(company_id)),
            )
            return cur.rowcount > 0

    def apply_update(self, *, company_id: int, update: CompanyUpdate) -> bool:
        sets: list[str] = []
        params: list[Any] = []
        if update.subscription_status is not None:
            sets.append("subscription_status=%s")
            params.append(update.subscription_status.value)
        if update.is_active is not None:
            sets.append("is_active=%s")
            params.append(1 if update.is_active else 0)
        if update.is_approved is not None:
            sets.append("is_approved=%s")
            params.append(1 if update.is_approved else 0)
        if update.subscription_end_date is not None:
            sets.append("subscription_end_date=%s")
            params.append(update.subscription_end_date)
        if update.trial_end_date is not None:
            sets.append("trial_end_date=%s")
            params.append(update.trial_end_date)
        if update.max_employees is not None:
            sets.append("max_employees=%s")
            params.append(int(update.max_employees))
        if not sets:
            return False

        params.append(int(company_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE companies SET {', '.join(sets)} WHERE company_id=%s", tuple(params))
            return cur.rowcount > 0

    def list_stale_trials(self, *, created_before: datetime) -> Sequence[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM companies
                WHERE subscription_status=%s AND is_approved=0 AND created_at <= %s
                ORDER BY created_at
                """,
                (SubscriptionStatus.TRIAL.value, created_before),
            )
            return [row_to_company(r) for r in fetchall(cur)]

    def delete(self, company_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM companies WHERE company_id=%s", (int(company_id),))
            return cur.rowcount > 0
