from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..companies.mysql_company_repository import row_to_company
from ..core.enums import SubscriptionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CompanyOverview
from .repository import TenantDirectoryRepository

# name in API payloads -> table counted per company
_COUNTED_TABLES = {
    "admins": "admins",
    "employees": "employees",
    "qrCodes": "qr_codes",
    "attendances": "attendances",
    "leaveRequests": "leave_requests",
    "employeeLeaves": "employee_leaves",
    "contracts": "employment_contracts",
}


class MySQLTenantDirectoryRepository(TenantDirectoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_companies(
        self,
        *,
        search: Optional[str],
        status: Optional[SubscriptionStatus],
        offset: int,
        limit: int,
    ) -> Tuple[Sequence[CompanyOverview], int]:
        where: List[str] = ["1=1"]
        params: List[Any] = []
        if search:
            pattern = f"%{search}%"
            where.append("(c.name LIKE %s OR c.code LIKE %s OR c.phone LIKE %s)")
            params.extend([pattern, pattern, pattern])
        if status is not None:
            where.append("c.subscription_status=%s")
            params.append(status.value)
        where_sql = " AND ".join(where)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM companies c WHERE {where_sql}", tuple(params))
            total_row = fetchone(cur)
            total = int(total_row["total"]) if total_row else 0

            cur.execute(
                f"""
                SELECT c.*,
                       (SELECT COUNT(*) FROM admins a WHERE a.company_id = c.company_id) AS total_admins,
                       (SELECT COUNT(*) FROM employees e WHERE e.company_id = c.company_id) AS total_employees,
                       (SELECT COUNT(*) FROM attendances t WHERE t.company_id = c.company_id) AS total_attendances
                FROM companies c
                WHERE {where_sql}
                ORDER BY c.created_at DESC, c.company_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            items = [
                CompanyOverview(
                    company=row_to_company(r),
                    counts={
                        "admins": int(r["total_admins"]),
                        "employees": int(r["total_employees"]),
                        "attendances": int(r["total_attendances"]),
                    },
                )
                for r in fetchall(cur)
            ]
            return items, total

    def related_counts(self, company_id: int) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        with db_cursor(self._conn_factory) as (_, cur):
            for key, table in _COUNTED_TABLES.items():
                cur.execute(f"SELECT COUNT(*) AS total FROM {table} WHERE company_id=%s", (int(company_id),))
                r = fetchone(cur)
                counts[key] = int(r["total"]) if r else 0
        return counts
