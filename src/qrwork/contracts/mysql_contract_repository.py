from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import ContractStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ContractTerms, EmploymentContract
from .repository import ContractRepository

_SELECT = """
    SELECT c.contract_id, c.company_id, c.employee_id, c.title, c.content, c.start_date, c.end_date, c.salary,
           c.position, c.department, c.status, c.created_by_id, c.sent_at, c.created_at, c.updated_at,
           e.name AS employee_name
    FROM employment_contracts c
    JOIN employees e ON e.employee_id = c.employee_id
"""


def _row_to_contract(r: Dict[str, Any]) -> EmploymentContract:
    return EmploymentContract(
        contract_id=int(r["contract_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        title=r["title"],
        content=r["content"],
        status=ContractStatus(r["status"]),
        created_by_id=int(r["created_by_id"]),
        start_date=r.get("start_date"),
        end_date=r.get("end_date"),
        salary=Decimal(r["salary"]) if r.get("salary") is not None else None,
        position=r.get("position"),
        department=r.get("department"),
        sent_at=r.get("sent_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=r.get("employee_name"),
    )


class MySQLContractRepository(ContractRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, company_id: int, employee_id: int, created_by_id: int, terms: ContractTerms) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employment_contracts(
                    company_id, employee_id, title, content, start_date, end_date, salary, position, department,
                    status, created_by_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(company_id),
                    int(employee_id),
                    terms.title,
                    terms.content,
                    terms.start_date,
                    terms.end_date,
                    terms.salary,
                    terms.position,
                    terms.department,
                    ContractStatus.DRAFT.value,
                    int(created_by_id),
                ),
            )
            return int(cur.lastrowid)

    def get(self, contract_id: int) -> Optional[EmploymentContract]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.contract_id=%s", (int(contract_id),))
            r = fetchone(cur)
            return _row_to_contract(r) if r else None

    def list_for_company(
        self, *, company_id: int, status: Optional[ContractStatus] = None
    ) -> Sequence[EmploymentContract]:
        sql = _SELECT + " WHERE c.company_id=%s"
        params: List[Any] = [int(company_id)]
        if status is not None:
            sql += " AND c.status=%s"
            params.append(status.value)
        sql += " ORDER BY c.created_at DESC, c.contract_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_contract(r) for r in fetchall(cur)]

    def update_terms(self, *, contract_id: int, terms: ContractTerms) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employment_contracts
                SET title=%s, content=%s, start_date=%s, end_date=%s, salary=%s, position=%s, department=%s
                WHERE contract_id=%s AND status=%s
                """,
                (
                    terms.title,
                    terms.content,
                    terms.start_date,
                    terms.end_date,
                    terms.salary,
                    terms.position,
                    terms.department,
                    int(contract_id),
                    ContractStatus.DRAFT.value,
                ),
            )
            return cur.rowcount > 0

    def mark_sent(self, *, contract_id: int, sent_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employment_contracts SET status=%s, sent_at=%s WHERE contract_id=%s AND status=%s",
                (ContractStatus.SENT.value, sent_at, int(contract_id), ContractStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def delete(self, *, contract_id: int, company_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM employment_contracts WHERE contract_id=%s AND company_id=%s",
                (int(contract_id), int(company_id)),
            )
            return cur.rowcount > 0
