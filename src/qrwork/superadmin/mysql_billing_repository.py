from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import PlanSubscriptionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, load_json
from .model import Payment, Subscription, SubscriptionPlan
from .repository import BillingRepository

_PLAN_COLUMNS = "plan_id, name, description, price, max_employees, features, is_active, created_at"
_SUBSCRIPTION_SELECT = """
    SELECT s.subscription_id, s.company_id, s.plan_id, s.status, s.start_date, s.end_date, s.auto_renew,
           s.created_at, p.name AS plan_name
    FROM subscriptions s
    JOIN subscription_plans p ON p.plan_id = s.plan_id
"""


def _row_to_plan(r: Dict[str, Any]) -> SubscriptionPlan:
    return SubscriptionPlan(
        plan_id=int(r["plan_id"]),
        name=r["name"],
        price=Decimal(r["price"]),
        max_employees=int(r["max_employees"]) if r.get("max_employees") is not None else None,
        description=r.get("description"),
        features=list(load_json(r.get("features"), [])),
        is_active=as_bool(r["is_active"]),
        created_at=r.get("created_at"),
    )


def _row_to_subscription(r: Dict[str, Any]) -> Subscription:
    return Subscription(
        subscription_id=int(r["subscription_id"]),
        company_id=int(r["company_id"]),
        plan_id=int(r["plan_id"]),
        status=PlanSubscriptionStatus(r["status"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        auto_renew=as_bool(r["auto_renew"]),
        plan_name=r.get("plan_name"),
        created_at=r.get("created_at"),
    )


class MySQLBillingRepository(BillingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count_plans(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM subscription_plans")
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def create_plan(
        self,
        *,
        name: str,
        description: Optional[str],
        price: Decimal,
        max_employees: Optional[int],
        features: List[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subscription_plans(name, description, price, max_employees, features, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, description, price, max_employees, json.dumps(features, ensure_ascii=False)),
            )
            return int(cur.lastrowid)

    def list_active_plans(self) -> Sequence[SubscriptionPlan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PLAN_COLUMNS} FROM subscription_plans WHERE is_active=1 ORDER BY price")
            return [_row_to_plan(r) for r in fetchall(cur)]

    def get_plan(self, plan_id: int) -> Optional[SubscriptionPlan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PLAN_COLUMNS} FROM subscription_plans WHERE plan_id=%s", (int(plan_id),))
            r = fetchone(cur)
            return _row_to_plan(r) if r else None

    def expire_active_subscriptions(self, company_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE subscriptions SET status=%s WHERE company_id=%s AND status=%s",
                (PlanSubscriptionStatus.EXPIRED.value, int(company_id), PlanSubscriptionStatus.ACTIVE.value),
            )
            return int(cur.rowcount)

    def create_subscription(
        self,
        *,
        company_id: int,
        plan_id: int,
        start_date: datetime,
        end_date: datetime,
        auto_renew: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subscriptions(company_id, plan_id, status, start_date, end_date, auto_renew)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(company_id),
                    int(plan_id),
                    PlanSubscriptionStatus.ACTIVE.value,
                    start_date,
                    end_date,
                    1 if auto_renew else 0,
                ),
            )
            return int(cur.lastrowid)

    def get_active_subscription(self, company_id: int) -> Optional[Subscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SUBSCRIPTION_SELECT
                + " WHERE s.company_id=%s AND s.status=%s ORDER BY s.end_date DESC LIMIT 1",
                (int(company_id), PlanSubscriptionStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _row_to_subscription(r) if r else None

    def set_subscription_end(self, *, subscription_id: int, end_date: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE subscriptions SET end_date=%s WHERE subscription_id=%s",
                (end_date, int(subscription_id)),
            )

    def list_subscriptions(self, company_id: int) -> Sequence[Subscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SUBSCRIPTION_SELECT + " WHERE s.company_id=%s ORDER BY s.created_at DESC, s.subscription_id DESC",
                (int(company_id),),
            )
            return [_row_to_subscription(r) for r in fetchall(cur)]

    def create_payment(
        self,
        *,
        company_id: int,
        subscription_id: Optional[int],
        amount: Decimal,
        method: str,
        description: Optional[str],
        paid_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payments(company_id, subscription_id, amount, method, status, description, paid_at)
                VALUES(%s,%s,%s,%s,'COMPLETED',%s,%s)
                """,
                (int(company_id), subscription_id, amount, method, description, paid_at),
            )
            return int(cur.lastrowid)

    def list_payments(self, company_id: int, *, limit: int) -> Sequence[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payment_id, company_id, subscription_id, amount, method, status, description, paid_at
                FROM payments
                WHERE company_id=%s
                ORDER BY paid_at DESC, payment_id DESC
                LIMIT %s
                """,
                (int(company_id), int(limit)),
            )
            return [
                Payment(
                    payment_id=int(r["payment_id"]),
                    company_id=int(r["company_id"]),
                    subscription_id=int(r["subscription_id"]) if r.get("subscription_id") is not None else None,
                    amount=Decimal(r["amount"]),
                    method=r["method"],
                    status=r["status"],
                    description=r.get("description"),
                    paid_at=r["paid_at"],
                )
                for r in fetchall(cur)
            ]
