from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..core.enums import SubscriptionStatus
from .model import CompanyOverview, Payment, SubscriptionPlan, Subscription, SuperAdmin


class SuperAdminRepository(Protocol):
    def get_by_id(self, super_admin_id: int) -> Optional[SuperAdmin]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[SuperAdmin]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, password_hash: str) -> int:
        raise NotImplementedError

    def touch_login(self, *, super_admin_id: int, at: datetime) -> None:
        raise NotImplementedError


class BillingRepository(Protocol):
    def count_plans(self) -> int:
        raise NotImplementedError

    def create_plan(
        self,
        *,
        name: str,
        description: Optional[str],
        price: Decimal,
        max_employees: Optional[int],
        features: List[str],
    ) -> int:
        raise NotImplementedError

    def list_active_plans(self) -> Sequence[SubscriptionPlan]:
        raise NotImplementedError

    def get_plan(self, plan_id: int) -> Optional[SubscriptionPlan]:
        raise NotImplementedError

    def expire_active_subscriptions(self, company_id: int) -> int:
        raise NotImplementedError

    def create_subscription(
        self,
        *,
        company_id: int,
        plan_id: int,
        start_date: datetime,
        end_date: datetime,
        auto_renew: bool,
    ) -> int:
        raise NotImplementedError

    def get_active_subscription(self, company_id: int) -> Optional[Subscription]:
        raise NotImplementedError

    def set_subscription_end(self, *, subscription_id: int, end_date: datetime) -> None:
        raise NotImplementedError

    def list_subscriptions(self, company_id: int) -> Sequence[Subscription]:
        raise NotImplementedError

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
        raise NotImplementedError

    def list_payments(self, company_id: int, *, limit: int) -> Sequence[Payment]:
        raise NotImplementedError


class TenantDirectoryRepository(Protocol):
    """Cross-tenant read queries used by the super-admin console."""

    def list_companies(
        self,
        *,
        search: Optional[str],
        status: Optional[SubscriptionStatus],
        offset: int,
        limit: int,
    ) -> Tuple[Sequence[CompanyOverview], int]:
        raise NotImplementedError

    def related_counts(self, company_id: int) -> Dict[str, int]:
        """Row counts of every table that belongs to the company."""

        raise NotImplementedError
