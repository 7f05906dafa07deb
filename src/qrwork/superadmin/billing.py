from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from ..common.datetime_utils import add_months, now_local, parse_iso_date
from ..common.validators import optional_str, parse_bool, parse_int
from ..companies.model import CompanyUpdate
from ..companies.repository import CompanyRepository
from ..core.constants import DEFAULT_MAX_EMPLOYEES, RECENT_LIMIT
from ..core.enums import SubscriptionStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Payment, Subscription, SubscriptionPlan
from .repository import BillingRepository

logger = logging.getLogger(__name__)

DEFAULT_PLANS = (
    {
        "name": "Basic",
        "description": "For small teams getting started",
        "price": Decimal("50000"),
        "max_employees": 10,
        "features": ["QR check-in/check-out", "Attendance history", "CSV export"],
    },
    {
        "name": "Premium",
        "description": "For growing companies",
        "price": Decimal("100000"),
        "max_employees": 50,
        "features": ["Everything in Basic", "Leave management", "Employment contracts", "Statistics"],
    },
    {
        "name": "Enterprise",
        "description": "For large organisations",
        "price": Decimal("200000"),
        "max_employees": 200,
        "features": ["Everything in Premium", "Priority support", "Custom employee fields"],
    },
)


def _datetime(value: Any, field_name: str, *, end_of_day: bool = False) -> datetime:
    if isinstance(value, datetime):
        return value
    if value in (None, ""):
        raise ValidationError(f"{field_name} is required")
    d = parse_iso_date(str(value)[:10])
    if end_of_day:
        return datetime(d.year, d.month, d.day, 23, 59, 59)
    return datetime(d.year, d.month, d.day)


def _amount(value: Any) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("paymentAmount must be a number")
    if amount <= 0:
        raise ValidationError("paymentAmount must be greater than zero")
    return amount


@dataclass(frozen=True)
class BillingHistory:
    subscriptions: Sequence[Subscription]
    payments: Sequence[Payment]


class BillingService:
    def __init__(self, billing: BillingRepository, companies: CompanyRepository):
        self._billing = billing
        self._companies = companies

    def init_plans(self) -> Sequence[SubscriptionPlan]:
        if self._billing.count_plans() > 0:
            raise ConflictError("Subscription plans already exist")
        for plan in DEFAULT_PLANS:
            self._billing.create_plan(**plan)
        logger.info("Seeded %d subscription plans", len(DEFAULT_PLANS))
        return self._billing.list_active_plans()

    def list_plans(self) -> Sequence[SubscriptionPlan]:
        return self._billing.list_active_plans()

    def create_subscription(
        self,
        *,
        company_id: int,
        plan_id: Any,
        start_date: Any,
        end_date: Any,
        auto_renew: Any = False,
        payment_amount: Any = None,
        payment_method: Optional[str] = None,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """Replace the company's active subscription and activate the company on the plan."""
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("Company not found")
        plan = self._billing.get_plan(parse_int(plan_id, "planId"))
        if not plan:
            raise NotFoundError("Subscription plan not found")

        start = _datetime(start_date, "startDate")
        end = _datetime(end_date, "endDate", end_of_day=True)
        if end < start:
            raise ValidationError("endDate cannot be before startDate")
        amount = _amount(payment_amount)

        self._billing.expire_active_subscriptions(company.company_id)
        subscription_id = self._billing.create_subscription(
            company_id=company.company_id,
            plan_id=plan.plan_id,
            start_date=start,
            end_date=end,
            auto_renew=parse_bool(auto_renew),
        )
        self._companies.apply_update(
            company_id=company.company_id,
            update=CompanyUpdate(
                subscription_status=SubscriptionStatus.ACTIVE,
                is_active=True,
                is_approved=True,
                subscription_end_date=end,
                max_employees=plan.max_employees or DEFAULT_MAX_EMPLOYEES,
            ),
        )
        if amount is not None:
            self._billing.create_payment(
                company_id=company.company_id,
                subscription_id=subscription_id,
                amount=amount,
                method=optional_str(payment_method) or "MANUAL",
                description=optional_str(description),
                paid_at=now or now_local(),
            )
        logger.info("Company %s subscribed to plan %s until %s", company.code, plan.name, end.date())

        created = self._billing.get_active_subscription(company.company_id)
        if not created:
            raise NotFoundError("Subscription not found")
        return created

    def extend_subscription(self, *, company_id: int, extend_months: Any = 1) -> Subscription:
        months = parse_int(extend_months if extend_months not in (None, "") else 1, "extendMonths", minimum=1)
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("Company not found")
        current = self._billing.get_active_subscription(company.company_id)
        if not current:
            raise NotFoundError("The company has no active subscription")

        new_end = add_months(current.end_date, months)
        self._billing.set_subscription_end(subscription_id=current.subscription_id, end_date=new_end)
        self._companies.apply_update(
            company_id=company.company_id,
            update=CompanyUpdate(subscription_end_date=new_end),
        )
        logger.info("Subscription of company %s extended by %d month(s) to %s", company.code, months, new_end.date())

        extended = self._billing.get_active_subscription(company.company_id)
        if not extended:
            raise NotFoundError("Subscription not found")
        return extended

    def history(self, *, company_id: int) -> BillingHistory:
        if not self._companies.get_by_id(int(company_id)):
            raise NotFoundError("Company not found")
        return BillingHistory(
            subscriptions=self._billing.list_subscriptions(int(company_id)),
            payments=self._billing.list_payments(int(company_id), limit=RECENT_LIMIT),
        )
