from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from ..companies.model import Company
from ..core.enums import PlanSubscriptionStatus


@dataclass(frozen=True)
class SuperAdmin:
    super_admin_id: int
    name: str
    email: str
    password_hash: str
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SubscriptionPlan:
    plan_id: int
    name: str
    price: Decimal
    max_employees: Optional[int] = None
    description: Optional[str] = None
    features: List[str] = field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Subscription:
    subscription_id: int
    company_id: int
    plan_id: int
    status: PlanSubscriptionStatus
    start_date: datetime
    end_date: datetime
    auto_renew: bool = False
    plan_name: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Payment:
    payment_id: int
    company_id: int
    amount: Decimal
    method: str
    status: str
    paid_at: datetime
    subscription_id: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CompanyOverview:
    """A company with the related-record counts shown in tenant listings."""

    company: Company
    counts: Dict[str, int] = field(default_factory=dict)
