from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SubscriptionStatus


@dataclass(frozen=True)
class Company:
    """Tenant: every other record is scoped by `company_id`."""

    company_id: int
    name: str
    code: str
    phone: Optional[str]
    trial_end_date: datetime
    max_employees: int
    is_active: bool
    is_approved: bool
    subscription_status: SubscriptionStatus
    subscription_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def is_trial_expired(self, now: datetime) -> bool:
        return now > self.trial_end_date

    def is_subscription_expired(self, now: datetime) -> bool:
        return self.subscription_end_date is not None and now > self.subscription_end_date


@dataclass(frozen=True)
class Admin:
    admin_id: int
    company_id: int
    name: str
    email: str
    password_hash: str
    role: str = "ADMIN"
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CompanyUpdate:
    """Partial lifecycle update; None leaves a column unchanged."""

    subscription_status: Optional[SubscriptionStatus] = None
    is_active: Optional[bool] = None
    is_approved: Optional[bool] = None
    subscription_end_date: Optional[datetime] = None
    trial_end_date: Optional[datetime] = None
    max_employees: Optional[int] = None
