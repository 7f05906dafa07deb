from __future__ import annotations

from enum import Enum


class TokenRole(str, Enum):
    """Role tag carried by every access token."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    SUPER_ADMIN = "super_admin"


class AttendanceType(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class WriteAction(str, Enum):
    """How a scan is persisted: a new row or an overwrite of today's row."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"


class SubscriptionStatus(str, Enum):
    """Tenant lifecycle state of a company."""

    TRIAL = "TRIAL"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"
    REJECTED = "REJECTED"


class PlanSubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class LeaveType(str, Enum):
    ANNUAL = "ANNUAL"
    SICK = "SICK"
    PERSONAL = "PERSONAL"
    OTHER = "OTHER"


class RequestStatus(str, Enum):
    """Approval workflow state of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ContractStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    SIGNED = "SIGNED"
    EXPIRED = "EXPIRED"


class CompanyAction(str, Enum):
    """Actions a super-admin can apply to a company."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"
    EXTEND = "EXTEND"
    SUSPEND = "SUSPEND"
    ACTIVATE = "ACTIVATE"
    EXTEND_TRIAL = "EXTEND_TRIAL"
    UPDATE_SUBSCRIPTION = "UPDATE_SUBSCRIPTION"
