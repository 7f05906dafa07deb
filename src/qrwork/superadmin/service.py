from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from math import ceil
from typing import Any, Dict, List, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..attendance.model import AttendanceFilter, AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import add_months, day_window, now_local, parse_iso_date
from ..common.validators import optional_str, parse_enum, parse_int
from ..companies.model import Admin, Company, CompanyUpdate
from ..companies.repository import AdminRepository, CompanyRepository
from ..core.constants import DEFAULT_EXTEND_TRIAL_DAYS, RECENT_LIMIT, TRIAL_DAYS
from ..core.enums import CompanyAction, SubscriptionStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leave.model import LeaveRequest
from ..leave.repository import LeaveRepository
from ..qrcodes.model import QrCode
from ..qrcodes.repository import QrCodeRepository
from .model import CompanyOverview, SuperAdmin
from .repository import SuperAdminRepository, TenantDirectoryRepository

logger = logging.getLogger(__name__)

SINGLE_ACTIONS = {
    CompanyAction.APPROVE,
    CompanyAction.REJECT,
    CompanyAction.EXTEND,
    CompanyAction.SUSPEND,
    CompanyAction.ACTIVATE,
}
BULK_ACTIONS = {
    CompanyAction.APPROVE,
    CompanyAction.REJECT,
    CompanyAction.SUSPEND,
    CompanyAction.ACTIVATE,
    CompanyAction.EXTEND_TRIAL,
    CompanyAction.UPDATE_SUBSCRIPTION,
}


def _end_date(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    parsed = parse_iso_date(str(value)[:10])
    return datetime(parsed.year, parsed.month, parsed.day, 23, 59, 59)


@dataclass(frozen=True)
class BootstrapStatus:
    email_configured: bool
    password_configured: bool
    name: str
    super_admin: Optional[SuperAdmin] = None


@dataclass(frozen=True)
class CompanyPage:
    items: Sequence[CompanyOverview]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


@dataclass(frozen=True)
class CompanyDetails:
    company: Company
    admins: Sequence[Admin]
    employees: Sequence[Employee]
    qr_codes: Sequence[QrCode]
    recent_attendances: Sequence[AttendanceReportRow]
    recent_leave_requests: Sequence[LeaveRequest]
    counts: Dict[str, int]
    stats: Dict[str, int]


@dataclass(frozen=True)
class BulkOutcome:
    company_id: int
    status: str
    message: str


@dataclass(frozen=True)
class BulkResult:
    action: CompanyAction
    results: List[BulkOutcome] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.status == "SUCCESS")

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if r.status == "ERROR")


class SuperAdminService:
    """Tenant lifecycle across companies, plus bootstrap of the super-admin account."""

    def __init__(
        self,
        super_admins: SuperAdminRepository,
        companies: CompanyRepository,
        directory: TenantDirectoryRepository,
        admins: AdminRepository,
        employees: EmployeeRepository,
        qr_codes: QrCodeRepository,
        attendance: AttendanceRepository,
        leave: LeaveRepository,
        *,
        bootstrap_email: Optional[str] = None,
        bootstrap_password: Optional[str] = None,
        bootstrap_name: str = "Super Admin",
    ):
        self._super_admins = super_admins
        self._companies = companies
        self._directory = directory
        self._admins = admins
        self._employees = employees
        self._qr_codes = qr_codes
        self._attendance = attendance
        self._leave = leave
        self._bootstrap_email = (bootstrap_email or "").strip().lower() or None
        self._bootstrap_password = bootstrap_password
        self._bootstrap_name = bootstrap_name

    def _require_bootstrap_config(self) -> str:
        if not self._bootstrap_email or not self._bootstrap_password:
            raise ValidationError("SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD are not configured")
        return self._bootstrap_email

    def bootstrap_status(self) -> BootstrapStatus:
        super_admin = None
        if self._bootstrap_email:
            super_admin = self._super_admins.get_by_email(self._bootstrap_email)
        return BootstrapStatus(
            email_configured=bool(self._bootstrap_email),
            password_configured=bool(self._bootstrap_password),
            name=self._bootstrap_name,
            super_admin=super_admin,
        )

    def init_super_admin(self) -> SuperAdmin:
        email = self._require_bootstrap_config()
        if self._super_admins.get_by_email(email):
            raise ValidationError("The super-admin account already exists")
        super_admin_id = self._super_admins.create(
            name=self._bootstrap_name,
            email=email,
            password_hash=generate_password_hash(str(self._bootstrap_password)),
        )
        logger.info("Created super-admin id=%s", super_admin_id)
        created = self._super_admins.get_by_id(super_admin_id)
        if not created:
            raise NotFoundError("Super-admin not found")
        return created

    def _company(self, company_id: int) -> Company:
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("Company not found")
        return company

    def list_companies(
        self, *, page: int, limit: int, search: Optional[str] = None, status: Optional[str] = None
    ) -> CompanyPage:
        status_filter = None
        if optional_str(status) and str(status).upper() != "ALL":
            status_filter = parse_enum(SubscriptionStatus, status, "status")
        items, total = self._directory.list_companies(
            search=optional_str(search),
            status=status_filter,
            offset=(int(page) - 1) * int(limit),
            limit=int(limit),
        )
        return CompanyPage(items=items, total=total, page=int(page), limit=int(limit))

    def company_details(self, company_id: int, *, now: Optional[datetime] = None) -> CompanyDetails:
        company = self._company(company_id)
        now = now or now_local()
        this_month = datetime(now.year, now.month, 1)
        last_month = add_months(this_month, -1)
        today_start, today_end = day_window(now)
        employees = self._employees.list_for_company(company.company_id)
        recent_login_cutoff = now - timedelta(days=7)

        recent, _ = self._attendance.search(AttendanceFilter(company_id=company.company_id), limit=RECENT_LIMIT)
        return CompanyDetails(
            company=company,
            admins=self._admins.list_for_company(company.company_id),
            employees=employees,
            qr_codes=self._qr_codes.list_for_company(company.company_id),
            recent_attendances=recent,
            recent_leave_requests=self._leave.list_requests(company_id=company.company_id, limit=RECENT_LIMIT),
            counts=self._directory.related_counts(company.company_id),
            stats={
                "thisMonthAttendances": self._attendance.count_for_company(company.company_id, start=this_month),
                "lastMonthAttendances": self._attendance.count_for_company(
                    company.company_id, start=last_month, end=this_month
                ),
                "todayAttendances": self._attendance.count_for_company(
                    company.company_id, start=today_start, end=today_end
                ),
                "activeEmployees": sum(
                    1 for e in employees if e.last_login_at is not None and e.last_login_at >= recent_login_cutoff
                ),
            },
        )

    def delete_company(self, company_id: int, *, now: Optional[datetime] = None) -> Dict[str, Any]:
        company = self._company(company_id)
        counts = self._directory.related_counts(company.company_id)
        self._companies.delete(company.company_id)
        logger.warning("Deleted company %s (id=%s) and all its data", company.code, company.company_id)
        return {
            "companyName": company.name,
            "companyCode": company.code,
            "counts": counts,
            "createdAt": company.created_at,
            "deletedAt": now or now_local(),
        }

    def _update_for(
        self, company: Company, action: CompanyAction, data: Dict[str, Any], now: datetime
    ) -> CompanyUpdate:
        max_employees = data.get("maxEmployees")
        max_employees = parse_int(max_employees, "maxEmployees", minimum=1) if max_employees not in (None, "") else None

        if action == CompanyAction.APPROVE:
            return CompanyUpdate(
                subscription_status=SubscriptionStatus.ACTIVE,
                is_active=True,
                is_approved=True,
                subscription_end_date=_end_date(data.get("subscriptionEndDate")),
                max_employees=max_employees,
            )
        if action == CompanyAction.REJECT:
            return CompanyUpdate(subscription_status=SubscriptionStatus.REJECTED, is_active=False, is_approved=False)
        if action == CompanyAction.EXTEND:
            end = _end_date(data.get("subscriptionEndDate"))
            if end is None:
                raise ValidationError("subscriptionEndDate is required to extend")
            return CompanyUpdate(subscription_status=SubscriptionStatus.ACTIVE, is_active=True, subscription_end_date=end)
        if action == CompanyAction.SUSPEND:
            return CompanyUpdate(subscription_status=SubscriptionStatus.SUSPENDED, is_active=False)
        if action == CompanyAction.ACTIVATE:
            return CompanyUpdate(subscription_status=SubscriptionStatus.ACTIVE, is_active=True)
        if action == CompanyAction.EXTEND_TRIAL:
            days = parse_int(data.get("extendDays") or DEFAULT_EXTEND_TRIAL_DAYS, "extendDays", minimum=1)
            base = max(company.trial_end_date, now)
            return CompanyUpdate(
                subscription_status=SubscriptionStatus.TRIAL,
                is_active=True,
                trial_end_date=base + timedelta(days=days),
            )
        # UPDATE_SUBSCRIPTION
        status = data.get("subscriptionStatus")
        return CompanyUpdate(
            subscription_status=parse_enum(SubscriptionStatus, status, "subscriptionStatus") if status else None,
            subscription_end_date=_end_date(data.get("subscriptionEndDate")),
            max_employees=max_employees,
        )

    def apply_action(
        self, company_id: int, action: Any, data: Optional[Dict[str, Any]] = None, *, now: Optional[datetime] = None
    ) -> Company:
        parsed = parse_enum(CompanyAction, action, "action")
        if parsed not in SINGLE_ACTIONS:
            raise ValidationError(f"Unsupported action: {parsed.value}")
        return self._apply(company_id, parsed, data or {}, now or now_local())

    def _apply(self, company_id: int, action: CompanyAction, data: Dict[str, Any], now: datetime) -> Company:
        company = self._company(company_id)
        self._companies.apply_update(company_id=company.company_id, update=self._update_for(company, action, data, now))
        logger.info("Company %s (id=%s): %s", company.code, company.company_id, action.value)
        return self._company(company.company_id)

    def bulk_action(
        self,
        company_ids: Sequence[Any],
        action: Any,
        data: Optional[Dict[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> BulkResult:
        parsed = parse_enum(CompanyAction, action, "action")
        if parsed not in BULK_ACTIONS:
            raise ValidationError(f"Unsupported bulk action: {parsed.value}")
        if not company_ids:
            raise ValidationError("companyIds must be a non-empty list")
        ids = [parse_int(cid, "companyIds") for cid in company_ids]

        now = now or now_local()
        result = BulkResult(action=parsed)
        for cid in ids:
            try:
                self._apply(cid, parsed, data or {}, now)
                result.results.append(BulkOutcome(company_id=cid, status="SUCCESS", message=f"{parsed.value} applied"))
            except DomainError as e:
                result.results.append(BulkOutcome(company_id=cid, status="ERROR", message=str(e)))
        logger.info("Bulk %s: %d ok, %d failed", parsed.value, result.success_count, result.error_count)
        return result

    def expire_stale_trials(self, *, now: Optional[datetime] = None) -> List[Company]:
        """Expire unapproved TRIAL companies whose trial period has fully elapsed."""
        now = now or now_local()
        stale = self._companies.list_stale_trials(created_before=now - timedelta(days=TRIAL_DAYS))
        for company in stale:
            self._companies.apply_update(
                company_id=company.company_id,
                update=CompanyUpdate(subscription_status=SubscriptionStatus.EXPIRED, is_active=False),
            )
            logger.info("Trial expired for company %s (id=%s)", company.code, company.company_id)
        return list(stale)
