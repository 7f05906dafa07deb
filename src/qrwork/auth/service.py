from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.model import AttendanceEvent
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_min_length, require_non_empty
from ..companies.model import Admin, Company
from ..companies.repository import AdminRepository, CompanyRepository
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import SubscriptionStatus
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..superadmin.model import SuperAdmin
from ..superadmin.repository import SuperAdminRepository
from .claims import AdminClaims, EmployeeClaims, SuperAdminClaims

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    claims: AdminClaims
    admin: Admin
    company: Company


@dataclass(frozen=True)
class EmployeeSession:
    claims: EmployeeClaims
    employee: Employee
    company: Company
    last_attendance: Optional[AttendanceEvent] = None


@dataclass(frozen=True)
class SuperAdminSession:
    claims: SuperAdminClaims
    super_admin: SuperAdmin


class AuthService:
    """Use cases: log in each role, resolve `me`, change passwords."""

    def __init__(
        self,
        companies: CompanyRepository,
        admins: AdminRepository,
        employees: EmployeeRepository,
        super_admins: SuperAdminRepository,
        attendance: AttendanceRepository,
    ):
        self._companies = companies
        self._admins = admins
        self._employees = employees
        self._super_admins = super_admins
        self._attendance = attendance

    def _company_for_login(self, company_code: str, now: datetime) -> Company:
        code = require_non_empty(company_code, "Company code").upper()
        company = self._companies.get_by_code(code)
        if not company:
            raise NotFoundError("Company not found")
        if not company.is_active:
            raise AuthorizationError("Company account is inactive")
        if company.subscription_status == SubscriptionStatus.TRIAL and company.is_trial_expired(now):
            raise AuthorizationError("The free trial has ended")
        return company

    def login_admin(self, *, email: str, password: str, company_code: str, now: Optional[datetime] = None) -> AdminSession:
        email = require_non_empty(email, "Email").lower()
        password = require_non_empty(password, "Password")
        now = now or now_local()
        company = self._company_for_login(company_code, now)

        admin = self._admins.get_in_company(email=email, company_id=company.company_id)
        if not admin:
            logger.warning("Admin login rejected: unknown email for company %s", company.code)
            raise NotFoundError("Admin account not found for this company")
        if not admin.is_active:
            raise AuthorizationError("Admin account is inactive")
        if not check_password_hash(admin.password_hash, password):
            logger.warning("Admin login rejected: wrong password (admin id=%s)", admin.admin_id)
            raise AuthenticationError("Incorrect password")

        self._admins.touch_login(admin_id=admin.admin_id, at=now)
        logger.info("Admin id=%s logged in to company %s", admin.admin_id, company.code)
        claims = AdminClaims(
            admin_id=admin.admin_id,
            company_id=company.company_id,
            company_code=company.code,
            email=admin.email,
        )
        return AdminSession(claims=claims, admin=admin, company=company)

    def login_employee(
        self, *, username: str, password: str, company_code: str, now: Optional[datetime] = None
    ) -> EmployeeSession:
        username = require_non_empty(username, "Username")
        password = require_non_empty(password, "Password")
        now = now or now_local()
        company = self._company_for_login(company_code, now)

        emp = self._employees.get_by_username(company_id=company.company_id, username=username)
        if not emp or not emp.is_active or not check_password_hash(emp.password_hash, password):
            logger.warning("Employee login rejected for company %s", company.code)
            raise AuthenticationError("Incorrect username or password")

        self._employees.touch_login(employee_id=emp.employee_id, at=now)
        logger.info("Employee id=%s logged in to company %s", emp.employee_id, company.code)
        claims = EmployeeClaims(
            employee_id=emp.employee_id,
            company_id=company.company_id,
            company_code=company.code,
            username=emp.username,
        )
        return EmployeeSession(
            claims=claims,
            employee=emp,
            company=company,
            last_attendance=self._attendance.get_latest_for_employee(emp.employee_id),
        )

    def login_super_admin(self, *, email: str, password: str, now: Optional[datetime] = None) -> SuperAdminSession:
        email = require_non_empty(email, "Email").lower()
        password = require_non_empty(password, "Password")
        now = now or now_local()

        sa = self._super_admins.get_by_email(email)
        if not sa or not sa.is_active or not check_password_hash(sa.password_hash, password):
            logger.warning("Super-admin login rejected")
            raise AuthenticationError("Incorrect email or password")

        self._super_admins.touch_login(super_admin_id=sa.super_admin_id, at=now)
        logger.info("Super-admin id=%s logged in", sa.super_admin_id)
        return SuperAdminSession(claims=SuperAdminClaims(super_admin_id=sa.super_admin_id, email=sa.email), super_admin=sa)

    def admin_session(self, claims: AdminClaims) -> AdminSession:
        admin = self._admins.get_by_id(claims.admin_id)
        company = self._companies.get_by_id(claims.company_id)
        if not admin or not company or admin.company_id != company.company_id:
            raise AuthenticationError("Account no longer exists")
        if not admin.is_active:
            raise AuthorizationError("Admin account is inactive")
        return AdminSession(claims=claims, admin=admin, company=company)

    def employee_session(self, claims: EmployeeClaims) -> EmployeeSession:
        emp = self._employees.get_by_id(claims.employee_id)
        company = self._companies.get_by_id(claims.company_id)
        if not emp or not company or emp.company_id != company.company_id:
            raise AuthenticationError("Account no longer exists")
        if not emp.is_active:
            raise AuthorizationError("Employee account is inactive")
        return EmployeeSession(
            claims=claims,
            employee=emp,
            company=company,
            last_attendance=self._attendance.get_latest_for_employee(emp.employee_id),
        )

    def super_admin_session(self, claims: SuperAdminClaims) -> SuperAdminSession:
        sa = self._super_admins.get_by_id(claims.super_admin_id)
        if not sa or not sa.is_active:
            raise AuthenticationError("Account no longer exists")
        return SuperAdminSession(claims=claims, super_admin=sa)

    @staticmethod
    def _check_new_password(current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

    def change_admin_password(self, *, admin_id: int, current_password: str, new_password: str) -> None:
        self._check_new_password(current_password, new_password)
        admin = self._admins.get_by_id(int(admin_id))
        if not admin:
            raise NotFoundError("Admin account not found")
        if not check_password_hash(admin.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")
        self._admins.update_password(admin_id=admin.admin_id, password_hash=generate_password_hash(new_password))
        logger.info("Admin id=%s changed password", admin.admin_id)

    def change_employee_password(self, *, employee_id: int, current_password: str, new_password: str) -> None:
        self._check_new_password(current_password, new_password)
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Employee not found")
        if not check_password_hash(emp.password_hash, current_password):
            raise ValidationError("Current password is incorrect")
        self._employees.update_password(employee_id=emp.employee_id, password_hash=generate_password_hash(new_password))
        logger.info("Employee id=%s changed password", emp.employee_id)
