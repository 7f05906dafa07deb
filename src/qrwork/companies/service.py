from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_min_length, require_non_empty
from ..core.constants import (
    COMPANY_CODE_ALPHABET,
    COMPANY_CODE_ATTEMPTS,
    COMPANY_CODE_LENGTH,
    DEFAULT_MAX_EMPLOYEES,
    MIN_PASSWORD_LENGTH,
    TRIAL_DAYS,
)
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from .model import Company
from .repository import AdminRepository, CompanyRepository

logger = logging.getLogger(__name__)


def random_company_code() -> str:
    return "".join(secrets.choice(COMPANY_CODE_ALPHABET) for _ in range(COMPANY_CODE_LENGTH))


@dataclass(frozen=True)
class Registration:
    company_id: int
    admin_id: int
    company_code: str
    company_name: str
    trial_end_date: datetime


class CompanyService:
    """Use cases: tenant sign-up, public lookup, profile edits."""

    def __init__(
        self,
        companies: CompanyRepository,
        admins: AdminRepository,
        *,
        code_generator: Optional[Callable[[], str]] = None,
    ):
        self._companies = companies
        self._admins = admins
        self._code_generator = code_generator or random_company_code

    def _unique_code(self) -> str:
        for _ in range(COMPANY_CODE_ATTEMPTS):
            code = self._code_generator()
            if not self._companies.code_exists(code):
                return code
        raise DomainError("Could not allocate a unique company code, please retry")

    def register(
        self,
        *,
        company_name: str,
        admin_name: str,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
        agree_terms: bool = False,
        phone: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Registration:
        company_name = require_non_empty(company_name, "Company name")
        admin_name = require_non_empty(admin_name, "Admin name")
        email = require_non_empty(email, "Email").lower()
        password = require_non_empty(password, "Password")
        if confirm_password is not None and confirm_password != password:
            raise ValidationError("Passwords do not match")
        if not agree_terms:
            raise ValidationError("You must accept the terms of service")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._admins.email_exists(email):
            raise ConflictError("This email is already registered")

        now = now or now_local()
        code = self._unique_code()
        trial_end = now + timedelta(days=TRIAL_DAYS)
        company_id, admin_id = self._companies.create_with_admin(
            name=company_name,
            code=code,
            phone=optional_str(phone),
            trial_end_date=trial_end,
            max_employees=DEFAULT_MAX_EMPLOYEES,
            admin_name=admin_name,
            admin_email=email,
            admin_password_hash=generate_password_hash(password),
        )
        logger.info("Registered company %s (id=%s) with admin id=%s", code, company_id, admin_id)
        return Registration(
            company_id=company_id,
            admin_id=admin_id,
            company_code=code,
            company_name=company_name,
            trial_end_date=trial_end,
        )

    def get(self, company_id: int) -> Company:
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("Company not found")
        return company

    def get_by_code(self, code: str) -> Company:
        company = self._companies.get_by_code(require_non_empty(code, "Company code").upper())
        if not company:
            raise NotFoundError("Company not found")
        return company

    def update_profile(self, *, company_id: int, name: str, phone: Optional[str]) -> Company:
        name = require_non_empty(name, "Company name")
        self.get(company_id)
        self._companies.update_profile(company_id=int(company_id), name=name, phone=optional_str(phone))
        return self.get(company_id)
