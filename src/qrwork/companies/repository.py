from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from .model import Admin, Company, CompanyUpdate


class CompanyRepository(Protocol):
    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Company]:
        raise NotImplementedError

    def code_exists(self, code: str) -> bool:
        raise NotImplementedError

    def create_with_admin(
        self,
        *,
        name: str,
        code: str,
        phone: Optional[str],
        trial_end_date: datetime,
        max_employees: int,
        admin_name: str,
        admin_email: str,
        admin_password_hash: str,
    ) -> Tuple[int, int]:
        """Insert company and its first admin in one transaction; returns (company_id, admin_id)."""

        raise NotImplementedError

    def update_profile(self, *, company_id: int, name: str, phone: Optional[str]) -> bool:
        raise NotImplementedError

    def apply_update(self, *, company_id: int, update: CompanyUpdate) -> bool:
        raise NotImplementedError

    def list_stale_trials(self, *, created_before: datetime) -> Sequence[Company]:
        raise NotImplementedError

    def delete(self, company_id: int) -> bool:
        raise NotImplementedError


class AdminRepository(Protocol):
    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def email_exists(self, email: str) -> bool:
        raise NotImplementedError

    def get_in_company(self, *, email: str, company_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[Admin]:
        raise NotImplementedError

    def touch_login(self, *, admin_id: int, at: datetime) -> None:
        raise NotImplementedError

    def update_password(self, *, admin_id: int, password_hash: str) -> bool:
        raise NotImplementedError
