from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_username(self, *, company_id: int, username: str) -> Optional[Employee]:
        raise NotImplementedError

    def username_taken(self, *, company_id: int, username: str, exclude_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def list_for_company(self, company_id: int, *, active_only: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def count_for_company(self, company_id: int, *, active_only: bool = False) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        name: str,
        username: str,
        password_hash: str,
        email: Optional[str],
        phone: Optional[str],
        custom_fields: Dict[str, Any],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        username: str,
        email: Optional[str],
        phone: Optional[str],
        custom_fields: Dict[str, Any],
        is_active: bool,
    ) -> bool:
        raise NotImplementedError

    def update_password(self, *, employee_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def touch_login(self, *, employee_id: int, at: datetime) -> None:
        raise NotImplementedError

    def delete(self, *, employee_id: int, company_id: int) -> bool:
        raise NotImplementedError
