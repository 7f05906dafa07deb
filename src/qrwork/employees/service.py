from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import optional_email, optional_str, require_min_length, require_non_empty
from ..companies.model import Company
from ..companies.repository import CompanyRepository
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def _custom_fields(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError("customFields must be an object")
    return dict(value)


class EmployeeService:
    """Use cases: admin-side employee management and employee self-service profile."""

    def __init__(self, employees: EmployeeRepository, companies: CompanyRepository):
        self._employees = employees
        self._companies = companies

    def list(self, company_id: int) -> Sequence[Employee]:
        return self._employees.list_for_company(int(company_id))

    def get(self, *, company_id: int, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp or emp.company_id != int(company_id):
            raise NotFoundError("Employee not found")
        return emp

    def _check_capacity(self, company_id: int) -> Company:
        company = self._companies.get_by_id(company_id)
        if not company:
            raise NotFoundError("Company not found")
        if self._employees.count_for_company(company.company_id, active_only=True) >= company.max_employees:
            raise ValidationError(f"Employee limit reached ({company.max_employees}) for the current plan")
        return company

    def create(
        self,
        *,
        company_id: int,
        name: str,
        username: str,
        password: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        custom_fields: Any = None,
    ) -> Employee:
        name = require_non_empty(name, "Name")
        username = require_non_empty(username, "Username")
        password = require_min_length(require_non_empty(password, "Password"), "Password", MIN_PASSWORD_LENGTH)

        company = self._check_capacity(int(company_id))
        if self._employees.username_taken(company_id=company.company_id, username=username):
            raise ConflictError("Username is already in use")

        employee_id = self._employees.create(
            company_id=company.company_id,
            name=name,
            username=username,
            password_hash=generate_password_hash(password),
            email=optional_email(email),
            phone=optional_str(phone),
            custom_fields=_custom_fields(custom_fields),
        )
        logger.info("Created employee id=%s (%s) in company id=%s", employee_id, username, company.company_id)
        return self.get(company_id=company.company_id, employee_id=employee_id)

    def update(
        self,
        *,
        company_id: int,
        employee_id: int,
        name: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        custom_fields: Any = None,
        is_active: Optional[bool] = None,
        password: Optional[str] = None,
    ) -> Employee:
        """Update an employee; every omitted (None) field keeps its current value."""
        current = self.get(company_id=company_id, employee_id=employee_id)

        new_username = optional_str(username) or current.username
        if new_username != current.username and self._employees.username_taken(
            company_id=current.company_id, username=new_username, exclude_id=current.employee_id
        ):
            raise ConflictError("Username is already in use")
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        new_email = optional_email(email) if email is not None else current.email
        fields = _custom_fields(custom_fields) if custom_fields is not None else current.custom_fields
        active = current.is_active if is_active is None else bool(is_active)
        if active and not current.is_active:
            self._check_capacity(current.company_id)

        self._employees.update(
            employee_id=current.employee_id,
            name=optional_str(name) or current.name,
            username=new_username,
            email=new_email,
            phone=optional_str(phone) if phone is not None else current.phone,
            custom_fields=fields,
            is_active=active,
        )
        if password:
            self._employees.update_password(
                employee_id=current.employee_id, password_hash=generate_password_hash(password)
            )
        return self.get(company_id=company_id, employee_id=employee_id)

    def delete(self, *, company_id: int, employee_id: int) -> None:
        self.get(company_id=company_id, employee_id=employee_id)
        self._employees.delete(employee_id=int(employee_id), company_id=int(company_id))
        logger.info("Deleted employee id=%s from company id=%s", employee_id, company_id)

    def update_profile(
        self,
        *,
        company_id: int,
        employee_id: int,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Employee:
        current = self.get(company_id=company_id, employee_id=employee_id)
        self._employees.update(
            employee_id=current.employee_id,
            name=require_non_empty(name, "Name"),
            username=current.username,
            email=optional_email(email),
            phone=optional_str(phone),
            custom_fields=current.custom_fields,
            is_active=current.is_active,
        )
        return self.get(company_id=company_id, employee_id=employee_id)
