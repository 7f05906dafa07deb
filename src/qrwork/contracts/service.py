from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.validators import optional_str, parse_enum, require_non_empty
from ..companies.repository import CompanyRepository
from ..core.constants import CONTRACT_MIN_EMPLOYEES
from ..core.enums import ContractStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import ContractTerms, EmploymentContract
from .repository import ContractRepository

logger = logging.getLogger(__name__)


def _salary(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("salary must be a number")
    if amount < 0:
        raise ValidationError("salary cannot be negative")
    return amount


def build_terms(
    *,
    title: Any,
    content: Any,
    start_date: Any = None,
    end_date: Any = None,
    salary: Any = None,
    position: Any = None,
    department: Any = None,
) -> ContractTerms:
    terms = ContractTerms(
        title=require_non_empty(title, "Title"),
        content=require_non_empty(content, "Content"),
        start_date=parse_optional_date(start_date),
        end_date=parse_optional_date(end_date),
        salary=_salary(salary),
        position=optional_str(position),
        department=optional_str(department),
    )
    if terms.start_date and terms.end_date and terms.end_date < terms.start_date:
        raise ValidationError("Contract end date cannot be before its start date")
    return terms


class ContractService:
    """Employment contracts: drafted by admins, editable until sent."""

    def __init__(self, contracts: ContractRepository, employees: EmployeeRepository, companies: CompanyRepository):
        self._contracts = contracts
        self._employees = employees
        self._companies = companies

    def _require_feature(self, company_id: int) -> None:
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("Company not found")
        if company.max_employees <= CONTRACT_MIN_EMPLOYEES:
            raise AuthorizationError("Employment contracts are not available on the current plan")

    def _get(self, *, company_id: int, contract_id: int) -> EmploymentContract:
        contract = self._contracts.get(int(contract_id))
        if not contract or contract.company_id != int(company_id):
            raise NotFoundError("Contract not found")
        return contract

    def _get_draft(self, *, company_id: int, contract_id: int) -> EmploymentContract:
        contract = self._get(company_id=company_id, contract_id=contract_id)
        if contract.status != ContractStatus.DRAFT:
            raise ValidationError("Only draft contracts can be changed")
        return contract

    def list(self, *, company_id: int, status: Optional[str] = None) -> Sequence[EmploymentContract]:
        self._require_feature(company_id)
        status_filter = None
        if optional_str(status) and str(status).upper() != "ALL":
            status_filter = parse_enum(ContractStatus, status, "status")
        return self._contracts.list_for_company(company_id=int(company_id), status=status_filter)

    def get(self, *, company_id: int, contract_id: int) -> EmploymentContract:
        self._require_feature(company_id)
        return self._get(company_id=company_id, contract_id=contract_id)

    def create(self, *, company_id: int, admin_id: int, employee_id: Any, terms: ContractTerms) -> EmploymentContract:
        self._require_feature(company_id)
        if employee_id in (None, ""):
            raise ValidationError("employeeId is required")
        try:
            emp = self._employees.get_by_id(int(employee_id))
        except (TypeError, ValueError):
            raise ValidationError("employeeId must be an integer")
        if not emp or emp.company_id != int(company_id) or not emp.is_active:
            raise NotFoundError("Employee not found or inactive")

        contract_id = self._contracts.create(
            company_id=int(company_id),
            employee_id=emp.employee_id,
            created_by_id=int(admin_id),
            terms=terms,
        )
        logger.info("Contract id=%s drafted for employee id=%s", contract_id, emp.employee_id)
        return self._get(company_id=company_id, contract_id=contract_id)

    def update(self, *, company_id: int, contract_id: int, terms: ContractTerms) -> EmploymentContract:
        self._require_feature(company_id)
        current = self._get_draft(company_id=company_id, contract_id=contract_id)
        self._contracts.update_terms(contract_id=current.contract_id, terms=terms)
        return self._get(company_id=company_id, contract_id=contract_id)

    def delete(self, *, company_id: int, contract_id: int) -> None:
        self._require_feature(company_id)
        current = self._get_draft(company_id=company_id, contract_id=contract_id)
        self._contracts.delete(contract_id=current.contract_id, company_id=int(company_id))
        logger.info("Contract id=%s deleted", current.contract_id)

    def send(self, *, company_id: int, contract_id: int, now: Optional[datetime] = None) -> EmploymentContract:
        self._require_feature(company_id)
        current = self._get_draft(company_id=company_id, contract_id=contract_id)
        if not self._contracts.mark_sent(contract_id=current.contract_id, sent_at=now or now_local()):
            raise ValidationError("Only draft contracts can be sent")
        logger.info("Contract id=%s sent to employee id=%s", current.contract_id, current.employee_id)
        return self._get(company_id=company_id, contract_id=contract_id)
