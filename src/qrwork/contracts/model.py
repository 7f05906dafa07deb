from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ContractStatus


@dataclass(frozen=True)
class EmploymentContract:
    contract_id: int
    company_id: int
    employee_id: int
    title: str
    content: str
    status: ContractStatus
    created_by_id: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    salary: Optional[Decimal] = None
    position: Optional[str] = None
    department: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee_name: Optional[str] = None


@dataclass(frozen=True)
class ContractTerms:
    """Editable part of a contract."""

    title: str
    content: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    salary: Optional[Decimal] = None
    position: Optional[str] = None
    department: Optional[str] = None
