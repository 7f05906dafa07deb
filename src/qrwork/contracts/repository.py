from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ContractStatus
from .model import ContractTerms, EmploymentContract


class ContractRepository(Protocol):
    def create(self, *, company_id: int, employee_id: int, created_by_id: int, terms: ContractTerms) -> int:
        raise NotImplementedError

    def get(self, contract_id: int) -> Optional[EmploymentContract]:
        raise NotImplementedError

    def list_for_company(
        self, *, company_id: int, status: Optional[ContractStatus] = None
    ) -> Sequence[EmploymentContract]:
        raise NotImplementedError

    def update_terms(self, *, contract_id: int, terms: ContractTerms) -> bool:
        raise NotImplementedError

    def mark_sent(self, *, contract_id: int, sent_at: datetime) -> bool:
        raise NotImplementedError

    def delete(self, *, contract_id: int, company_id: int) -> bool:
        raise NotImplementedError
