from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceType
from .model import QrCode


class QrCodeRepository(Protocol):
    def get_by_id(self, qr_code_id: int) -> Optional[QrCode]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[QrCode]:
        raise NotImplementedError

    def count_for_company(self, company_id: int) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        name: str,
        type: AttendanceType,
        location: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        radius: Optional[float],
        is_active: bool,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        qr_code_id: int,
        name: str,
        type: AttendanceType,
        location: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        radius: Optional[float],
        is_active: bool,
    ) -> bool:
        raise NotImplementedError

    def set_payload(self, *, qr_code_id: int, qr_data: str) -> None:
        raise NotImplementedError

    def delete(self, *, qr_code_id: int, company_id: int) -> bool:
        raise NotImplementedError
