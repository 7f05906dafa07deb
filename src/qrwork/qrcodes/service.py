from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.validators import optional_str, parse_bool, parse_enum, parse_optional_float, require_non_empty
from ..companies.repository import CompanyRepository
from ..core.enums import AttendanceType
from ..core.exceptions import NotFoundError
from .model import QrCode
from .payload import QrPayload, scan_url
from .repository import QrCodeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QrCodeListing:
    qr_code: QrCode
    attendance_count: int


class QrCodeService:
    def __init__(
        self,
        qr_codes: QrCodeRepository,
        companies: CompanyRepository,
        attendance: AttendanceRepository,
        *,
        base_url: str,
    ):
        self._qr_codes = qr_codes
        self._companies = companies
        self._attendance = attendance
        self._base_url = base_url

    def list(self, company_id: int) -> Sequence[QrCodeListing]:
        counts = self._attendance.count_by_qr_code(int(company_id))
        return [
            QrCodeListing(qr_code=qr, attendance_count=counts.get(qr.qr_code_id, 0))
            for qr in self._qr_codes.list_for_company(int(company_id))
        ]

    def get(self, *, company_id: int, qr_code_id: int) -> QrCode:
        qr = self._qr_codes.get_by_id(int(qr_code_id))
        if not qr or qr.company_id != int(company_id):
            raise NotFoundError("QR code not found")
        return qr

    def payload_for(self, qr: QrCode) -> QrPayload:
        company = self._companies.get_by_id(qr.company_id)
        if not company:
            raise NotFoundError("Company not found")
        return QrPayload(
            company_code=company.code,
            qr_code_id=qr.qr_code_id,
            type=qr.type.value,
            name=qr.name,
            location=qr.location,
            scan_url=scan_url(self._base_url, company.code),
        )

    def _write_payload(self, qr_code_id: int, company_id: int) -> QrCode:
        qr = self.get(company_id=company_id, qr_code_id=qr_code_id)
        self._qr_codes.set_payload(qr_code_id=qr.qr_code_id, qr_data=self.payload_for(qr).to_json())
        return self.get(company_id=company_id, qr_code_id=qr_code_id)

    def create(
        self,
        *,
        company_id: int,
        name: str,
        type: Any,
        location: Optional[str] = None,
        latitude: Any = None,
        longitude: Any = None,
        radius: Any = None,
        is_active: Any = True,
    ) -> QrCode:
        qr_code_id = self._qr_codes.create(
            company_id=int(company_id),
            name=require_non_empty(name, "Name"),
            type=parse_enum(AttendanceType, type, "type"),
            location=optional_str(location),
            latitude=parse_optional_float(latitude, "latitude"),
            longitude=parse_optional_float(longitude, "longitude"),
            radius=parse_optional_float(radius, "radius"),
            is_active=parse_bool(is_active, default=True),
        )
        # payload embeds the id, so it can only be written after the insert
        qr = self._write_payload(qr_code_id, int(company_id))
        logger.info("Created QR code id=%s for company id=%s", qr_code_id, company_id)
        return qr

    def update(
        self,
        *,
        company_id: int,
        qr_code_id: int,
        name: Optional[str] = None,
        type: Any = None,
        location: Optional[str] = None,
        latitude: Any = None,
        longitude: Any = None,
        radius: Any = None,
        is_active: Any = None,
    ) -> QrCode:
        current = self.get(company_id=company_id, qr_code_id=qr_code_id)
        self._qr_codes.update(
            qr_code_id=current.qr_code_id,
            name=optional_str(name) or current.name,
            type=parse_enum(AttendanceType, type, "type") if type else current.type,
            location=optional_str(location) if location is not None else current.location,
            latitude=parse_optional_float(latitude, "latitude") if latitude is not None else current.latitude,
            longitude=parse_optional_float(longitude, "longitude") if longitude is not None else current.longitude,
            radius=parse_optional_float(radius, "radius") if radius is not None else current.radius,
            is_active=parse_bool(is_active, default=current.is_active),
        )
        return self._write_payload(current.qr_code_id, current.company_id)

    def delete(self, *, company_id: int, qr_code_id: int) -> None:
        self.get(company_id=company_id, qr_code_id=qr_code_id)
        self._qr_codes.delete(qr_code_id=int(qr_code_id), company_id=int(company_id))
        logger.info("Deleted QR code id=%s from company id=%s", qr_code_id, company_id)

    def image_data(self, *, company_id: int, qr_code_id: int) -> str:
        """Text to encode into the QR image; rebuilt when the stored payload is missing."""
        qr = self.get(company_id=company_id, qr_code_id=qr_code_id)
        return qr.qr_data or self.payload_for(qr).to_json()
