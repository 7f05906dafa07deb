from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class QrPayload:
    """JSON document encoded into each QR image."""

    company_code: str
    qr_code_id: int
    type: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    scan_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "companyCode": self.company_code,
            "qrCodeId": self.qr_code_id,
            "type": self.type,
            "name": self.name,
            "location": self.location,
            "scanUrl": self.scan_url,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


def scan_url(base_url: str, company_code: str) -> str:
    return f"{base_url.rstrip('/')}/company/{company_code}/scan"


def parse_payload(raw: Any) -> QrPayload:
    """Parse scanned QR text (or an already-decoded dict) into a QrPayload."""
    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except ValueError:
            raise ValidationError("Unrecognized QR code")
    if not isinstance(data, dict):
        raise ValidationError("Unrecognized QR code")

    company_code = data.get("companyCode")
    if not isinstance(company_code, str) or not company_code.strip():
        raise ValidationError("QR code is missing the company code")

    qr_code_id = data.get("qrCodeId")
    if isinstance(qr_code_id, bool):
        qr_code_id = None
    if isinstance(qr_code_id, str) and qr_code_id.strip().isdigit():
        qr_code_id = int(qr_code_id.strip())
    if not isinstance(qr_code_id, int):
        raise ValidationError("QR code is missing its id")

    return QrPayload(
        company_code=company_code.strip().upper(),
        qr_code_id=qr_code_id,
        type=data.get("type"),
        name=data.get("name"),
        location=data.get("location"),
        scan_url=data.get("scanUrl"),
    )
