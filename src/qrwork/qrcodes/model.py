from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceType


@dataclass(frozen=True)
class QrCode:
    """A printed/displayed code placed at a physical location."""

    qr_code_id: int
    company_id: int
    name: str
    type: AttendanceType
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius: Optional[float] = None
    qr_data: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def place(self) -> str:
        """What an attendance event records as its location."""
        return self.location or self.name
