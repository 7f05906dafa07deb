from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Employee:
    employee_id: int
    company_id: int
    name: str
    username: str
    password_hash: str
    email: Optional[str] = None
    phone: Optional[str] = None
    custom_fields: Dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
