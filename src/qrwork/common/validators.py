from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.constants import DEFAULT_PAGE_LIMIT
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def optional_email(value: Any, field_name: str = "Email") -> Optional[str]:
    email = optional_str(value)
    if email is not None and not _EMAIL_RE.match(email):
        raise ValidationError(f"{field_name} is not a valid email address")
    return email


def parse_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    try:
        return enum_cls(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def parse_int(value: Any, field_name: str, *, minimum: Optional[int] = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    return number


def parse_optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def parse_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def parse_page(page: Any, limit: Any) -> tuple[int, int]:
    """Page/limit query values with defaults; both must be positive."""
    page_no = parse_int(page or 1, "page", minimum=1)
    page_size = parse_int(limit or DEFAULT_PAGE_LIMIT, "limit", minimum=1)
    return page_no, page_size
