from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from ..core.enums import TokenRole
from ..core.exceptions import AuthenticationError


@dataclass(frozen=True)
class AdminClaims:
    admin_id: int
    company_id: int
    company_code: str
    email: str
    role: TokenRole = TokenRole.ADMIN

    @property
    def subject(self) -> str:
        return f"admin:{self.admin_id}"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "admin_id": self.admin_id,
            "company_id": self.company_id,
            "company_code": self.company_code,
            "email": self.email,
        }


@dataclass(frozen=True)
class EmployeeClaims:
    employee_id: int
    company_id: int
    company_code: str
    username: str
    role: TokenRole = TokenRole.EMPLOYEE

    @property
    def subject(self) -> str:
        return f"employee:{self.employee_id}"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "employee_id": self.employee_id,
            "company_id": self.company_id,
            "company_code": self.company_code,
            "username": self.username,
        }


@dataclass(frozen=True)
class SuperAdminClaims:
    super_admin_id: int
    email: str
    role: TokenRole = TokenRole.SUPER_ADMIN

    @property
    def subject(self) -> str:
        return f"super_admin:{self.super_admin_id}"

    def to_payload(self) -> Dict[str, Any]:
        return {"role": self.role.value, "super_admin_id": self.super_admin_id, "email": self.email}


Claims = Union[AdminClaims, EmployeeClaims, SuperAdminClaims]


def _int_field(payload: Mapping[str, Any], name: str) -> int:
    value = payload.get(name)
    # bool is an int subclass; a token carrying true/false for an id is malformed
    if isinstance(value, bool) or not isinstance(value, int):
        raise AuthenticationError(f"Invalid token: '{name}' missing or not an integer")
    return value


def _str_field(payload: Mapping[str, Any], name: str) -> str:
    value = payload.get(name)
    if not isinstance(value, str) or not value:
        raise AuthenticationError(f"Invalid token: '{name}' missing or empty")
    return value


def claims_from_payload(payload: Mapping[str, Any]) -> Claims:
    """Validate a decoded token payload into the tagged claims for its role.

    Raises AuthenticationError for an unknown role tag or a missing/mistyped field.
    """
    try:
        role = TokenRole(payload.get("role"))
    except ValueError:
        raise AuthenticationError("Invalid token: unknown role")

    if role == TokenRole.ADMIN:
        return AdminClaims(
            admin_id=_int_field(payload, "admin_id"),
            company_id=_int_field(payload, "company_id"),
            company_code=_str_field(payload, "company_code"),
            email=_str_field(payload, "email"),
        )
    if role == TokenRole.EMPLOYEE:
        return EmployeeClaims(
            employee_id=_int_field(payload, "employee_id"),
            company_id=_int_field(payload, "company_id"),
            company_code=_str_field(payload, "company_code"),
            username=_str_field(payload, "username"),
        )
    return SuperAdminClaims(
        super_admin_id=_int_field(payload, "super_admin_id"),
        email=_str_field(payload, "email"),
    )
