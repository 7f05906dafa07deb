from __future__ import annotations

from functools import wraps
from typing import Type

from flask import g
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from ..core.exceptions import AuthorizationError
from .claims import AdminClaims, Claims, EmployeeClaims, SuperAdminClaims, claims_from_payload


def _role_required(claims_cls: Type, denied_message: str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            claims = claims_from_payload(get_jwt())
            if not isinstance(claims, claims_cls):
                raise AuthorizationError(denied_message)
            g.claims = claims
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = _role_required(AdminClaims, "Admin access required")
employee_required = _role_required(EmployeeClaims, "Employee access required")
super_admin_required = _role_required(SuperAdminClaims, "Super-admin access required")


def current_claims() -> Claims:
    return g.claims
