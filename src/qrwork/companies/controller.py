from __future__ import annotations

from flask import Flask

from ..auth.guards import admin_required, current_claims
from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..common.validators import parse_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/company/register", methods=["POST"], endpoint="company_register")
    def company_register():
        data = json_body()
        reg = container.company_service.register(
            company_name=data.get("companyName"),
            admin_name=data.get("adminName"),
            email=data.get("email"),
            password=data.get("password"),
            confirm_password=data.get("confirmPassword"),
            agree_terms=parse_bool(data.get("agreeTerms")),
            phone=data.get("phone"),
        )
        return ok(
            201,
            message="Company registered. Your free trial has started.",
            company={
                "id": reg.company_id,
                "name": reg.company_name,
                "code": reg.company_code,
                "trialEndDate": reg.trial_end_date.isoformat(),
            },
            adminId=reg.admin_id,
        )

    @app.route("/api/company/<code>", methods=["GET"], endpoint="company_by_code")
    def company_by_code(code: str):
        company = container.company_service.get_by_code(code)
        return ok(
            company={
                "id": company.company_id,
                "name": company.name,
                "code": company.code,
                "phone": company.phone,
                "trialEndDate": company.trial_end_date.isoformat(),
                "maxEmployees": company.max_employees,
                "isActive": company.is_active,
                "createdAt": company.created_at.isoformat() if company.created_at else None,
            }
        )

    @app.route("/api/admin/company", methods=["PUT"], endpoint="admin_company_update")
    @admin_required
    def admin_company_update():
        data = json_body()
        company = container.company_service.update_profile(
            company_id=current_claims().company_id,
            name=data.get("name"),
            phone=data.get("phone"),
        )
        return ok(message="Company information updated", company=to_json(company))
