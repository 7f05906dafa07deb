from __future__ import annotations

from flask import Flask

from ..auth.guards import admin_required, current_claims, employee_required
from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..common.validators import parse_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/employees", methods=["GET"], endpoint="admin_employees_list")
    @admin_required
    def admin_employees_list():
        employees = container.employee_service.list(current_claims().company_id)
        return ok(employees=[to_json(e) for e in employees])

    @app.route("/api/admin/employees", methods=["POST"], endpoint="admin_employees_create")
    @admin_required
    def admin_employees_create():
        data = json_body()
        emp = container.employee_service.create(
            company_id=current_claims().company_id,
            name=data.get("name"),
            username=data.get("username"),
            password=data.get("password"),
            email=data.get("email"),
            phone=data.get("phone"),
            custom_fields=data.get("customFields"),
        )
        return ok(201, message="Employee created", employee=to_json(emp))

    @app.route("/api/admin/employees/<int:employee_id>", methods=["GET"], endpoint="admin_employees_get")
    @admin_required
    def admin_employees_get(employee_id: int):
        emp = container.employee_service.get(company_id=current_claims().company_id, employee_id=employee_id)
        return ok(employee=to_json(emp))

    @app.route("/api/admin/employees/<int:employee_id>", methods=["PUT"], endpoint="admin_employees_update")
    @admin_required
    def admin_employees_update(employee_id: int):
        data = json_body()
        emp = container.employee_service.update(
            company_id=current_claims().company_id,
            employee_id=employee_id,
            name=data.get("name"),
            username=data.get("username"),
            email=data.get("email"),
            phone=data.get("phone"),
            custom_fields=data.get("customFields"),
            is_active=parse_bool(data["isActive"]) if "isActive" in data else None,
            password=data.get("password"),
        )
        return ok(message="Employee updated", employee=to_json(emp))

    @app.route("/api/admin/employees/<int:employee_id>", methods=["DELETE"], endpoint="admin_employees_delete")
    @admin_required
    def admin_employees_delete(employee_id: int):
        container.employee_service.delete(company_id=current_claims().company_id, employee_id=employee_id)
        return ok(message="Employee deleted")

    @app.route("/api/employee/profile", methods=["GET"], endpoint="employee_profile")
    @employee_required
    def employee_profile():
        claims = current_claims()
        emp = container.employee_service.get(company_id=claims.company_id, employee_id=claims.employee_id)
        return ok(employee=to_json(emp))

    @app.route("/api/employee/profile", methods=["PUT"], endpoint="employee_profile_update")
    @employee_required
    def employee_profile_update():
        claims = current_claims()
        data = json_body()
        emp = container.employee_service.update_profile(
            company_id=claims.company_id,
            employee_id=claims.employee_id,
            name=data.get("name"),
            email=data.get("email"),
            phone=data.get("phone"),
        )
        return ok(message="Profile updated", employee=to_json(emp))
