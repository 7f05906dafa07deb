from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..container import Container
from ..core.constants import ADMIN_TOKEN_HOURS, EMPLOYEE_TOKEN_HOURS, SUPER_ADMIN_TOKEN_HOURS
from .guards import admin_required, current_claims, employee_required, super_admin_required
from .service import AdminSession, EmployeeSession, SuperAdminSession
from .tokens import attach_token, clear_token, issue_token


def _admin_json(s: AdminSession) -> dict:
    return {
        "admin": to_json(s.admin),
        "company": to_json(s.company),
    }


def _employee_json(s: EmployeeSession) -> dict:
    return {
        "employee": to_json(s.employee),
        "company": to_json(s.company),
        "lastAttendance": to_json(s.last_attendance) if s.last_attendance else None,
    }


def _super_admin_json(s: SuperAdminSession) -> dict:
    return {"superAdmin": to_json(s.super_admin)}


def register(app: Flask, container: Container) -> None:
    def _login_response(payload: dict, token: str, message: str):
        response, status = ok(message=message, token=token, **payload)
        return attach_token(response, token), status

    def _logout_response():
        response, status = ok(message="Logged out")
        return clear_token(response), status

    # Admin

    @app.route("/api/auth/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = json_body()
        session = container.auth_service.login_admin(
            email=data.get("email"),
            password=data.get("password"),
            company_code=data.get("companyCode"),
        )
        token = issue_token(session.claims, hours=ADMIN_TOKEN_HOURS)
        return _login_response(_admin_json(session), token, "Logged in")

    @app.route("/api/auth/me", methods=["GET"], endpoint="admin_me")
    @admin_required
    def admin_me():
        return ok(**_admin_json(container.auth_service.admin_session(current_claims())))

    @app.route("/api/auth/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        return _logout_response()

    @app.route("/api/admin/password/change", methods=["POST", "PUT"], endpoint="admin_password_change")
    @admin_required
    def admin_password_change():
        data = json_body()
        container.auth_service.change_admin_password(
            admin_id=current_claims().admin_id,
            current_password=data.get("currentPassword"),
            new_password=data.get("newPassword"),
        )
        return ok(message="Password changed")

    # Employee

    @app.route("/api/employee/auth/login", methods=["POST"], endpoint="employee_login")
    def employee_login():
        data = json_body()
        session = container.auth_service.login_employee(
            username=data.get("username"),
            password=data.get("password"),
            company_code=data.get("companyCode"),
        )
        token = issue_token(session.claims, hours=EMPLOYEE_TOKEN_HOURS)
        return _login_response(_employee_json(session), token, "Logged in")

    @app.route("/api/employee/auth/me", methods=["GET"], endpoint="employee_me")
    @employee_required
    def employee_me():
        return ok(**_employee_json(container.auth_service.employee_session(current_claims())))

    @app.route("/api/employee/auth/logout", methods=["POST"], endpoint="employee_logout")
    def employee_logout():
        return _logout_response()

    @app.route("/api/employee/password", methods=["POST", "PUT"], endpoint="employee_password_change")
    @employee_required
    def employee_password_change():
        data = json_body()
        container.auth_service.change_employee_password(
            employee_id=current_claims().employee_id,
            current_password=data.get("currentPassword"),
            new_password=data.get("newPassword"),
        )
        return ok(message="Password changed")

    # Super-admin

    @app.route("/api/super-admin/login", methods=["POST"], endpoint="super_admin_login")
    def super_admin_login():
        data = json_body()
        session = container.auth_service.login_super_admin(email=data.get("email"), password=data.get("password"))
        token = issue_token(session.claims, hours=SUPER_ADMIN_TOKEN_HOURS)
        return _login_response(_super_admin_json(session), token, "Logged in")

    @app.route("/api/super-admin/me", methods=["GET"], endpoint="super_admin_me")
    @super_admin_required
    def super_admin_me():
        return ok(**_super_admin_json(container.auth_service.super_admin_session(current_claims())))

    @app.route("/api/super-admin/logout", methods=["POST"], endpoint="super_admin_logout")
    def super_admin_logout():
        return _logout_response()
