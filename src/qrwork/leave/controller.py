from __future__ import annotations

from flask import Flask, request

from ..auth.guards import admin_required, current_claims, employee_required
from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # Employee

    @app.route("/api/employee/leave/request", methods=["POST"], endpoint="employee_leave_request")
    @employee_required
    def employee_leave_request():
        claims = current_claims()
        data = json_body()
        req = container.leave_service.request_leave(
            company_id=claims.company_id,
            employee_id=claims.employee_id,
            type=data.get("type"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            days=data.get("days"),
            reason=data.get("reason"),
        )
        return ok(201, message="Leave request submitted", leaveRequest=to_json(req))

    @app.route("/api/employee/leave/requests", methods=["GET"], endpoint="employee_leave_requests")
    @employee_required
    def employee_leave_requests():
        claims = current_claims()
        requests_ = container.leave_service.list_own(company_id=claims.company_id, employee_id=claims.employee_id)
        return ok(leaveRequests=[to_json(r) for r in requests_])

    @app.route("/api/employee/leave/info", methods=["GET"], endpoint="employee_leave_info")
    @employee_required
    def employee_leave_info():
        claims = current_claims()
        info = container.leave_service.info(company_id=claims.company_id, employee_id=claims.employee_id)
        return ok(
            leaveInfo=to_json(info.balance),
            pendingRequests=info.pending_count,
            approvedRequests=info.approved_count,
        )

    # Admin

    @app.route("/api/admin/leave/requests", methods=["GET"], endpoint="admin_leave_requests")
    @admin_required
    def admin_leave_requests():
        requests_ = container.leave_service.list_for_company(
            company_id=current_claims().company_id,
            status=request.args.get("status"),
        )
        return ok(leaveRequests=[to_json(r) for r in requests_])

    @app.route("/api/admin/leave/requests/<int:request_id>", methods=["PUT"], endpoint="admin_leave_decide")
    @admin_required
    def admin_leave_decide(request_id: int):
        claims = current_claims()
        data = json_body()
        req = container.leave_service.decide(
            company_id=claims.company_id,
            admin_id=claims.admin_id,
            request_id=request_id,
            status=data.get("status"),
            admin_note=data.get("adminNote"),
        )
        return ok(message=f"Leave request {req.status.value.lower()}", leaveRequest=to_json(req))

    @app.route("/api/admin/employees/<int:employee_id>/leave", methods=["GET"], endpoint="admin_employee_leave")
    @admin_required
    def admin_employee_leave(employee_id: int):
        balance = container.leave_service.get_balance(company_id=current_claims().company_id, employee_id=employee_id)
        return ok(leaveInfo=to_json(balance))

    @app.route("/api/admin/employees/<int:employee_id>/leave", methods=["PUT"], endpoint="admin_employee_leave_set")
    @admin_required
    def admin_employee_leave_set(employee_id: int):
        data = json_body()
        balance = container.leave_service.set_total_days(
            company_id=current_claims().company_id,
            employee_id=employee_id,
            total_days=data.get("totalDays"),
        )
        return ok(message="Leave allowance updated", leaveInfo=to_json(balance))

    @app.route("/api/admin/leave/employees", methods=["GET"], endpoint="admin_leave_employees")
    @admin_required
    def admin_leave_employees():
        rows = container.leave_service.employee_balances(company_id=current_claims().company_id)
        return ok(
            employees=[
                to_json(emp, exclude=("custom_fields",), leaveInfo=to_json(balance) if balance else None)
                for emp, balance in rows
            ]
        )
