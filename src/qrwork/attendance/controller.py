from __future__ import annotations

from flask import Flask, request

from ..auth.guards import admin_required, current_claims, employee_required
from ..common.csv_export import csv_response
from ..common.datetime_utils import now_local, parse_optional_date
from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..common.validators import parse_page
from ..container import Container
from .export import ATTENDANCE_CSV_FIELDS, attendance_csv_rows
from .service import ScanResult


def _scan_json(result: ScanResult) -> dict:
    return {
        "message": result.message,
        "attendance": to_json(result.event),
        "type": result.decision.decided_type.value,
        "action": result.decision.action.value,
    }


def register(app: Flask, container: Container) -> None:
    def _criteria():
        return container.attendance_service.build_filter(
            company_id=current_claims().company_id,
            search=request.args.get("search"),
            day=request.args.get("date"),
            month=request.args.get("month"),
            type=request.args.get("type"),
        )

    # Employee

    @app.route("/api/app/attendance", methods=["POST"], endpoint="attendance_scan")
    @employee_required
    def attendance_scan():
        claims = current_claims()
        data = json_body()
        result = container.attendance_service.record_scan(
            employee_id=claims.employee_id,
            company_id=claims.company_id,
            qr_data=data.get("qrData"),
        )
        return ok(201, **_scan_json(result))

    @app.route("/api/app/attendance", methods=["GET"], endpoint="attendance_day_history")
    @employee_required
    def attendance_day_history():
        history = container.attendance_service.day_history(
            employee_id=current_claims().employee_id,
            day=parse_optional_date(request.args.get("date")),
        )
        return ok(
            date=history.day.isoformat(),
            attendances=[to_json(e) for e in history.events],
            nextType=history.next_type.value,
        )

    @app.route("/api/employee/attendance", methods=["POST"], endpoint="employee_attendance_manual")
    @employee_required
    def employee_attendance_manual():
        claims = current_claims()
        data = json_body()
        result = container.attendance_service.record_manual(
            employee_id=claims.employee_id,
            company_id=claims.company_id,
            company_code=data.get("companyCode"),
            requested_type=data.get("type"),
        )
        return ok(201, **_scan_json(result))

    # Admin

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance_list")
    @admin_required
    def admin_attendance_list():
        page, limit = parse_page(request.args.get("page"), request.args.get("limit"))
        result = container.attendance_service.search(_criteria(), page=page, limit=limit)
        return ok(
            attendances=[to_json(r) for r in result.rows],
            total=result.total,
            page=result.page,
            limit=result.limit,
            totalPages=result.total_pages,
        )

    @app.route("/api/admin/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="admin_attendance_delete")
    @admin_required
    def admin_attendance_delete(attendance_id: int):
        container.attendance_service.delete(company_id=current_claims().company_id, attendance_id=attendance_id)
        return ok(message="Attendance record deleted")

    @app.route("/api/admin/attendance/export", methods=["GET"], endpoint="admin_attendance_export")
    @admin_required
    def admin_attendance_export():
        rows = container.attendance_service.export_rows(_criteria())
        stamp = request.args.get("date") or request.args.get("month") or now_local().strftime("%Y-%m-%d")
        return csv_response(attendance_csv_rows(rows), ATTENDANCE_CSV_FIELDS, filename=f"attendance_{stamp}.csv")

    @app.route("/api/admin/dashboard/recent-attendances", methods=["GET"], endpoint="admin_recent_attendances")
    @admin_required
    def admin_recent_attendances():
        rows = container.attendance_service.recent(current_claims().company_id)
        return ok(attendances=[to_json(r) for r in rows])
