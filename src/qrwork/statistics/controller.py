from __future__ import annotations

from flask import Flask, request

from ..auth.guards import admin_required, current_claims
from ..common.csv_export import csv_response
from ..common.datetime_utils import now_local
from ..common.http import ok
from ..common.serializers import to_json
from ..container import Container
from .export import EMPLOYEE_STATS_CSV_FIELDS, employee_stats_csv_rows


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/statistics", methods=["GET"], endpoint="admin_statistics")
    @admin_required
    def admin_statistics():
        stats = container.statistics_service.company_stats(
            company_id=current_claims().company_id,
            period=request.args.get("period", "month"),
            month=request.args.get("month"),
        )
        return ok(**to_json(stats))

    @app.route("/api/admin/statistics/export", methods=["GET"], endpoint="admin_statistics_export")
    @admin_required
    def admin_statistics_export():
        month = request.args.get("month") or now_local().strftime("%Y-%m")
        stats = container.statistics_service.per_employee(company_id=current_claims().company_id, month=month)
        return csv_response(
            employee_stats_csv_rows(stats),
            EMPLOYEE_STATS_CSV_FIELDS,
            filename=f"attendance_statistics_{month}.csv",
        )

    @app.route("/api/admin/dashboard/stats", methods=["GET"], endpoint="admin_dashboard_stats")
    @admin_required
    def admin_dashboard_stats():
        stats = container.statistics_service.dashboard(company_id=current_claims().company_id)
        return ok(stats=to_json(stats))
