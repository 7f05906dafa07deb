from __future__ import annotations

from flask import Flask, send_file

from ..auth.guards import admin_required, current_claims
from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..container import Container
from .model import QrCode
from .rendering import render_png


def _qr_json(qr: QrCode, **extra) -> dict:
    return to_json(qr, imageUrl=f"/api/admin/qr/{qr.qr_code_id}/image", **extra)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/qr", methods=["GET"], endpoint="admin_qr_list")
    @admin_required
    def admin_qr_list():
        listings = container.qr_code_service.list(current_claims().company_id)
        return ok(qrCodes=[_qr_json(x.qr_code, attendanceCount=x.attendance_count) for x in listings])

    @app.route("/api/admin/qr", methods=["POST"], endpoint="admin_qr_create")
    @admin_required
    def admin_qr_create():
        data = json_body()
        qr = container.qr_code_service.create(
            company_id=current_claims().company_id,
            name=data.get("name"),
            type=data.get("type"),
            location=data.get("location"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius=data.get("radius"),
            is_active=data.get("isActive", True),
        )
        return ok(201, message="QR code created", qrCode=_qr_json(qr))

    @app.route("/api/admin/qr/<int:qr_code_id>", methods=["GET"], endpoint="admin_qr_get")
    @admin_required
    def admin_qr_get(qr_code_id: int):
        qr = container.qr_code_service.get(company_id=current_claims().company_id, qr_code_id=qr_code_id)
        return ok(qrCode=_qr_json(qr))

    @app.route("/api/admin/qr/<int:qr_code_id>", methods=["PUT"], endpoint="admin_qr_update")
    @admin_required
    def admin_qr_update(qr_code_id: int):
        data = json_body()
        qr = container.qr_code_service.update(
            company_id=current_claims().company_id,
            qr_code_id=qr_code_id,
            name=data.get("name"),
            type=data.get("type"),
            location=data.get("location"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius=data.get("radius"),
            is_active=data.get("isActive"),
        )
        return ok(message="QR code updated", qrCode=_qr_json(qr))

    @app.route("/api/admin/qr/<int:qr_code_id>", methods=["DELETE"], endpoint="admin_qr_delete")
    @admin_required
    def admin_qr_delete(qr_code_id: int):
        container.qr_code_service.delete(company_id=current_claims().company_id, qr_code_id=qr_code_id)
        return ok(message="QR code deleted")

    @app.route("/api/admin/qr/<int:qr_code_id>/image", methods=["GET"], endpoint="admin_qr_image")
    @admin_required
    def admin_qr_image(qr_code_id: int):
        data = container.qr_code_service.image_data(company_id=current_claims().company_id, qr_code_id=qr_code_id)
        return send_file(render_png(data), mimetype="image/png")

    @app.route("/api/admin/qr/<int:qr_code_id>/download", methods=["GET"], endpoint="admin_qr_download")
    @admin_required
    def admin_qr_download(qr_code_id: int):
        claims = current_claims()
        qr = container.qr_code_service.get(company_id=claims.company_id, qr_code_id=qr_code_id)
        data = container.qr_code_service.image_data(company_id=claims.company_id, qr_code_id=qr_code_id)
        return send_file(
            render_png(data),
            mimetype="image/png",
            as_attachment=True,
            download_name=f"qr_{qr.qr_code_id}_{qr.type.value.lower()}.png",
        )
