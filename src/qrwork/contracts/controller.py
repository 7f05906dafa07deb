from __future__ import annotations

from flask import Flask, request

from ..auth.guards import admin_required, current_claims
from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..container import Container
from .service import build_terms


def _terms_from(data: dict):
    return build_terms(
        title=data.get("title"),
        content=data.get("content"),
        start_date=data.get("startDate"),
        end_date=data.get("endDate"),
        salary=data.get("salary"),
        position=data.get("position"),
        department=data.get("department"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/employment-contracts", methods=["GET"], endpoint="admin_contracts_list")
    @admin_required
    def admin_contracts_list():
        contracts = container.contract_service.list(
            company_id=current_claims().company_id,
            status=request.args.get("status"),
        )
        return ok(contracts=[to_json(c) for c in contracts])

    @app.route("/api/admin/employment-contracts", methods=["POST"], endpoint="admin_contracts_create")
    @admin_required
    def admin_contracts_create():
        claims = current_claims()
        data = json_body()
        contract = container.contract_service.create(
            company_id=claims.company_id,
            admin_id=claims.admin_id,
            employee_id=data.get("employeeId"),
            terms=_terms_from(data),
        )
        return ok(201, message="Contract drafted", contract=to_json(contract))

    @app.route("/api/admin/employment-contracts/<int:contract_id>", methods=["GET"], endpoint="admin_contracts_get")
    @admin_required
    def admin_contracts_get(contract_id: int):
        contract = container.contract_service.get(company_id=current_claims().company_id, contract_id=contract_id)
        return ok(contract=to_json(contract))

    @app.route("/api/admin/employment-contracts/<int:contract_id>", methods=["PUT"], endpoint="admin_contracts_update")
    @admin_required
    def admin_contracts_update(contract_id: int):
        contract = container.contract_service.update(
            company_id=current_claims().company_id,
            contract_id=contract_id,
            terms=_terms_from(json_body()),
        )
        return ok(message="Contract updated", contract=to_json(contract))

    @app.route(
        "/api/admin/employment-contracts/<int:contract_id>", methods=["DELETE"], endpoint="admin_contracts_delete"
    )
    @admin_required
    def admin_contracts_delete(contract_id: int):
        container.contract_service.delete(company_id=current_claims().company_id, contract_id=contract_id)
        return ok(message="Contract deleted")

    @app.route(
        "/api/admin/employment-contracts/<int:contract_id>/send", methods=["POST"], endpoint="admin_contracts_send"
    )
    @admin_required
    def admin_contracts_send(contract_id: int):
        contract = container.contract_service.send(company_id=current_claims().company_id, contract_id=contract_id)
        return ok(message="Contract sent", contract=to_json(contract))
