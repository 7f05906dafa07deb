from __future__ import annotations

from datetime import datetime

from flask import Flask, request

from ..auth.guards import super_admin_required
from ..common.datetime_utils import now_local
from ..common.http import json_body, ok
from ..common.serializers import to_json
from ..common.validators import parse_int, parse_page
from ..companies.model import Company
from ..container import Container
from .model import CompanyOverview


def _company_json(company: Company, now: datetime, **extra) -> dict:
    created = company.created_at or now
    return to_json(
        company,
        daysSinceCreated=(now - created).days,
        isTrialExpired=company.is_trial_expired(now),
        isSubscriptionExpired=company.is_subscription_expired(now),
        **extra,
    )


def _overview_json(overview: CompanyOverview, now: datetime) -> dict:
    return _company_json(overview.company, now, counts=overview.counts)


def register(app: Flask, container: Container) -> None:
    # Bootstrap

    @app.route("/api/super-admin/check", methods=["GET"], endpoint="super_admin_check")
    def super_admin_check():
        status = container.super_admin_service.bootstrap_status()
        return ok(
            env={
                "email": status.email_configured,
                "password": status.password_configured,
                "name": status.name,
            },
            exists=status.super_admin is not None,
            superAdmin=to_json(status.super_admin) if status.super_admin else None,
        )

    @app.route("/api/super-admin/init", methods=["POST"], endpoint="super_admin_init")
    def super_admin_init():
        sa = container.super_admin_service.init_super_admin()
        return ok(201, message="Super-admin account created", superAdmin=to_json(sa))

    # Companies

    @app.route("/api/super-admin/companies", methods=["GET"], endpoint="super_admin_companies")
    @super_admin_required
    def super_admin_companies():
        page, limit = parse_page(request.args.get("page"), request.args.get("limit"))
        result = container.super_admin_service.list_companies(
            page=page,
            limit=limit,
            search=request.args.get("search"),
            status=request.args.get("status"),
        )
        now = now_local()
        return ok(
            companies=[_overview_json(o, now) for o in result.items],
            pagination={
                "page": result.page,
                "limit": result.limit,
                "total": result.total,
                "totalPages": result.total_pages,
            },
        )

    @app.route("/api/super-admin/companies/<int:company_id>/details", methods=["GET"], endpoint="super_admin_company_details")
    @super_admin_required
    def super_admin_company_details(company_id: int):
        now = now_local()
        d = container.super_admin_service.company_details(company_id, now=now)
        return ok(
            company=_company_json(
                d.company,
                now,
                admins=[to_json(a) for a in d.admins],
                employees=[to_json(e) for e in d.employees],
                qrCodes=[to_json(q) for q in d.qr_codes],
                recentAttendances=[to_json(r) for r in d.recent_attendances],
                recentLeaveRequests=[to_json(r) for r in d.recent_leave_requests],
                counts=d.counts,
            ),
            stats=d.stats,
        )

    @app.route("/api/super-admin/companies/<int:company_id>", methods=["DELETE"], endpoint="super_admin_company_delete")
    @app.route(
        "/api/super-admin/companies/<int:company_id>/delete", methods=["DELETE"], endpoint="super_admin_company_delete_legacy"
    )
    @super_admin_required
    def super_admin_company_delete(company_id: int):
        summary = container.super_admin_service.delete_company(company_id)
        return ok(message=f"Company {summary['companyName']} deleted", deletedData=summary)

    @app.route("/api/super-admin/companies/<int:company_id>/approve", methods=["POST"], endpoint="super_admin_company_action")
    @super_admin_required
    def super_admin_company_action(company_id: int):
        data = json_body()
        company = container.super_admin_service.apply_action(company_id, data.get("action"), data)
        return ok(message=f"{company.name}: {str(data.get('action')).upper()} applied", company=_company_json(company, now_local()))

    @app.route("/api/super-admin/bulk-actions", methods=["POST"], endpoint="super_admin_bulk_actions")
    @super_admin_required
    def super_admin_bulk_actions():
        data = json_body()
        result = container.super_admin_service.bulk_action(
            data.get("companyIds") or [],
            data.get("action"),
            data.get("data") or {},
        )
        return ok(
            message=f"{result.action.value}: {result.success_count} succeeded, {result.error_count} failed",
            results=[to_json(r) for r in result.results],
            summary={
                "total": len(result.results),
                "success": result.success_count,
                "error": result.error_count,
            },
        )

    @app.route("/api/super-admin/auto-approve", methods=["POST"], endpoint="super_admin_expire_trials")
    @super_admin_required
    def super_admin_expire_trials():
        expired = container.super_admin_service.expire_stale_trials()
        return ok(
            message=f"{len(expired)} trial(s) expired",
            expiredCompanies=[{"id": c.company_id, "name": c.name, "code": c.code} for c in expired],
        )

    @app.route("/api/super-admin/auto-approve", methods=["PUT"], endpoint="super_admin_confirm_payment")
    @super_admin_required
    def super_admin_confirm_payment():
        data = json_body()
        company = container.super_admin_service.apply_action(parse_int(data.get("companyId"), "companyId"), "APPROVE", data)
        return ok(message=f"{company.name} approved", company=_company_json(company, now_local()))

    # Billing

    @app.route("/api/super-admin/init-plans", methods=["POST"], endpoint="super_admin_init_plans")
    @super_admin_required
    def super_admin_init_plans():
        plans = container.billing_service.init_plans()
        return ok(201, message="Subscription plans created", plans=[to_json(p) for p in plans])

    @app.route("/api/super-admin/subscription-plans", methods=["GET"], endpoint="super_admin_plans")
    @super_admin_required
    def super_admin_plans():
        return ok(plans=[to_json(p) for p in container.billing_service.list_plans()])

    @app.route(
        "/api/super-admin/companies/<int:company_id>/subscription", methods=["GET"], endpoint="super_admin_subscriptions"
    )
    @super_admin_required
    def super_admin_subscriptions(company_id: int):
        history = container.billing_service.history(company_id=company_id)
        return ok(
            subscriptions=[to_json(s) for s in history.subscriptions],
            payments=[to_json(p) for p in history.payments],
        )

    @app.route(
        "/api/super-admin/companies/<int:company_id>/subscription",
        methods=["POST"],
        endpoint="super_admin_subscription_create",
    )
    @super_admin_required
    def super_admin_subscription_create(company_id: int):
        data = json_body()
        subscription = container.billing_service.create_subscription(
            company_id=company_id,
            plan_id=data.get("planId"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            auto_renew=data.get("autoRenew", False),
            payment_amount=data.get("paymentAmount"),
            payment_method=data.get("paymentMethod"),
            description=data.get("description"),
        )
        return ok(201, message="Subscription created", subscription=to_json(subscription))

    @app.route(
        "/api/super-admin/companies/<int:company_id>/subscription",
        methods=["PUT"],
        endpoint="super_admin_subscription_extend",
    )
    @super_admin_required
    def super_admin_subscription_extend(company_id: int):
        data = json_body()
        subscription = container.billing_service.extend_subscription(
            company_id=company_id,
            extend_months=data.get("extendMonths", 1),
        )
        return ok(message="Subscription extended", subscription=to_json(subscription))
