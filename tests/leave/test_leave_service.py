from __future__ import annotations

from datetime import date, datetime

import pytest

from fakes import FakeDB, add_company, add_employee, in_memory_repositories
from qrwork.core.enums import LeaveType, RequestStatus
from qrwork.core.exceptions import NotFoundError, ValidationError
from qrwork.leave.service import LeaveService

TODAY = date(2025, 3, 10)


@pytest.fixture
def db():
    return FakeDB()


@pytest.fixture
def svc(db):
    repos = in_memory_repositories(db)
    return LeaveService(repos.leave, repos.employees)


@pytest.fixture
def company(db):
    return add_company(db)


@pytest.fixture
def alice(db, company):
    return add_employee(db, company)


def _request(svc, emp, **overrides):
    data = dict(
        company_id=emp.company_id,
        employee_id=emp.employee_id,
        type="annual",
        start_date="2025-03-20",
        end_date="2025-03-21",
        days=2,
        reason="Family trip",
        today=TODAY,
    )
    data.update(overrides)
    return svc.request_leave(**data)


def test_request_starts_pending_with_default_allowance(svc, db, alice):
    req = _request(svc, alice)

    assert req.status == RequestStatus.PENDING
    assert req.type == LeaveType.ANNUAL
    assert req.start_date == date(2025, 3, 20)
    balance = db.balances[(alice.employee_id, 2025)]
    assert balance.total_days == 15.0
    assert balance.remaining_days == 15.0


def test_single_day_leave_is_allowed(svc, alice):
    req = _request(svc, alice, start_date="2025-03-20", end_date="2025-03-20", days=1)

    assert req.start_date == req.end_date


@pytest.mark.parametrize(
    "overrides",
    [
        {"start_date": "2025-03-22", "end_date": "2025-03-21"},
        {"start_date": "2025-03-01", "end_date": "2025-03-02"},
        {"days": 0},
        {"days": "two"},
        {"days": 16},
        {"type": "holiday"},
        {"reason": "  "},
    ],
)
def test_invalid_requests(svc, alice, overrides):
    with pytest.raises(ValidationError):
        _request(svc, alice, **overrides)


def test_overlapping_request_is_rejected(svc, alice):
    _request(svc, alice)

    with pytest.raises(ValidationError):
        _request(svc, alice, start_date="2025-03-21", end_date="2025-03-25", days=3)


def test_approval_consumes_allowance(svc, db, company, alice):
    req = _request(svc, alice, days=3)

    decided = svc.decide(
        company_id=company.company_id,
        admin_id=7,
        request_id=req.request_id,
        status="APPROVED",
        admin_note="Enjoy",
        now=datetime(2025, 3, 11, 9, 0),
    )

    assert decided.status == RequestStatus.APPROVED
    assert decided.approved_by == 7
    balance = db.balances[(alice.employee_id, 2025)]
    assert (balance.used_days, balance.remaining_days) == (3.0, 12.0)


def test_failed_balance_write_leaves_request_pending(db, company, alice, monkeypatch):
    repos = in_memory_repositories(db)
    svc = LeaveService(repos.leave, repos.employees)
    req = _request(svc, alice, days=3)

    def broken_save(balance):
        raise RuntimeError("disk full")

    monkeypatch.setattr(repos.leave, "save_balance", broken_save)
    with pytest.raises(RuntimeError):
        svc.decide(company_id=company.company_id, admin_id=7, request_id=req.request_id, status="APPROVED")

    assert db.leave_requests[req.request_id].status == RequestStatus.PENDING
    assert db.balances[(alice.employee_id, 2025)].used_days == 0.0


def test_rejection_keeps_allowance(svc, db, company, alice):
    req = _request(svc, alice)

    svc.decide(company_id=company.company_id, admin_id=7, request_id=req.request_id, status="rejected")

    assert db.balances[(alice.employee_id, 2025)].remaining_days == 15.0


def test_request_can_be_decided_only_once(svc, company, alice):
    req = _request(svc, alice)
    svc.decide(company_id=company.company_id, admin_id=7, request_id=req.request_id, status="APPROVED")

    with pytest.raises(ValidationError):
        svc.decide(company_id=company.company_id, admin_id=7, request_id=req.request_id, status="REJECTED")


def test_pending_is_not_a_decision(svc, company, alice):
    req = _request(svc, alice)

    with pytest.raises(ValidationError):
        svc.decide(company_id=company.company_id, admin_id=7, request_id=req.request_id, status="PENDING")


def test_other_company_cannot_decide(svc, db, alice):
    req = _request(svc, alice)
    other = add_company(db, code="OTHER001")

    with pytest.raises(NotFoundError):
        svc.decide(company_id=other.company_id, admin_id=7, request_id=req.request_id, status="APPROVED")


def test_info_counts_requests_of_the_year(svc, company, alice):
    first = _request(svc, alice)
    _request(svc, alice, start_date="2025-04-01", end_date="2025-04-01", days=1)
    svc.decide(company_id=company.company_id, admin_id=7, request_id=first.request_id, status="APPROVED")

    info = svc.info(company_id=company.company_id, employee_id=alice.employee_id, year=2025)

    assert info.pending_count == 1
    assert info.approved_count == 1
    assert info.balance.remaining_days == 13.0


def test_set_total_days_keeps_used(svc, company, alice):
    req = _request(svc, alice, days=2)
    svc.decide(company_id=company.company_id, admin_id=7, request_id=req.request_id, status="APPROVED")

    balance = svc.set_total_days(company_id=company.company_id, employee_id=alice.employee_id, total_days=20, year=2025)

    assert (balance.total_days, balance.used_days, balance.remaining_days) == (20.0, 2.0, 18.0)
    with pytest.raises(ValidationError):
        svc.set_total_days(company_id=company.company_id, employee_id=alice.employee_id, total_days=-1, year=2025)


def test_balance_without_record_is_zero(svc, company, alice):
    balance = svc.get_balance(company_id=company.company_id, employee_id=alice.employee_id, year=2024)

    assert balance.total_days == 0.0


def test_employee_balances_lists_active_employees(svc, db, company, alice):
    add_employee(db, company, username="gone", is_active=False)
    _request(svc, alice)

    rows = svc.employee_balances(company_id=company.company_id, year=2025)

    assert [(emp.username, bal.remaining_days) for emp, bal in rows] == [("alice", 15.0)]
