from __future__ import annotations

import json
from datetime import date, datetime

import pytest

from fakes import FakeDB, add_company, add_employee, add_event, add_qr, in_memory_repositories, qr_text
from qrwork.attendance.service import AttendanceService
from qrwork.core.enums import AttendanceType, WriteAction
from qrwork.core.exceptions import AuthorizationError, NotFoundError, ValidationError

IN = AttendanceType.CHECK_IN
OUT = AttendanceType.CHECK_OUT


@pytest.fixture
def db():
    return FakeDB()


@pytest.fixture
def svc(db):
    repos = in_memory_repositories(db)
    return AttendanceService(repos.attendance, repos.employees, repos.companies, repos.qr_codes)


@pytest.fixture
def company(db):
    return add_company(db)


@pytest.fixture
def alice(db, company):
    return add_employee(db, company)


@pytest.fixture
def qr(db, company):
    return add_qr(db, company)


def _scan(svc, emp, company, qr, at):
    return svc.record_scan(
        employee_id=emp.employee_id,
        company_id=company.company_id,
        qr_data=qr_text(company, qr),
        now=at,
    )


def test_first_scan_of_day_creates_check_in(svc, db, company, alice, qr):
    result = _scan(svc, alice, company, qr, datetime(2025, 3, 10, 8, 55))

    assert result.decision.decided_type == IN
    assert result.decision.action == WriteAction.CREATE
    assert result.event.qr_code_id == qr.qr_code_id
    assert result.event.location == "Lobby"
    assert "Alice" in result.message
    assert len(db.attendances) == 1


def test_scans_alternate_then_overwrite(svc, db, company, alice, qr):
    first = _scan(svc, alice, company, qr, datetime(2025, 3, 10, 9, 0))
    second = _scan(svc, alice, company, qr, datetime(2025, 3, 10, 18, 0))
    third = _scan(svc, alice, company, qr, datetime(2025, 3, 10, 19, 0))

    assert second.decision.decided_type == OUT
    assert second.decision.action == WriteAction.CREATE
    assert third.decision.decided_type == IN
    assert third.decision.action == WriteAction.UPDATE
    assert third.event.attendance_id == first.event.attendance_id
    assert third.event.timestamp == datetime(2025, 3, 10, 19, 0)
    assert len(db.attendances) == 2


def test_later_scans_keep_overwriting_the_check_in(svc, db, company, alice, qr):
    day = [datetime(2025, 3, 10, h, 0) for h in (9, 18, 19, 20)]

    results = [_scan(svc, alice, company, qr, at) for at in day]

    decisions = [(r.decision.decided_type, r.decision.action) for r in results]
    assert decisions == [
        (IN, WriteAction.CREATE),
        (OUT, WriteAction.CREATE),
        (IN, WriteAction.UPDATE),
        (IN, WriteAction.UPDATE),
    ]
    first_id = results[0].event.attendance_id
    assert results[3].event.attendance_id == first_id
    assert db.attendances[first_id].timestamp == datetime(2025, 3, 10, 20, 0)
    assert db.attendances[first_id].created_at == datetime(2025, 3, 10, 9, 0)
    assert len(db.attendances) == 2


def test_new_day_starts_with_check_in(svc, company, alice, qr):
    _scan(svc, alice, company, qr, datetime(2025, 3, 10, 9, 0))

    result = _scan(svc, alice, company, qr, datetime(2025, 3, 11, 9, 0))

    assert result.decision.decided_type == IN
    assert result.decision.action == WriteAction.CREATE


def test_location_falls_back_to_qr_name(svc, db, company, alice):
    qr = add_qr(db, company, name="Warehouse gate", location=None)

    result = _scan(svc, alice, company, qr, datetime(2025, 3, 10, 9, 0))

    assert result.event.location == "Warehouse gate"


def test_qr_of_another_company_is_rejected(svc, db, company, alice):
    other = add_company(db, code="OTHER001", name="Other")
    other_qr = add_qr(db, other)

    with pytest.raises(AuthorizationError):
        svc.record_scan(
            employee_id=alice.employee_id,
            company_id=company.company_id,
            qr_data=qr_text(other, other_qr),
            now=datetime(2025, 3, 10, 9, 0),
        )
    assert db.attendances == {}


def test_inactive_qr_is_not_found(svc, db, company, alice):
    qr = add_qr(db, company, is_active=False)

    with pytest.raises(NotFoundError):
        _scan(svc, alice, company, qr, datetime(2025, 3, 10, 9, 0))


def test_unknown_qr_id_is_not_found(svc, company, alice):
    payload = json.dumps({"companyCode": company.code, "qrCodeId": 999})

    with pytest.raises(NotFoundError):
        svc.record_scan(employee_id=alice.employee_id, company_id=company.company_id, qr_data=payload)


@pytest.mark.parametrize("raw", ["", "not json", "[1, 2]", '{"qrCodeId": 1}', '{"companyCode": "ACME1234"}'])
def test_bad_payload_is_validation_error(svc, company, alice, raw):
    with pytest.raises(ValidationError):
        svc.record_scan(employee_id=alice.employee_id, company_id=company.company_id, qr_data=raw)


def test_inactive_employee_cannot_scan(svc, db, company, qr):
    bob = add_employee(db, company, username="bob", name="Bob", is_active=False)

    with pytest.raises(NotFoundError):
        _scan(svc, bob, company, qr, datetime(2025, 3, 10, 9, 0))


def test_manual_check_in_uses_same_policy(svc, db, company, alice, qr):
    _scan(svc, alice, company, qr, datetime(2025, 3, 10, 9, 0))

    result = svc.record_manual(
        employee_id=alice.employee_id,
        company_id=company.company_id,
        company_code="acme1234",
        requested_type="CHECK_OUT",
        now=datetime(2025, 3, 10, 18, 0),
    )

    assert result.decision.decided_type == OUT
    assert result.event.qr_code_id is None
    assert len(db.attendances) == 2


def test_manual_type_mismatch_writes_nothing(svc, db, company, alice):
    add_event(db, alice, IN, datetime(2025, 3, 10, 9, 0))

    with pytest.raises(ValidationError):
        svc.record_manual(
            employee_id=alice.employee_id,
            company_id=company.company_id,
            requested_type="CHECK_IN",
            now=datetime(2025, 3, 10, 12, 0),
        )
    assert len(db.attendances) == 1


def test_manual_with_wrong_company_code(svc, company, alice):
    with pytest.raises(AuthorizationError):
        svc.record_manual(employee_id=alice.employee_id, company_id=company.company_id, company_code="NOPE0000")


def test_day_history_is_chronological_with_next_type(svc, db, alice):
    add_event(db, alice, IN, datetime(2025, 3, 10, 9, 0))
    add_event(db, alice, OUT, datetime(2025, 3, 10, 18, 0))
    add_event(db, alice, IN, datetime(2025, 3, 9, 9, 0))

    history = svc.day_history(employee_id=alice.employee_id, day=date(2025, 3, 10))

    assert [e.type for e in history.events] == [IN, OUT]
    assert history.next_type == IN


def test_day_history_of_empty_day(svc, alice):
    history = svc.day_history(employee_id=alice.employee_id, now=datetime(2025, 3, 10, 7, 0))

    assert history.day == date(2025, 3, 10)
    assert list(history.events) == []
    assert history.next_type == IN


def test_build_filter():
    by_day = AttendanceService.build_filter(company_id=1, day="2025-03-10", type="check_out")
    by_month = AttendanceService.build_filter(company_id=1, month="2025-02", type="ALL", search="  ")

    assert (by_day.start, by_day.end) == (datetime(2025, 3, 10), datetime(2025, 3, 11))
    assert by_day.type == OUT
    assert (by_month.start, by_month.end) == (datetime(2025, 2, 1), datetime(2025, 3, 1))
    assert by_month.type is None
    assert by_month.search is None


def test_build_filter_rejects_unknown_type():
    with pytest.raises(ValidationError):
        AttendanceService.build_filter(company_id=1, type="LUNCH")


def test_search_pages_newest_first(svc, db, company, alice):
    bob = add_employee(db, company, username="bob", name="Bob")
    for day in range(1, 6):
        add_event(db, alice, IN, datetime(2025, 3, day, 9, 0))
    add_event(db, bob, IN, datetime(2025, 3, 6, 9, 0))

    page = svc.search(AttendanceService.build_filter(company_id=company.company_id, search="ali"), page=2, limit=2)

    assert page.total == 5
    assert page.total_pages == 3
    assert [r.timestamp.day for r in page.rows] == [3, 2]
    assert all(r.employee_username == "alice" for r in page.rows)


def test_delete_is_tenant_scoped(svc, db, company, alice):
    event = add_event(db, alice, IN, datetime(2025, 3, 10, 9, 0))
    other = add_company(db, code="OTHER001", name="Other")

    with pytest.raises(NotFoundError):
        svc.delete(company_id=other.company_id, attendance_id=event.attendance_id)

    svc.delete(company_id=company.company_id, attendance_id=event.attendance_id)
    assert db.attendances == {}
