from __future__ import annotations

import json
from datetime import datetime

import pytest

from fakes import FakeDB, add_company, add_employee, add_event, add_qr, in_memory_repositories
from qrwork.core.enums import AttendanceType
from qrwork.core.exceptions import NotFoundError, ValidationError
from qrwork.qrcodes.payload import parse_payload, scan_url
from qrwork.qrcodes.rendering import render_png
from qrwork.qrcodes.service import QrCodeService


@pytest.fixture
def db():
    return FakeDB()


@pytest.fixture
def svc(db):
    repos = in_memory_repositories(db)
    return QrCodeService(repos.qr_codes, repos.companies, repos.attendance, base_url="https://qr.example/")


@pytest.fixture
def company(db):
    return add_company(db)


def test_create_writes_payload_with_own_id(svc, company):
    qr = svc.create(company_id=company.company_id, name="Front door", type="check_in", location="Lobby")

    data = json.loads(qr.qr_data)
    assert data["qrCodeId"] == qr.qr_code_id
    assert data["companyCode"] == "ACME1234"
    assert data["type"] == "CHECK_IN"
    assert data["scanUrl"] == "https://qr.example/company/ACME1234/scan"


def test_create_validation(svc, company):
    with pytest.raises(ValidationError):
        svc.create(company_id=company.company_id, name="", type="CHECK_IN")
    with pytest.raises(ValidationError):
        svc.create(company_id=company.company_id, name="Gate", type="LUNCH")
    with pytest.raises(ValidationError):
        svc.create(company_id=company.company_id, name="Gate", type="CHECK_IN", latitude="north")


def test_update_refreshes_payload(svc, company):
    qr = svc.create(company_id=company.company_id, name="Front door", type="CHECK_IN")

    updated = svc.update(company_id=company.company_id, qr_code_id=qr.qr_code_id, name="Back door", is_active="false")

    assert updated.name == "Back door"
    assert updated.is_active is False
    assert updated.type == AttendanceType.CHECK_IN
    assert json.loads(updated.qr_data)["name"] == "Back door"


def test_list_includes_attendance_counts(svc, db, company):
    front = add_qr(db, company)
    back = add_qr(db, company, name="Back door")
    alice = add_employee(db, company)
    add_event(db, alice, AttendanceType.CHECK_IN, datetime(2025, 3, 10, 9, 0), qr_code_id=front.qr_code_id)
    add_event(db, alice, AttendanceType.CHECK_OUT, datetime(2025, 3, 10, 18, 0), qr_code_id=front.qr_code_id)

    counts = {row.qr_code.qr_code_id: row.attendance_count for row in svc.list(company.company_id)}

    assert counts == {front.qr_code_id: 2, back.qr_code_id: 0}


def test_other_company_cannot_touch_qr(svc, db, company):
    qr = add_qr(db, company)
    other = add_company(db, code="OTHER001")

    with pytest.raises(NotFoundError):
        svc.get(company_id=other.company_id, qr_code_id=qr.qr_code_id)
    with pytest.raises(NotFoundError):
        svc.delete(company_id=other.company_id, qr_code_id=qr.qr_code_id)


def test_image_data_rebuilds_missing_payload(svc, db, company):
    qr = add_qr(db, company)

    data = parse_payload(svc.image_data(company_id=company.company_id, qr_code_id=qr.qr_code_id))

    assert data.qr_code_id == qr.qr_code_id
    assert data.location == "Lobby"


def test_render_png_returns_png_bytes():
    buf = render_png('{"companyCode": "ACME1234", "qrCodeId": 1}')

    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"


def test_scan_url_trims_trailing_slash():
    assert scan_url("http://localhost:5000/", "ACME1234") == "http://localhost:5000/company/ACME1234/scan"
