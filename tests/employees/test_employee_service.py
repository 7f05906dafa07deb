from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from fakes import FakeDB, add_company, add_employee, in_memory_repositories
from qrwork.core.exceptions import ConflictError, NotFoundError, ValidationError
from qrwork.employees.service import EmployeeService


@pytest.fixture
def db():
    return FakeDB()


@pytest.fixture
def svc(db):
    repos = in_memory_repositories(db)
    return EmployeeService(repos.employees, repos.companies)


def test_create_employee(svc, db):
    company = add_company(db)

    emp = svc.create(
        company_id=company.company_id,
        name="Alice",
        username="alice",
        password="secret1",
        email="alice@acme.test",
        custom_fields={"department": "Sales"},
    )

    assert emp.company_id == company.company_id
    assert emp.custom_fields == {"department": "Sales"}
    assert check_password_hash(emp.password_hash, "secret1")


def test_employee_cap_counts_active_only(svc, db):
    company = add_company(db, max_employees=2)
    add_employee(db, company, username="a")
    add_employee(db, company, username="b", is_active=False)

    svc.create(company_id=company.company_id, name="C", username="c", password="secret1")
    with pytest.raises(ValidationError):
        svc.create(company_id=company.company_id, name="D", username="d", password="secret1")


def test_username_unique_within_company_only(svc, db):
    acme = add_company(db)
    other = add_company(db, code="OTHER001")
    add_employee(db, acme, username="alice")

    svc.create(company_id=other.company_id, name="Alice", username="alice", password="secret1")
    with pytest.raises(ConflictError):
        svc.create(company_id=acme.company_id, name="Alice 2", username="alice", password="secret1")


def test_invalid_email_and_custom_fields(svc, db):
    company = add_company(db)

    with pytest.raises(ValidationError):
        svc.create(company_id=company.company_id, name="A", username="a", password="secret1", email="nope")
    with pytest.raises(ValidationError):
        svc.create(company_id=company.company_id, name="A", username="a", password="secret1", custom_fields=[1])


def test_update_keeps_omitted_fields(svc, db):
    company = add_company(db)
    alice = add_employee(db, company)

    updated = svc.update(company_id=company.company_id, employee_id=alice.employee_id, phone="0900", is_active=False)

    assert updated.name == "Alice"
    assert updated.phone == "0900"
    assert updated.is_active is False


def test_rejected_update_changes_nothing(svc, db):
    company = add_company(db)
    alice = add_employee(db, company)

    with pytest.raises(ValidationError):
        svc.update(
            company_id=company.company_id,
            employee_id=alice.employee_id,
            name="Mallory",
            is_active=False,
            password="123",
        )

    assert db.employees[alice.employee_id] == alice


def test_reactivation_respects_employee_cap(svc, db):
    company = add_company(db, max_employees=1)
    add_employee(db, company, username="a")
    idle = add_employee(db, company, username="b", is_active=False)

    with pytest.raises(ValidationError):
        svc.update(company_id=company.company_id, employee_id=idle.employee_id, is_active=True)
    assert db.employees[idle.employee_id].is_active is False

    renamed = svc.update(company_id=company.company_id, employee_id=idle.employee_id, name="Still idle")
    assert renamed.name == "Still idle"


def test_update_rejects_taken_username(svc, db):
    company = add_company(db)
    alice = add_employee(db, company)
    add_employee(db, company, username="bob", name="Bob")

    with pytest.raises(ConflictError):
        svc.update(company_id=company.company_id, employee_id=alice.employee_id, username="bob")


def test_other_company_cannot_see_employee(svc, db):
    alice = add_employee(db, add_company(db))
    other = add_company(db, code="OTHER001")

    with pytest.raises(NotFoundError):
        svc.get(company_id=other.company_id, employee_id=alice.employee_id)
    with pytest.raises(NotFoundError):
        svc.delete(company_id=other.company_id, employee_id=alice.employee_id)
    assert alice.employee_id in db.employees


def test_profile_update_cannot_change_username(svc, db):
    company = add_company(db)
    alice = add_employee(db, company)

    updated = svc.update_profile(
        company_id=company.company_id, employee_id=alice.employee_id, name="Alice A.", email="a@acme.test"
    )

    assert updated.username == "alice"
    assert updated.name == "Alice A."
