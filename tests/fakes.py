from __future__ import annotations

import json
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from werkzeug.security import generate_password_hash

from qrwork.attendance.model import AttendanceEvent, AttendanceFilter, AttendanceReportRow
from qrwork.companies.model import Admin, Company, CompanyUpdate
from qrwork.container import Repositories
from qrwork.contracts.model import ContractTerms, EmploymentContract
from qrwork.core.constants import TRIAL_DAYS
from qrwork.core.enums import (
    AttendanceType,
    ContractStatus,
    PlanSubscriptionStatus,
    RequestStatus,
    SubscriptionStatus,
)
from qrwork.employees.model import Employee
from qrwork.leave.model import LeaveBalance, LeaveRequest
from qrwork.qrcodes.model import QrCode
from qrwork.superadmin.model import CompanyOverview, Payment, Subscription, SubscriptionPlan, SuperAdmin


class FakeDB:
    """Shared tables so the fakes can answer joined queries."""

    def __init__(self):
        self.companies: Dict[int, Company] = {}
        self.admins: Dict[int, Admin] = {}
        self.employees: Dict[int, Employee] = {}
        self.qr_codes: Dict[int, QrCode] = {}
        self.attendances: Dict[int, AttendanceEvent] = {}
        self.leave_requests: Dict[int, LeaveRequest] = {}
        self.balances: Dict[Tuple[int, int], LeaveBalance] = {}
        self.contracts: Dict[int, EmploymentContract] = {}
        self.super_admins: Dict[int, SuperAdmin] = {}
        self.plans: Dict[int, SubscriptionPlan] = {}
        self.subscriptions: Dict[int, Subscription] = {}
        self.payments: Dict[int, Payment] = {}
        self._ids: Dict[str, int] = {}

    def next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]


class InMemoryCompanies:
    def __init__(self, db: FakeDB):
        self.db = db

    def get_by_id(self, company_id: int) -> Optional[Company]:
        return self.db.companies.get(company_id)

    def get_by_code(self, code: str) -> Optional[Company]:
        return next((c for c in self.db.companies.values() if c.code == code), None)

    def code_exists(self, code: str) -> bool:
        return self.get_by_code(code) is not None

    def create_with_admin(
        self,
        *,
        name,
        code,
        phone,
        trial_end_date,
        max_employees,
        admin_name,
        admin_email,
        admin_password_hash,
    ) -> Tuple[int, int]:
        company_id = self.db.next_id("companies")
        self.db.companies[company_id] = Company(
            company_id=company_id,
            name=name,
            code=code,
            phone=phone,
            trial_end_date=trial_end_date,
            max_employees=max_employees,
            is_active=True,
            is_approved=False,
            subscription_status=SubscriptionStatus.TRIAL,
            created_at=trial_end_date - timedelta(days=TRIAL_DAYS),
        )
        admin_id = self.db.next_id("admins")
        self.db.admins[admin_id] = Admin(
            admin_id=admin_id,
            company_id=company_id,
            name=admin_name,
            email=admin_email,
            password_hash=admin_password_hash,
        )
        return company_id, admin_id

    def update_profile(self, *, company_id: int, name: str, phone: Optional[str]) -> bool:
        self.db.companies[company_id] = replace(self.db.companies[company_id], name=name, phone=phone)
        return True

    def apply_update(self, *, company_id: int, update: CompanyUpdate) -> bool:
        changes = {k: v for k, v in vars(update).items() if v is not None}
        self.db.companies[company_id] = replace(self.db.companies[company_id], **changes)
        return True

    def list_stale_trials(self, *, created_before: datetime) -> Sequence[Company]:
        return [
            c
            for c in self.db.companies.values()
            if c.subscription_status == SubscriptionStatus.TRIAL
            and not c.is_approved
            and c.created_at is not None
            and c.created_at <= created_before
        ]

    def delete(self, company_id: int) -> bool:
        if self.db.companies.pop(company_id, None) is None:
            return False
        for table in ("admins", "employees", "qr_codes", "attendances", "leave_requests", "contracts"):
            rows = getattr(self.db, table)
            for key in [k for k, v in rows.items() if v.company_id == company_id]:
                del rows[key]
        return True


class InMemoryAdmins:
    def __init__(self, db: FakeDB):
        self.db = db

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        return self.db.admins.get(admin_id)

    def email_exists(self, email: str) -> bool:
        return any(a.email == email for a in self.db.admins.values())

    def get_in_company(self, *, email: str, company_id: int) -> Optional[Admin]:
        return next(
            (a for a in self.db.admins.values() if a.email == email and a.company_id == company_id),
            None,
        )

    def list_for_company(self, company_id: int) -> Sequence[Admin]:
        return [a for a in self.db.admins.values() if a.company_id == company_id]

    def touch_login(self, *, admin_id: int, at: datetime) -> None:
        self.db.admins[admin_id] = replace(self.db.admins[admin_id], last_login_at=at)

    def update_password(self, *, admin_id: int, password_hash: str) -> bool:
        self.db.admins[admin_id] = replace(self.db.admins[admin_id], password_hash=password_hash)
        return True


class InMemoryEmployees:
    def __init__(self, db: FakeDB):
        self.db = db

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.db.employees.get(employee_id)

    def get_by_username(self, *, company_id: int, username: str) -> Optional[Employee]:
        return next(
            (e for e in self.db.employees.values() if e.company_id == company_id and e.username == username),
            None,
        )

    def username_taken(self, *, company_id: int, username: str, exclude_id: Optional[int] = None) -> bool:
        found = self.get_by_username(company_id=company_id, username=username)
        return found is not None and found.employee_id != exclude_id

    def list_for_company(self, company_id: int, *, active_only: bool = False) -> Sequence[Employee]:
        rows = [e for e in self.db.employees.values() if e.company_id == company_id]
        if active_only:
            rows = [e for e in rows if e.is_active]
        return sorted(rows, key=lambda e: e.employee_id, reverse=True)

    def count_for_company(self, company_id: int, *, active_only: bool = False) -> int:
        return len(self.list_for_company(company_id, active_only=active_only))

    def create(self, *, company_id, name, username, password_hash, email, phone, custom_fields) -> int:
        employee_id = self.db.next_id("employees")
        self.db.employees[employee_id] = Employee(
            employee_id=employee_id,
            company_id=company_id,
            name=name,
            username=username,
            password_hash=password_hash,
            email=email,
            phone=phone,
            custom_fields=dict(custom_fields),
        )
        return employee_id

    def update(self, *, employee_id, name, username, email, phone, custom_fields, is_active) -> bool:
        self.db.employees[employee_id] = replace(
            self.db.employees[employee_id],
            name=name,
            username=username,
            email=email,
            phone=phone,
            custom_fields=dict(custom_fields),
            is_active=is_active,
        )
        return True

    def update_password(self, *, employee_id: int, password_hash: str) -> bool:
        self.db.employees[employee_id] = replace(self.db.employees[employee_id], password_hash=password_hash)
        return True

    def touch_login(self, *, employee_id: int, at: datetime) -> None:
        self.db.employees[employee_id] = replace(self.db.employees[employee_id], last_login_at=at)

    def delete(self, *, employee_id: int, company_id: int) -> bool:
        emp = self.db.employees.get(employee_id)
        if not emp or emp.company_id != company_id:
            return False
        del self.db.employees[employee_id]
        return True


class InMemoryQrCodes:
    def __init__(self, db: FakeDB):
        self.db = db

    def get_by_id(self, qr_code_id: int) -> Optional[QrCode]:
        return self.db.qr_codes.get(qr_code_id)

    def list_for_company(self, company_id: int) -> Sequence[QrCode]:
        rows = [q for q in self.db.qr_codes.values() if q.company_id == company_id]
        return sorted(rows, key=lambda q: q.qr_code_id, reverse=True)

    def count_for_company(self, company_id: int) -> int:
        return len(self.list_for_company(company_id))

    def create(self, *, company_id, name, type, location, latitude, longitude, radius, is_active) -> int:
        qr_code_id = self.db.next_id("qr_codes")
        self.db.qr_codes[qr_code_id] = QrCode(
            qr_code_id=qr_code_id,
            company_id=company_id,
            name=name,
            type=type,
            location=location,
            latitude=latitude,
            longitude=longitude,
            radius=radius,
            is_active=is_active,
        )
        return qr_code_id

    def update(self, *, qr_code_id, name, type, location, latitude, longitude, radius, is_active) -> bool:
        self.db.qr_codes[qr_code_id] = replace(
            self.db.qr_codes[qr_code_id],
            name=name,
            type=type,
            location=location,
            latitude=latitude,
            longitude=longitude,
            radius=radius,
            is_active=is_active,
        )
        return True

    def set_payload(self, *, qr_code_id: int, qr_data: str) -> None:
        self.db.qr_codes[qr_code_id] = replace(self.db.qr_codes[qr_code_id], qr_data=qr_data)

    def delete(self, *, qr_code_id: int, company_id: int) -> bool:
        qr = self.db.qr_codes.get(qr_code_id)
        if not qr or qr.company_id != company_id:
            return False
        del self.db.qr_codes[qr_code_id]
        return True


class InMemoryAttendance:
    def __init__(self, db: FakeDB):
        self.db = db

    @staticmethod
    def _newest_first(rows: List[AttendanceEvent]) -> List[AttendanceEvent]:
        return sorted(rows, key=lambda e: (e.created_at, e.attendance_id), reverse=True)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEvent]:
        return self.db.attendances.get(attendance_id)

    def list_for_employee_between(self, *, employee_id: int, start: datetime, end: datetime):
        rows = [
            e
            for e in self.db.attendances.values()
            if e.employee_id == employee_id and start <= e.timestamp < end
        ]
        return self._newest_first(rows)

    def get_latest_for_employee(self, employee_id: int) -> Optional[AttendanceEvent]:
        rows = [e for e in self.db.attendances.values() if e.employee_id == employee_id]
        return max(rows, key=lambda e: (e.timestamp, e.attendance_id), default=None)

    def create(self, *, employee_id, company_id, type, timestamp, qr_code_id=None, location=None) -> int:
        attendance_id = self.db.next_id("attendances")
        self.db.attendances[attendance_id] = AttendanceEvent(
            attendance_id=attendance_id,
            employee_id=employee_id,
            company_id=company_id,
            type=type,
            timestamp=timestamp,
            qr_code_id=qr_code_id,
            location=location,
            created_at=timestamp,
        )
        return attendance_id

    def overwrite(self, *, attendance_id, timestamp, qr_code_id, location) -> bool:
        self.db.attendances[attendance_id] = replace(
            self.db.attendances[attendance_id],
            timestamp=timestamp,
            qr_code_id=qr_code_id,
            location=location,
        )
        return True

    def delete(self, *, attendance_id: int, company_id: int) -> bool:
        event = self.db.attendances.get(attendance_id)
        if not event or event.company_id != company_id:
            return False
        del self.db.attendances[attendance_id]
        return True

    def _matches(self, e: AttendanceEvent, criteria: AttendanceFilter) -> bool:
        if e.company_id != criteria.company_id:
            return False
        if criteria.start and e.timestamp < criteria.start:
            return False
        if criteria.end and e.timestamp >= criteria.end:
            return False
        if criteria.type and e.type != criteria.type:
            return False
        if criteria.search:
            emp = self.db.employees[e.employee_id]
            needle = criteria.search.lower()
            if needle not in emp.name.lower() and needle not in emp.username.lower():
                return False
        return True

    def search(self, criteria: AttendanceFilter, *, offset: int = 0, limit: Optional[int] = None):
        matches = sorted(
            (e for e in self.db.attendances.values() if self._matches(e, criteria)),
            key=lambda e: (e.timestamp, e.attendance_id),
            reverse=True,
        )
        page = matches[offset:] if limit is None else matches[offset:offset + limit]
        rows = []
        for e in page:
            emp = self.db.employees[e.employee_id]
            qr = self.db.qr_codes.get(e.qr_code_id) if e.qr_code_id else None
            rows.append(
                AttendanceReportRow(
                    attendance_id=e.attendance_id,
                    employee_id=e.employee_id,
                    employee_name=emp.name,
                    employee_username=emp.username,
                    type=e.type,
                    timestamp=e.timestamp,
                    location=e.location,
                    qr_code_id=e.qr_code_id,
                    qr_code_name=qr.name if qr else None,
                )
            )
        return rows, len(matches)

    def list_for_company_between(self, *, company_id: int, start: datetime, end: datetime):
        rows = [e for e in self.db.attendances.values() if e.company_id == company_id and start <= e.timestamp < end]
        return sorted(rows, key=lambda e: e.timestamp)

    def count_for_company(self, company_id: int, *, start=None, end=None, type=None) -> int:
        return self.search(AttendanceFilter(company_id=company_id, start=start, end=end, type=type))[1]

    def count_distinct_employees(self, company_id: int, *, start, end, type) -> int:
        return len(
            {
                e.employee_id
                for e in self.db.attendances.values()
                if e.company_id == company_id and e.type == type and start <= e.timestamp < end
            }
        )

    def count_by_qr_code(self, company_id: int) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for e in self.db.attendances.values():
            if e.company_id == company_id and e.qr_code_id is not None:
                counts[e.qr_code_id] = counts.get(e.qr_code_id, 0) + 1
        return counts


class InMemoryLeave:
    def __init__(self, db: FakeDB):
        self.db = db

    def create_request(self, *, employee_id, company_id, type, start_date, end_date, days, reason) -> int:
        request_id = self.db.next_id("leave_requests")
        self.db.leave_requests[request_id] = LeaveRequest(
            request_id=request_id,
            employee_id=employee_id,
            company_id=company_id,
            type=type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason,
            status=RequestStatus.PENDING,
            employee_name=self.db.employees[employee_id].name,
        )
        return request_id

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        return self.db.leave_requests.get(request_id)

    def list_requests(self, *, company_id, employee_id=None, status=None, limit=None) -> Sequence[LeaveRequest]:
        rows = [r for r in self.db.leave_requests.values() if r.company_id == company_id]
        if employee_id is not None:
            rows = [r for r in rows if r.employee_id == employee_id]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        rows.sort(key=lambda r: r.request_id, reverse=True)
        return rows if limit is None else rows[:limit]

    def has_overlap(self, *, employee_id: int, start_date: date, end_date: date) -> bool:
        return any(
            r.employee_id == employee_id
            and r.status in (RequestStatus.PENDING, RequestStatus.APPROVED)
            and r.start_date <= end_date
            and r.end_date >= start_date
            for r in self.db.leave_requests.values()
        )

    def decide(self, *, request_id, status, decided_by, admin_note, decided_at, balance=None) -> bool:
        req = self.db.leave_requests.get(request_id)
        if not req or req.status != RequestStatus.PENDING:
            return False
        # balance first: a failed write leaves the request untouched
        if balance is not None:
            self.save_balance(balance)
        self.db.leave_requests[request_id] = replace(
            req, status=status, approved_by=decided_by, admin_note=admin_note, approved_at=decided_at
        )
        return True

    def get_balance(self, *, employee_id: int, year: int) -> Optional[LeaveBalance]:
        return self.db.balances.get((employee_id, year))

    def list_balances(self, *, company_id: int, year: int) -> Dict[int, LeaveBalance]:
        return {b.employee_id: b for (_, y), b in self.db.balances.items() if y == year and b.company_id == company_id}

    def save_balance(self, balance: LeaveBalance) -> None:
        self.db.balances[(balance.employee_id, balance.year)] = balance


class InMemoryContracts:
    def __init__(self, db: FakeDB):
        self.db = db

    def create(self, *, company_id: int, employee_id: int, created_by_id: int, terms: ContractTerms) -> int:
        contract_id = self.db.next_id("contracts")
        self.db.contracts[contract_id] = EmploymentContract(
            contract_id=contract_id,
            company_id=company_id,
            employee_id=employee_id,
            status=ContractStatus.DRAFT,
            created_by_id=created_by_id,
            **vars(terms),
        )
        return contract_id

    def get(self, contract_id: int) -> Optional[EmploymentContract]:
        return self.db.contracts.get(contract_id)

    def list_for_company(self, *, company_id: int, status=None) -> Sequence[EmploymentContract]:
        rows = [c for c in self.db.contracts.values() if c.company_id == company_id]
        if status is not None:
            rows = [c for c in rows if c.status == status]
        return rows

    def update_terms(self, *, contract_id: int, terms: ContractTerms) -> bool:
        self.db.contracts[contract_id] = replace(self.db.contracts[contract_id], **vars(terms))
        return True

    def mark_sent(self, *, contract_id: int, sent_at: datetime) -> bool:
        contract = self.db.contracts[contract_id]
        if contract.status != ContractStatus.DRAFT:
            return False
        self.db.contracts[contract_id] = replace(contract, status=ContractStatus.SENT, sent_at=sent_at)
        return True

    def delete(self, *, contract_id: int, company_id: int) -> bool:
        return self.db.contracts.pop(contract_id, None) is not None


class InMemorySuperAdmins:
    def __init__(self, db: FakeDB):
        self.db = db

    def get_by_id(self, super_admin_id: int) -> Optional[SuperAdmin]:
        return self.db.super_admins.get(super_admin_id)

    def get_by_email(self, email: str) -> Optional[SuperAdmin]:
        return next((s for s in self.db.super_admins.values() if s.email == email), None)

    def create(self, *, name: str, email: str, password_hash: str) -> int:
        super_admin_id = self.db.next_id("super_admins")
        self.db.super_admins[super_admin_id] = SuperAdmin(
            super_admin_id=super_admin_id, name=name, email=email, password_hash=password_hash
        )
        return super_admin_id

    def touch_login(self, *, super_admin_id: int, at: datetime) -> None:
        self.db.super_admins[super_admin_id] = replace(self.db.super_admins[super_admin_id], last_login_at=at)


class InMemoryBilling:
    def __init__(self, db: FakeDB):
        self.db = db

    def count_plans(self) -> int:
        return len(self.db.plans)

    def create_plan(self, *, name, description, price, max_employees, features) -> int:
        plan_id = self.db.next_id("plans")
        self.db.plans[plan_id] = SubscriptionPlan(
            plan_id=plan_id,
            name=name,
            description=description,
            price=Decimal(price),
            max_employees=max_employees,
            features=list(features),
        )
        return plan_id

    def list_active_plans(self) -> Sequence[SubscriptionPlan]:
        return sorted((p for p in self.db.plans.values() if p.is_active), key=lambda p: p.price)

    def get_plan(self, plan_id: int) -> Optional[SubscriptionPlan]:
        return self.db.plans.get(plan_id)

    def expire_active_subscriptions(self, company_id: int) -> int:
        expired = 0
        for sid, s in list(self.db.subscriptions.items()):
            if s.company_id == company_id and s.status == PlanSubscriptionStatus.ACTIVE:
                self.db.subscriptions[sid] = replace(s, status=PlanSubscriptionStatus.EXPIRED)
                expired += 1
        return expired

    def create_subscription(self, *, company_id, plan_id, start_date, end_date, auto_renew) -> int:
        subscription_id = self.db.next_id("subscriptions")
        self.db.subscriptions[subscription_id] = Subscription(
            subscription_id=subscription_id,
            company_id=company_id,
            plan_id=plan_id,
            status=PlanSubscriptionStatus.ACTIVE,
            start_date=start_date,
            end_date=end_date,
            auto_renew=auto_renew,
            plan_name=self.db.plans[plan_id].name,
        )
        return subscription_id

    def get_active_subscription(self, company_id: int) -> Optional[Subscription]:
        return next(
            (
                s
                for s in self.db.subscriptions.values()
                if s.company_id == company_id and s.status == PlanSubscriptionStatus.ACTIVE
            ),
            None,
        )

    def set_subscription_end(self, *, subscription_id: int, end_date: datetime) -> None:
        self.db.subscriptions[subscription_id] = replace(self.db.subscriptions[subscription_id], end_date=end_date)

    def list_subscriptions(self, company_id: int) -> Sequence[Subscription]:
        return [s for s in self.db.subscriptions.values() if s.company_id == company_id]

    def create_payment(self, *, company_id, subscription_id, amount, method, description, paid_at) -> int:
        payment_id = self.db.next_id("payments")
        self.db.payments[payment_id] = Payment(
            payment_id=payment_id,
            company_id=company_id,
            subscription_id=subscription_id,
            amount=amount,
            method=method,
            status="COMPLETED",
            description=description,
            paid_at=paid_at,
        )
        return payment_id

    def list_payments(self, company_id: int, *, limit: int) -> Sequence[Payment]:
        rows = [p for p in self.db.payments.values() if p.company_id == company_id]
        return sorted(rows, key=lambda p: p.payment_id, reverse=True)[:limit]


class InMemoryDirectory:
    def __init__(self, db: FakeDB):
        self.db = db

    def related_counts(self, company_id: int) -> Dict[str, int]:
        def count(rows) -> int:
            return sum(1 for r in rows.values() if r.company_id == company_id)

        return {
            "admins": count(self.db.admins),
            "employees": count(self.db.employees),
            "qrCodes": count(self.db.qr_codes),
            "attendances": count(self.db.attendances),
            "leaveRequests": count(self.db.leave_requests),
            "employeeLeaves": sum(1 for b in self.db.balances.values() if b.company_id == company_id),
            "contracts": count(self.db.contracts),
        }

    def list_companies(self, *, search, status, offset, limit):
        rows = list(self.db.companies.values())
        if search:
            needle = search.lower()
            rows = [c for c in rows if any(needle in (v or "").lower() for v in (c.name, c.code, c.phone))]
        if status:
            rows = [c for c in rows if c.subscription_status == status]
        rows.sort(key=lambda c: c.company_id, reverse=True)
        page = rows[offset:offset + limit]
        return [CompanyOverview(company=c, counts=self.related_counts(c.company_id)) for c in page], len(rows)


def in_memory_repositories(db: Optional[FakeDB] = None) -> Repositories:
    db = db or FakeDB()
    return Repositories(
        companies=InMemoryCompanies(db),
        admins=InMemoryAdmins(db),
        employees=InMemoryEmployees(db),
        qr_codes=InMemoryQrCodes(db),
        attendance=InMemoryAttendance(db),
        leave=InMemoryLeave(db),
        contracts=InMemoryContracts(db),
        super_admins=InMemorySuperAdmins(db),
        billing=InMemoryBilling(db),
        directory=InMemoryDirectory(db),
    )


# Seed helpers


def add_company(
    db: FakeDB,
    *,
    code: str = "ACME1234",
    name: str = "Acme",
    created_at: datetime = datetime(2025, 3, 1, 8, 0),
    trial_days: int = 14,
    max_employees: int = 10,
    status: SubscriptionStatus = SubscriptionStatus.TRIAL,
    is_active: bool = True,
    is_approved: bool = False,
) -> Company:
    company_id = db.next_id("companies")
    company = Company(
        company_id=company_id,
        name=name,
        code=code,
        phone=None,
        trial_end_date=created_at + timedelta(days=trial_days),
        max_employees=max_employees,
        is_active=is_active,
        is_approved=is_approved,
        subscription_status=status,
        created_at=created_at,
    )
    db.companies[company_id] = company
    return company


def add_admin(db: FakeDB, company: Company, *, email: str = "boss@acme.test", password: str = "secret1") -> Admin:
    admin_id = db.next_id("admins")
    admin = Admin(
        admin_id=admin_id,
        company_id=company.company_id,
        name="Boss",
        email=email,
        password_hash=generate_password_hash(password),
    )
    db.admins[admin_id] = admin
    return admin


def add_employee(
    db: FakeDB,
    company: Company,
    *,
    username: str = "alice",
    name: str = "Alice",
    password: str = "secret1",
    is_active: bool = True,
) -> Employee:
    employee_id = db.next_id("employees")
    emp = Employee(
        employee_id=employee_id,
        company_id=company.company_id,
        name=name,
        username=username,
        password_hash=generate_password_hash(password),
        is_active=is_active,
    )
    db.employees[employee_id] = emp
    return emp


def add_qr(
    db: FakeDB,
    company: Company,
    *,
    name: str = "Front door",
    location: Optional[str] = "Lobby",
    type: AttendanceType = AttendanceType.CHECK_IN,
    is_active: bool = True,
) -> QrCode:
    qr_code_id = db.next_id("qr_codes")
    qr = QrCode(
        qr_code_id=qr_code_id,
        company_id=company.company_id,
        name=name,
        type=type,
        location=location,
        is_active=is_active,
    )
    db.qr_codes[qr_code_id] = qr
    return qr


def add_event(
    db: FakeDB,
    emp: Employee,
    type: AttendanceType,
    at: datetime,
    *,
    qr_code_id: Optional[int] = None,
    location: Optional[str] = None,
) -> AttendanceEvent:
    attendance_id = db.next_id("attendances")
    event = AttendanceEvent(
        attendance_id=attendance_id,
        employee_id=emp.employee_id,
        company_id=emp.company_id,
        type=type,
        timestamp=at,
        qr_code_id=qr_code_id,
        location=location,
        created_at=at,
    )
    db.attendances[attendance_id] = event
    return event


def qr_text(company: Company, qr: QrCode) -> str:
    return json.dumps({"companyCode": company.code, "qrCodeId": qr.qr_code_id, "type": qr.type.value})



def add_super_admin(db: FakeDB, *, email: str = "root@qrwork.test", password: str = "toor123") -> SuperAdmin:
    super_admin_id = InMemorySuperAdmins(db).create(
        name="Root", email=email, password_hash=generate_password_hash(password)
    )
    return db.super_admins[super_admin_id]
