from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.service import AuthService
from .companies.mysql_admin_repository import MySQLAdminRepository
from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.repository import AdminRepository, CompanyRepository
from .companies.service import CompanyService
from .contracts.mysql_contract_repository import MySQLContractRepository
from .contracts.repository import ContractRepository
from .contracts.service import ContractService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .qrcodes.mysql_qr_code_repository import MySQLQrCodeRepository
from .qrcodes.repository import QrCodeRepository
from .qrcodes.service import QrCodeService
from .statistics.service import StatisticsService
from .superadmin.billing import BillingService
from .superadmin.mysql_billing_repository import MySQLBillingRepository
from .superadmin.mysql_super_admin_repository import MySQLSuperAdminRepository
from .superadmin.mysql_tenant_directory_repository import MySQLTenantDirectoryRepository
from .superadmin.repository import BillingRepository, SuperAdminRepository, TenantDirectoryRepository
from .superadmin.service import SuperAdminService


@dataclass(frozen=True)
class Repositories:
    companies: CompanyRepository
    admins: AdminRepository
    employees: EmployeeRepository
    qr_codes: QrCodeRepository
    attendance: AttendanceRepository
    leave: LeaveRepository
    contracts: ContractRepository
    super_admins: SuperAdminRepository
    billing: BillingRepository
    directory: TenantDirectoryRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories

    company_service: CompanyService
    auth_service: AuthService
    employee_service: EmployeeService
    qr_code_service: QrCodeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    contract_service: ContractService
    statistics_service: StatisticsService
    super_admin_service: SuperAdminService
    billing_service: BillingService

    conn: Optional[DatabaseConnection] = None


def mysql_repositories(conn: DatabaseConnection) -> Repositories:
    return Repositories(
        companies=MySQLCompanyRepository(conn),
        admins=MySQLAdminRepository(conn),
        employees=MySQLEmployeeRepository(conn),
        qr_codes=MySQLQrCodeRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        leave=MySQLLeaveRepository(conn),
        contracts=MySQLContractRepository(conn),
        super_admins=MySQLSuperAdminRepository(conn),
        billing=MySQLBillingRepository(conn),
        directory=MySQLTenantDirectoryRepository(conn),
    )


def assemble(
    repos: Repositories,
    *,
    base_url: str,
    super_admin_email: Optional[str] = None,
    super_admin_password: Optional[str] = None,
    super_admin_name: str = "Super Admin",
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services onto a set of repositories (MySQL in production, in-memory in tests)."""
    return Container(
        repos=repos,
        company_service=CompanyService(repos.companies, repos.admins),
        auth_service=AuthService(repos.companies, repos.admins, repos.employees, repos.super_admins, repos.attendance),
        employee_service=EmployeeService(repos.employees, repos.companies),
        qr_code_service=QrCodeService(repos.qr_codes, repos.companies, repos.attendance, base_url=base_url),
        attendance_service=AttendanceService(repos.attendance, repos.employees, repos.companies, repos.qr_codes),
        leave_service=LeaveService(repos.leave, repos.employees),
        contract_service=ContractService(repos.contracts, repos.employees, repos.companies),
        statistics_service=StatisticsService(repos.attendance, repos.employees, repos.qr_codes),
        super_admin_service=SuperAdminService(
            repos.super_admins,
            repos.companies,
            repos.directory,
            repos.admins,
            repos.employees,
            repos.qr_codes,
            repos.attendance,
            repos.leave,
            bootstrap_email=super_admin_email,
            bootstrap_password=super_admin_password,
            bootstrap_name=super_admin_name,
        ),
        billing_service=BillingService(repos.billing, repos.companies),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    base_url: str,
    super_admin_email: Optional[str] = None,
    super_admin_password: Optional[str] = None,
    super_admin_name: str = "Super Admin",
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return assemble(
        mysql_repositories(conn),
        base_url=base_url,
        super_admin_email=super_admin_email,
        super_admin_password=super_admin_password,
        super_admin_name=super_admin_name,
        conn=conn,
    )
