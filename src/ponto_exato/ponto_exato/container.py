from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .assistant.client import GeminiClient
from .assistant.service import AssistantService
from .common.security import PasswordHasher
from .common.web import ViewGuard
from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.repository import CompanyRepository
from .companies.service import CompanyService
from .core.constants import DEFAULT_SYNC_POLL_SECONDS
from .core.enums import Collection
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .holidays.service import HolidayService
from .punch.service import PunchService
from .records.mysql_record_repository import MySQLRecordRepository
from .records.repository import RecordRepository
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .session.store import FlaskSessionStore
from .sync.polling_feed import PollingSnapshotFeed
from .sync.registry import LiveStateRegistry


@dataclass(frozen=True)
class Container:
    companies_repo: CompanyRepository
    employees_repo: EmployeeRepository
    records_repo: RecordRepository
    requests_repo: RequestRepository

    session_store: FlaskSessionStore
    guard: ViewGuard
    live_states: LiveStateRegistry

    auth_service: AuthService
    employee_service: EmployeeService
    company_service: CompanyService
    holiday_service: HolidayService
    request_service: RequestService
    punch_service: PunchService
    assistant_service: AssistantService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    companies_repo: CompanyRepository,
    employees_repo: EmployeeRepository,
    records_repo: RecordRepository,
    requests_repo: RequestRepository,
    live_states: LiveStateRegistry,
    assistant_service: AssistantService,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the service graph on top of any repository implementations."""

    hasher = PasswordHasher()
    session_store = FlaskSessionStore()

    return Container(
        companies_repo=companies_repo,
        employees_repo=employees_repo,
        records_repo=records_repo,
        requests_repo=requests_repo,
        session_store=session_store,
        guard=ViewGuard(session_store),
        live_states=live_states,
        auth_service=AuthService(companies_repo, employees_repo, hasher),
        employee_service=EmployeeService(employees_repo, hasher),
        company_service=CompanyService(companies_repo),
        holiday_service=HolidayService(companies_repo),
        request_service=RequestService(requests_repo),
        punch_service=PunchService(records_repo, companies_repo, employees_repo),
        assistant_service=assistant_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    gemini_api_key: Optional[str] = None,
    gemini_model: str = "gemini-3-pro-preview",
    gemini_audit_model: Optional[str] = None,
    sync_poll_seconds: float = DEFAULT_SYNC_POLL_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    companies_repo = MySQLCompanyRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    records_repo = MySQLRecordRepository(conn)
    requests_repo = MySQLRequestRepository(conn)

    sources = {
        Collection.COMPANIES: companies_repo.list_documents,
        Collection.EMPLOYEES: employees_repo.list_documents,
        Collection.RECORDS: records_repo.list_documents,
    }
    markers = {Collection.RECORDS: records_repo.change_marker}
    live_states = LiveStateRegistry(
        lambda: PollingSnapshotFeed(sources, markers=markers, interval=sync_poll_seconds)
    )

    assistant_service = AssistantService(
        GeminiClient(gemini_api_key, gemini_model),
        audit_model=gemini_audit_model,
    )

    return wire_services(
        companies_repo=companies_repo,
        employees_repo=employees_repo,
        records_repo=records_repo,
        requests_repo=requests_repo,
        live_states=live_states,
        assistant_service=assistant_service,
        conn=conn,
    )
