from datetime import timedelta

import pytest

from fakes import FakeCompanyRepo, FakeEmployeeRepo, FakeGenerator, FakeRecordRepo, FakeRequestRepo, make_record

from ponto_exato.assistant.service import AssistantService
from ponto_exato.common.datetime_utils import now_local
from ponto_exato.common.security import PasswordHasher
from ponto_exato.companies.model import Company
from ponto_exato.container import wire_services
from ponto_exato.core.enums import Collection
from ponto_exato.employees.model import Employee
from ponto_exato.main import create_app
from ponto_exato.sync.polling_feed import PollingSnapshotFeed
from ponto_exato.sync.registry import LiveStateRegistry

hasher = PasswordHasher()


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    today = now_local().replace(hour=8, minute=0, second=0, microsecond=0)

    companies = FakeCompanyRepo(
        Company(id="ABC123", name="Acme", admin_email="admin@acme.com", admin_password_hash=hasher.hash("admin123"))
    )
    employees = FakeEmployeeRepo(
        Employee(id="e1", company_code="ABC123", name="Ana", matricula="1001", password_hash=hasher.hash("1234")),
    )
    records = FakeRecordRepo(
        make_record(today, matricula="1001", record_id="mine"),
        make_record(today, matricula="2002", record_id="other"),
        make_record(today, matricula="1001", company_code="XYZ999", record_id="foreign"),
    )
    requests_repo = FakeRequestRepo()

    sources = {
        Collection.COMPANIES: companies.list_documents,
        Collection.EMPLOYEES: employees.list_documents,
        Collection.RECORDS: records.list_documents,
    }
    live_states = LiveStateRegistry(lambda: PollingSnapshotFeed(sources, interval=60))
    container = wire_services(
        companies_repo=companies,
        employees_repo=employees,
        records_repo=records,
        requests_repo=requests_repo,
        live_states=live_states,
        assistant_service=AssistantService(FakeGenerator(answer="Tudo certo.")),
    )
    app = create_app(container)
    yield app.test_client(), container
    live_states.shutdown()


def _login_employee(client):
    return client.post("/api/login", json={"kind": "employee", "companyCode": "ABC123", "matricula": "1001", "password": "1234"})


def _login_admin(client):
    return client.post("/api/login", json={"kind": "admin", "companyCode": "ABC123", "email": "admin@acme.com", "password": "admin123"})


def test_requires_session(env):
    client, _ = env
    resp = client.get("/api/records")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_bad_credentials(env):
    client, _ = env
    resp = client.post("/api/login", json={"kind": "employee", "companyCode": "ABC123", "matricula": "1001", "password": "x"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Credenciais inválidas"


def test_employee_sees_only_own_company_records(env):
    client, container = env
    assert _login_employee(client).get_json()["view"] == "dashboard"
    assert container.live_states.active_codes() == ["ABC123"]

    body = client.get("/api/records").get_json()

    ids = [r["id"] for day in body["days"] for r in day["records"]]
    assert ids == ["mine"]

    timeline = client.get("/api/timeline").get_json()
    assert timeline["slots"][0]["done"] is True
    assert timeline["nextType"] == "inicio_intervalo"


def test_employee_is_kept_out_of_admin_screens(env):
    client, _ = env
    _login_employee(client)

    assert client.get("/api/admin/employees").status_code == 403
    assert client.post("/api/view", json={"view": "employees"}).status_code == 403
    resp = client.post("/api/view", json={"view": "card"})
    assert resp.get_json()["view"] == "card"
    assert client.get("/api/view").get_json()["view"] == "card"


def test_punch_with_denied_location_uses_fallback(env):
    client, container = env
    _login_employee(client)

    resp = client.post("/api/punch", json={"photo": "data:image/jpeg;base64,AA", "locationDenied": True})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["approximateLocation"] is True
    assert body["record"]["latitude"] == -23.5505
    assert len(container.records_repo.records) == 4


def test_punch_without_photo_is_a_device_error(env):
    client, _ = env
    _login_employee(client)
    resp = client.post("/api/punch", json={"latitude": -23.5, "longitude": -46.6})
    assert resp.status_code == 400


def test_request_approval_flow(env):
    client, _ = env
    _login_employee(client)
    rid = client.post("/api/requests", json={"type": "ajuste", "reason": "Esqueci", "date": "14/02/2026"}).get_json()["id"]
    client.post("/api/logout")

    _login_admin(client)
    pending = client.get("/api/admin/requests?status=pending").get_json()["requests"]
    assert [r["id"] for r in pending] == [rid]
    assert pending[0]["date"] == "2026-02-14"

    approved = client.post(f"/api/admin/requests/{rid}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["decision"] == "approved"
    second = client.post(f"/api/admin/requests/{rid}/reject")
    assert second.status_code == 400
    assert second.get_json()["message"] == "Solicitação já foi processada"


def test_admin_manages_employees_and_holidays(env):
    client, container = env
    _login_admin(client)

    created = client.post("/api/admin/employees", json={"name": "Bruno", "matricula": "2002", "password": "1234"})
    assert created.status_code == 201
    dup = client.post("/api/admin/employees", json={"name": "Bruno 2", "matricula": "2002", "password": "1234"})
    assert dup.status_code == 400

    emp_id = created.get_json()["id"]
    assert client.delete(f"/api/admin/employees/{emp_id}", json={}).status_code == 400
    assert client.delete(f"/api/admin/employees/{emp_id}", json={"confirm": True}).status_code == 200

    assert client.post("/api/admin/holidays", json={"date": "2026-04-21", "description": "Tiradentes"}).status_code == 201
    assert client.post("/api/admin/holidays", json={"date": "21/04/2026", "description": "Outro"}).status_code == 400
    # Lists render the live snapshot; a fresh session attaches and reads it at once.
    client.post("/api/logout")
    _login_admin(client)
    holidays = client.get("/api/holidays").get_json()["holidays"]
    assert [h["date"] for h in holidays] == ["2026-04-21"]
    names = [e["name"] for e in client.get("/api/admin/employees").get_json()["employees"]]
    assert names == ["Ana"]


def test_logout_releases_live_state(env):
    client, container = env
    _login_employee(client)

    client.post("/api/logout")

    assert container.live_states.active_codes() == []
    assert client.get("/api/me").status_code == 401


def test_ledger_export_download(env):
    client, _ = env
    _login_employee(client)

    resp = client.get("/api/export/ledger.txt")

    assert resp.status_code == 200
    assert resp.mimetype == "text/plain"
    assert "Espelho_Ponto_Mensal.txt" in resp.headers["Content-Disposition"]
    assert "Funcionário: Ana" in resp.get_data(as_text=True)


def test_record_lists_carry_no_photo_and_photo_is_served_per_record(env):
    client, _ = env
    _login_employee(client)

    record = client.get("/api/records").get_json()["days"][0]["records"][0]
    assert record["photo"] == ""

    resp = client.get("/api/records/mine/photo")
    assert resp.status_code == 200
    assert resp.get_json()["photo"].startswith("data:image/jpeg")
    assert client.get("/api/records/other/photo").status_code == 404
    assert client.get("/api/records/foreign/photo").status_code == 404


def test_denied_location_is_refused_when_company_has_geofence(env):
    client, container = env
    container.company_service.update_geofence(
        container.auth_service.login_admin("ABC123", "admin@acme.com", "admin123"),
        {"enabled": True, "lat": -23.5614, "lng": -46.6559, "radius": 100},
    )
    _login_employee(client)

    resp = client.post("/api/punch", json={"photo": "data:image/jpeg;base64,AA", "locationDenied": True})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Ative o GPS para registrar o ponto."
    assert len(container.records_repo.records) == 3


def test_employee_update_rejects_invalid_weekly_hours(env):
    client, _ = env
    _login_admin(client)

    resp = client.patch("/api/admin/employees/e1", json={"weeklyHours": "abc"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Carga horária inválida"


def test_remembered_login_uses_configured_lifetime(env):
    client, _ = env
    lifetime = client.application.permanent_session_lifetime

    resp = client.post(
        "/api/login",
        json={"kind": "employee", "companyCode": "ABC123", "matricula": "1001", "password": "1234", "remember": True},
    )

    assert resp.status_code == 200
    assert "Expires=" in resp.headers["Set-Cookie"]
    assert client.application.permanent_session_lifetime == lifetime == timedelta(days=7)
