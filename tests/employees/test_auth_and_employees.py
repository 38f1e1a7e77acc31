import pytest

from fakes import FakeCompanyRepo, FakeEmployeeRepo, admin_user, employee_user

from ponto_exato.common.security import PasswordHasher
from ponto_exato.companies.model import Company
from ponto_exato.core.enums import EmployeeStatus, Role
from ponto_exato.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ponto_exato.employees.model import Employee
from ponto_exato.employees.service import AuthService, EmployeeService

hasher = PasswordHasher()


def _setup():
    company = Company(
        id="ABC123",
        name="Acme",
        admin_email="admin@acme.com",
        admin_password_hash=hasher.hash("admin123"),
    )
    ana = Employee(
        id="e1",
        company_code="ABC123",
        name="Ana Souza",
        matricula="1001",
        password_hash=hasher.hash("1234"),
        role_function="Analista",
    )
    companies = FakeCompanyRepo(company)
    employees = FakeEmployeeRepo(ana)
    return AuthService(companies, employees, hasher), companies, employees


def test_employee_login_builds_session_user():
    auth, _, _ = _setup()

    user = auth.login_employee("abc123", "1001", "1234")

    assert user.role == Role.EMPLOYEE
    assert user.company_code == "ABC123"
    assert user.company_name == "Acme"
    assert user.matricula == "1001"
    assert user.role_function == "Analista"


@pytest.mark.parametrize(
    "code, matricula, password",
    [("ABC123", "1001", "wrong"), ("ABC123", "9999", "1234"), ("NOPE00", "1001", "1234")],
)
def test_employee_login_failures_share_one_message(code, matricula, password):
    auth, _, _ = _setup()
    with pytest.raises(AuthenticationError, match="Credenciais inválidas"):
        auth.login_employee(code, matricula, password)


def test_inactive_employee_cannot_login():
    auth, _, employees = _setup()
    employees.update_fields("e1", {"status": "inactive"})

    with pytest.raises(AuthenticationError):
        auth.login_employee("ABC123", "1001", "1234")


def test_admin_and_totem_login():
    auth, _, _ = _setup()

    admin = auth.login_admin("ABC123", "ADMIN@acme.com", "admin123")
    totem = auth.login_totem("ABC123", "admin@acme.com", "admin123")

    assert admin.role == Role.ADMIN and admin.matricula is None
    assert totem.role == Role.TOTEM
    with pytest.raises(AuthenticationError):
        auth.login_admin("ABC123", "admin@acme.com", "nope")


def test_signup_creates_company_with_access_code():
    auth, companies, _ = _setup()

    user = auth.signup_company(name="Nova Ltda", admin_email="Dono@Nova.com", admin_password="segredo")

    assert user.role == Role.ADMIN
    company = companies.companies[user.company_code]
    assert len(company.id) == 6 and company.id.isalnum() and company.id == company.id.upper()
    assert company.admin_email == "dono@nova.com"
    assert hasher.verify(company.admin_password_hash, "segredo")
    assert company.config.weekly_hours == 44
    assert auth.login_admin(company.id, "dono@nova.com", "segredo").company_name == "Nova Ltda"


def test_change_password():
    auth, _, _ = _setup()
    user = employee_user()

    with pytest.raises(ValidationError):
        auth.change_password(user, "12")
    auth.change_password(user, "nova-senha")

    assert auth.login_employee("ABC123", "1001", "nova-senha").name == "Ana Souza"
    with pytest.raises(AuthorizationError):
        auth.change_password(admin_user(), "nova-senha")


def test_create_employee_validates_and_rejects_duplicate_badge():
    _, _, employees = _setup()
    service = EmployeeService(employees, hasher)
    admin = admin_user()

    with pytest.raises(ValidationError, match="Nome"):
        service.create(admin, {"matricula": "2002", "password": "1234"})
    with pytest.raises(ValidationError, match="Matrícula já cadastrada"):
        service.create(admin, {"name": "Outra Ana", "matricula": "1001", "password": "1234"})

    new_id = service.create(
        admin,
        {"name": "Bruno", "matricula": "2002", "password": "1234", "weeklyHours": "40", "department": "TI"},
    )

    bruno = employees.get_by_id(new_id)
    assert bruno.company_code == "ABC123"
    assert bruno.weekly_hours == 40 and bruno.department == "TI"
    assert bruno.password_hash != "1234" and hasher.verify(bruno.password_hash, "1234")


def test_employee_admin_operations_are_scoped_and_admin_only():
    _, _, employees = _setup()
    service = EmployeeService(employees, hasher)

    with pytest.raises(AuthorizationError):
        service.set_status(employee_user(), "e1", "inactive")
    with pytest.raises(NotFoundError):
        service.update(admin_user("XYZ999"), "e1", {"name": "Hack"})

    service.update(admin_user(), "e1", {"department": "RH", "companyCode": "XYZ999"})
    service.set_status(admin_user(), "e1", "inactive")

    ana = employees.get_by_id("e1")
    assert ana.department == "RH"
    assert ana.company_code == "ABC123"
    assert ana.status == EmployeeStatus.INACTIVE

    service.delete(admin_user(), "e1")
    assert employees.get_by_id("e1") is None


def test_update_employee_coerces_hours_and_facial_flag():
    _, _, employees = _setup()
    service = EmployeeService(employees, hasher)
    admin = admin_user()

    with pytest.raises(ValidationError, match="Carga horária inválida"):
        service.update(admin, "e1", {"weeklyHours": "abc"})
    with pytest.raises(ValidationError, match="Carga horária inválida"):
        service.create(admin, {"name": "Bruno", "matricula": "2002", "password": "1234", "weeklyHours": "-4"})

    service.update(admin, "e1", {"weeklyHours": "36", "hasFacialRecord": "false"})

    ana = employees.get_by_id("e1")
    assert ana.weekly_hours == 36
    assert ana.has_facial_record is False
