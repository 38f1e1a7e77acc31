from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.security import PasswordHasher, generate_access_code, new_document_id
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..companies.model import Company
from ..companies.repository import CompanyRepository
from ..core.constants import ACCESS_CODE_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..session.model import SessionUser
from .model import EDITABLE_FIELDS, Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS = "Credenciais inválidas"
_ACCESS_CODE_ATTEMPTS = 10


def _weekly_hours(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        hours = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Carga horária inválida")
    if hours <= 0:
        raise ValidationError("Carga horária inválida")
    return hours


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "sim", "yes"}
    return bool(value)


def _normalize_code(company_code: Optional[str]) -> str:
    return require_non_empty(company_code, "Código da empresa").upper()


class AuthService:
    """Use case: login (employee/admin/totem), company signup, password change."""

    def __init__(self, companies: CompanyRepository, employees: EmployeeRepository, hasher: PasswordHasher):
        self._companies = companies
        self._employees = employees
        self._hasher = hasher

    def login_employee(self, company_code: str, matricula: str, password: str) -> SessionUser:
        code = _normalize_code(company_code)
        matricula = require_non_empty(matricula, "Matrícula")

        company = self._companies.get_by_id(code)
        if not company:
            logger.info("employee login refused: unknown company %s", code)
            raise AuthenticationError(_INVALID_CREDENTIALS)

        employee = self._employees.get_by_matricula(code, matricula)
        if not employee or not employee.is_active:
            logger.info("employee login refused for %s/%s", code, matricula)
            raise AuthenticationError(_INVALID_CREDENTIALS)

        if not self._hasher.verify(employee.password_hash, password or ""):
            logger.info("employee login refused for %s/%s: bad password", code, matricula)
            raise AuthenticationError(_INVALID_CREDENTIALS)

        return SessionUser(
            name=employee.name,
            email=employee.email,
            role=Role.EMPLOYEE,
            company_code=code,
            company_name=company.name,
            matricula=employee.matricula,
            photo=employee.photo or None,
            role_function=employee.role_function,
            work_shift=employee.work_shift,
        )

    def _check_admin(self, company_code: str, email: str, password: str) -> Company:
        code = _normalize_code(company_code)
        email = require_non_empty(email, "E-mail").lower()

        company = self._companies.get_by_id(code)
        if not company or (company.admin_email or "").lower() != email:
            logger.info("admin login refused for company %s", code)
            raise AuthenticationError(_INVALID_CREDENTIALS)
        if not self._hasher.verify(company.admin_password_hash, password or ""):
            logger.info("admin login refused for company %s: bad password", code)
            raise AuthenticationError(_INVALID_CREDENTIALS)
        return company

    def login_admin(self, company_code: str, email: str, password: str) -> SessionUser:
        company = self._check_admin(company_code, email, password)
        return SessionUser(
            name="Administrador",
            email=company.admin_email,
            role=Role.ADMIN,
            company_code=company.id,
            company_name=company.name,
            photo=company.logo_url,
        )

    def login_totem(self, company_code: str, email: str, password: str) -> SessionUser:
        company = self._check_admin(company_code, email, password)
        return SessionUser(
            name="Totem",
            email=company.admin_email,
            role=Role.TOTEM,
            company_code=company.id,
            company_name=company.name,
            photo=company.logo_url,
        )

    def signup_company(
        self,
        *,
        name: str,
        admin_email: str,
        admin_password: str,
        cnpj: str = "",
        phone: Optional[str] = None,
        address: str = "",
    ) -> SessionUser:
        name = require_non_empty(name, "Nome da empresa")
        admin_email = require_non_empty(admin_email, "E-mail do administrador").lower()
        require_min_length(admin_password, "Senha", MIN_PASSWORD_LENGTH)

        code = self._new_access_code()
        company = Company(
            id=code,
            name=name,
            cnpj=(cnpj or "").strip(),
            phone=optional_text(phone),
            address=(address or "").strip(),
            admin_email=admin_email,
            admin_password_hash=self._hasher.hash(admin_password),
        )
        self._companies.create(company)
        logger.info("company %s created", code)

        return SessionUser(
            name="Administrador",
            email=admin_email,
            role=Role.ADMIN,
            company_code=code,
            company_name=name,
        )

    def _new_access_code(self) -> str:
        for _ in range(_ACCESS_CODE_ATTEMPTS):
            code = generate_access_code(ACCESS_CODE_LENGTH)
            if not self._companies.get_by_id(code):
                return code
        raise ValidationError("Não foi possível gerar um código de acesso. Tente novamente.")

    def change_password(self, user: SessionUser, new_password: str) -> None:
        if user.role != Role.EMPLOYEE or not user.matricula:
            raise AuthorizationError("Apenas colaboradores podem alterar a senha por aqui")
        require_min_length(new_password, "Nova senha", MIN_PASSWORD_LENGTH)

        employee = self._employees.get_by_matricula(user.company_code, user.matricula)
        if not employee:
            raise NotFoundError("Colaborador não encontrado")
        self._employees.update_fields(employee.id, {"passwordHash": self._hasher.hash(new_password)})


class EmployeeService:
    """Use case: manage the employees of the admin's company."""

    def __init__(self, employees: EmployeeRepository, hasher: PasswordHasher):
        self._employees = employees
        self._hasher = hasher

    @staticmethod
    def _require_admin(user: SessionUser) -> None:
        if user.role != Role.ADMIN:
            raise AuthorizationError("Você não tem permissão")

    def _owned(self, user: SessionUser, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.company_code != user.company_code:
            raise NotFoundError("Colaborador não encontrado")
        return employee

    def create(self, user: SessionUser, data: dict[str, Any]) -> str:
        self._require_admin(user)
        name = require_non_empty(data.get("name"), "Nome")
        matricula = require_non_empty(data.get("matricula"), "Matrícula")
        password = require_non_empty(data.get("password"), "Senha")
        require_min_length(password, "Senha", MIN_PASSWORD_LENGTH)

        if self._employees.get_by_matricula(user.company_code, matricula):
            raise ValidationError("Matrícula já cadastrada nesta empresa")

        extra = {
            attr: data[doc_field]
            for doc_field, attr in EDITABLE_FIELDS.items()
            if doc_field not in {"name", "matricula"} and data.get(doc_field) is not None
        }
        if "weekly_hours" in extra:
            extra["weekly_hours"] = _weekly_hours(extra["weekly_hours"])
        if "has_facial_record" in extra:
            extra["has_facial_record"] = _flag(extra["has_facial_record"])

        employee = Employee(
            id=new_document_id(),
            company_code=user.company_code,
            name=name,
            matricula=matricula,
            password_hash=self._hasher.hash(password),
            status=EmployeeStatus.ACTIVE,
            **extra,
        )
        return self._employees.create(employee)

    def update(self, user: SessionUser, employee_id: str, changes: dict[str, Any]) -> None:
        self._require_admin(user)
        employee = self._owned(user, employee_id)

        fields = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        if "name" in fields:
            fields["name"] = require_non_empty(fields["name"], "Nome")
        if "matricula" in fields:
            fields["matricula"] = require_non_empty(fields["matricula"], "Matrícula")
            other = self._employees.get_by_matricula(user.company_code, fields["matricula"])
            if other and other.id != employee.id:
                raise ValidationError("Matrícula já cadastrada nesta empresa")
        if "weeklyHours" in fields:
            fields["weeklyHours"] = _weekly_hours(fields["weeklyHours"])
        if "hasFacialRecord" in fields:
            fields["hasFacialRecord"] = _flag(fields["hasFacialRecord"])
        if changes.get("password"):
            require_min_length(changes["password"], "Senha", MIN_PASSWORD_LENGTH)
            fields["passwordHash"] = self._hasher.hash(changes["password"])
        if not fields:
            raise ValidationError("Nenhum campo para atualizar")

        self._employees.update_fields(employee.id, fields)

    def set_status(self, user: SessionUser, employee_id: str, status: EmployeeStatus | str) -> None:
        self._require_admin(user)
        try:
            status = EmployeeStatus(status)
        except ValueError:
            raise ValidationError("Status inválido")
        employee = self._owned(user, employee_id)
        self._employees.update_fields(employee.id, {"status": status.value})

    def delete(self, user: SessionUser, employee_id: str) -> None:
        self._require_admin(user)
        employee = self._owned(user, employee_id)
        self._employees.delete(employee.id)
