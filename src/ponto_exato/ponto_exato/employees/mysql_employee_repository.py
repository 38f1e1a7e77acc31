from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = {
    "name": "name",
    "email": "email",
    "matricula": "matricula",
    "cpf": "cpf",
    "phone": "phone",
    "department": "department",
    "admissionDate": "admission_date",
    "roleFunction": "role_function",
    "workShift": "work_shift",
    "weeklyHours": "weekly_hours",
    "photo": "photo",
    "hasFacialRecord": "has_facial_record",
    "passwordHash": "password_hash",
    "status": "status",
}

_SELECT = """
    SELECT employee_id, company_code, name, email, matricula, cpf, phone, department, admission_date,
           role_function, work_shift, weekly_hours, password_hash, photo, has_facial_record, status
    FROM employees
"""


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        id=str(r["employee_id"]),
        company_code=r["company_code"],
        name=r["name"],
        matricula=r["matricula"],
        password_hash=r.get("password_hash"),
        email=r.get("email") or "",
        cpf=r.get("cpf"),
        phone=r.get("phone"),
        department=r.get("department"),
        admission_date=r.get("admission_date"),
        role_function=r.get("role_function"),
        work_shift=r.get("work_shift"),
        weekly_hours=int(r["weekly_hours"]) if r.get("weekly_hours") is not None else None,
        photo=r.get("photo") or "",
        has_facial_record=bool(r.get("has_facial_record")),
        status=EmployeeStatus(r.get("status") or EmployeeStatus.ACTIVE.value),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_by_matricula(self, company_code: str, matricula: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE company_code=%s AND matricula=%s", (company_code, matricula))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_for_company(self, company_code: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE company_code=%s ORDER BY name", (company_code,))
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create(self, employee: Employee) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_id, company_code, name, email, matricula, cpf, phone, department,
                    admission_date, role_function, work_shift, weekly_hours, password_hash, photo,
                    has_facial_record, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee.id,
                    employee.company_code,
                    employee.name,
                    employee.email,
                    employee.matricula,
                    employee.cpf,
                    employee.phone,
                    employee.department,
                    employee.admission_date,
                    employee.role_function,
                    employee.work_shift,
                    employee.weekly_hours,
                    employee.password_hash,
                    employee.photo,
                    int(employee.has_facial_record),
                    employee.status.value,
                ),
            )
            return employee.id

    def update_fields(self, employee_id: str, fields: dict) -> bool:
        set_clause, params = build_update(fields, _COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {set_clause} WHERE employee_id=%s", (*params, employee_id))
            return cur.rowcount > 0

    def delete(self, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (employee_id,))
            return cur.rowcount > 0

    def list_documents(self, company_code: str) -> list[dict]:
        return [e.to_document() for e in self.list_for_company(company_code)]
