from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_matricula(self, company_code: str, matricula: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_company(self, company_code: str) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, employee: Employee) -> str:
        raise NotImplementedError

    def update_fields(self, employee_id: str, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, employee_id: str) -> bool:
        raise NotImplementedError

    def list_documents(self, company_code: str) -> list[dict]:
        raise NotImplementedError
