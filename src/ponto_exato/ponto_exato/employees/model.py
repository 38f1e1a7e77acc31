from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import EmployeeStatus


# Campos editáveis pelo administrador (documento -> atributo).
EDITABLE_FIELDS = {
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
}


@dataclass(frozen=True)
class Employee:
    """Colaborador de uma empresa (documento em ``employees``).

    Note: only the salted hash of the password is ever stored.
    """

    id: str
    company_code: str
    name: str
    matricula: str
    password_hash: Optional[str] = None
    email: str = ""
    cpf: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    admission_date: Optional[str] = None
    role_function: Optional[str] = None
    work_shift: Optional[str] = None
    weekly_hours: Optional[int] = None
    photo: str = ""
    has_facial_record: bool = False
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    def to_document(self, *, include_secrets: bool = False) -> dict:
        doc: dict[str, Any] = {"id": self.id, "companyCode": self.company_code, "status": self.status.value}
        for doc_field, attr in EDITABLE_FIELDS.items():
            doc[doc_field] = getattr(self, attr)
        if include_secrets:
            doc["passwordHash"] = self.password_hash
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "Employee":
        kwargs: dict[str, Any] = {}
        for doc_field, attr in EDITABLE_FIELDS.items():
            if doc.get(doc_field) is not None:
                kwargs[attr] = doc[doc_field]
        kwargs.setdefault("name", "")
        kwargs.setdefault("matricula", "")
        if "has_facial_record" in kwargs:
            kwargs["has_facial_record"] = bool(kwargs["has_facial_record"])
        if kwargs.get("weekly_hours") is not None:
            kwargs["weekly_hours"] = int(kwargs["weekly_hours"])
        return cls(
            id=str(doc.get("id") or ""),
            company_code=str(doc.get("companyCode") or ""),
            password_hash=doc.get("passwordHash"),
            status=EmployeeStatus(doc.get("status") or EmployeeStatus.ACTIVE.value),
            **kwargs,
        )
