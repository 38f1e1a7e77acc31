from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class SessionUser:
    """Identidade logada, guardada no cookie de sessão após o login."""

    name: str
    email: str
    role: Role
    company_code: str
    company_name: Optional[str] = None
    matricula: Optional[str] = None
    photo: Optional[str] = None
    role_function: Optional[str] = None
    work_shift: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        return cls(
            name=str(data["name"]),
            email=str(data.get("email") or ""),
            role=Role(data["role"]),
            company_code=str(data["company_code"]),
            company_name=data.get("company_name"),
            matricula=data.get("matricula"),
            photo=data.get("photo"),
            role_function=data.get("role_function"),
            work_shift=data.get("work_shift"),
        )
