from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import coerce_timestamp
from ..core.enums import RequestKind, RequestStatus


@dataclass(frozen=True)
class AttendanceRequest:
    """Solicitação de ajuste/atestado enviada pelo colaborador."""

    id: str
    company_code: str
    matricula: str
    user_name: str
    kind: RequestKind
    reason: str
    date: str
    status: RequestStatus
    created_at: datetime
    photo: Optional[str] = None
    decided_at: Optional[datetime] = None
    decided_by: Optional[str] = None

    @property
    def is_decided(self) -> bool:
        return self.status != RequestStatus.PENDING

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "companyCode": self.company_code,
            "matricula": self.matricula,
            "userName": self.user_name,
            "type": self.kind.value,
            "reason": self.reason,
            "date": self.date,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "photo": self.photo,
            "decidedAt": self.decided_at.isoformat() if self.decided_at else None,
            "decidedBy": self.decided_by,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "AttendanceRequest":
        decided_at = doc.get("decidedAt")
        return cls(
            id=str(doc.get("id") or ""),
            company_code=str(doc.get("companyCode") or ""),
            matricula=str(doc.get("matricula") or ""),
            user_name=str(doc.get("userName") or ""),
            kind=RequestKind(doc.get("type") or RequestKind.AJUSTE.value),
            reason=str(doc.get("reason") or ""),
            date=str(doc.get("date") or ""),
            status=RequestStatus(doc.get("status") or RequestStatus.PENDING.value),
            created_at=coerce_timestamp(doc.get("createdAt")),
            photo=doc.get("photo"),
            decided_at=coerce_timestamp(decided_at) if decided_at else None,
            decided_by=doc.get("decidedBy"),
        )
