from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import coerce_timestamp
from ..core.enums import PunchType, RecordStatus


@dataclass(frozen=True)
class PointRecord:
    """Marcação de ponto. Imutável depois de criada."""

    id: str
    company_code: str
    user_name: str
    matricula: Optional[str]
    timestamp: datetime
    latitude: float
    longitude: float
    address: str
    photo: str = ""
    status: RecordStatus = RecordStatus.SYNCHRONIZED
    digital_signature: str = ""
    type: PunchType = PunchType.ENTRADA
    mood: Optional[str] = None
    is_adjustment: bool = False

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "companyCode": self.company_code,
            "userName": self.user_name,
            "matricula": self.matricula,
            "timestamp": self.timestamp.isoformat(),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "photo": self.photo,
            "status": self.status.value,
            "digitalSignature": self.digital_signature,
            "type": self.type.value,
            "mood": self.mood,
            "isAdjustment": self.is_adjustment,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "PointRecord":
        """Build a record from a raw document, coercing its timestamp."""

        return cls(
            id=str(doc.get("id") or ""),
            company_code=str(doc.get("companyCode") or ""),
            user_name=str(doc.get("userName") or ""),
            matricula=doc.get("matricula"),
            timestamp=coerce_timestamp(doc.get("timestamp")),
            latitude=float(doc.get("latitude") or 0.0),
            longitude=float(doc.get("longitude") or 0.0),
            address=str(doc.get("address") or ""),
            photo=str(doc.get("photo") or ""),
            status=RecordStatus(doc.get("status") or RecordStatus.SYNCHRONIZED.value),
            digital_signature=str(doc.get("digitalSignature") or ""),
            type=PunchType(doc.get("type") or PunchType.ENTRADA.value),
            mood=doc.get("mood"),
            is_adjustment=bool(doc.get("isAdjustment", False)),
        )
