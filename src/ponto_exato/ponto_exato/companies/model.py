from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from ..core import constants
from ..core.enums import HolidayType


@dataclass(frozen=True)
class Holiday:
    """Feriado/parada embutido no documento da empresa.

    ``date`` is always the canonical ``YYYY-MM-DD`` key.
    """

    id: str
    date: str
    description: str
    type: HolidayType = HolidayType.FERIADO

    def to_document(self) -> dict:
        return {"id": self.id, "date": self.date, "description": self.description, "type": self.type.value}

    @classmethod
    def from_document(cls, doc: dict) -> "Holiday":
        return cls(
            id=str(doc.get("id") or ""),
            date=str(doc.get("date") or ""),
            description=str(doc.get("description") or ""),
            type=HolidayType(doc.get("type") or HolidayType.FERIADO.value),
        )


@dataclass(frozen=True)
class Geofence:
    enabled: bool = False
    lat: float = 0.0
    lng: float = 0.0
    radius: float = 0.0

    def to_document(self) -> dict:
        return {"enabled": self.enabled, "lat": self.lat, "lng": self.lng, "radius": self.radius}

    @classmethod
    def from_document(cls, doc: Optional[dict]) -> "Geofence":
        doc = doc or {}
        return cls(
            enabled=bool(doc.get("enabled", False)),
            lat=float(doc.get("lat") or 0.0),
            lng=float(doc.get("lng") or 0.0),
            radius=float(doc.get("radius") or 0.0),
        )


@dataclass(frozen=True)
class CompanyConfig:
    weekly_hours: int = constants.DEFAULT_WEEKLY_HOURS
    tolerance_minutes: int = constants.DEFAULT_TOLERANCE_MINUTES
    overtime_percentage: int = constants.DEFAULT_OVERTIME_PERCENTAGE
    night_shift_percentage: int = constants.DEFAULT_NIGHT_SHIFT_PERCENTAGE

    def to_document(self) -> dict:
        return {
            "weeklyHours": self.weekly_hours,
            "toleranceMinutes": self.tolerance_minutes,
            "overtimePercentage": self.overtime_percentage,
            "nightShiftPercentage": self.night_shift_percentage,
        }

    @classmethod
    def from_document(cls, doc: Optional[dict]) -> "CompanyConfig":
        doc = doc or {}
        return cls(
            weekly_hours=int(doc.get("weeklyHours", constants.DEFAULT_WEEKLY_HOURS)),
            tolerance_minutes=int(doc.get("toleranceMinutes", constants.DEFAULT_TOLERANCE_MINUTES)),
            overtime_percentage=int(doc.get("overtimePercentage", constants.DEFAULT_OVERTIME_PERCENTAGE)),
            night_shift_percentage=int(doc.get("nightShiftPercentage", constants.DEFAULT_NIGHT_SHIFT_PERCENTAGE)),
        )


# Campos editáveis na tela "Perfil da Empresa" (documento -> atributo).
PROFILE_FIELDS = {
    "name": "name",
    "socialReason": "social_reason",
    "cnpj": "cnpj",
    "phone": "phone",
    "address": "address",
    "neighborhood": "neighborhood",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "adminEmail": "admin_email",
    "logoUrl": "logo_url",
    "themeColor": "theme_color",
    "authorizedIP": "authorized_ip",
}


@dataclass(frozen=True)
class Company:
    """Documento de empresa (tenant). ``id`` é o código de acesso."""

    id: str
    name: str
    cnpj: str = ""
    admin_email: str = ""
    admin_password_hash: Optional[str] = None
    social_reason: Optional[str] = None
    phone: Optional[str] = None
    address: str = ""
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    logo_url: Optional[str] = None
    theme_color: str = constants.DEFAULT_THEME_COLOR
    authorized_ip: Optional[str] = None
    geofence: Geofence = field(default_factory=Geofence)
    config: CompanyConfig = field(default_factory=CompanyConfig)
    holidays: tuple[Holiday, ...] = ()

    @property
    def access_code(self) -> str:
        return self.id

    def with_holidays(self, holidays: tuple[Holiday, ...]) -> "Company":
        return replace(self, holidays=tuple(sorted(holidays, key=lambda h: h.date)))

    def to_document(self, *, include_secrets: bool = False) -> dict:
        doc: dict[str, Any] = {"id": self.id, "accessCode": self.id}
        for doc_field, attr in PROFILE_FIELDS.items():
            doc[doc_field] = getattr(self, attr)
        doc["geofence"] = self.geofence.to_document()
        doc["config"] = self.config.to_document()
        doc["holidays"] = [h.to_document() for h in self.holidays]
        if include_secrets:
            doc["adminPasswordHash"] = self.admin_password_hash
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "Company":
        kwargs: dict[str, Any] = {}
        for doc_field, attr in PROFILE_FIELDS.items():
            if doc.get(doc_field) is not None:
                kwargs[attr] = doc[doc_field]
        kwargs.setdefault("name", "")
        holidays = tuple(Holiday.from_document(h) for h in (doc.get("holidays") or []))
        return cls(
            id=str(doc.get("id") or doc.get("accessCode") or ""),
            admin_password_hash=doc.get("adminPasswordHash"),
            geofence=Geofence.from_document(doc.get("geofence")),
            config=CompanyConfig.from_document(doc.get("config")),
            holidays=tuple(sorted(holidays, key=lambda h: h.date)),
            **kwargs,
        )
