from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.geo import haversine_distance
from ..common.security import new_document_id, sign_punch
from ..common.validators import require_non_empty
from ..companies.model import Company
from ..companies.repository import CompanyRepository
from ..core.constants import KIOSK_ADDRESS
from ..core.enums import PunchType, RecordStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, OutsideGeofenceError, ValidationError
from ..employees.repository import EmployeeRepository
from ..records.derivation import next_punch_type
from ..records.model import PointRecord
from ..records.repository import RecordRepository
from ..session.model import SessionUser
from .devices import Location

logger = logging.getLogger(__name__)


def check_geofence(company: Company, location: Location) -> None:
    """Raise when the company's enabled perimeter cannot be confirmed for ``location``.

    An approximate (fallback) position never satisfies an enabled perimeter.
    """

    fence = company.geofence
    if not fence.enabled:
        return
    if location.is_fallback:
        raise ValidationError("Ative o GPS para registrar o ponto.")
    distance = haversine_distance(location.lat, location.lng, fence.lat, fence.lng)
    if distance > fence.radius:
        raise OutsideGeofenceError(distance, fence.radius)


class PunchService:
    """Use case: write point records (employee punch and kiosk punch)."""

    def __init__(self, records: RecordRepository, companies: CompanyRepository, employees: EmployeeRepository):
        self._records = records
        self._companies = companies
        self._employees = employees

    def _company(self, company_code: str) -> Company:
        company = self._companies.get_by_id(company_code)
        if not company:
            raise NotFoundError("Empresa não encontrada")
        return company

    def register_punch(
        self,
        user: SessionUser,
        *,
        photo: str,
        location: Location,
        punch_type: Optional[PunchType | str] = None,
        mood: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PointRecord:
        if user.role != Role.EMPLOYEE or not user.matricula:
            raise AuthorizationError("Apenas colaboradores registram ponto")
        photo = require_non_empty(photo, "Foto")

        company = self._company(user.company_code)
        check_geofence(company, location)

        now = now or now_local()
        if punch_type is None:
            todays = self._records.list_for_user(user.company_code, user.matricula)
            punch_type = next_punch_type(todays, now.date())
        else:
            try:
                punch_type = PunchType(punch_type)
            except ValueError:
                raise ValidationError("Tipo de marcação inválido")

        record = PointRecord(
            id=new_document_id(),
            company_code=user.company_code,
            user_name=user.name,
            matricula=user.matricula,
            timestamp=now,
            latitude=location.lat,
            longitude=location.lng,
            address=location.address,
            photo=photo,
            status=RecordStatus.SYNCHRONIZED,
            digital_signature=sign_punch(user.company_code, user.matricula, now.isoformat(), location.lat, location.lng),
            type=punch_type,
            mood=(mood or None),
        )
        self._records.create(record)
        logger.info("punch %s recorded for %s/%s", punch_type.value, user.company_code, user.matricula)
        return record

    def kiosk_punch(self, user: SessionUser, matricula: str, *, now: Optional[datetime] = None) -> PointRecord:
        if user.role != Role.TOTEM:
            raise AuthorizationError("Disponível apenas no modo totem")
        matricula = require_non_empty(matricula, "Matrícula")

        employee = self._employees.get_by_matricula(user.company_code, matricula)
        if not employee or not employee.is_active:
            raise NotFoundError("Colaborador não encontrado")

        now = now or now_local()
        record = PointRecord(
            id=new_document_id(),
            company_code=user.company_code,
            user_name=employee.name,
            matricula=employee.matricula,
            timestamp=now,
            latitude=0.0,
            longitude=0.0,
            address=KIOSK_ADDRESS,
            photo=employee.photo,
            status=RecordStatus.SYNCHRONIZED,
            digital_signature=sign_punch(user.company_code, employee.matricula, now.isoformat(), 0.0, 0.0),
            type=PunchType.ENTRADA,
        )
        self._records.create(record)
        logger.info("kiosk punch recorded for %s/%s", user.company_code, employee.matricula)
        return record
