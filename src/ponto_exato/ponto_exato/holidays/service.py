from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import normalize_date_key
from ..common.security import new_document_id
from ..common.validators import require_non_empty
from ..companies.model import Company, Holiday
from ..companies.repository import CompanyRepository
from ..core.enums import HolidayType
from ..core.exceptions import NotFoundError, ValidationError


def normalize_holiday_date(value: Any) -> str:
    """Canonical ``YYYY-MM-DD`` key; the only form used to compare holiday dates."""

    return normalize_date_key(value)


@dataclass(frozen=True)
class CalendarDay:
    day: date
    holiday: Optional[Holiday] = None

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "weekday": self.day.weekday(),
            "holiday": self.holiday.to_document() if self.holiday else None,
        }


class HolidayService:
    """Holiday set embedded in the company document, keyed by canonical date."""

    def __init__(self, companies: CompanyRepository):
        self._companies = companies

    def _company(self, company_code: str) -> Company:
        company = self._companies.get_by_id(company_code)
        if not company:
            raise NotFoundError("Empresa não encontrada")
        return company

    def list_sorted(self, company_code: str) -> list[Holiday]:
        return sorted(self._company(company_code).holidays, key=lambda h: h.date)

    def find_by_date(self, holidays: list[Holiday] | tuple[Holiday, ...], value: Any) -> Optional[Holiday]:
        key = normalize_holiday_date(value)
        for h in holidays:
            if normalize_holiday_date(h.date) == key:
                return h
        return None

    def is_holiday(self, company_code: str, value: Any) -> bool:
        return self.find_by_date(self.list_sorted(company_code), value) is not None

    def add(
        self,
        company_code: str,
        *,
        date_value: Any,
        description: str,
        holiday_type: HolidayType | str = HolidayType.FERIADO,
    ) -> str:
        description = require_non_empty(description, "Descrição")
        key = normalize_holiday_date(date_value)
        try:
            holiday_type = HolidayType(holiday_type)
        except ValueError:
            raise ValidationError("Tipo de feriado inválido")

        holidays = self.list_sorted(company_code)
        if self.find_by_date(holidays, key):
            raise ValidationError("Já existe um feriado cadastrado nesta data")

        holiday = Holiday(id=new_document_id(), date=key, description=description, type=holiday_type)
        self._companies.set_holidays(company_code, [*holidays, holiday])
        return holiday.id

    def remove(self, company_code: str, holiday_id: str) -> None:
        holidays = self.list_sorted(company_code)
        remaining = [h for h in holidays if h.id != holiday_id]
        if len(remaining) == len(holidays):
            raise NotFoundError("Feriado não encontrado")
        self._companies.set_holidays(company_code, remaining)

    def month_calendar(self, company_code: str, year: int, month: int) -> list[CalendarDay]:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Mês inválido")
        by_date = {h.date: h for h in self.list_sorted(company_code)}
        _, last_day = calendar.monthrange(int(year), int(month))
        days = []
        for d in range(1, last_day + 1):
            current = date(int(year), int(month), d)
            days.append(CalendarDay(day=current, holiday=by_date.get(current.isoformat())))
        return days
