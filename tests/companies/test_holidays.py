from datetime import date, datetime

import pytest

from fakes import FakeCompanyRepo

from ponto_exato.companies.model import Company, Holiday
from ponto_exato.core.enums import HolidayType
from ponto_exato.core.exceptions import NotFoundError, ValidationError
from ponto_exato.holidays.service import HolidayService, normalize_holiday_date


@pytest.mark.parametrize(
    "value",
    ["2026-02-14", "14/02/2026", "14-02-2026", "2026/02/14", "2026-02-14T00:00:00", date(2026, 2, 14), datetime(2026, 2, 14, 9)],
)
def test_accepted_formats_normalize_to_same_key(value):
    assert normalize_holiday_date(value) == "2026-02-14"


def test_unparseable_date_is_rejected():
    with pytest.raises(ValidationError):
        normalize_holiday_date("amanhã")
    with pytest.raises(ValidationError):
        normalize_holiday_date("")


def _service(*holidays):
    repo = FakeCompanyRepo(Company(id="ABC123", name="Acme", holidays=tuple(holidays)))
    return HolidayService(repo), repo


def test_add_rejects_same_canonical_date():
    service, repo = _service()
    service.add("ABC123", date_value="2026-02-14", description="Carnaval")

    with pytest.raises(ValidationError):
        service.add("ABC123", date_value="14/02/2026", description="Carnaval de novo")

    assert [h.date for h in repo.companies["ABC123"].holidays] == ["2026-02-14"]


def test_add_requires_description_and_known_type():
    service, _ = _service()
    with pytest.raises(ValidationError):
        service.add("ABC123", date_value="2026-02-14", description=" ")
    with pytest.raises(ValidationError):
        service.add("ABC123", date_value="2026-02-14", description="X", holiday_type="folga")


def test_list_is_sorted_and_lookup_uses_normalized_dates():
    service, _ = _service()
    service.add("ABC123", date_value="25/12/2026", description="Natal")
    service.add("ABC123", date_value="2026-04-21", description="Tiradentes", holiday_type=HolidayType.FERIADO)
    service.add("ABC123", date_value="2026/01/01", description="Ano Novo")

    holidays = service.list_sorted("ABC123")

    assert [h.date for h in holidays] == ["2026-01-01", "2026-04-21", "2026-12-25"]
    assert service.find_by_date(holidays, "21/04/2026").description == "Tiradentes"
    assert service.is_holiday("ABC123", date(2026, 12, 25))
    assert not service.is_holiday("ABC123", "2026-12-24")


def test_remove_holiday():
    service, _ = _service(Holiday(id="h1", date="2026-04-21", description="Tiradentes"))

    service.remove("ABC123", "h1")

    assert service.list_sorted("ABC123") == []
    with pytest.raises(NotFoundError):
        service.remove("ABC123", "h1")


def test_month_calendar_marks_holidays():
    service, _ = _service(Holiday(id="h1", date="2026-02-16", description="Carnaval", type=HolidayType.PARADA))

    days = service.month_calendar("ABC123", 2026, 2)

    assert len(days) == 28
    marked = [d for d in days if d.holiday]
    assert [d.day for d in marked] == [date(2026, 2, 16)]
    assert days[15].to_dict()["holiday"]["type"] == "parada"
