import pytest

from fakes import FakeCompanyRepo, admin_user, employee_user

from ponto_exato.companies.model import Company
from ponto_exato.companies.service import CompanyService
from ponto_exato.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def _service():
    repo = FakeCompanyRepo(Company(id="ABC123", name="Acme", admin_email="admin@acme.com"))
    return CompanyService(repo), repo


def test_update_profile_requires_name_and_admin():
    service, repo = _service()

    with pytest.raises(ValidationError):
        service.update_profile(admin_user(), {"name": "   "})
    with pytest.raises(AuthorizationError):
        service.update_profile(employee_user(), {"name": "Outra"})

    service.update_profile(admin_user(), {"name": "Acme SA", "city": "Campinas", "adminPasswordHash": "x"})

    company = repo.companies["ABC123"]
    assert (company.name, company.city) == ("Acme SA", "Campinas")
    assert company.admin_password_hash is None


def test_update_config_merges_and_validates():
    service, repo = _service()

    config = service.update_config(admin_user(), {"toleranceMinutes": 5})

    assert config.tolerance_minutes == 5
    assert config.weekly_hours == 44
    assert repo.companies["ABC123"].config.tolerance_minutes == 5
    with pytest.raises(ValidationError):
        service.update_config(admin_user(), {"weeklyHours": 0})


def test_update_geofence():
    service, repo = _service()

    with pytest.raises(ValidationError):
        service.update_geofence(admin_user(), {"enabled": True, "radius": 0})

    service.update_geofence(admin_user(), {"enabled": True, "lat": -23.56, "lng": -46.65, "radius": 150})

    fence = repo.companies["ABC123"].geofence
    assert fence.enabled and fence.radius == 150


def test_delete_company_only_own():
    service, repo = _service()

    with pytest.raises(AuthorizationError):
        service.delete_company(admin_user("XYZ999"), "ABC123")

    service.delete_company(admin_user(), "ABC123")
    assert "ABC123" not in repo.companies
    with pytest.raises(NotFoundError):
        service.get("ABC123")
