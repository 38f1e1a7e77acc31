from __future__ import annotations

from typing import Any, Optional

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..session.model import SessionUser
from .model import PROFILE_FIELDS, Company, CompanyConfig, Geofence
from .repository import CompanyRepository


def _require_admin(user: SessionUser, company_code: Optional[str] = None) -> None:
    if user.role != Role.ADMIN:
        raise AuthorizationError("Apenas administradores podem alterar a empresa")
    if company_code is not None and user.company_code != company_code:
        raise AuthorizationError("Empresa diferente da sessão")


class CompanyService:
    """Use case: company profile, numeric rules and geofence (admin)."""

    def __init__(self, companies: CompanyRepository):
        self._companies = companies

    def get(self, company_code: str) -> Company:
        company = self._companies.get_by_id(company_code)
        if not company:
            raise NotFoundError("Empresa não encontrada")
        return company

    def update_profile(self, user: SessionUser, changes: dict[str, Any]) -> None:
        _require_admin(user)
        fields = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
        if not fields:
            raise ValidationError("Nenhum campo para atualizar")
        if "name" in fields:
            fields["name"] = require_non_empty(fields["name"], "Nome da empresa")
        if "adminEmail" in fields:
            fields["adminEmail"] = require_non_empty(fields["adminEmail"], "E-mail do administrador").lower()

        self.get(user.company_code)
        self._companies.update_fields(user.company_code, fields)

    def update_config(self, user: SessionUser, changes: dict[str, Any]) -> CompanyConfig:
        _require_admin(user)
        current = self.get(user.company_code).config
        merged = {**current.to_document(), **{k: v for k, v in changes.items() if k in current.to_document()}}
        try:
            config = CompanyConfig.from_document(merged)
        except (TypeError, ValueError):
            raise ValidationError("Configuração inválida")
        if config.weekly_hours <= 0 or config.tolerance_minutes < 0:
            raise ValidationError("Configuração inválida")
        if config.overtime_percentage < 0 or config.night_shift_percentage < 0:
            raise ValidationError("Configuração inválida")

        self._companies.update_fields(user.company_code, {"config": config.to_document()})
        return config

    def update_geofence(self, user: SessionUser, changes: dict[str, Any]) -> Geofence:
        _require_admin(user)
        current = self.get(user.company_code).geofence
        merged = {**current.to_document(), **{k: v for k, v in changes.items() if k in current.to_document()}}
        try:
            geofence = Geofence.from_document(merged)
        except (TypeError, ValueError):
            raise ValidationError("Cerca virtual inválida")
        if geofence.enabled and geofence.radius <= 0:
            raise ValidationError("Raio da cerca virtual deve ser maior que zero")
        if not (-90 <= geofence.lat <= 90 and -180 <= geofence.lng <= 180):
            raise ValidationError("Coordenadas inválidas")

        self._companies.update_fields(user.company_code, {"geofence": geofence.to_document()})
        return geofence

    def delete_company(self, user: SessionUser, company_code: str) -> None:
        _require_admin(user, company_code)
        if not self._companies.delete(company_code):
            raise NotFoundError("Empresa não encontrada")
