from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, dump_json, fetchone, load_json
from .model import Company, CompanyConfig, Geofence, Holiday
from .repository import CompanyRepository

_COLUMNS = {
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
    "adminPasswordHash": "admin_password_hash",
    "logoUrl": "logo_url",
    "themeColor": "theme_color",
    "authorizedIP": "authorized_ip",
    "geofence": "geofence",
    "config": "config",
}

_JSON_FIELDS = {"geofence", "config"}

_SELECT = """
    SELECT company_id, name, social_reason, cnpj, phone, address, neighborhood, city, state, zip,
           admin_email, admin_password_hash, logo_url, theme_color, authorized_ip,
           geofence, config, holidays
    FROM companies
"""


def _row_to_company(r: dict) -> Company:
    holidays = tuple(Holiday.from_document(h) for h in load_json(r.get("holidays"), []))
    return Company(
        id=str(r["company_id"]),
        name=r["name"],
        social_reason=r.get("social_reason"),
        cnpj=r.get("cnpj") or "",
        phone=r.get("phone"),
        address=r.get("address") or "",
        neighborhood=r.get("neighborhood"),
        city=r.get("city"),
        state=r.get("state"),
        zip=r.get("zip"),
        admin_email=r.get("admin_email") or "",
        admin_password_hash=r.get("admin_password_hash"),
        logo_url=r.get("logo_url"),
        theme_color=r.get("theme_color") or "#0057ff",
        authorized_ip=r.get("authorized_ip"),
        geofence=Geofence.from_document(load_json(r.get("geofence"), {})),
        config=CompanyConfig.from_document(load_json(r.get("config"), {})),
        holidays=tuple(sorted(holidays, key=lambda h: h.date)),
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: str) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE company_id=%s", (company_id,))
            r = fetchone(cur)
            return _row_to_company(r) if r else None

    def create(self, company: Company) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO companies(
                    company_id, name, social_reason, cnpj, phone, address, neighborhood, city, state, zip,
                    admin_email, admin_password_hash, logo_url, theme_color, authorized_ip,
                    geofence, config, holidays
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    company.id,
                    company.name,
                    company.social_reason,
                    company.cnpj,
                    company.phone,
                    company.address,
                    company.neighborhood,
                    company.city,
                    company.state,
                    company.zip,
                    company.admin_email,
                    company.admin_password_hash,
                    company.logo_url,
                    company.theme_color,
                    company.authorized_ip,
                    dump_json(company.geofence.to_document()),
                    dump_json(company.config.to_document()),
                    dump_json([h.to_document() for h in company.holidays]),
                ),
            )
            return company.id

    def update_fields(self, company_id: str, fields: dict) -> bool:
        encoded = {k: (dump_json(v) if k in _JSON_FIELDS else v) for k, v in fields.items()}
        set_clause, params = build_update(encoded, _COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE companies SET {set_clause} WHERE company_id=%s", (*params, company_id))
            return cur.rowcount > 0

    def set_holidays(self, company_id: str, holidays: Sequence[Holiday]) -> bool:
        ordered = sorted(holidays, key=lambda h: h.date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE companies SET holidays=%s WHERE company_id=%s",
                (dump_json([h.to_document() for h in ordered]), company_id),
            )
            return cur.rowcount > 0

    def delete(self, company_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM companies WHERE company_id=%s", (company_id,))
            return cur.rowcount > 0

    def list_documents(self, company_code: str) -> list[dict]:
        company = self.get_by_id(company_code)
        return [company.to_document()] if company else []
