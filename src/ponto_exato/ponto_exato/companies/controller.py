from __future__ import annotations

import logging

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.web import fail, int_arg, json_body, ok
from ..container import Container
from ..navigation.views import View
from ..session.model import SessionUser

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guard = container.guard

    def _company_document(company_code: str) -> dict:
        state = container.live_states.get(company_code)
        company = state.company or container.company_service.get(company_code)
        return company.to_document()

    @app.route("/api/company", methods=["GET"], endpoint="get_company")
    @guard.logged_in
    def get_company(user: SessionUser):
        return ok(company=_company_document(user.company_code))

    @app.route("/api/company", methods=["PATCH"], endpoint="update_company")
    @guard(View.COMPANY_PROFILE)
    def update_company(user: SessionUser):
        container.company_service.update_profile(user, json_body())
        return ok(id=user.company_code)

    @app.route("/api/company/config", methods=["PATCH"], endpoint="update_company_config")
    @guard(View.COMPANY_PROFILE)
    def update_company_config(user: SessionUser):
        config = container.company_service.update_config(user, json_body())
        return ok(id=user.company_code, config=config.to_document())

    @app.route("/api/company/geofence", methods=["PATCH"], endpoint="update_company_geofence")
    @guard(View.COMPANY_PROFILE)
    def update_company_geofence(user: SessionUser):
        geofence = container.company_service.update_geofence(user, json_body())
        return ok(id=user.company_code, geofence=geofence.to_document())

    @app.route("/api/company", methods=["DELETE"], endpoint="delete_company")
    @guard(View.COMPANY_PROFILE)
    def delete_company(user: SessionUser):
        if json_body().get("confirm") is not True:
            return fail("Confirme a exclusão da empresa")
        container.company_service.delete_company(user, user.company_code)
        logger.warning("company %s deleted by %s", user.company_code, user.email)
        container.live_states.release(user.company_code)
        container.session_store.clear()
        return ok(id=user.company_code)

    # ---- holidays --------------------------------------------------------

    @app.route("/api/holidays", methods=["GET"], endpoint="list_holidays")
    @guard.logged_in
    def list_holidays(user: SessionUser):
        state = container.live_states.get(user.company_code)
        company = state.company or container.company_service.get(user.company_code)
        holidays = sorted(company.holidays, key=lambda h: h.date)
        return ok(holidays=[h.to_document() for h in holidays])

    @app.route("/api/holidays/calendar", methods=["GET"], endpoint="holiday_calendar")
    @guard.logged_in
    def holiday_calendar(user: SessionUser):
        today = now_local()
        days = container.holiday_service.month_calendar(
            user.company_code,
            int_arg("year", today.year),
            int_arg("month", today.month),
        )
        return ok(days=[d.to_dict() for d in days])

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="add_holiday")
    @guard(View.ADMIN_HOLIDAYS)
    def add_holiday(user: SessionUser):
        data = json_body()
        holiday_id = container.holiday_service.add(
            user.company_code,
            date_value=data.get("date"),
            description=data.get("description", ""),
            holiday_type=data.get("type") or "feriado",
        )
        return ok(201, id=holiday_id)

    @app.route("/api/admin/holidays/<holiday_id>", methods=["DELETE"], endpoint="remove_holiday")
    @guard(View.ADMIN_HOLIDAYS)
    def remove_holiday(user: SessionUser, holiday_id: str):
        if json_body().get("confirm") is not True:
            return fail("Confirme a exclusão do feriado")
        container.holiday_service.remove(user.company_code, holiday_id)
        return ok(id=holiday_id)
