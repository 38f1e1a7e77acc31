from __future__ import annotations

from flask import Flask, Response, request

from ..common.datetime_utils import now_local
from ..common.web import int_arg, ok
from ..core.exceptions import NotFoundError
from ..container import Container
from ..navigation.views import View
from ..session.model import SessionUser
from .derivation import (
    build_daily_timeline,
    filter_for_user,
    group_by_day,
    latest,
    next_punch_type,
    ordered_day_labels,
)
from .export import (
    LEDGER_FILENAME,
    build_device_snapshot,
    build_ledger_text,
    device_snapshot_filename,
)
from .hours import build_monthly_card


def register(app: Flask, container: Container) -> None:
    guard = container.guard

    def _own_records(user: SessionUser):
        state = container.live_states.get(user.company_code)
        return filter_for_user(state.records, user.matricula)

    def _company_config(user: SessionUser):
        state = container.live_states.get(user.company_code)
        company = state.company or container.company_service.get(user.company_code)
        return company.config

    def _weekly_hours(user: SessionUser):
        state = container.live_states.get(user.company_code)
        for employee in state.employees:
            if employee.matricula == user.matricula:
                return employee.weekly_hours
        return None

    @app.route("/api/records", methods=["GET"], endpoint="my_records")
    @guard(View.MY_POINT)
    def my_records(user: SessionUser):
        groups = group_by_day(_own_records(user))
        days = [
            {"date": label, "records": [r.to_document() for r in groups[label]]}
            for label in ordered_day_labels(groups)
        ]
        return ok(days=days, count=sum(len(g) for g in groups.values()))

    @app.route("/api/records/<record_id>/photo", methods=["GET"], endpoint="record_photo")
    @guard.logged_in
    def record_photo(user: SessionUser, record_id: str):
        state = container.live_states.get(user.company_code)
        record = next((r for r in state.records if r.id == record_id), None)
        if record is None or (not user.is_admin and record.matricula != user.matricula):
            raise NotFoundError("Registro não encontrado")
        photo = container.records_repo.get_photo(user.company_code, record_id)
        if not photo:
            raise NotFoundError("Registro não encontrado")
        return ok(id=record_id, photo=photo)

    @app.route("/api/timeline", methods=["GET"], endpoint="timeline")
    @guard(View.DASHBOARD)
    def timeline(user: SessionUser):
        records = _own_records(user)
        today = now_local().date()
        last = latest(records)
        return ok(
            slots=[s.to_dict() for s in build_daily_timeline(records, today)],
            nextType=next_punch_type(records, today).value,
            lastPunch=last.to_document() if last else None,
        )

    @app.route("/api/card", methods=["GET"], endpoint="monthly_card")
    @guard(View.CARD)
    def monthly_card(user: SessionUser):
        today = now_local()
        card = build_monthly_card(
            _own_records(user),
            int_arg("year", today.year),
            int_arg("month", today.month),
            _company_config(user),
            weekly_hours=_weekly_hours(user),
        )
        return ok(card=card.to_dict())

    @app.route("/api/export/ledger.txt", methods=["GET"], endpoint="export_ledger")
    @guard(View.CARD)
    def export_ledger(user: SessionUser):
        today = now_local()
        year, month = int_arg("year", today.year), int_arg("month", today.month)
        in_month = [r for r in _own_records(user) if r.timestamp.year == year and r.timestamp.month == month]
        card = build_monthly_card(in_month, year, month, _company_config(user), weekly_hours=_weekly_hours(user))
        text = build_ledger_text(
            in_month,
            employee_name=user.name,
            reference=f"{month:02d}/{year}",
            total_worked_minutes=card.total_worked_minutes,
        )
        return Response(
            text,
            mimetype="text/plain",
            headers={"Content-Disposition": f"attachment; filename={LEDGER_FILENAME}"},
        )

    @app.route("/api/export/device.json", methods=["GET"], endpoint="export_device")
    @guard(View.SETTINGS)
    def export_device(user: SessionUser):
        body = build_device_snapshot(
            user,
            device_info=request.headers.get("User-Agent", ""),
            now=now_local(),
        )
        return Response(
            body,
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename={device_snapshot_filename(user)}"},
        )

    @app.route("/api/admin/records", methods=["GET"], endpoint="company_records")
    @guard(View.ADMIN)
    def company_records(user: SessionUser):
        state = container.live_states.get(user.company_code)
        records = state.records
        matricula = request.args.get("matricula")
        if matricula:
            records = filter_for_user(records, matricula)
        return ok(records=[r.to_document() for r in records], employees=len(state.employees))
