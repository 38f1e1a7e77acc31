from __future__ import annotations

from flask import Flask

from ..common.validators import require_non_empty
from ..common.web import json_body, ok
from ..container import Container
from ..core.exceptions import NotFoundError
from ..navigation.views import View
from ..records.derivation import filter_for_user
from ..session.model import SessionUser


def register(app: Flask, container: Container) -> None:
    guard = container.guard

    @app.route("/api/assistant/ask", methods=["POST"], endpoint="assistant_ask")
    @guard(View.ASSISTANT)
    def assistant_ask(user: SessionUser):
        state = container.live_states.get(user.company_code)
        records = filter_for_user(state.records, user.matricula)
        answer = container.assistant_service.ask(json_body().get("prompt", ""), records)
        return ok(answer=answer)

    @app.route("/api/admin/assistant/summary", methods=["POST"], endpoint="assistant_summary")
    @guard(View.ADMIN_ASSISTANT)
    def assistant_summary(user: SessionUser):
        summary = container.assistant_service.summarize(json_body().get("text", ""))
        return ok(summary=summary.to_dict())

    @app.route("/api/admin/compliance", methods=["POST"], endpoint="compliance_audit")
    @guard(View.COMPLIANCE)
    def compliance_audit(user: SessionUser):
        matricula = require_non_empty(json_body().get("matricula"), "Matrícula")
        state = container.live_states.get(user.company_code)
        employee = next((e for e in state.employees if e.matricula == matricula), None)
        if employee is None:
            raise NotFoundError("Colaborador não encontrado")
        result = container.assistant_service.audit_compliance(
            employee.name,
            filter_for_user(state.records, matricula),
            employee.work_shift,
        )
        return ok(audit=result.to_dict())
