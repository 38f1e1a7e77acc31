from __future__ import annotations

from flask import Flask, request

from ..common.web import json_body, ok
from ..container import Container
from ..navigation.views import View
from ..session.model import SessionUser


def register(app: Flask, container: Container) -> None:
    guard = container.guard

    @app.route("/api/requests", methods=["GET"], endpoint="my_requests")
    @guard(View.REQUESTS)
    def my_requests(user: SessionUser):
        items = container.request_service.list_for_user(user)
        return ok(requests=[r.to_document() for r in items])

    @app.route("/api/requests", methods=["POST"], endpoint="create_request")
    @guard(View.REQUESTS)
    def create_request(user: SessionUser):
        data = json_body()
        request_id = container.request_service.create(
            user,
            kind=data.get("type", ""),
            reason=data.get("reason", ""),
            date_value=data.get("date"),
            photo=data.get("photo"),
        )
        return ok(201, id=request_id)

    @app.route("/api/admin/requests", methods=["GET"], endpoint="company_requests")
    @guard(View.ADMIN_REQUESTS)
    def company_requests(user: SessionUser):
        items = container.request_service.list_for_company(user, status=request.args.get("status") or None)
        return ok(requests=[r.to_document() for r in items])

    @app.route("/api/admin/requests/<request_id>/approve", methods=["POST"], endpoint="approve_request")
    @guard(View.ADMIN_REQUESTS)
    def approve_request(user: SessionUser, request_id: str):
        container.request_service.approve(user, request_id)
        return ok(id=request_id, decision="approved")

    @app.route("/api/admin/requests/<request_id>/reject", methods=["POST"], endpoint="reject_request")
    @guard(View.ADMIN_REQUESTS)
    def reject_request(user: SessionUser, request_id: str):
        container.request_service.reject(user, request_id)
        return ok(id=request_id, decision="rejected")
