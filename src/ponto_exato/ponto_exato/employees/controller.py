from __future__ import annotations

import logging

from flask import Flask

from ..common.web import api_errors, fail, json_body, ok
from ..container import Container
from ..navigation.views import DEFAULT_VIEW, View
from ..session.model import SessionUser

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    store = container.session_store
    guard = container.guard

    def _start_session(user: SessionUser, remember: bool):
        store.save(user, remember=remember)
        store.save_active_view(DEFAULT_VIEW[user.role].value)
        container.live_states.acquire(user.company_code)
        return ok(user=user.to_dict(), view=DEFAULT_VIEW[user.role].value)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    @api_errors
    def login():
        data = json_body()
        kind = (data.get("kind") or "employee").strip().lower()
        code = data.get("companyCode", "")
        password = data.get("password", "")

        if kind == "employee":
            user = container.auth_service.login_employee(code, data.get("matricula", ""), password)
        elif kind == "admin":
            user = container.auth_service.login_admin(code, data.get("email", ""), password)
        elif kind == "totem":
            user = container.auth_service.login_totem(code, data.get("email", ""), password)
        else:
            return fail("Tipo de acesso inválido")

        return _start_session(user, bool(data.get("remember")))

    @app.route("/api/signup", methods=["POST"], endpoint="signup")
    @api_errors
    def signup():
        data = json_body()
        user = container.auth_service.signup_company(
            name=data.get("name", ""),
            admin_email=data.get("adminEmail", ""),
            admin_password=data.get("password", ""),
            cnpj=data.get("cnpj", ""),
            phone=data.get("phone"),
            address=data.get("address", ""),
        )
        return _start_session(user, bool(data.get("remember")))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    @api_errors
    def logout():
        user = store.load()
        if user:
            container.live_states.release(user.company_code)
        store.clear()
        return ok()

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @guard.logged_in
    def me(user: SessionUser):
        return ok(user=user.to_dict())

    @app.route("/api/me/password", methods=["POST"], endpoint="change_password")
    @guard(View.PROFILE)
    def change_password(user: SessionUser):
        container.auth_service.change_password(user, json_body().get("password", ""))
        return ok()

    # ---- admin: employees ------------------------------------------------

    @app.route("/api/admin/employees", methods=["GET"], endpoint="list_employees")
    @guard(View.EMPLOYEES)
    def list_employees(user: SessionUser):
        state = container.live_states.get(user.company_code)
        employees = sorted(state.employees, key=lambda e: e.name)
        return ok(employees=[e.to_document() for e in employees])

    @app.route("/api/admin/employees", methods=["POST"], endpoint="create_employee")
    @guard(View.EMPLOYEES)
    def create_employee(user: SessionUser):
        employee_id = container.employee_service.create(user, json_body())
        return ok(201, id=employee_id)

    @app.route("/api/admin/employees/<employee_id>", methods=["PATCH"], endpoint="update_employee")
    @guard(View.EMPLOYEES)
    def update_employee(user: SessionUser, employee_id: str):
        data = json_body()
        status = data.pop("status", None)
        if status is not None:
            container.employee_service.set_status(user, employee_id, status)
        if data:
            container.employee_service.update(user, employee_id, data)
        return ok(id=employee_id)

    @app.route("/api/admin/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @guard(View.EMPLOYEES)
    def delete_employee(user: SessionUser, employee_id: str):
        if json_body().get("confirm") is not True:
            return fail("Confirme a exclusão do colaborador")
        container.employee_service.delete(user, employee_id)
        logger.info("employee %s deleted by %s", employee_id, user.email)
        return ok(id=employee_id)
