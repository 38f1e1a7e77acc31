from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok
from ..container import Container
from ..session.model import SessionUser
from .router import ViewRouter


def register(app: Flask, container: Container) -> None:
    store = container.session_store
    guard = container.guard

    def _payload(router: ViewRouter):
        return ok(view=router.active.value, available=[v.value for v in router.available])

    @app.route("/api/view", methods=["GET"], endpoint="current_view")
    @guard.logged_in
    def current_view(user: SessionUser):
        return _payload(ViewRouter.restore(user.role, store.load_active_view()))

    @app.route("/api/view", methods=["POST"], endpoint="navigate")
    @guard.logged_in
    def navigate(user: SessionUser):
        router = ViewRouter.restore(user.role, store.load_active_view())
        router.navigate(json_body().get("view", ""))
        store.save_active_view(router.active.value)
        return _payload(router)
