from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok
from ..container import Container
from ..navigation.views import View
from ..session.model import SessionUser
from .devices import ReportedPositionLocator, UploadedPhotoCamera
from .flow import PunchFlow


def register(app: Flask, container: Container) -> None:
    guard = container.guard

    @app.route("/api/punch", methods=["POST"], endpoint="punch")
    @guard(View.DASHBOARD)
    def punch(user: SessionUser):
        data = json_body()
        flow = PunchFlow(
            container.punch_service,
            UploadedPhotoCamera(data.get("photo")),
            ReportedPositionLocator(
                data.get("latitude"),
                data.get("longitude"),
                denied=bool(data.get("locationDenied")),
            ),
        )
        record = flow.run(user, punch_type=data.get("type") or None, mood=data.get("mood"))
        return ok(201, record=record.to_document(), approximateLocation=flow.location.is_fallback)

    @app.route("/api/kiosk/punch", methods=["POST"], endpoint="kiosk_punch")
    @guard(View.KIOSK)
    def kiosk_punch(user: SessionUser):
        record = container.punch_service.kiosk_punch(user, json_body().get("matricula", ""))
        return ok(201, record=record.to_document())
