from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from ..core.constants import GEOLOCATION_TIMEOUT_SECONDS
from ..core.enums import PunchType
from ..core.exceptions import DeviceError, DomainError, ValidationError
from ..records.model import PointRecord
from ..session.model import SessionUser
from .devices import FRONT_CAMERA, Camera, Geolocator, Location, locate_with_fallback
from .service import PunchService

logger = logging.getLogger(__name__)


class PunchState(str, Enum):
    IDLE = "idle"
    CAMERA_OPEN = "camera_open"
    CAPTURED = "captured"
    SUBMITTING = "submitting"
    DONE = "done"
    ERROR = "error"


class PunchFlow:
    """Capture flow for one punch: camera -> photo -> location -> record.

    A failed submit keeps the captured photo so the user can try again;
    nothing is retried automatically.
    """

    def __init__(
        self,
        service: PunchService,
        camera: Camera,
        locator: Geolocator,
        *,
        timeout: float = GEOLOCATION_TIMEOUT_SECONDS,
    ):
        self._service = service
        self._camera = camera
        self._locator = locator
        self._timeout = timeout

        self.state = PunchState.IDLE
        self.photo: Optional[str] = None
        self.location: Optional[Location] = None
        self.record: Optional[PointRecord] = None
        self.last_error: Optional[DomainError] = None

    def open_camera(self) -> None:
        if self.state not in (PunchState.IDLE, PunchState.ERROR, PunchState.DONE):
            raise ValidationError("Câmera já está aberta")
        try:
            self._camera.open(FRONT_CAMERA)
        except DeviceError as e:
            self.state = PunchState.ERROR
            self.last_error = e
            raise
        self.state = PunchState.CAMERA_OPEN
        self.photo = None
        self.record = None
        self.last_error = None

    def capture(self) -> str:
        if self.state != PunchState.CAMERA_OPEN:
            raise ValidationError("Abra a câmera antes de capturar")
        self.photo = self._camera.capture_frame()
        self._camera.close()
        self.state = PunchState.CAPTURED
        return self.photo

    def submit(
        self,
        user: SessionUser,
        *,
        punch_type: Optional[PunchType | str] = None,
        mood: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PointRecord:
        if self.state != PunchState.CAPTURED or not self.photo:
            raise ValidationError("Nenhuma foto capturada")

        self.state = PunchState.SUBMITTING
        self.location = locate_with_fallback(self._locator, self._timeout)
        try:
            record = self._service.register_punch(
                user,
                photo=self.photo,
                location=self.location,
                punch_type=punch_type,
                mood=mood,
                now=now,
            )
        except DomainError as e:
            logger.info("punch not recorded: %s", e)
            self.state = PunchState.CAPTURED
            self.last_error = e
            raise

        self.state = PunchState.DONE
        self.record = record
        self.last_error = None
        return record

    def cancel(self) -> None:
        self._camera.close()
        self.state = PunchState.IDLE
        self.photo = None
        self.location = None
        self.last_error = None

    def run(self, user: SessionUser, **kwargs) -> PointRecord:
        """Whole flow in one go, as used by the HTTP endpoint."""

        self.open_camera()
        self.capture()
        return self.submit(user, **kwargs)
