"""Device capabilities used by the punch flow.

In the browser these are the camera and the GPS; on the server they are thin
adapters over what the client uploaded with the punch request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.constants import (
    FALLBACK_ADDRESS,
    FALLBACK_LATITUDE,
    FALLBACK_LONGITUDE,
    GEOLOCATION_TIMEOUT_SECONDS,
    GPS_ADDRESS,
)
from ..core.exceptions import DeviceError

logger = logging.getLogger(__name__)

FRONT_CAMERA = "user"


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    address: str
    is_fallback: bool = False


FALLBACK_LOCATION = Location(
    lat=FALLBACK_LATITUDE,
    lng=FALLBACK_LONGITUDE,
    address=FALLBACK_ADDRESS,
    is_fallback=True,
)


class LocationUnavailable(Exception):
    """Geolocation was denied, timed out or returned nothing usable."""


class Camera(Protocol):
    def open(self, facing: str = FRONT_CAMERA) -> None:
        raise NotImplementedError

    def capture_frame(self) -> str:
        """Return the current frame as an image data URL."""

        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class Geolocator(Protocol):
    def locate(self, timeout: float) -> Location:
        raise NotImplementedError


class UploadedPhotoCamera(Camera):
    """Camera whose single frame is the photo the client already captured."""

    def __init__(self, photo: Optional[str]):
        self._photo = (photo or "").strip()
        self._open = False

    def open(self, facing: str = FRONT_CAMERA) -> None:
        if not self._photo:
            raise DeviceError("Câmera indisponível. Permita o acesso à câmera para registrar o ponto.")
        self._open = True

    def capture_frame(self) -> str:
        if not self._open:
            raise DeviceError("Câmera não iniciada")
        return self._photo

    def close(self) -> None:
        self._open = False


class ReportedPositionLocator(Geolocator):
    """Position reported by the client; ``denied`` mirrors a refused permission prompt."""

    def __init__(self, lat: object = None, lng: object = None, *, denied: bool = False):
        self._lat = lat
        self._lng = lng
        self._denied = denied

    def locate(self, timeout: float) -> Location:
        if self._denied:
            raise LocationUnavailable("permission denied")
        if self._lat is None or self._lng is None:
            raise LocationUnavailable("no position reported")
        try:
            lat, lng = float(self._lat), float(self._lng)
        except (TypeError, ValueError):
            raise LocationUnavailable("unreadable position")
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            raise LocationUnavailable("position out of range")
        return Location(lat=lat, lng=lng, address=GPS_ADDRESS)


def locate_with_fallback(locator: Geolocator, timeout: float = GEOLOCATION_TIMEOUT_SECONDS) -> Location:
    try:
        return locator.locate(timeout)
    except LocationUnavailable as e:
        logger.info("geolocation unavailable (%s), using approximate location", e)
        return FALLBACK_LOCATION
