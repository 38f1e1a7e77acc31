class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a session lacks permission for an action or view."""


class NotFoundError(DomainError):
    """Raised when a referenced document does not exist."""


class BackendError(DomainError):
    """Raised when the document database cannot be reached."""


class DeviceError(DomainError):
    """Raised when a device capability (camera) is refused or broken."""


class OutsideGeofenceError(ValidationError):
    """Raised when a punch is attempted outside the company perimeter."""

    def __init__(self, distance_m: float, radius_m: float):
        super().__init__(
            f"Fora do Perímetro! Você está a {round(distance_m)}m da empresa. Limite: {round(radius_m)}m."
        )
        self.distance_m = distance_m
        self.radius_m = radius_m
