from typing import Optional

from fastapi import status

# Error kinds raised by the shift services. All of them are user-correctable
# and are turned into a structured response by the handler in main.py.


class ShiftTrackingError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "shift_error"
    headers: Optional[dict] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict:
        return {}

    def to_response(self) -> dict:
        return {
            "status": "error",
            "success": False,
            "error_type": self.error_type,
            "message": self.message,
            **self.details(),
        }


# Organization geofence not set up
class ConfigurationError(ShiftTrackingError):
    status_code = 422
    error_type = "configuration_error"


# Already clocked in / shift already closed
class ConflictError(ShiftTrackingError):
    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"


# Not the shift owner, or role too low for a manager operation
class AuthorizationError(ShiftTrackingError):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "authorization_error"


class NotFoundError(ShiftTrackingError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"


class OutOfRangeError(ShiftTrackingError):
    """Measured distance exceeds the facility radius."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "out_of_range"

    def __init__(self, message: str, distance_meters: float, radius_meters: float):
        super().__init__(message)
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters

    def details(self) -> dict:
        return {
            "distance_meters": round(self.distance_meters),
            "radius_meters": self.radius_meters,
        }


# Coordinates outside [-90, 90] / [-180, 180]
class InvalidLocationError(ShiftTrackingError):
    status_code = 422
    error_type = "invalid_location"


# Missing or unverifiable bearer token, or a token for an identity that
# conflicts with the linked account
class AuthenticationError(ShiftTrackingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "authentication_error"
    headers = {"WWW-Authenticate": "Bearer"}
