"""
Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status code it is rendered with; the app-level
exception handler turns it into ``{"status": false, "error": <message>}``.
"""


class TripShareError(Exception):
    status_code = 400
    default_message = "The request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEntity(TripShareError):
    status_code = 409
    default_message = "The record already exists"


class NotAuthenticated(TripShareError):
    status_code = 401
    default_message = "You need to be logged in"


class InvalidCredentials(TripShareError):
    status_code = 401
    default_message = "Invalid email or password"


class NotAuthorized(TripShareError):
    status_code = 403
    default_message = "Only the trip admin can do that"


class NotFound(TripShareError):
    status_code = 404
    default_message = "Not found"


class AmbiguousTrip(TripShareError):
    status_code = 409
    default_message = "Several trips share this name and destination; pass trip_id instead"


class InvalidStateTransition(TripShareError):
    """Raised when a membership status change violates the state machine."""

    status_code = 409


class StoreFailure(TripShareError):
    status_code = 500
    default_message = "The operation failed, please try again"
