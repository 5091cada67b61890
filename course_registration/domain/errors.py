class RegistrationError(Exception):
    """Base class for failures surfaced to API callers."""
    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(RegistrationError):
    status_code = 400
    default_message = "Invalid request."


class AuthenticationFailed(RegistrationError):
    status_code = 401
    default_message = "Invalid username or password."


class PermissionDenied(RegistrationError):
    status_code = 403
    default_message = "Not allowed."


class NotFound(RegistrationError):
    status_code = 404
    default_message = "Not found."


# Duplicate registrations are reported as a bad request, not 409.
class Conflict(RegistrationError):
    status_code = 400
    default_message = "Already exists."


class InternalError(RegistrationError):
    pass
