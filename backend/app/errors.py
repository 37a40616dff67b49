"""
Registration error taxonomy.

Every error carries the HTTP status it maps to, a client-safe message and,
where one applies, the form field the message belongs to. The FastAPI
exception handler in ``app.main`` renders them as
``{"success": false, "message": ..., "field": ...}``.
"""

from typing import Optional


class RegistrationError(Exception):
    """Base class for errors surfaced to registration clients."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_response(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(RegistrationError):
    """A required field is missing or a field is malformed."""


class ConflictError(RegistrationError):
    """The email address already belongs to a stored record."""

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message, field="email")


class StorageError(RegistrationError):
    """The record collection could not be read or written.

    The detail is kept for server-side logging; clients only ever see the
    generic message.
    """

    status_code = 500

    def __init__(self, detail: str):
        super().__init__("Internal server error")
        self.detail = detail


class UnexpectedError(RegistrationError):
    """Any other failure while handling a request."""

    status_code = 500

    def __init__(self):
        super().__init__("Internal server error")


class AccessDeniedError(RegistrationError):
    """The caller may not use an administrative endpoint."""

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.status_code = status_code
