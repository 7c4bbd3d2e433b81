"""
Registration error kinds.

Each kind carries the HTTP status it maps to. `responses.py` turns them into
the JSON envelope at the request boundary.
"""

from __future__ import annotations


class RegistrationError(RuntimeError):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, *, errors: list[str] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = list(errors) if errors else []
        super().__init__(self.message)


class MalformedInput(RegistrationError):
    status_code = 400
    default_message = "Invalid JSON data"


class ValidationFailed(RegistrationError):
    status_code = 400
    default_message = "Missing or Invalid Data"


class NotFound(RegistrationError):
    status_code = 404
    default_message = "Student not found"


class MethodNotAllowed(RegistrationError):
    status_code = 405
    default_message = "Method not allowed"


class Conflict(RegistrationError):
    status_code = 409
    default_message = "Email address already registered"


class StoreFailure(RegistrationError):
    status_code = 500
    default_message = "Database operation failed"
