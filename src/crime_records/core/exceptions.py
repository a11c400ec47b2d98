"""
Domain Exceptions

Every error the service reports to clients. Each carries the HTTP status it
maps to and a client-facing message; the API layer renders them as
``{"message": ..., "errors": ...}``.
"""

from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError


class CrimeRecordsError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(CrimeRecordsError):
    """Input rejected before (or instead of) touching persistence"""

    status_code = 400
    default_message = "Invalid input."

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors


class AuthenticationRequired(CrimeRecordsError):
    status_code = 401
    default_message = "Authentication required."


class AuthenticationFailed(CrimeRecordsError):
    """Credentials or token presented but not accepted"""

    status_code = 401
    default_message = "Invalid or expired token."


class Forbidden(CrimeRecordsError):
    status_code = 403
    default_message = "Forbidden: Not authorized."


class NotFound(CrimeRecordsError):
    status_code = 404
    default_message = "Resource not found."


class Conflict(CrimeRecordsError):
    status_code = 409
    default_message = "Resource already exists."


class ConfigurationFault(CrimeRecordsError):
    """Deployment is missing required configuration (e.g. JWT_SECRET)"""

    status_code = 500
    default_message = "Internal server configuration error."


def translate_integrity_error(exc: IntegrityError, conflict_message: str) -> CrimeRecordsError:
    """Map a store constraint violation to the matching client error.

    Foreign-key failures mean a referenced record vanished or never existed
    (400); anything else is a unique-key collision (409).
    """
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    if "foreign key" in detail.lower():
        return ValidationFailed("Referenced record does not exist.")
    return Conflict(conflict_message)
