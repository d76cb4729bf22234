"""
Verification error taxonomy.

Use cases raise these; the API layer maps each one to an HTTP status.
"""


class VerificationError(Exception):
    """Base class for every error the workflow surfaces to a caller."""

    default_message = "Verification error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(VerificationError):
    default_message = "User not authenticated"


class PermissionDenied(VerificationError):
    default_message = "Insufficient permissions"


class InvalidArgument(VerificationError):
    """Validation failure. `fields` maps each offending field to its problem."""

    default_message = "Invalid request"

    def __init__(self, message: str | None = None, fields: dict[str, str] | None = None):
        super().__init__(message)
        self.fields = fields or {}


class NotFound(VerificationError):
    default_message = "User not found"


class RateLimited(VerificationError):
    default_message = "Too many requests, try again later"


class InternalError(VerificationError):
    default_message = "Internal server error"


class WriteConflict(InternalError):
    """Another transaction wrote the same row first; the unit of work may be retried."""

    default_message = "Concurrent update, try again"
