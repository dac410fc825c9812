"""
Custom Exception Classes for the DevConnector API.

This module defines the error taxonomy used across the services and the API
surface. Services raise these exceptions; the error handling middleware turns
them into JSON responses, so no endpoint needs to build error bodies by hand.

Key Components:
- `ConnectorAPIException`: The base exception class. It carries a message, an
  error code, optional details and the HTTP status code it maps to.
- Specific Exception Classes: `ValidationError` (400, field level),
  `DuplicateUserError`, `InvalidCredentialsError`, `AlreadyLikedError` and
  `NotLikedError` (400, conflicts), `AuthenticationError` (401),
  `ForbiddenError` (403), `NotFoundError` (404) and `DatabaseError` (500).
- `to_error_response`: Builds the response body for an exception. Every 400
  response carries an `errors` list of `{"msg", "param"}` entries so clients
  can show field-level messages.

Architectural Design:
- Hierarchy of Exceptions: All exceptions inherit from `ConnectorAPIException`,
  so handlers can catch the whole family or a single member.
- Status on the Exception: The status code lives on the class, which keeps the
  mapping next to the error definition instead of in a lookup table.
"""

from typing import Any, Dict, List, Optional, Sequence


class ConnectorAPIException(Exception):
    """Base exception class for DevConnector API"""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = "CONNECTOR_API_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def errors(self) -> List[Dict[str, Any]]:
        """Client-facing error entries"""
        return [{"msg": self.message}]


class ValidationError(ConnectorAPIException):
    """Raised when input validation fails"""

    status_code = 400

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            reason,
            "VALIDATION_ERROR",
            {"field": field, "value": str(value), "reason": reason},
        )
        self.field = field
        self._errors = [{"msg": reason, "param": field}]

    @property
    def errors(self) -> List[Dict[str, Any]]:
        return self._errors

    @classmethod
    def combine(cls, errors: Sequence["ValidationError"]) -> "ValidationError":
        """Merge several field errors into one exception"""
        first = errors[0]
        combined = cls(first.field, first.details.get("value"), first.message)
        combined._errors = [entry for error in errors for entry in error.errors]
        combined.details["fields"] = [error.field for error in errors]
        return combined


class DuplicateUserError(ConnectorAPIException):
    """Raised when registering an email that is already taken"""

    status_code = 400

    def __init__(self, email: str):
        super().__init__("User already exists.", "DUPLICATE_USER", {"email": email})


class InvalidCredentialsError(ConnectorAPIException):
    """Raised when an email/password pair does not match a user"""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid Credentials", "INVALID_CREDENTIALS")


class AuthenticationError(ConnectorAPIException):
    """Raised when the session token is missing or invalid"""

    status_code = 401

    def __init__(self, reason: str):
        super().__init__(reason, "AUTHENTICATION_ERROR", {"reason": reason})


class ForbiddenError(ConnectorAPIException):
    """Raised when an authenticated user may not touch a resource"""

    status_code = 403

    def __init__(self, reason: str = "User not authorized"):
        super().__init__(reason, "FORBIDDEN", {"reason": reason})


class NotFoundError(ConnectorAPIException):
    """Raised when a requested resource does not exist"""

    status_code = 404

    def __init__(self, resource: str, message: Optional[str] = None):
        super().__init__(
            message or f"{resource} not found",
            "NOT_FOUND",
            {"resource": resource},
        )


class AlreadyLikedError(ConnectorAPIException):
    """Raised when a user likes a post twice"""

    status_code = 400

    def __init__(self, post_id: str):
        super().__init__("Post already liked", "ALREADY_LIKED", {"post_id": post_id})


class NotLikedError(ConnectorAPIException):
    """Raised when a user unlikes a post they never liked"""

    status_code = 400

    def __init__(self, post_id: str):
        super().__init__(
            "Post has not yet been liked", "NOT_LIKED", {"post_id": post_id}
        )


class DatabaseError(ConnectorAPIException):
    """Raised when database operations fail"""

    status_code = 500

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Database operation '{operation}' failed: {reason}",
            "DATABASE_ERROR",
            {"operation": operation, "reason": reason},
        )


def to_error_response(exc: ConnectorAPIException) -> Dict[str, Any]:
    """Build the JSON body returned for a ConnectorAPIException"""
    if exc.status_code >= 500:
        # Internal detail stays in the logs
        return {"code": exc.error_code, "message": "Server Error"}

    body: Dict[str, Any] = {"code": exc.error_code, "message": exc.message}
    if exc.status_code == 400:
        body["errors"] = exc.errors
    return body
