"""
core/errors.py -- Application error hierarchy.

Every expected failure is raised as an AppError subclass and rendered by a
single exception handler in api/main.py as {<body_key>: <message>}. Route and
flow code never builds error JSON by hand.

Error kinds:
  ValidationError      400  missing or empty required field
  NotFoundError        404  unknown record (401 when raised by login)
  ConflictError        409  unique constraint hit (duplicate username)
  AuthenticationError  401  wrong password
    TokenMissingError  401  no usable bearer token on the request
    TokenInvalidError  403  bad signature, malformed payload, or expired
  UpstreamError        500  credential store unreachable or query failure

UpstreamError messages are generic on purpose. The underlying driver error is
logged server-side by whoever raises it and is never put in the message.

Layer rule: core/ is the kernel. No imports from api/ or auth/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    body_key: str = "error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, status_code: int | None = None, body_key: str | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        if body_key is not None:
            self.body_key = body_key
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {self.body_key: self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"

    @classmethod
    def missing_field(cls, field: str) -> ValidationError:
        return cls(f"Missing required field: {field}")


class NotFoundError(AppError):
    status_code = 404
    body_key = "message"
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Authentication failed"


class TokenMissingError(AuthenticationError):
    status_code = 401
    body_key = "message"
    default_message = "Token not provided"


class TokenInvalidError(AuthenticationError):
    status_code = 403
    body_key = "message"
    default_message = "Invalid or expired token"


class UpstreamError(AppError):
    status_code = 500
    default_message = "Internal server error"


def require_fields(values: dict, keys: list[str]) -> None:
    """Raise ValidationError naming the first key that is None or empty."""
    for key in keys:
        value = values.get(key)
        if value is None or value == "":
            raise ValidationError.missing_field(key)
