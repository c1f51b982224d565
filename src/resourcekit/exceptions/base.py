"""
Error taxonomy for the resource service layer.

Every error raised by the service, its repositories and its default
collaborators derives from `ResourceError`, which carries a safe,
human-friendly message plus optional structured context, and knows how to
render itself for an HTTP response.
"""

from typing import Iterable


class ResourceError(Exception):
    """
    Base exception for service/repository errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['name'])
    - constraint: optional DB constraint name or identifier (for logs only)
    - error_code: canonical short code (e.g., 'not_found', 'invalid_argument') used by clients
    """

    # Map canonical error_code -> default HTTP status.
    ERROR_CODE_TO_STATUS = {
        "not_found": 404,
        "invalid_argument": 400,
        "invalid_field": 422,
        "duplicate": 409,
        "resource_creation_failed": 500,
        "repository_error": 500,
        # fallback: anything else maps to 400
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses.
        Standard shape:
            {
                "detail": "A human-friendly message",
                "code": "invalid_argument",    # optional canonical code
                "fields": ["name"],            # optional list for client usage
            }
        The `constraint` value is kept out of the payload.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class NotFoundError(ResourceError):
    """A lookup by identity or by criteria matched no row."""

    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class InvalidArgumentError(ResourceError):
    """
    A precondition of a service operation was violated.

    `violations` holds the validator messages when the error comes from a
    validation pass (empty otherwise).
    """

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 violations: Iterable[str] | None = None, error_code: str = "invalid_argument"):
        super().__init__(message, fields=fields, error_code=error_code)
        self.violations = list(violations) if violations else []

    def to_payload(self) -> dict:
        payload = super().to_payload()
        if self.violations:
            payload["violations"] = list(self.violations)
        return payload


class InvalidFieldError(InvalidArgumentError):
    """Raised when the caller passes unknown fields (e.g. criteria keys the model does not have)."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


class ResourceCreationFailedError(ResourceError):
    """The entity was written but the post-create verification read could not find it."""

    def __init__(self, message: str):
        super().__init__(message, error_code="resource_creation_failed")


class RepositoryError(ResourceError):
    """Unexpected persistence failure (driver error, unclassified integrity error, ...)."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str = "repository_error"):
        super().__init__(message, fields=fields, constraint=constraint, error_code=error_code)


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        # canonical error_code 'duplicate' so http_status() -> 409
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


__all__ = [
    "ResourceError",
    "NotFoundError",
    "InvalidArgumentError",
    "InvalidFieldError",
    "ResourceCreationFailedError",
    "RepositoryError",
    "DuplicateError",
]
