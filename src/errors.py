"""Application error taxonomy.

Every failure a handler can report is one of the classes below. Each carries
the HTTP status it maps to and renders to the single error body shape used by
the whole API::

    {"errors": [{"msg": "...", "field": "email"}]}

``field`` is null for errors that are not tied to a request field.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from fastapi import status


class AppError(Exception):
    """Base class for errors translated into JSON responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: str | None = None, *, field: str | None = None) -> None:
        self.message = message or self.message
        self.field = field
        super().__init__(self.message)

    def to_errors(self) -> list[dict[str, Any]]:
        return [{"msg": self.message, "field": self.field}]


class ValidationError(AppError):
    """Malformed input. Holds one message per offending field."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "Invalid request"

    def __init__(
        self,
        errors: Sequence[dict[str, Any]],
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(errors[0]["msg"] if errors else None)
        self.errors = list(errors)
        if status_code is not None:
            self.status_code = status_code

    @classmethod
    def from_pydantic(
        cls, raw_errors: Iterable[dict[str, Any]], *, status_code: int | None = None
    ) -> "ValidationError":
        """Collapse pydantic error entries to the first message per field."""
        errors: list[dict[str, Any]] = []
        seen: set[str | None] = set()
        for error in raw_errors:
            loc = [part for part in error.get("loc", ()) if part != "body"]
            field = str(loc[-1]) if loc else None
            if field in seen:
                continue
            seen.add(field)
            errors.append({"msg": error.get("msg", cls.message), "field": field})
        return cls(errors, status_code=status_code)

    def to_errors(self) -> list[dict[str, Any]]:
        return self.errors


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Resource already exists"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authorization denied"


class InvalidCredentialsError(UnauthorizedError):
    """Bad login. Deliberately does not say which field was wrong."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid email or password"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "User not authorized"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ServerError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"
