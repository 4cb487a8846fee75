"""
Service-level error taxonomy.

Services raise these exceptions instead of ``HTTPException`` so that
business rules stay independent of the web framework.  Each class
carries the HTTP status the API layer answers with; the handlers
registered in ``main.create_app`` turn them into JSON responses.
"""

from typing import Iterable, List


class ServiceError(Exception):
    """Base class for expected, caller-visible failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Input failed shape validation; carries every problem found."""

    status_code = 400

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors))


class ConflictError(ServiceError):
    """A uniqueness rule was violated (duplicate email or registration)."""

    status_code = 409


class CapacityExceededError(ConflictError):
    """The event already holds as many participants as its capacity."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class UnauthenticatedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403
