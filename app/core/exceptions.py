"""Expected, caller-recoverable failures of the portal core.

Every error carries an ``ErrorKind``; the HTTP status is derived from the kind
and only matters at the transport boundary (see ``app.main``).
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import status


class ErrorKind(str, Enum):
    """Error taxonomy."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    MISSING_DOCUMENTS = "MISSING_DOCUMENTS"
    DUPLICATE = "DUPLICATE"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


ERROR_STATUS_CODES = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MISSING_DOCUMENTS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE: status.HTTP_409_CONFLICT,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class PortalError(Exception):
    """Base class for expected failures."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details: Dict[str, Any] = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        """Structured body returned to the caller."""
        return {"detail": self.message, "code": self.kind.value, **self.details}


class AuthenticationError(PortalError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Not authenticated"


class PermissionDeniedError(PortalError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Not authorized"


class NotFoundError(PortalError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class InvalidInputError(PortalError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid input"


class MissingDocumentsError(PortalError):
    """Raised when an applicant has not uploaded every required document."""

    kind = ErrorKind.MISSING_DOCUMENTS

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"You must upload your {' and '.join(self.missing)} before applying",
            missing_documents=self.missing,
        )


class DuplicateError(PortalError):
    kind = ErrorKind.DUPLICATE
    default_message = "Resource already exists"


class ConflictError(PortalError):
    kind = ErrorKind.CONFLICT
    default_message = "Operation conflicts with the current state"


ERRORS_BY_KIND = {
    ErrorKind.UNAUTHENTICATED: AuthenticationError,
    ErrorKind.UNAUTHORIZED: PermissionDeniedError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.VALIDATION: InvalidInputError,
    ErrorKind.DUPLICATE: DuplicateError,
    ErrorKind.CONFLICT: ConflictError,
}


def error_for(kind: ErrorKind, message: Optional[str] = None) -> PortalError:
    """Build the exception matching ``kind``."""
    return ERRORS_BY_KIND.get(kind, PortalError)(message)
