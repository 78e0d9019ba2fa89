"""Error taxonomy shared by the record store, the API and the oracle."""

from typing import Any, Optional


class VeripassError(Exception):
    """Base class for all domain errors.

    ``status_code`` is the HTTP status the API answers with; ``details`` is an
    optional structured payload (for example a list of field errors).
    """

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(VeripassError):
    """Malformed or incomplete input."""

    status_code = 400


class AuthError(VeripassError):
    """Missing or invalid credentials."""

    status_code = 401


class ForbiddenError(AuthError):
    """Valid credentials, but the caller may not act on this resource."""

    status_code = 403


class NotFoundError(VeripassError):
    """Unknown id or hash."""

    status_code = 404


class ConflictError(VeripassError):
    """Duplicate or already-finalized resource."""

    status_code = 409


class LedgerError(VeripassError):
    """The ledger rejected or reverted a transaction."""

    status_code = 502


class TransientInfrastructureError(VeripassError):
    """Network, gateway or RPC failure that may succeed on retry."""

    status_code = 503


class FatalStartupError(VeripassError):
    """The oracle cannot run at all (for example it is not a trusted oracle)."""


STATUS_CODE_ERRORS = {
    400: ValidationError,
    401: AuthError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


def error_for_status(status_code: int, message: str, details: Optional[Any] = None) -> VeripassError:
    """Rebuild the domain error for an HTTP error response."""
    if status_code >= 500:
        return TransientInfrastructureError(message, details)
    error_cls = STATUS_CODE_ERRORS.get(status_code, ValidationError)
    return error_cls(message, details)
