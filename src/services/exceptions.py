"""Domain errors raised by the marketplace services."""

from typing import List, Optional

from src.utils.validators import FieldError


class MarketplaceServiceError(Exception):
    """Base exception for marketplace service errors."""

    code = "SERVICE_ERROR"
    status_code = 400

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class NotFoundError(MarketplaceServiceError):
    """Raised when a referenced song, album, complaint, dispute or user does not exist."""

    code = "RESOURCE_NOT_FOUND"
    status_code = 404


class AuthorizationError(MarketplaceServiceError):
    """Raised when the caller is neither the resource owner nor an admin."""

    code = "FORBIDDEN"
    status_code = 403


class StateError(MarketplaceServiceError):
    """Raised when the resource's current status forbids the operation."""

    code = "INVALID_STATE"
    status_code = 409


class ValidationError(MarketplaceServiceError):
    """Raised when request data or preconditions fail validation."""

    code = "VALIDATION_FAILED"
    status_code = 422

    def __init__(
        self,
        message: str,
        validation_errors: Optional[List[FieldError]] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message, code=code)
        self.validation_errors = validation_errors or []
