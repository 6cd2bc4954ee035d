"""
Custom exception classes for the admin management application.
Provides structured error handling with machine-readable error codes.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes shared with the admin dashboard frontend"""

    # Authentication errors (401)
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"
    AUTH_TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    AUTH_NOT_AUTHENTICATED = "AUTH_NOT_AUTHENTICATED"

    # Authorization errors (403)
    AUTHZ_FORBIDDEN = "AUTHZ_FORBIDDEN"
    AUTHZ_INSUFFICIENT_PERMISSIONS = "AUTHZ_INSUFFICIENT_PERMISSIONS"
    AUTHZ_ACCOUNT_NOT_APPROVED = "AUTHZ_ACCOUNT_NOT_APPROVED"

    # Resource errors (404, 409)
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    VALIDATION_INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"
    VALIDATION_REQUIRED_FIELD = "VALIDATION_REQUIRED_FIELD"

    # Server errors (500+)
    SERVER_ERROR = "SERVER_ERROR"
    SERVER_UNAVAILABLE = "SERVER_UNAVAILABLE"
    IDENTITY_PROVIDER_ERROR = "IDENTITY_PROVIDER_ERROR"


class AppException(Exception):
    """
    Base exception class for application errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SERVER_ERROR,
        status_code: int = 500,
        field: str | None = None,
        error: str | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.field = field
        self.error = error
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary"""
        response: dict[str, Any] = {
            "message": self.message,
            "code": self.code.value,
        }
        if self.field:
            response["field"] = self.field
        if self.error:
            response["error"] = self.error
        return response


# Authentication Errors (401)


class AuthenticationError(AppException):
    """Base authentication error"""

    def __init__(
        self,
        message: str = "Unauthorized",
        code: ErrorCode = ErrorCode.AUTH_NOT_AUTHENTICATED,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=401,
        )


class InvalidCredentialsError(AuthenticationError):
    """Invalid email or password"""

    def __init__(self, message: str = "Incorrect email or password"):
        super().__init__(
            message=message,
            code=ErrorCode.AUTH_INVALID_CREDENTIALS,
        )


class TokenExpiredError(AuthenticationError):
    """Bearer token has expired"""

    def __init__(self, message: str = "Unauthorized: token expired"):
        super().__init__(
            message=message,
            code=ErrorCode.AUTH_TOKEN_EXPIRED,
        )


class TokenInvalidError(AuthenticationError):
    """Bearer token is malformed or its signature does not verify"""

    def __init__(self, message: str = "Unauthorized: invalid token"):
        super().__init__(
            message=message,
            code=ErrorCode.AUTH_TOKEN_INVALID,
        )


# Authorization Errors (403)


class AuthorizationError(AppException):
    """Base authorization error"""

    def __init__(
        self,
        message: str = "Forbidden",
        code: ErrorCode = ErrorCode.AUTHZ_FORBIDDEN,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=403,
        )


class InsufficientPermissionsError(AuthorizationError):
    """Caller's role does not allow the action"""

    def __init__(self, message: str = "Forbidden: insufficient privileges"):
        super().__init__(
            message=message,
            code=ErrorCode.AUTHZ_INSUFFICIENT_PERMISSIONS,
        )


class AccountNotApprovedError(AuthorizationError):
    """Profile is pending review or was rejected"""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code=ErrorCode.AUTHZ_ACCOUNT_NOT_APPROVED,
        )


# Resource Errors (404, 409)


class NotFoundError(AppException):
    """Resource not found"""

    def __init__(self, message: str = "Requested resource not found"):
        super().__init__(
            message=message,
            code=ErrorCode.RESOURCE_NOT_FOUND,
            status_code=404,
        )


class AlreadyExistsError(AppException):
    """Resource already exists"""

    def __init__(
        self,
        message: str = "Resource already exists",
        field: str | None = None,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.RESOURCE_ALREADY_EXISTS,
            status_code=409,
            field=field,
        )


# Validation Errors (400)


class ValidationError(AppException):
    """Validation error"""

    def __init__(
        self,
        message: str = "Please check the submitted data",
        field: str | None = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            field=field,
        )


class InvalidFormatError(ValidationError):
    """Invalid data format"""

    def __init__(
        self,
        message: str = "Invalid data format",
        field: str | None = None,
    ):
        super().__init__(
            message=message,
            field=field,
            code=ErrorCode.VALIDATION_INVALID_FORMAT,
        )


# Server Errors (500)


class ServerError(AppException):
    """Internal server error"""

    def __init__(
        self,
        message: str = "Internal server error",
        code: ErrorCode = ErrorCode.SERVER_ERROR,
        error: str | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=500,
            error=error,
        )


class IdentityProviderError(ServerError):
    """The identity provider rejected or failed an account operation"""

    def __init__(self, message: str = "Identity provider error", error: str | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.IDENTITY_PROVIDER_ERROR,
            error=error,
        )


class IdentityAccountNotFoundError(IdentityProviderError):
    """No identity account exists for the given uid"""

    def __init__(self, uid: str):
        self.uid = uid
        super().__init__(
            message="Identity account not found",
            error=f"No identity account for uid {uid}",
        )
