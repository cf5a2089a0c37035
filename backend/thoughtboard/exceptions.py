"""
Custom Exception Classes for Thoughtboard

Every error the API reports on purpose is an AppException subclass. Each one
carries a stable error code so clients can tell failures apart without
parsing messages.
"""

from typing import Any, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes used in every error response"""

    # Authentication & Authorization (AUTH_xxx)
    INVALID_TOKEN = "AUTH_001"
    TOKEN_EXPIRED = "AUTH_002"
    INVALID_CREDENTIALS = "AUTH_003"
    USER_NOT_FOUND = "AUTH_004"
    USERNAME_TAKEN = "AUTH_007"
    PERMISSION_DENIED = "AUTH_009"

    # Boards (BOARD_xxx)
    BOARD_NOT_FOUND = "BOARD_001"
    NOT_BOARD_OWNER = "BOARD_002"

    # Thoughts (THOUGHT_xxx)
    THOUGHT_NOT_FOUND = "THOUGHT_001"
    INVALID_CHECKLIST = "THOUGHT_002"

    # Connections (CONN_xxx)
    CONNECTION_NOT_FOUND = "CONN_001"
    INVALID_CONNECTION = "CONN_002"

    # Validation (VAL_xxx)
    VALIDATION_ERROR = "VAL_001"

    # Database (DB_xxx)
    DATABASE_ERROR = "DB_001"

    # General (GEN_xxx)
    INTERNAL_SERVER_ERROR = "GEN_001"
    SERVICE_UNAVAILABLE = "GEN_002"
    RATE_LIMIT_EXCEEDED = "GEN_003"


class AppException(Exception):
    """
    Base exception class for all application errors.

    Attributes:
        message: Human readable error message
        code: Error code (ErrorCode enum)
        status_code: HTTP status code
        details: Extra error details (optional)
    """

    # Extra response headers, e.g. Retry-After
    headers: Optional[dict[str, str]] = None

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Render the exception as an API response body"""
        result = {
            "error": self.code.value,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.details:
            result["details"] = self.details
        return result


# ==================== Authentication Exceptions ====================

class AuthenticationException(AppException):
    """Generic authentication failure"""

    def __init__(
        self,
        message: str = "Authentication failed",
        code: ErrorCode = ErrorCode.INVALID_TOKEN,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, 401, details)


class TokenExpiredException(AuthenticationException):
    """Missing, expired or invalid bearer token"""

    def __init__(self, message: str = "Session expired, please log in again"):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED)


class InvalidCredentialsException(AuthenticationException):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS)


class UserNotFoundException(AuthenticationException):
    """Token refers to a user that no longer exists"""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, ErrorCode.USER_NOT_FOUND)


class UsernameTakenException(AppException):
    """Username already registered"""

    def __init__(self, message: str = "Username already exists"):
        super().__init__(message, ErrorCode.USERNAME_TAKEN, 400, {"field": "username"})


class PermissionDeniedException(AppException):
    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        code: ErrorCode = ErrorCode.PERMISSION_DENIED,
    ):
        super().__init__(message, code, 403)


class NotBoardOwnerException(PermissionDeniedException):
    """Board exists but belongs to another user"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, ErrorCode.NOT_BOARD_OWNER)


# ==================== Not Found Exceptions ====================

class ResourceNotFoundException(AppException):
    """Generic missing resource"""

    def __init__(self, message: str, code: ErrorCode, resource_id: Any = None):
        details = {"id": str(resource_id)} if resource_id is not None else None
        super().__init__(message, code, 404, details)


class BoardNotFoundException(ResourceNotFoundException):
    def __init__(self, board_id: Any = None):
        super().__init__("Board not found", ErrorCode.BOARD_NOT_FOUND, board_id)


class ThoughtNotFoundException(ResourceNotFoundException):
    def __init__(self, thought_id: Any = None):
        super().__init__("Thought not found", ErrorCode.THOUGHT_NOT_FOUND, thought_id)


class ConnectionNotFoundException(ResourceNotFoundException):
    def __init__(self, connection_id: Any = None):
        super().__init__("Connection not found", ErrorCode.CONNECTION_NOT_FOUND, connection_id)


# ==================== Validation Exceptions ====================

class ValidationException(AppException):
    """Generic validation failure"""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.VALIDATION_ERROR, 400, details)


class InvalidChecklistException(ValidationException):
    def __init__(self, reason: str):
        super().__init__("Checklist content must be a JSON array of items", {"field": "content", "reason": reason})
        self.code = ErrorCode.INVALID_CHECKLIST


class InvalidConnectionException(ValidationException):
    """Connection endpoints missing, on another board, or identical"""

    def __init__(self, reason: str):
        super().__init__(f"Invalid connection: {reason}", {"reason": reason})
        self.code = ErrorCode.INVALID_CONNECTION


# ==================== Rate Limiting ====================

class RateLimitExceededException(AppException):
    """Caller spent its request budget for the current window"""

    def __init__(self, retry_after: int, headers: Optional[dict[str, str]] = None):
        super().__init__(
            "Rate limit exceeded. Please try again later.",
            ErrorCode.RATE_LIMIT_EXCEEDED,
            429,
            {"retry_after": retry_after},
        )
        self.headers = headers


# ==================== Database Exceptions ====================

class DatabaseException(AppException):
    def __init__(
        self,
        message: str = "Database error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.DATABASE_ERROR, 500, details)
