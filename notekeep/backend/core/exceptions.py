"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Services and dependencies raise these; exception_handlers.py turns them
into HTTP responses.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found, or belongs to someone else."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Authentication required",
        code: str = "AUTH_INVALID_CREDENTIAL",
    ) -> None:
        super().__init__(message, code=code)


class MissingCredentialError(AuthenticationError):
    """Raised when the Authorization header is absent."""

    def __init__(self, message: str = "Missing Authorization header") -> None:
        super().__init__(message, code="AUTH_MISSING_CREDENTIAL")


class MalformedCredentialError(AuthenticationError):
    """Raised when the Authorization header is not `Bearer <token>`."""

    def __init__(self, message: str = "Authorization header must be 'Bearer <token>'") -> None:
        super().__init__(message, code="AUTH_MALFORMED_CREDENTIAL")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class ExternalServiceError(ApplicationError):
    """Raised when an external service call fails."""

    def __init__(self, message: str = "External service error") -> None:
        super().__init__(message, code="SYS_EXTERNAL_SERVICE_ERROR")


class StorageError(ApplicationError):
    """Raised when the blob store rejects or fails an operation."""

    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message, code="SYS_STORAGE_ERROR")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
