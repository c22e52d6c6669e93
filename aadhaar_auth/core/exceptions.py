from typing import Optional, Any


class AuthServiceError(Exception):
    """
    Base exception for the authentication service.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AuthServiceError):
    """
    Raised when client input is malformed (e.g. password mismatch).
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)


class AuthenticationError(AuthServiceError):
    """
    Raised for bad credentials and missing or rejected tokens.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class InvalidTokenError(AuthenticationError):
    """
    Raised by the token service when a token cannot be trusted.
    """
    def __init__(self, message: str = "Invalid token", details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "INVALID_TOKEN"


class ConflictError(AuthServiceError):
    """
    Raised when a write violates a uniqueness constraint.

    Surfaces as a 500: sign-up does not tell clients which field clashed.
    """
    def __init__(self, message: str = "Duplicate value", field: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=500, details=details)
        self.field = field


class StoreError(AuthServiceError):
    """
    Raised when the user store fails (connectivity, write errors).
    """
    def __init__(self, message: str = "Store operation failed", details: Optional[Any] = None):
        super().__init__(message, code="STORE_ERROR", status_code=500, details=details)


class UnexpectedError(AuthServiceError):
    """
    Raised for any other failure inside a request handler.
    """
    def __init__(self, message: str = "An internal error occurred. Please try again later.", details: Optional[Any] = None):
        super().__init__(message, code="INTERNAL_ERROR", status_code=500, details=details)
