"""
Exception taxonomy for the Snafles mock API.

Every failure a handler can surface maps to one of these classes. The
error handling middleware turns them into the standard error envelope.
"""


class SnaflesException(Exception):
    """Base exception for Snafles errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class Unauthenticated(SnaflesException):
    """No credential was supplied."""

    def __init__(self, message: str = "No token, authorization denied"):
        super().__init__(
            message=message,
            code="UNAUTHENTICATED",
            status_code=401,
        )


class InvalidToken(SnaflesException):
    """Credential present but the signature or structure is bad."""

    def __init__(self, detail: str = None):
        super().__init__(
            message="Token is not valid",
            code="INVALID_TOKEN",
            status_code=401,
            detail=detail,
        )


class ExpiredToken(SnaflesException):
    """Credential present but past its validity window."""

    def __init__(self):
        super().__init__(
            message="Token has expired",
            code="EXPIRED_TOKEN",
            status_code=401,
        )


class PrincipalNotFound(SnaflesException):
    """Token is valid but the user it names no longer exists."""

    def __init__(self, principal_id: str):
        super().__init__(
            message="Token is not valid",
            code="PRINCIPAL_NOT_FOUND",
            status_code=401,
            detail=f"No user with id '{principal_id}'",
        )


class Forbidden(SnaflesException):
    """Authenticated, but not allowed."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
        )


class NotFoundError(SnaflesException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource.lower()} with identifier '{identifier}' exists",
        )


class ConflictError(SnaflesException):
    """A unique field is already taken."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=400,
            detail=detail,
        )


class InvalidCredentials(SnaflesException):
    """Email/password pair did not match."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=400,
        )


class ValidationError(SnaflesException):
    """Input validation failed."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class RateLimitError(SnaflesException):
    """Rate limit exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            message="Too many requests from this IP, please try again later.",
            code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            detail=f"Maximum {limit} requests per {window_seconds} seconds",
        )
