"""
Service Errors

Base exception hierarchy shared by all resource modules. Each error carries
the HTTP status code and machine-readable error code used at the API boundary.
"""


class ServiceError(Exception):
    """Base exception for service-layer errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ResourceNotFoundError(ServiceError):
    """Raised when a resource (or the calling identity) does not exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
        )


class AccessForbiddenError(ServiceError):
    """Raised when the caller is not allowed to perform an operation."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=403,
        )


__all__ = [
    "ServiceError",
    "ResourceNotFoundError",
    "AccessForbiddenError",
]
