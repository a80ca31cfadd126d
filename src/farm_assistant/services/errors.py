"""Service-level error types."""


class ServiceError(Exception):
    """Base class for errors raised by application services."""


class InvalidInputError(ServiceError, ValueError):
    """Raised when a computation receives input it cannot work with."""


class UnauthorizedError(ServiceError):
    """Raised when an operation requires an authenticated caller."""


class ForbiddenError(ServiceError):
    """Raised when a caller touches a record owned by someone else."""


class NotFoundError(ServiceError):
    """Raised when a record targeted by a mutation does not exist."""


class BadRequestError(ServiceError):
    """Raised when a request references data the caller may not use."""


class UpstreamError(ServiceError):
    """Raised when an external provider fails to produce a result."""
