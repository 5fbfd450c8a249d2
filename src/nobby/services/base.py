"""Error types raised by the forum services."""


class ServiceError(Exception):
    """Base exception for expected service failures.

    The HTTP layer maps ``status_code`` onto the response; the message is
    safe to show to clients.
    """

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(ServiceError):
    """Raised when a board, topic, user or token does not exist."""

    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class InvalidInputError(ServiceError):
    """Raised for empty, oversize or malformed input."""

    status_code = 400

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class ConflictError(ServiceError):
    """Raised when a unique value (username, email, slug) is already taken."""

    status_code = 409

    def __init__(self, message: str = "Already exists"):
        super().__init__(message)


class UnauthorizedError(ServiceError):
    """Raised when an operation needs a signed-in user."""

    status_code = 401

    def __init__(self, message: str = "Login required"):
        super().__init__(message)


class ForbiddenError(ServiceError):
    """Raised when acting on another account's resource."""

    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message)


class InternalError(ServiceError):
    """Raised when storage fails; the message is logged, never returned."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
