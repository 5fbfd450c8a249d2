"""Forum business logic."""

from nobby.services.accounts import AccountDirectory
from nobby.services.base import (
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from nobby.services.content import (
    BoardLastPost,
    BoardSummary,
    ContentStore,
    TopicSummary,
    total_pages,
)
from nobby.services.mailer import LogMailer, MailMessage
from nobby.services.password_reset import PasswordResetManager
from nobby.services.sessions import SessionManager

__all__ = [
    # Errors
    "ServiceError",
    "NotFoundError",
    "InvalidInputError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
    "InternalError",
    # Components
    "AccountDirectory",
    "ContentStore",
    "SessionManager",
    "PasswordResetManager",
    "LogMailer",
    "MailMessage",
    # Read records
    "BoardLastPost",
    "BoardSummary",
    "TopicSummary",
    "total_pages",
]
