"""SQLAlchemy ORM models."""

from nobby.models.board import Board
from nobby.models.token import PasswordResetToken, UserSession
from nobby.models.topic import Post, Topic
from nobby.models.user import AccountUser

__all__ = [
    "AccountUser",
    "Board",
    "PasswordResetToken",
    "Post",
    "Topic",
    "UserSession",
]
