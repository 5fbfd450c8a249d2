"""Pydantic schemas for request/response validation."""

from nobby.schemas.board import (
    BoardCreate,
    BoardIndexResponse,
    BoardPageResponse,
    BoardResponse,
    BoardSummaryResponse,
    LastPostResponse,
)
from nobby.schemas.topic import (
    PostResponse,
    ReplyCreate,
    TopicCreate,
    TopicPageResponse,
    TopicResponse,
    TopicSummaryResponse,
)
from nobby.schemas.user import (
    ForgotPasswordRequest,
    ForgotUsernameRequest,
    MessageResponse,
    ProfileUpdate,
    ResetPasswordRequest,
    UserCreate,
    UserListResponse,
    UserLogin,
    UserResponse,
)

__all__ = [
    # Board schemas
    "BoardCreate",
    "BoardResponse",
    "BoardSummaryResponse",
    "BoardIndexResponse",
    "BoardPageResponse",
    "LastPostResponse",
    # Topic schemas
    "TopicCreate",
    "ReplyCreate",
    "TopicResponse",
    "TopicSummaryResponse",
    "PostResponse",
    "TopicPageResponse",
    # User schemas
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserListResponse",
    "ProfileUpdate",
    "ForgotPasswordRequest",
    "ForgotUsernameRequest",
    "ResetPasswordRequest",
    "MessageResponse",
]
