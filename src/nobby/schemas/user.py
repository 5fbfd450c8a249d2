"""Pydantic schemas for user and authentication API endpoints."""

from typing import Self

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from nobby.services.accounts import MIN_PASSWORD_LENGTH, USERNAME_PATTERN


class UserCreate(BaseModel):
    """Schema for user registration."""

    username: str = Field(description="Unique username (3-30 characters, case-insensitive)")
    email: EmailStr = Field(description="Valid email address")
    password: str = Field(
        min_length=MIN_PASSWORD_LENGTH,
        max_length=200,
        description=f"Password (at least {MIN_PASSWORD_LENGTH} characters)",
    )
    repeat_password: str = Field(description="Password typed a second time")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username contains only allowed characters."""
        v = v.strip()
        if not USERNAME_PATTERN.match(v):
            msg = "Username must be 3-30 letters, numbers, underscores or hyphens"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.password != self.repeat_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    """Schema for user login request."""

    username: str = Field(description="Username")
    password: str = Field(description="Password")


class UserResponse(BaseModel):
    """Public profile and activity counters. Email is only set for the owner or admins."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    email: str | None = Field(default=None, description="Email address")
    is_admin: bool = Field(description="Whether the user is an administrator")
    thread_count: int = Field(description="Topics started")
    post_count: int = Field(description="Posts written, thread starters included")
    comment_count: int = Field(description="Replies written")
    user_status: str = Field(description="Short status line")
    user_bio: str = Field(description="Profile biography (raw text)")
    created_at: int = Field(description="Registration time (Unix seconds)")


class UserListResponse(BaseModel):
    """Paginated user statistics."""

    users: list[UserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ProfileUpdate(BaseModel):
    """Editable profile fields. Longer values are clamped, not rejected."""

    user_status: str = Field(default="", description="Short status line (max 140 characters)")
    user_bio: str = Field(default="", description="Biography (max 4000 characters)")


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(description="Email address of the account")


class ForgotUsernameRequest(BaseModel):
    email: EmailStr = Field(description="Email address of the account")


class ResetPasswordRequest(BaseModel):
    """Schema for completing a password reset."""

    token: str = Field(min_length=1, description="Reset token from the email")
    password: str = Field(
        min_length=MIN_PASSWORD_LENGTH,
        max_length=200,
        description=f"New password (at least {MIN_PASSWORD_LENGTH} characters)",
    )
    repeat_password: str = Field(description="New password typed a second time")

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.password != self.repeat_password:
            raise ValueError("Passwords do not match")
        return self


class MessageResponse(BaseModel):
    message: str
