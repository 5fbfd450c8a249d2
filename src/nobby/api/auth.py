"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from nobby.api.deps import (
    CurrentUser,
    Forum,
    clear_session_cookie,
    session_token,
    set_session_cookie,
)
from nobby.api.users import user_to_response
from nobby.schemas.user import (
    ForgotPasswordRequest,
    ForgotUsernameRequest,
    MessageResponse,
    ResetPasswordRequest,
    UserCreate,
    UserLogin,
    UserResponse,
)
from nobby.services.base import InvalidInputError, UnauthorizedError

router = APIRouter(prefix="/auth", tags=["auth"])

FORGOT_PASSWORD_MESSAGE = "If that email is registered, a reset link has been sent."
FORGOT_USERNAME_MESSAGE = "If that email is registered, a username reminder has been sent."
INVALID_RESET_TOKEN_MESSAGE = "Reset link is invalid or has expired"


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(user_data: UserCreate, response: Response, forum: Forum) -> UserResponse:
    """Register a new user and sign them in.

    Raises:
        ConflictError 409: If username (any case) or email already exists
    """
    user = await forum.accounts.register(
        user_data.username,
        user_data.email,
        user_data.password,
    )
    token = await forum.sessions.create_session(user.id)
    set_session_cookie(response, forum, token)
    return user_to_response(user, show_email=True)


@router.post("/login", response_model=UserResponse)
async def login(credentials: UserLogin, response: Response, forum: Forum) -> UserResponse:
    """Authenticate with username and password and set the session cookie.

    Raises:
        UnauthorizedError 401: If the username is unknown or the password is
            wrong; both cases give the same answer.
    """
    user = await forum.accounts.authenticate(credentials.username, credentials.password)
    if user is None:
        raise UnauthorizedError("Invalid username or password")

    token = await forum.sessions.create_session(user.id)
    set_session_cookie(response, forum, token)
    return user_to_response(user, show_email=True)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    forum: Forum,
    token: Annotated[str, Depends(session_token)],
) -> MessageResponse:
    """Delete the current session (if any) and clear the cookie."""
    await forum.sessions.clear_session(token)
    clear_session_cookie(response, forum)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the signed-in user's profile, including email."""
    return user_to_response(current_user, show_email=True)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request_data: ForgotPasswordRequest, forum: Forum) -> MessageResponse:
    """Send a password reset link.

    The answer is the same whether or not the email belongs to an account.
    """
    user = await forum.accounts.get_user_by_email(request_data.email)
    if user is not None:
        token = await forum.resets.create_reset_token(user.id)
        base_url = forum.settings.public_base_url.rstrip("/")
        await forum.mailer.send(
            user.email,
            "Password reset",
            f"Hello {user.username},\n\n"
            f"Reset your password here: {base_url}/reset-password?token={token}\n"
            "The link expires in "
            f"{forum.settings.reset_token_ttl_seconds // 60} minutes.",
        )
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request_data: ResetPasswordRequest, forum: Forum) -> MessageResponse:
    """Consume a reset token and set a new password.

    All existing sessions of the account are signed out.

    Raises:
        InvalidInputError 400: If the token is unknown, used or expired
    """
    user = await forum.accounts.reset_password(request_data.token, request_data.password)
    if user is None:
        raise InvalidInputError(INVALID_RESET_TOKEN_MESSAGE)
    return MessageResponse(message="Password updated. Please log in.")


@router.post("/forgot-username", response_model=MessageResponse)
async def forgot_username(request_data: ForgotUsernameRequest, forum: Forum) -> MessageResponse:
    """Email the username registered to an address, without revealing whether it exists."""
    user = await forum.accounts.get_user_by_email(request_data.email)
    if user is not None:
        await forum.mailer.send(
            user.email,
            "Your username",
            f"The username registered to this address is: {user.username}",
        )
    return MessageResponse(message=FORGOT_USERNAME_MESSAGE)
