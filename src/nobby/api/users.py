"""User profile and statistics API endpoints."""

from fastapi import APIRouter, Query

from nobby.api.deps import CurrentUser, Forum, OptionalUser
from nobby.models.user import AccountUser
from nobby.schemas.user import ProfileUpdate, UserListResponse, UserResponse
from nobby.services.base import ForbiddenError, NotFoundError
from nobby.services.content import total_pages

router = APIRouter(prefix="/users", tags=["users"])


def user_to_response(user: AccountUser, show_email: bool = False) -> UserResponse:
    """Convert an AccountUser to UserResponse, hiding the email unless asked."""
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email if show_email else None,
        is_admin=user.is_admin,
        thread_count=user.thread_count,
        post_count=user.post_count,
        comment_count=user.comment_count,
        user_status=user.user_status,
        user_bio=user.user_bio,
        created_at=user.created_at,
    )


def can_manage(viewer: AccountUser | None, user: AccountUser) -> bool:
    return viewer is not None and (viewer.is_admin or viewer.id == user.id)


@router.get("", response_model=UserListResponse)
async def list_users(
    forum: Forum,
    viewer: OptionalUser,
    page: int = Query(1, description="Page number (values below 1 mean 1)"),
) -> UserListResponse:
    """List users by activity. Emails are shown to administrators only."""
    page = max(1, page)
    page_size = forum.settings.users_page_size
    total = await forum.accounts.count_users()
    users = await forum.accounts.list_user_stats(page, page_size)
    show_emails = viewer is not None and viewer.is_admin

    return UserListResponse(
        users=[user_to_response(user, show_email=show_emails) for user in users],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size),
    )


@router.get("/{username}", response_model=UserResponse)
async def get_user(username: str, forum: Forum, viewer: OptionalUser) -> UserResponse:
    """Get one user's public profile.

    Raises:
        NotFoundError 404: If no user has that name (any case)
    """
    user = await forum.accounts.get_user_by_username(username)
    if user is None:
        raise NotFoundError("User not found")
    return user_to_response(user, show_email=can_manage(viewer, user))


@router.patch("/{username}", response_model=UserResponse)
async def update_user_profile(
    username: str,
    profile: ProfileUpdate,
    forum: Forum,
    current_user: CurrentUser,
) -> UserResponse:
    """Update status line and biography.

    Raises:
        UnauthorizedError 401: If not signed in
        ForbiddenError 403: If editing another user's profile without admin rights
        NotFoundError 404: If the user does not exist
    """
    user = await forum.accounts.get_user_by_username(username)
    if user is None:
        raise NotFoundError("User not found")
    if not can_manage(current_user, user):
        raise ForbiddenError("You can only edit your own profile")

    user = await forum.accounts.update_profile(user, profile.user_status, profile.user_bio)
    return user_to_response(user, show_email=True)
