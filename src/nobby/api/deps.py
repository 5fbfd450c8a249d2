"""Request dependencies: forum context, session cookie and current user."""

from typing import Annotated

from fastapi import Depends, Request, Response

from nobby.context import ForumContext
from nobby.models.user import AccountUser
from nobby.services.base import UnauthorizedError


def get_forum(request: Request) -> ForumContext:
    """Return the forum context created at startup."""
    return request.app.state.forum


Forum = Annotated[ForumContext, Depends(get_forum)]


def session_token(request: Request, forum: Forum) -> str:
    """Raw session token from the request cookie, or an empty string."""
    return request.cookies.get(forum.settings.session_cookie_name, "")


def set_session_cookie(response: Response, forum: ForumContext, token: str) -> None:
    """Attach ``name=token; Path=/; HttpOnly; SameSite=Lax`` to the response."""
    response.set_cookie(
        key=forum.settings.session_cookie_name,
        value=token,
        path="/",
        httponly=True,
        samesite="lax",
        secure=forum.settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response, forum: ForumContext) -> None:
    """Expire the session cookie immediately (``Max-Age=0``)."""
    response.delete_cookie(
        key=forum.settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=forum.settings.session_cookie_secure,
    )


async def get_optional_user(
    forum: Forum,
    token: Annotated[str, Depends(session_token)],
) -> AccountUser | None:
    """Resolve the signed-in user from the session cookie, if any.

    Expired sessions are deleted during resolution and yield None.
    """
    user_id = await forum.sessions.resolve_session(token)
    if user_id is None:
        return None
    return await forum.accounts.get_user_by_id(user_id)


async def get_current_user(
    user: Annotated[AccountUser | None, Depends(get_optional_user)],
) -> AccountUser:
    """Require a signed-in user.

    Raises:
        UnauthorizedError: If there is no valid session.
    """
    if user is None:
        raise UnauthorizedError()
    return user


# Type aliases for use in route dependencies
OptionalUser = Annotated[AccountUser | None, Depends(get_optional_user)]
CurrentUser = Annotated[AccountUser, Depends(get_current_user)]
