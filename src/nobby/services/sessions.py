"""Cookie-carried login sessions stored in the database."""

import logging

from sqlalchemy import delete, select

from nobby.database import Database
from nobby.models.token import UserSession
from nobby.utils.clock import now_epoch
from nobby.utils.security import make_token

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 24 * 30


class SessionManager:
    """Issues, resolves and revokes opaque session tokens.

    A token is active until ``expires_at``; after that it is treated as
    absent and its row is deleted the next time someone presents it.
    """

    def __init__(self, database: Database, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> None:
        self.database = database
        self.ttl_seconds = ttl_seconds

    async def create_session(self, user_id: int, ttl: int | None = None) -> str:
        """Store a new session for ``user_id`` and return its token."""
        ttl = self.ttl_seconds if ttl is None else ttl
        now = now_epoch()
        session_row = UserSession(
            user_id=user_id,
            token=make_token(),
            expires_at=now + ttl,
            created_at=now,
        )
        async with self.database.transaction() as session:
            session.add(session_row)
        logger.info("Session created for user %d", user_id)
        return session_row.token

    async def resolve_session(self, token: str) -> int | None:
        """Return the user id bound to ``token``, or None if unknown or expired."""
        if not token:
            return None

        async with self.database.session() as session:
            result = await session.execute(
                select(UserSession.user_id, UserSession.expires_at).where(
                    UserSession.token == token
                )
            )
            row = result.first()
        if row is None:
            return None

        user_id, expires_at = row
        if expires_at <= now_epoch():
            await self.clear_session(token)
            logger.info("Expired session removed for user %d", user_id)
            return None
        return user_id

    async def clear_session(self, token: str) -> None:
        """Delete the session for ``token``; missing tokens are ignored."""
        if not token:
            return
        async with self.database.transaction() as session:
            await session.execute(delete(UserSession).where(UserSession.token == token))

    async def clear_user_sessions(self, user_id: int) -> int:
        """Delete every session of one user. Returns the number removed."""
        async with self.database.transaction() as session:
            result = await session.execute(
                delete(UserSession).where(UserSession.user_id == user_id)
            )
        if result.rowcount:
            logger.info("Revoked %d session(s) for user %d", result.rowcount, user_id)
        return result.rowcount
