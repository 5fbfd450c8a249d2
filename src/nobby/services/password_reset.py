"""Single-use password reset tokens."""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from nobby.database import Database
from nobby.models.token import PasswordResetToken
from nobby.utils.clock import now_epoch
from nobby.utils.security import make_token

logger = logging.getLogger(__name__)

DEFAULT_RESET_TTL_SECONDS = 60 * 30


class PasswordResetManager:
    """Mints reset tokens and consumes each one at most once."""

    def __init__(self, database: Database, ttl_seconds: int = DEFAULT_RESET_TTL_SECONDS) -> None:
        self.database = database
        self.ttl_seconds = ttl_seconds

    async def create_reset_token(self, user_id: int, ttl: int | None = None) -> str:
        """Store an unused reset token for ``user_id`` and return it."""
        ttl = self.ttl_seconds if ttl is None else ttl
        now = now_epoch()
        reset_token = PasswordResetToken(
            user_id=user_id,
            token=make_token(),
            expires_at=now + ttl,
            used_at=0,
            created_at=now,
        )
        async with self.database.transaction() as session:
            session.add(reset_token)
        logger.info("Password reset token issued for user %d", user_id)
        return reset_token.token

    async def consume_reset_token(self, token: str) -> int | None:
        """Mark ``token`` used and return its user id.

        Only the first call for a live token succeeds. Unknown, used and
        expired tokens all return None.
        """
        if not token:
            return None

        async with self.database.transaction() as session:
            user_id = await mark_token_used(session, token, now_epoch())
        if user_id is not None:
            logger.info("Password reset token consumed for user %d", user_id)
        return user_id


async def mark_token_used(session: AsyncSession, token: str, now: int) -> int | None:
    """Mark a live token used inside the caller's transaction.

    The update is conditioned on the stored unused state, so concurrent
    callers cannot both win.

    Returns:
        The bound user id, or None if the token is unknown, used or expired.
    """
    result = await session.execute(
        update(PasswordResetToken)
        .where(
            PasswordResetToken.token == token,
            PasswordResetToken.used_at == 0,
            PasswordResetToken.expires_at > now,
        )
        .values(used_at=now)
    )
    if result.rowcount != 1:
        return None

    return (
        await session.execute(
            select(PasswordResetToken.user_id).where(PasswordResetToken.token == token)
        )
    ).scalar_one()
