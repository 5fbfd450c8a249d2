"""Account registration, authentication, profiles and counters."""

import asyncio
import logging
import re

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nobby.database import Database
from nobby.models.token import PasswordResetToken, UserSession
from nobby.models.topic import Post, Topic
from nobby.models.user import AccountUser
from nobby.services.base import ConflictError, InvalidInputError, NotFoundError
from nobby.services.content import page_window
from nobby.services.password_reset import mark_token_used
from nobby.utils.clock import now_epoch
from nobby.utils.security import (
    DEFAULT_PASSWORD_ITERATIONS,
    PasswordHash,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,30}$")
MIN_PASSWORD_LENGTH = 6
MAX_USER_STATUS_LENGTH = 140
MAX_USER_BIO_LENGTH = 4000


def clean_username(username: str) -> str:
    return username.strip()


def clean_email(email: str) -> str:
    return email.strip().lower()


def clean_user_status(value: str) -> str:
    """Trim a one-line status and clamp it to 140 characters."""
    return value.strip()[:MAX_USER_STATUS_LENGTH]


def clean_user_bio(value: str) -> str:
    """Trim a profile biography and clamp it to 4000 characters."""
    return value.strip()[:MAX_USER_BIO_LENGTH]


def validate_password(password: str) -> None:
    """Raise InvalidInputError if the password is too short."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


class AccountDirectory:
    """User accounts backed by the ``account_user`` table.

    Passwords are hashed with the server secret mixed in, so the same
    ``secret`` must be used for every directory opened on one database.
    """

    def __init__(
        self,
        database: Database,
        secret: str,
        iterations: int = DEFAULT_PASSWORD_ITERATIONS,
    ) -> None:
        self.database = database
        self.secret = secret
        self.iterations = iterations
        # Cost of the dummy derivation for unknown usernames; follows the
        # stored count of the last account checked.
        self._dummy_iterations = iterations

    # Lookups

    async def get_user_by_id(self, user_id: int) -> AccountUser | None:
        async with self.database.session() as session:
            return await session.get(AccountUser, user_id)

    async def get_user_by_username(self, username: str) -> AccountUser | None:
        """Find a user by username, ignoring case."""
        username = clean_username(username)
        if not username:
            return None
        async with self.database.session() as session:
            result = await session.execute(
                select(AccountUser)
                .where(func.lower(AccountUser.username) == func.lower(username))
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> AccountUser | None:
        email = clean_email(email)
        if not email:
            return None
        async with self.database.session() as session:
            result = await session.execute(
                select(AccountUser).where(AccountUser.email == email).limit(1)
            )
            return result.scalar_one_or_none()

    async def count_users(self) -> int:
        async with self.database.session() as session:
            result = await session.execute(select(func.count()).select_from(AccountUser))
            return result.scalar_one()

    async def list_user_stats(self, page: int = 1, page_size: int = 50) -> list[AccountUser]:
        """One page of users, most active first."""
        limit, offset = page_window(page, page_size)
        async with self.database.session() as session:
            result = await session.execute(
                select(AccountUser)
                .order_by(
                    AccountUser.post_count.desc(),
                    AccountUser.thread_count.desc(),
                    AccountUser.username.asc(),
                )
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars())

    # Registration and login

    async def register(self, username: str, email: str, password: str) -> AccountUser:
        """Create an account.

        The username is trimmed and keeps its case; the email is trimmed and
        lowercased. Uniqueness of both is checked ignoring case, and the
        database indexes reject a concurrent duplicate that slips past the
        lookups.

        Raises:
            InvalidInputError: If a field is empty, malformed or too short.
            ConflictError: If the username or email is already registered.
        """
        username = clean_username(username)
        email = clean_email(email)
        if not USERNAME_PATTERN.match(username):
            raise InvalidInputError(
                "Username must be 3-30 letters, numbers, underscores or hyphens"
            )
        if not email or "@" not in email:
            raise InvalidInputError("A valid email address is required")
        validate_password(password)

        if await self.get_user_by_username(username) is not None:
            raise ConflictError("Username already registered")
        if await self.get_user_by_email(email) is not None:
            raise ConflictError("Email already registered")

        password_hash = await asyncio.to_thread(
            hash_password, self.secret, username, password, self.iterations
        )
        now = now_epoch()
        user = AccountUser(
            username=username,
            email=email,
            is_admin=False,
            thread_count=0,
            post_count=0,
            user_status="",
            user_bio="",
            password_salt=password_hash.salt,
            password_hash=password_hash.hash,
            password_iterations=password_hash.iterations,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self.database.transaction() as session:
                session.add(user)
        except IntegrityError:
            raise ConflictError("Username or email already registered") from None

        logger.info("Registered user %s (id=%d)", user.username, user.id)
        return user

    async def authenticate(self, username: str, password: str) -> AccountUser | None:
        """Return the user if the password matches, else None.

        Unknown usernames and wrong passwords are indistinguishable: both
        return None after one key derivation.
        """
        user = await self.get_user_by_username(username)
        if user is None:
            await asyncio.to_thread(
                hash_password, self.secret, "", password, self._dummy_iterations
            )
            return None

        self._dummy_iterations = user.password_iterations

        matches = await asyncio.to_thread(
            verify_password,
            self.secret,
            user.username,
            password,
            user.password_salt,
            user.password_hash,
            user.password_iterations,
        )
        return user if matches else None

    # Updates

    async def _update_user(self, user_id: int, **values) -> None:
        async with self.database.transaction() as session:
            result = await session.execute(
                update(AccountUser).where(AccountUser.id == user_id).values(**values)
            )
        if result.rowcount != 1:
            raise NotFoundError("User not found")

    async def set_password(self, user: AccountUser, new_password: str) -> AccountUser:
        """Replace the user's salt, hash and iteration count.

        Raises:
            InvalidInputError: If the new password is too short.
            NotFoundError: If the user no longer exists.
        """
        validate_password(new_password)
        password_hash = await asyncio.to_thread(
            hash_password, self.secret, user.username, new_password, self.iterations
        )
        now = now_epoch()
        async with self.database.transaction() as session:
            await self._store_password(session, user.id, password_hash, now)

        self._apply_password(user, password_hash, now)
        logger.info("Password changed for user %s", user.username)
        return user

    async def reset_password(self, token: str, new_password: str) -> AccountUser | None:
        """Spend a reset token and set a new password in one transaction.

        The token is marked used, the password replaced and every session
        of the account deleted together; if any step fails the token stays
        valid.

        Returns:
            The updated user, or None if the token is unknown, used or expired.

        Raises:
            InvalidInputError: If the new password is too short.
        """
        validate_password(new_password)
        if not token:
            return None

        async with self.database.session() as session:
            result = await session.execute(
                select(AccountUser)
                .join(PasswordResetToken, PasswordResetToken.user_id == AccountUser.id)
                .where(PasswordResetToken.token == token)
            )
            user = result.scalar_one_or_none()
        if user is None:
            return None

        password_hash = await asyncio.to_thread(
            hash_password, self.secret, user.username, new_password, self.iterations
        )
        now = now_epoch()
        async with self.database.transaction() as session:
            if await mark_token_used(session, token, now) != user.id:
                return None
            await self._store_password(session, user.id, password_hash, now)
            await session.execute(delete(UserSession).where(UserSession.user_id == user.id))

        self._apply_password(user, password_hash, now)
        logger.info("Password reset for user %s", user.username)
        return user

    async def _store_password(
        self,
        session: AsyncSession,
        user_id: int,
        password_hash: PasswordHash,
        now: int,
    ) -> None:
        result = await session.execute(
            update(AccountUser)
            .where(AccountUser.id == user_id)
            .values(
                password_salt=password_hash.salt,
                password_hash=password_hash.hash,
                password_iterations=password_hash.iterations,
                updated_at=now,
            )
        )
        if result.rowcount != 1:
            raise NotFoundError("User not found")

    @staticmethod
    def _apply_password(user: AccountUser, password_hash: PasswordHash, now: int) -> None:
        user.password_salt = password_hash.salt
        user.password_hash = password_hash.hash
        user.password_iterations = password_hash.iterations
        user.updated_at = now

    async def update_profile(self, user: AccountUser, status: str, bio: str) -> AccountUser:
        """Store the clamped status line and biography."""
        user_status = clean_user_status(status)
        user_bio = clean_user_bio(bio)
        now = now_epoch()
        await self._update_user(user.id, user_status=user_status, user_bio=user_bio, updated_at=now)
        user.user_status = user_status
        user.user_bio = user_bio
        user.updated_at = now
        return user

    async def set_admin(self, user_id: int, is_admin: bool = True) -> None:
        await self._update_user(user_id, is_admin=is_admin, updated_at=now_epoch())

    async def sync_counters(self) -> int:
        """Recompute thread and post counters from authored content.

        Only rows whose counters drifted are written.

        Returns:
            Number of users whose counters changed.
        """
        now = now_epoch()
        changed = 0
        async with self.database.transaction() as session:
            thread_counts = dict(
                (
                    await session.execute(
                        select(Topic.author_name, func.count()).group_by(Topic.author_name)
                    )
                ).all()
            )
            post_counts = dict(
                (
                    await session.execute(
                        select(Post.author_name, func.count()).group_by(Post.author_name)
                    )
                ).all()
            )

            users = (await session.execute(select(AccountUser))).scalars().all()
            for user in users:
                thread_count = thread_counts.get(user.username, 0)
                post_count = post_counts.get(user.username, 0)
                if user.thread_count != thread_count or user.post_count != post_count:
                    user.thread_count = thread_count
                    user.post_count = post_count
                    user.updated_at = now
                    changed += 1

        if changed:
            logger.info("Reconciled activity counters for %d user(s)", changed)
        return changed
