"""Account user ORM model."""

from __future__ import annotations

from sqlalchemy import BigInteger, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from nobby.database import Base


class AccountUser(Base):
    """Registered account with password credentials and activity counters."""

    __tablename__ = "account_user"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(30), index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)  # stored lowercased
    is_admin: Mapped[bool] = mapped_column(default=False)
    thread_count: Mapped[int] = mapped_column(default=0)
    post_count: Mapped[int] = mapped_column(default=0)
    user_status: Mapped[str] = mapped_column(String(140), default="")
    user_bio: Mapped[str] = mapped_column(Text, default="")
    password_salt: Mapped[str] = mapped_column(String(64))
    password_hash: Mapped[str] = mapped_column(String(64))
    password_iterations: Mapped[int] = mapped_column()
    created_at: Mapped[int] = mapped_column(BigInteger)
    updated_at: Mapped[int] = mapped_column(BigInteger)

    @property
    def comment_count(self) -> int:
        """Replies authored, excluding thread starter posts."""
        return max(0, self.post_count - self.thread_count)


# Usernames are unique regardless of case.
Index("ux_account_user_username_nocase", func.lower(AccountUser.username), unique=True)
