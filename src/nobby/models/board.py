"""Board ORM model."""

from __future__ import annotations

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nobby.database import Base

DEFAULT_SECTION = "General Discussions"


class Board(Base):
    """A board groups topics; boards are ordered by section for display."""

    __tablename__ = "board"

    id: Mapped[int] = mapped_column(primary_key=True)
    section: Mapped[str] = mapped_column(String(120), default=DEFAULT_SECTION)
    slug: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(180))
    description: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[int] = mapped_column(BigInteger)
