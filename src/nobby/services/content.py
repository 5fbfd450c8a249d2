"""Boards, topics and posts."""

import logging
import math
import re
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nobby.database import Database
from nobby.models.board import DEFAULT_SECTION, Board
from nobby.models.topic import Post, Topic
from nobby.models.user import AccountUser
from nobby.services.base import ConflictError, InvalidInputError, NotFoundError
from nobby.utils.clock import now_epoch

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 180
MAX_BODY_LENGTH = 12_000
SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{0,63}$")


@dataclass(frozen=True)
class BoardLastPost:
    """Most recent post in a board, for the index page."""

    topic_id: int
    topic_title: str
    author_name: str
    created_at: int


@dataclass(frozen=True)
class BoardSummary:
    board: Board
    topic_count: int
    post_count: int
    last_post: BoardLastPost | None


@dataclass(frozen=True)
class TopicSummary:
    topic: Topic
    reply_count: int


def total_pages(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items; never less than one."""
    if total <= 0:
        return 1
    return max(1, math.ceil(total / max(1, page_size)))


def page_window(page: int, page_size: int) -> tuple[int, int]:
    """Clamp page and page size to at least 1 and return (limit, offset)."""
    safe_page = max(1, page)
    safe_page_size = max(1, page_size)
    return safe_page_size, (safe_page - 1) * safe_page_size


def clean_title(value: str) -> str:
    return value.strip()[:MAX_TITLE_LENGTH]


def clean_body(value: str) -> str:
    return value.strip()[:MAX_BODY_LENGTH]


async def _bump_author_counters(
    session: AsyncSession,
    author_name: str,
    threads: int,
    posts: int,
    now: int,
) -> None:
    # Authors without an account (seeded or legacy content) match no row.
    await session.execute(
        update(AccountUser)
        .where(AccountUser.username == author_name)
        .values(
            thread_count=AccountUser.thread_count + threads,
            post_count=AccountUser.post_count + posts,
            updated_at=now,
        )
    )


class ContentStore:
    """Reads and writes forum content through the shared connection pool."""

    def __init__(self, database: Database) -> None:
        self.database = database

    # Boards

    async def list_boards(self) -> list[Board]:
        """All boards ordered by section, then creation order."""
        async with self.database.session() as session:
            result = await session.execute(
                select(Board).order_by(Board.section.asc(), Board.created_at.asc(), Board.id.asc())
            )
            return list(result.scalars())

    async def get_board(self, board_id: int) -> Board | None:
        async with self.database.session() as session:
            return await session.get(Board, board_id)

    async def get_board_by_slug(self, slug: str) -> Board | None:
        async with self.database.session() as session:
            result = await session.execute(select(Board).where(Board.slug == slug).limit(1))
            return result.scalar_one_or_none()

    async def create_board(
        self,
        slug: str,
        title: str,
        description: str = "",
        section: str = DEFAULT_SECTION,
    ) -> Board:
        """Create a board.

        Raises:
            InvalidInputError: If the slug or title is malformed.
            ConflictError: If the slug is already used.
        """
        slug = slug.strip()
        title = clean_title(title)
        if not SLUG_PATTERN.match(slug):
            raise InvalidInputError("Slug may only contain lowercase letters, digits and hyphens")
        if not title:
            raise InvalidInputError("Board title is required")

        board = Board(
            section=section.strip() or DEFAULT_SECTION,
            slug=slug,
            title=title,
            description=description.strip(),
            created_at=now_epoch(),
        )
        try:
            async with self.database.transaction() as session:
                session.add(board)
        except IntegrityError:
            raise ConflictError("Board slug already exists") from None

        logger.info("Created board %s (%s)", board.slug, board.section)
        return board

    async def seed_default_board(self) -> Board | None:
        """Create the "main" board when the database has no boards yet."""
        async with self.database.session() as session:
            result = await session.execute(select(func.count()).select_from(Board))
            board_count = result.scalar_one()
        if board_count > 0:
            return None
        return await self.create_board(
            slug="main",
            title="Main",
            description="General discussion board.",
        )

    # Topics and posts

    async def get_topic(self, topic_id: int) -> Topic | None:
        async with self.database.session() as session:
            return await session.get(Topic, topic_id)

    async def create_topic_with_first_post(
        self,
        board_id: int,
        title: str,
        author_name: str,
        body: str,
        now: int,
    ) -> Topic:
        """Create a topic and its first post in one transaction.

        The author's thread and post counters are incremented in the same
        transaction.

        Raises:
            NotFoundError: If the board does not exist.
        """
        async with self.database.transaction() as session:
            if await session.get(Board, board_id) is None:
                raise NotFoundError("Board not found")

            topic = Topic(
                board_id=board_id,
                title=title,
                author_name=author_name,
                created_at=now,
                updated_at=now,
            )
            session.add(topic)
            await session.flush()

            session.add(
                Post(
                    topic_id=topic.id,
                    author_name=author_name,
                    body=body,
                    created_at=now,
                )
            )
            await _bump_author_counters(session, author_name, threads=1, posts=1, now=now)

        logger.info("Topic %d created in board %d by %s", topic.id, board_id, author_name)
        return topic

    async def create_reply(
        self,
        topic_id: int,
        author_name: str,
        body: str,
        now: int,
    ) -> Post | None:
        """Add a reply and bump the topic's ``updated_at`` in one transaction.

        Returns:
            The new post, or None if the topic does not exist (nothing is written).
        """
        async with self.database.transaction() as session:
            topic = await session.get(Topic, topic_id)
            if topic is None:
                return None

            post = Post(
                topic_id=topic_id,
                author_name=author_name,
                body=body,
                created_at=now,
            )
            session.add(post)
            topic.updated_at = max(topic.created_at, now)
            await _bump_author_counters(session, author_name, threads=0, posts=1, now=now)

        return post

    async def list_topics_by_board(
        self, board_id: int, page: int = 1, page_size: int = 30
    ) -> list[Topic]:
        """One page of a board's topics, most recently active first."""
        limit, offset = page_window(page, page_size)
        async with self.database.session() as session:
            result = await session.execute(
                select(Topic)
                .where(Topic.board_id == board_id)
                .order_by(Topic.updated_at.desc(), Topic.id.desc())
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars())

    async def list_posts_by_topic(
        self, topic_id: int, page: int = 1, page_size: int = 30
    ) -> list[Post]:
        """One page of a topic's posts, thread starter first."""
        limit, offset = page_window(page, page_size)
        async with self.database.session() as session:
            result = await session.execute(
                select(Post)
                .where(Post.topic_id == topic_id)
                .order_by(Post.created_at.asc(), Post.id.asc())
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars())

    # Aggregates

    async def count_topics_by_board(self, board_id: int) -> int:
        async with self.database.session() as session:
            result = await session.execute(
                select(func.count()).select_from(Topic).where(Topic.board_id == board_id)
            )
            return result.scalar_one()

    async def count_posts_by_board(self, board_id: int) -> int:
        async with self.database.session() as session:
            result = await session.execute(
                select(func.count())
                .select_from(Post)
                .join(Topic, Post.topic_id == Topic.id)
                .where(Topic.board_id == board_id)
            )
            return result.scalar_one()

    async def count_posts_by_topic(self, topic_id: int) -> int:
        async with self.database.session() as session:
            result = await session.execute(
                select(func.count()).select_from(Post).where(Post.topic_id == topic_id)
            )
            return result.scalar_one()

    async def get_last_post_summary(self, board_id: int) -> BoardLastPost | None:
        """Latest post in a board with its topic, or None for an empty board."""
        async with self.database.session() as session:
            result = await session.execute(
                select(Post.created_at, Post.author_name, Topic.id, Topic.title)
                .join(Topic, Post.topic_id == Topic.id)
                .where(Topic.board_id == board_id)
                .order_by(Post.created_at.desc(), Post.id.desc())
                .limit(1)
            )
            row = result.first()
        if row is None:
            return None
        created_at, author_name, topic_id, topic_title = row
        return BoardLastPost(
            topic_id=topic_id,
            topic_title=topic_title,
            author_name=author_name,
            created_at=created_at,
        )

    async def list_board_summaries(self) -> list[BoardSummary]:
        """Boards with their topic/post counts and latest post."""
        summaries = []
        for board in await self.list_boards():
            summaries.append(
                BoardSummary(
                    board=board,
                    topic_count=await self.count_topics_by_board(board.id),
                    post_count=await self.count_posts_by_board(board.id),
                    last_post=await self.get_last_post_summary(board.id),
                )
            )
        return summaries

    async def list_topic_summaries(
        self, board_id: int, page: int = 1, page_size: int = 30
    ) -> list[TopicSummary]:
        """One page of topics with their reply counts (posts minus the starter)."""
        topics = await self.list_topics_by_board(board_id, page, page_size)
        if not topics:
            return []

        async with self.database.session() as session:
            result = await session.execute(
                select(Post.topic_id, func.count())
                .where(Post.topic_id.in_([topic.id for topic in topics]))
                .group_by(Post.topic_id)
            )
            post_counts = dict(result.all())

        return [
            TopicSummary(topic=topic, reply_count=max(0, post_counts.get(topic.id, 0) - 1))
            for topic in topics
        ]
