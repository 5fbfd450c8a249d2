"""Board API endpoints."""

from fastapi import APIRouter, Query

from nobby.api.deps import CurrentUser, Forum
from nobby.schemas.board import (
    BoardCreate,
    BoardIndexResponse,
    BoardPageResponse,
    BoardResponse,
    BoardSummaryResponse,
    LastPostResponse,
)
from nobby.schemas.topic import TopicCreate, TopicResponse, TopicSummaryResponse
from nobby.services.base import ForbiddenError, InvalidInputError, NotFoundError
from nobby.services.content import clean_body, clean_title, total_pages
from nobby.utils.clock import now_epoch

router = APIRouter(prefix="/boards", tags=["boards"])


@router.get("", response_model=BoardIndexResponse)
async def list_boards(forum: Forum) -> BoardIndexResponse:
    """Board index: every board with topic/post counts and its latest post."""
    summaries = await forum.content.list_board_summaries()
    return BoardIndexResponse(
        boards=[
            BoardSummaryResponse(
                board=BoardResponse.model_validate(summary.board),
                topic_count=summary.topic_count,
                post_count=summary.post_count,
                last_post=(
                    LastPostResponse.model_validate(summary.last_post)
                    if summary.last_post
                    else None
                ),
            )
            for summary in summaries
        ]
    )


@router.post("", response_model=BoardResponse, status_code=201)
async def create_board(
    board_data: BoardCreate,
    forum: Forum,
    current_user: CurrentUser,
) -> BoardResponse:
    """Create a board. Administrators only.

    Raises:
        ForbiddenError 403: If the user is not an administrator
        ConflictError 409: If the slug is taken
    """
    if not current_user.is_admin:
        raise ForbiddenError("Only administrators can create boards")

    board = await forum.content.create_board(
        slug=board_data.slug,
        title=board_data.title,
        description=board_data.description,
        section=board_data.section,
    )
    return BoardResponse.model_validate(board)


@router.get("/{slug}", response_model=BoardPageResponse)
async def get_board(
    slug: str,
    forum: Forum,
    page: int = Query(1, description="Page number (values below 1 mean 1)"),
) -> BoardPageResponse:
    """One page of a board's topics, most recently active first.

    Raises:
        NotFoundError 404: If the board does not exist
    """
    board = await forum.content.get_board_by_slug(slug)
    if board is None:
        raise NotFoundError("Board not found")

    page = max(1, page)
    page_size = forum.settings.page_size
    total = await forum.content.count_topics_by_board(board.id)
    summaries = await forum.content.list_topic_summaries(board.id, page, page_size)

    return BoardPageResponse(
        board=BoardResponse.model_validate(board),
        topics=[
            TopicSummaryResponse(
                **TopicResponse.model_validate(summary.topic).model_dump(),
                reply_count=summary.reply_count,
            )
            for summary in summaries
        ],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size),
    )


@router.post("/{slug}/topics", response_model=TopicResponse, status_code=201)
async def create_topic(
    slug: str,
    topic_data: TopicCreate,
    forum: Forum,
    current_user: CurrentUser,
) -> TopicResponse:
    """Start a topic with its first post, authored by the signed-in user.

    Raises:
        UnauthorizedError 401: If not signed in
        NotFoundError 404: If the board does not exist
        InvalidInputError 400: If the title or body is empty
    """
    board = await forum.content.get_board_by_slug(slug)
    if board is None:
        raise NotFoundError("Board not found")

    title = clean_title(topic_data.title)
    body = clean_body(topic_data.body)
    if not title or not body:
        raise InvalidInputError("Title and message are required")

    topic = await forum.content.create_topic_with_first_post(
        board.id,
        title,
        current_user.username,
        body,
        now_epoch(),
    )
    return TopicResponse.model_validate(topic)
