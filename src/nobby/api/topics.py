"""Topic and reply API endpoints."""

from fastapi import APIRouter, Query

from nobby.api.deps import CurrentUser, Forum
from nobby.schemas.topic import PostResponse, ReplyCreate, TopicPageResponse, TopicResponse
from nobby.services.base import InvalidInputError, NotFoundError
from nobby.services.content import clean_body, total_pages
from nobby.utils.clock import now_epoch

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("/{topic_id}", response_model=TopicPageResponse)
async def get_topic(
    topic_id: int,
    forum: Forum,
    page: int = Query(1, description="Page number (values below 1 mean 1)"),
) -> TopicPageResponse:
    """One page of a topic's posts, thread starter first.

    Raises:
        NotFoundError 404: If the topic does not exist
    """
    topic = await forum.content.get_topic(topic_id)
    if topic is None:
        raise NotFoundError("Topic not found")

    page = max(1, page)
    page_size = forum.settings.page_size
    total = await forum.content.count_posts_by_topic(topic.id)
    posts = await forum.content.list_posts_by_topic(topic.id, page, page_size)

    return TopicPageResponse(
        topic=TopicResponse.model_validate(topic),
        posts=[PostResponse.model_validate(post) for post in posts],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size),
    )


@router.post("/{topic_id}/replies", response_model=PostResponse, status_code=201)
async def create_reply(
    topic_id: int,
    reply_data: ReplyCreate,
    forum: Forum,
    current_user: CurrentUser,
) -> PostResponse:
    """Reply to a topic as the signed-in user.

    Raises:
        UnauthorizedError 401: If not signed in
        InvalidInputError 400: If the body is empty
        NotFoundError 404: If the topic does not exist
    """
    body = clean_body(reply_data.body)
    if not body:
        raise InvalidInputError("Reply message is required")

    post = await forum.content.create_reply(topic_id, current_user.username, body, now_epoch())
    if post is None:
        raise NotFoundError("Topic not found")
    return PostResponse.model_validate(post)
