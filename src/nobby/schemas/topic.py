"""Pydantic schemas for topic and post API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class TopicCreate(BaseModel):
    """Schema for starting a topic. The author is always the signed-in user."""

    title: str = Field(description="Topic title (trimmed, max 180 characters)")
    body: str = Field(description="First post body (trimmed, max 12000 characters)")


class ReplyCreate(BaseModel):
    """Schema for replying to a topic. The author is always the signed-in user."""

    body: str = Field(description="Reply body (trimmed, max 12000 characters)")


class TopicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    board_id: int
    title: str
    author_name: str
    created_at: int
    updated_at: int


class TopicSummaryResponse(TopicResponse):
    reply_count: int = Field(description="Posts after the thread starter")


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    topic_id: int
    author_name: str
    body: str
    created_at: int


class TopicPageResponse(BaseModel):
    """One page of a topic's posts, oldest first."""

    topic: TopicResponse
    posts: list[PostResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
