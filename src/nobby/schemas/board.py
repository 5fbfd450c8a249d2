"""Pydantic schemas for board API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from nobby.models.board import DEFAULT_SECTION
from nobby.schemas.topic import TopicSummaryResponse


class BoardCreate(BaseModel):
    """Schema for creating a board (administrators only)."""

    slug: str = Field(description="URL identifier: lowercase letters, digits and hyphens")
    title: str = Field(description="Display title")
    description: str = Field(default="", description="One-line description")
    section: str = Field(default=DEFAULT_SECTION, description="Index section heading")


class BoardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    section: str
    slug: str
    title: str
    description: str
    created_at: int


class LastPostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    topic_id: int
    topic_title: str
    author_name: str
    created_at: int


class BoardSummaryResponse(BaseModel):
    """Board row on the index with derived counters."""

    board: BoardResponse
    topic_count: int
    post_count: int
    last_post: LastPostResponse | None = None


class BoardIndexResponse(BaseModel):
    boards: list[BoardSummaryResponse]


class BoardPageResponse(BaseModel):
    """One page of a board's topics."""

    board: BoardResponse
    topics: list[TopicSummaryResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
