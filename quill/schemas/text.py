"""Text Pydantic schemas."""

from typing import List

from pydantic import Field

from quill.schemas.common import MAX_INT, CamelModel, UtcDatetime


class TextIn(CamelModel):
    """Body for both create and full update; the owner is never client-supplied."""
    idea_id: int = Field(gt=0, le=MAX_INT)
    content: str = Field(min_length=10)
    time: int = Field(gt=0, le=MAX_INT)


class TextOut(CamelModel):
    id: int
    user_id: int
    idea_id: int
    content: str
    time: int
    created_at: UtcDatetime


class TextPage(CamelModel):
    data: List[TextOut]
    total: int
    page: int
    total_pages: int
