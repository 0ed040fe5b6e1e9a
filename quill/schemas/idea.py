"""Idea Pydantic schemas."""

from typing import List

from pydantic import BaseModel, Field

from quill.schemas.common import CamelModel


class IdeaIn(BaseModel):
    """Body for both create and full update."""
    title: str = Field(min_length=2, max_length=255)
    content: str = Field(min_length=2)


class IdeaOut(CamelModel):
    id: int
    title: str
    content: str


class IdeaPage(CamelModel):
    data: List[IdeaOut]
    total: int
    page: int
    total_pages: int
