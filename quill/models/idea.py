"""Idea model — an admin-curated writing prompt."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quill.database import Base


class Idea(Base):
    __tablename__ = "ideas"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
