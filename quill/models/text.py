"""Text model — a user's written response to an idea."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text as TextType
from sqlalchemy.orm import Mapped, mapped_column

from quill.database import Base, utcnow


class Text(Base):
    __tablename__ = "texts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    idea_id: Mapped[int] = mapped_column(
        ForeignKey("ideas.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(TextType, nullable=False)
    # Minutes spent writing.
    time: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
