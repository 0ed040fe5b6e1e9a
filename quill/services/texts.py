"""
Submission ledger — texts owned by exactly one user.

Only the owner may read, change, or delete a text. Mutations are issued as
single conditional statements (``WHERE id = ? AND user_id = ?``) and judged
by affected-row count; on a miss the row is looked up to tell a missing
text (``NotFound``) from someone else's (``Forbidden``).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quill.errors import Forbidden, NotFound
from quill.models.idea import Idea
from quill.models.text import Text
from quill.services.pagination import Page, offset_for, total_pages

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def as_utc(value: datetime) -> datetime:
    """Naive bounds are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def _require_idea(db: AsyncSession, idea_id: int) -> None:
    found = (await db.execute(select(Idea.id).where(Idea.id == idea_id))).scalar_one_or_none()
    if found is None:
        raise NotFound("idea not found")


async def _raise_for_miss(db: AsyncSession, text_id: int) -> None:
    """Explain why a conditional write on ``text_id`` touched no row."""
    owner_id = (
        await db.execute(select(Text.user_id).where(Text.id == text_id))
    ).scalar_one_or_none()
    if owner_id is None:
        raise NotFound("text not found")
    raise Forbidden("you are not the owner of this text")


async def create_text(
    db: AsyncSession,
    owner_id: int,
    idea_id: int,
    content: str,
    time: int,
) -> Text:
    await _require_idea(db, idea_id)

    text = Text(user_id=owner_id, idea_id=idea_id, content=content, time=time)
    db.add(text)
    try:
        await db.commit()
    except IntegrityError as e:
        # The idea was deleted after the check above.
        await db.rollback()
        raise NotFound("idea not found") from e
    await db.refresh(text)
    logger.info("User %s created text %s for idea %s", owner_id, text.id, idea_id)
    return text


async def get_text(db: AsyncSession, text_id: int, caller_id: int) -> Text:
    result = await db.execute(select(Text).where(Text.id == text_id))
    text = result.scalar_one_or_none()
    if not text:
        raise NotFound("text not found")
    if text.user_id != caller_id:
        raise Forbidden("you are not the owner of this text")
    return text


async def list_texts(
    db: AsyncSession,
    caller_id: int,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    idea_id: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Page[Text]:
    """Page through the caller's texts, newest first."""
    criteria = [Text.user_id == caller_id]
    if idea_id is not None:
        criteria.append(Text.idea_id == idea_id)
    if start is not None:
        criteria.append(Text.created_at >= as_utc(start))
    if end is not None:
        criteria.append(Text.created_at <= as_utc(end))

    total = (
        await db.execute(select(func.count(Text.id)).where(*criteria))
    ).scalar() or 0

    result = await db.execute(
        select(Text)
        .where(*criteria)
        .order_by(Text.created_at.desc(), Text.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    return Page(
        data=list(result.scalars().all()),
        total=total,
        page=page,
        total_pages=total_pages(total, limit),
    )


async def update_text(
    db: AsyncSession,
    text_id: int,
    caller_id: int,
    content: str,
    time: int,
    idea_id: int,
) -> Text:
    """Replace every mutable field of an owned text."""
    try:
        result = await db.execute(
            update(Text)
            .where(Text.id == text_id, Text.user_id == caller_id)
            .values(content=content, time=time, idea_id=idea_id)
            .execution_options(synchronize_session=False)
        )
    except IntegrityError as e:
        # Only a matched row is checked against the ideas foreign key.
        await db.rollback()
        raise NotFound("idea not found") from e
    if result.rowcount != 1:
        await db.rollback()
        await _raise_for_miss(db, text_id)
    await db.commit()

    result = await db.execute(
        select(Text).where(Text.id == text_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def delete_text(db: AsyncSession, text_id: int, caller_id: int) -> None:
    result = await db.execute(
        delete(Text)
        .where(Text.id == text_id, Text.user_id == caller_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        await _raise_for_miss(db, text_id)
    await db.commit()
    logger.info("User %s deleted text %s", caller_id, text_id)
