"""
Prompt catalog — CRUD, search, and random sampling over ideas.

Write operations are admin-only; that gate lives on the routes.
"""

import logging
import random
from typing import Optional

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quill.errors import Conflict, NotFound
from quill.models.idea import Idea
from quill.models.text import Text
from quill.services.pagination import Page, offset_for, total_pages

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def get_idea(db: AsyncSession, idea_id: int) -> Idea:
    result = await db.execute(select(Idea).where(Idea.id == idea_id))
    idea = result.scalar_one_or_none()
    if not idea:
        raise NotFound("idea not found")
    return idea


async def create_idea(db: AsyncSession, title: str, content: str) -> Idea:
    idea = Idea(title=title, content=content)
    db.add(idea)
    await db.commit()
    await db.refresh(idea)
    logger.info("Created idea %s", idea.id)
    return idea


async def update_idea(db: AsyncSession, idea_id: int, title: str, content: str) -> Idea:
    result = await db.execute(
        update(Idea)
        .where(Idea.id == idea_id)
        .values(title=title, content=content)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        raise NotFound("idea not found")
    await db.commit()

    result = await db.execute(
        select(Idea).where(Idea.id == idea_id).execution_options(populate_existing=True)
    )
    logger.info("Updated idea %s", idea_id)
    return result.scalar_one()


async def delete_idea(db: AsyncSession, idea_id: int) -> None:
    """
    Delete an idea that no text refers to.

    The reference check and the delete are one statement, so a text created
    concurrently cannot slip in between them. When nothing was deleted the
    cause is looked up afterwards: ``NotFound`` if the idea is gone,
    ``Conflict`` if texts still point at it.
    """
    in_use = exists().where(Text.idea_id == idea_id)
    try:
        result = await db.execute(
            delete(Idea)
            .where(Idea.id == idea_id, ~in_use)
            .execution_options(synchronize_session=False)
        )
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Refused to delete idea %s: still referenced", idea_id)
        raise Conflict("idea is referenced by existing texts") from e

    if result.rowcount == 1:
        await db.commit()
        logger.info("Deleted idea %s", idea_id)
        return

    await db.rollback()
    await get_idea(db, idea_id)
    logger.warning("Refused to delete idea %s: still referenced", idea_id)
    raise Conflict("idea is referenced by existing texts")


async def list_ideas(
    db: AsyncSession,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    search: Optional[str] = None,
) -> Page[Idea]:
    """Page through ideas by id; ``search`` matches content case-insensitively."""
    criteria = []
    if search:
        criteria.append(Idea.content.ilike(f"%{_escape_like(search)}%", escape="\\"))

    total = (
        await db.execute(select(func.count(Idea.id)).where(*criteria))
    ).scalar() or 0

    result = await db.execute(
        select(Idea)
        .where(*criteria)
        .order_by(Idea.id.asc())
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    return Page(
        data=list(result.scalars().all()),
        total=total,
        page=page,
        total_pages=total_pages(total, limit),
    )


async def random_idea(db: AsyncSession) -> Idea:
    """Pick one idea uniformly at random from the whole catalog."""
    count = (await db.execute(select(func.count(Idea.id)))).scalar() or 0
    if count == 0:
        raise NotFound("no ideas available")

    result = await db.execute(
        select(Idea).order_by(Idea.id.asc()).offset(random.randrange(count)).limit(1)
    )
    idea = result.scalar_one_or_none()
    if not idea:
        # Rows were deleted between the count and the fetch.
        raise NotFound("no ideas available")
    return idea
