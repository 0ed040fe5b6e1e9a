"""
Ideas router — the writing-prompt catalog.

Endpoints:
    GET    /ideas/random   → one idea chosen uniformly at random
    GET    /ideas          → paginated list, optional content search
    GET    /ideas/{id}     → a single idea
    POST   /ideas          → create (admin)
    PUT    /ideas/{id}     → replace title and content (admin)
    DELETE /ideas/{id}     → delete an unreferenced idea (admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from quill.database import get_db
from quill.models.user import User
from quill.routers.auth import get_current_user, require_admin
from quill.schemas.common import MAX_INT, Message
from quill.schemas.idea import IdeaIn, IdeaOut, IdeaPage
from quill.services import ideas as catalog

router = APIRouter(prefix="/ideas", tags=["ideas"])


@router.get("/random", response_model=IdeaOut)
async def random_idea(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.random_idea(db)


@router.get("", response_model=IdeaPage)
async def list_ideas(
    page: int = Query(catalog.DEFAULT_PAGE, ge=1, le=MAX_INT),
    limit: int = Query(catalog.DEFAULT_LIMIT, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await catalog.list_ideas(db, page=page, limit=limit, search=search)
    return IdeaPage.model_validate(result)


@router.get("/{idea_id}", response_model=IdeaOut)
async def read_idea(
    idea_id: int = Path(gt=0, le=MAX_INT),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.get_idea(db, idea_id)


@router.post("", response_model=IdeaOut, status_code=status.HTTP_201_CREATED)
async def create_idea(
    body: IdeaIn,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.create_idea(db, title=body.title, content=body.content)


@router.put("/{idea_id}", response_model=IdeaOut)
async def update_idea(
    body: IdeaIn,
    idea_id: int = Path(gt=0, le=MAX_INT),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.update_idea(db, idea_id, title=body.title, content=body.content)


@router.delete("/{idea_id}", response_model=Message)
async def delete_idea(
    idea_id: int = Path(gt=0, le=MAX_INT),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await catalog.delete_idea(db, idea_id)
    return Message(message="idea deleted")
