"""
Texts router — a user's own written responses.

Endpoints:
    GET    /texts          → the caller's texts, newest first (filter by idea/date)
    POST   /texts          → submit a text for an idea
    GET    /texts/{id}     → read one owned text
    PUT    /texts/{id}     → replace content, time and idea of an owned text
    DELETE /texts/{id}     → delete an owned text
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from quill.database import get_db
from quill.errors import ValidationFailed
from quill.models.user import User
from quill.routers.auth import get_current_user
from quill.schemas.common import MAX_INT, Message
from quill.schemas.text import TextIn, TextOut, TextPage
from quill.services import texts as ledger

router = APIRouter(prefix="/texts", tags=["texts"])


@router.get("", response_model=TextPage)
async def list_texts(
    page: int = Query(ledger.DEFAULT_PAGE, ge=1, le=MAX_INT),
    limit: int = Query(ledger.DEFAULT_LIMIT, ge=1, le=100),
    idea_id: Optional[int] = Query(None, alias="ideaId", gt=0, le=MAX_INT),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if start_date and end_date and ledger.as_utc(start_date) > ledger.as_utc(end_date):
        raise ValidationFailed("startDate must not be after endDate")
    result = await ledger.list_texts(
        db,
        current_user.id,
        page=page,
        limit=limit,
        idea_id=idea_id,
        start=start_date,
        end=end_date,
    )
    return TextPage.model_validate(result)


@router.post("", response_model=TextOut, status_code=status.HTTP_201_CREATED)
async def create_text(
    body: TextIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ledger.create_text(
        db, current_user.id, idea_id=body.idea_id, content=body.content, time=body.time
    )


@router.get("/{text_id}", response_model=TextOut)
async def read_text(
    text_id: int = Path(gt=0, le=MAX_INT),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ledger.get_text(db, text_id, current_user.id)


@router.put("/{text_id}", response_model=TextOut)
async def update_text(
    body: TextIn,
    text_id: int = Path(gt=0, le=MAX_INT),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ledger.update_text(
        db,
        text_id,
        current_user.id,
        content=body.content,
        time=body.time,
        idea_id=body.idea_id,
    )


@router.delete("/{text_id}", response_model=Message)
async def delete_text(
    text_id: int = Path(gt=0, le=MAX_INT),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await ledger.delete_text(db, text_id, current_user.id)
    return Message(message="text deleted")
