"""Account registration, login, and lookup."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quill.errors import ValidationFailed
from quill.models.user import Role, User
from quill.services.credentials import DUMMY_HASH, hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def register(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> User:
    """
    Create a new account.

    Raises ``ValidationFailed`` when the email is already registered, including
    when a concurrent registration wins the unique-index race.
    """
    email = normalize_email(email)
    if await get_user_by_email(db, email):
        raise ValidationFailed("user already exists")

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ValidationFailed("user already exists") from e
    await db.refresh(user)

    logger.info("Registered user %s (%s)", user.id, user.role.value)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the user for valid credentials, else raise ``ValidationFailed``."""
    user = await get_user_by_email(db, email)
    if not user:
        verify_password(password, DUMMY_HASH)
        raise ValidationFailed("invalid credentials")
    if not verify_password(password, user.password_hash):
        raise ValidationFailed("invalid credentials")
    return user
