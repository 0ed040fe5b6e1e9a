"""
Seed the database with an admin account and a few starter ideas.

    ADMIN_EMAIL=me@example.com ADMIN_PASSWORD=s3cret python seed_db.py

An existing account with ADMIN_EMAIL is promoted to ADMIN; its password is
left alone. Ideas are only added when the catalog is empty.
"""

import asyncio
import logging

from sqlalchemy import func, select

from quill.config import settings
from quill.database import build_engine, build_session_factory, create_tables
from quill.models.idea import Idea
from quill.models.user import Role, User
from quill.services.accounts import normalize_email
from quill.services.credentials import hash_password

logger = logging.getLogger("seed_db")

STARTER_IDEAS = [
    ("A door left open", "Write about someone who finds a door that is always open, and what lies past it."),
    ("Last message", "Describe the last message you would want to send before losing your phone for a year."),
    ("Morning noises", "List the sounds of your street at 7am and turn one of them into a story."),
    ("The wrong train", "A character boards the wrong train and decides not to get off."),
    ("Inherited object", "Write about an object passed down in a family and the argument it causes."),
]


async def seed(session_factory) -> None:
    if not settings.ADMIN_PASSWORD:
        raise SystemExit("ADMIN_PASSWORD is not set")

    async with session_factory() as session:
        email = normalize_email(settings.ADMIN_EMAIL)
        admin = (
            await session.execute(select(User).where(User.email == email))
        ).scalar_one_or_none()
        if admin:
            admin.role = Role.ADMIN
            logger.info("Promoted %s to ADMIN", email)
        else:
            session.add(User(
                name=settings.ADMIN_NAME,
                email=email,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                role=Role.ADMIN,
            ))
            logger.info("Created admin %s", email)

        idea_count = (await session.execute(select(func.count(Idea.id)))).scalar() or 0
        if idea_count == 0:
            session.add_all([Idea(title=t, content=c) for t, c in STARTER_IDEAS])
            logger.info("Added %d starter ideas", len(STARTER_IDEAS))

        await session.commit()


async def async_main():
    engine = build_engine(settings.DATABASE_URL)
    try:
        await create_tables(engine)
        await seed(build_session_factory(engine))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    asyncio.run(async_main())
