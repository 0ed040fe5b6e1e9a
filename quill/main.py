"""
Quill — FastAPI application entry-point.

Run with:
    uvicorn quill.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quill.config import Settings, settings as default_settings
from quill.database import build_engine, build_session_factory, create_tables
from quill.errors import register_exception_handlers
from quill.middleware import SecurityHeadersMiddleware
from quill.services.credentials import CredentialService

# ── Import routers ──
from quill.routers import auth, health, ideas, texts

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its process-wide handles.

    The engine, session factory and credential service are created here and
    kept on ``app.state``; the lifespan creates tables on startup and
    disposes the engine on shutdown.
    """
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

    # ── Lifespan: create tables on startup, close the pool on shutdown ──
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await create_tables(engine)
        logger.info("%s started", settings.APP_NAME)
        yield
        await engine.dispose()
        logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Writing practice — daily prompts and timed written responses.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.credentials = CredentialService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    # ── Register API routers ──
    app.include_router(health.router)
    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(ideas.router, prefix=settings.API_PREFIX)
    app.include_router(texts.router, prefix=settings.API_PREFIX)

    return app


app = create_app()
