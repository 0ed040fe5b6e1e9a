"""
Authentication router — email/password accounts and bearer JWTs.

Endpoints:
    POST /auth/register   → create an account, return a token
    POST /auth/login      → exchange credentials for a token
    GET  /auth/me         → the authenticated user's profile

Also home to the request guards used by every protected route:
``get_current_user`` (401 unless a valid token names an existing user) and
``require_admin`` (403 unless that user is an ADMIN).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from quill.database import get_db
from quill.errors import Forbidden, Unauthenticated
from quill.models.user import Role, User
from quill.schemas.user import Token, UserLogin, UserOut, UserRegister
from quill.services import accounts
from quill.services.credentials import CredentialService, ExpiredToken, InvalidToken

router = APIRouter(prefix="/auth", tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)


# ═══════════════════════════════════════════════════════════════
#  Guards
# ═══════════════════════════════════════════════════════════════

def get_credentials(request: Request) -> CredentialService:
    return request.app.state.credentials


async def get_current_user(
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    credentials: CredentialService = Depends(get_credentials),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the ``Authorization: Bearer`` token to a stored User.

    Missing token, bad or expired token, and a token for a user that no
    longer exists all fail with 401.
    """
    if not bearer or not bearer.credentials:
        raise Unauthenticated("missing bearer token")
    try:
        claims = credentials.verify(bearer.credentials)
    except ExpiredToken:
        raise Unauthenticated("token expired")
    except InvalidToken:
        raise Unauthenticated("token invalid")

    user = await accounts.get_user(db, claims.user_id)
    if not user:
        raise Unauthenticated("user not found")
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != Role.ADMIN:
        raise Forbidden("admin role required")
    return current_user


# ═══════════════════════════════════════════════════════════════
#  Routes
# ═══════════════════════════════════════════════════════════════

@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    body: UserRegister,
    credentials: CredentialService = Depends(get_credentials),
    db: AsyncSession = Depends(get_db),
):
    user = await accounts.register(db, name=body.name, email=body.email, password=body.password)
    return Token(token=credentials.issue(user.id, user.role))


@router.post("/login", response_model=Token)
async def login(
    body: UserLogin,
    credentials: CredentialService = Depends(get_credentials),
    db: AsyncSession = Depends(get_db),
):
    user = await accounts.authenticate(db, email=body.email, password=body.password)
    return Token(token=credentials.issue(user.id, user.role))


@router.get("/me", response_model=UserOut)
async def read_me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user
