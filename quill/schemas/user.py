"""User Pydantic schemas — registration, login, profile output."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from quill.models.user import Role
from quill.schemas.common import CamelModel, UtcDatetime


class UserRegister(BaseModel):
    """Fields submitted on registration."""
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class UserOut(CamelModel):
    """Public user representation returned by the API."""
    id: int
    name: str
    email: str
    role: Role
    created_at: Optional[UtcDatetime] = None


class Token(BaseModel):
    token: str
    token_type: str = "bearer"
