from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from comicshelf.models.user_model import UserRole
from comicshelf.schemas.base import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    username: str = Field(min_length=1, max_length=50)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class GoogleLogin(CamelModel):
    id_token: str = Field(min_length=1)


class UserUpdate(CamelModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    avatar: Optional[str] = None


class UserSummary(CamelModel):
    id: int
    username: str
    avatar: Optional[str] = None


class UserOut(CamelModel):
    id: int
    email: str
    username: str
    avatar: Optional[str] = None
    role: UserRole
    google_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AuthResponse(CamelModel):
    user: UserOut
    access_token: str
