import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.config import ALGORITHM, ACCESS_TOKEN_EXPIRE_DAYS
from comicshelf.database import get_async_session
from comicshelf.errors import UnauthorizedError
from comicshelf.models.user_model import User
from comicshelf.utils.logging import get_logger

log = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _get_secret_key() -> str:
    secret = os.getenv("SECRET_KEY")
    if not secret:
        # Fail fast with a clear message instead of a generic 500
        raise RuntimeError("SECRET_KEY is not configured in the backend environment")
    if len(secret) < 32:
        raise RuntimeError("SECRET_KEY is too short; use at least 32 characters")
    return secret


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {
        "id": user.id,          # what get_current_user expects
        "sub": user.username,   # helpful for auditing/logs
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, _get_secret_key(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user id carried by a valid token, else raise UnauthorizedError."""
    try:
        payload = jwt.decode(token, _get_secret_key(), algorithms=[ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Not authorized, token failed")

    user_id = payload.get("id")
    if not isinstance(user_id, int):
        raise UnauthorizedError("Not authorized, token failed")
    return user_id


async def resolve_token_user(session: AsyncSession, token: str) -> User:
    user_id = decode_access_token(token)
    user = await session.get(User, user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_async_session),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise UnauthorizedError("Not authorized, no token")
    return await resolve_token_user(session, credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_async_session),
) -> Optional[User]:
    """Anonymous access is allowed; a bad or stale token is treated as anonymous."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await resolve_token_user(session, credentials.credentials)
    except UnauthorizedError:
        log.debug("Ignoring invalid bearer token on optional-auth route")
        return None
