"""Registration, password login and Google sign-in."""
from typing import Any, Dict, Tuple

from google.auth import exceptions as google_exceptions
from passlib.hash import bcrypt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from comicshelf.config import BCRYPT_ROUNDS
from comicshelf.errors import ConflictError, UnauthorizedError
from comicshelf.models.user_model import User
from comicshelf.utils.google_auth import GoogleTokenVerifier
from comicshelf.utils.logging import get_logger
from comicshelf.utils.token_utils import create_access_token

log = get_logger(__name__)

_hasher = bcrypt.using(rounds=BCRYPT_ROUNDS)


def normalize_email(email: str) -> str:
    return str(email).strip().lower()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.verify(password, hashed)


async def get_user_by_email(session: AsyncSession, email: str):
    result = await session.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    )
    return result.scalars().first()


async def register_user(session: AsyncSession, email: str, password: str, username: str) -> User:
    email_norm = normalize_email(email)
    if await get_user_by_email(session, email_norm):
        raise ConflictError("User with this email already exists")

    user = User(
        email=email_norm,
        username=username.strip(),
        password=hash_password(password),
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    log.info("Registered user %s", user.id)
    return user


async def login_user(session: AsyncSession, email: str, password: str) -> Tuple[User, str]:
    user = await get_user_by_email(session, email)

    # Google-only accounts have no local password to compare against
    if not user or not user.password or not verify_password(password, user.password):
        raise UnauthorizedError("Invalid credentials")

    return user, create_access_token(user)


async def login_with_google(
    session: AsyncSession,
    verifier: GoogleTokenVerifier,
    token: str,
) -> Tuple[User, str]:
    try:
        id_info: Dict[str, Any] = await run_in_threadpool(verifier.verify, token)
    except (ValueError, google_exceptions.GoogleAuthError) as e:
        log.warning("Google token verification failed: %s", e)
        raise UnauthorizedError("Invalid Google token")

    google_id = id_info.get("sub")
    email = id_info.get("email")
    if not google_id or not email:
        raise UnauthorizedError("Invalid Google token")

    email_norm = normalize_email(email)
    picture = id_info.get("picture")

    result = await session.execute(select(User).where(User.google_id == google_id))
    user = result.scalars().first()

    if not user:
        user = await get_user_by_email(session, email_norm)
        if user:
            # Link Google to the existing email account; keep any avatar it already has
            user.google_id = google_id
            user.avatar = user.avatar or picture
        else:
            user = User(
                email=email_norm,
                google_id=google_id,
                username=email_norm.split("@")[0],
                avatar=picture,
                password=None,
            )
            session.add(user)
        await session.commit()
        await session.refresh(user)

    return user, create_access_token(user)
