from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.config import AUTH_RATE_LIMIT
from comicshelf.database import get_async_session
from comicshelf.limiter import limiter
from comicshelf.schemas.user_schemas import AuthResponse, GoogleLogin, UserCreate, UserLogin, UserOut
from comicshelf.services import auth_service
from comicshelf.utils.google_auth import GoogleTokenVerifier, get_google_verifier

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_RATE_LIMIT)
async def register(request: Request, payload: UserCreate, db: AsyncSession = Depends(get_async_session)):
    return await auth_service.register_user(db, payload.email, payload.password, payload.username)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def login(request: Request, payload: UserLogin, db: AsyncSession = Depends(get_async_session)):
    user, access_token = await auth_service.login_user(db, payload.email, payload.password)
    return AuthResponse(user=UserOut.model_validate(user), access_token=access_token)


@router.post("/google/login", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def google_login(
    request: Request,
    payload: GoogleLogin,
    db: AsyncSession = Depends(get_async_session),
    verifier: GoogleTokenVerifier = Depends(get_google_verifier),
):
    user, access_token = await auth_service.login_with_google(db, verifier, payload.id_token)
    return AuthResponse(user=UserOut.model_validate(user), access_token=access_token)
