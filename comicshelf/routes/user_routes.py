from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database import get_async_session
from comicshelf.models.user_model import User
from comicshelf.schemas.user_schemas import UserOut, UserUpdate
from comicshelf.services import user_service
from comicshelf.utils.token_utils import get_current_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserOut)
async def get_me(current_user: User = Depends(get_current_user)):
    # The token dependency already loaded the user
    return current_user


@router.put("/me", response_model=UserOut)
async def update_me(
    payload: UserUpdate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await user_service.update_user(db, current_user, payload.model_dump(exclude_unset=True))
