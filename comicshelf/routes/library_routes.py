from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database import get_async_session
from comicshelf.models.library_model import ReadingStatus
from comicshelf.models.user_model import User
from comicshelf.schemas.library_schemas import LibraryEntryOut, LibraryItemOut, LibraryUpsert, ProgressUpdate
from comicshelf.services import library_service
from comicshelf.utils.token_utils import get_current_user

router = APIRouter(prefix="/api/me/library", tags=["library"])


@router.get("", response_model=List[LibraryItemOut])
async def get_my_library(
    status: Optional[ReadingStatus] = Query(None),
    is_favorited: Optional[bool] = Query(None, alias="isFavorited"),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await library_service.get_library(db, current_user.id, status=status, is_favorited=is_favorited)


@router.post("", response_model=LibraryEntryOut)
async def upsert_library_entry(
    payload: LibraryUpsert,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await library_service.upsert_library_entry(
        db,
        current_user.id,
        payload.comic_id,
        is_favorited=payload.is_favorited,
        status=payload.status,
    )


@router.put("/progress", response_model=LibraryEntryOut)
async def update_reading_progress(
    payload: ProgressUpdate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await library_service.update_reading_progress(
        db, current_user.id, payload.comic_id, payload.last_read_chapter_id
    )
