from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database import get_async_session
from comicshelf.deps.admin import require_admin
from comicshelf.schemas.category_schemas import CategoryCreate, CategoryOut
from comicshelf.services import category_service

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
async def list_categories(db: AsyncSession = Depends(get_async_session)):
    return await category_service.list_categories(db)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    _admin=Depends(require_admin),
):
    return await category_service.create_category(db, payload.name)
