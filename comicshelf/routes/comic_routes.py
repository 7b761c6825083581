from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database import get_async_session
from comicshelf.deps.admin import require_comic_author
from comicshelf.errors import NotFoundError
from comicshelf.models.comic_model import Comic, ComicStatus, ComicVisibility
from comicshelf.models.user_model import User
from comicshelf.s3 import ObjectStorage, get_object_storage
from comicshelf.schemas.comic_schemas import ComicCreate, ComicDetailOut, ComicOut, ComicPageOut, ComicUpdate
from comicshelf.services import comic_service
from comicshelf.services.comic_service import ComicSort, MAX_PAGE_SIZE
from comicshelf.utils.token_utils import get_current_user, get_current_user_optional

router = APIRouter(prefix="/api/comics", tags=["comics"])


@router.get("", response_model=ComicPageOut)
async def list_comics(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    status: Optional[ComicStatus] = Query(None),
    sort: Optional[ComicSort] = Query(None),
    author_id: Optional[int] = Query(None, alias="authorId"),
    visibility: Optional[ComicVisibility] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return await comic_service.list_comics(
        db,
        page=page,
        limit=limit,
        search_term=search_term,
        category_id=category_id,
        status=status,
        sort=sort,
        author_id=author_id,
        visibility=visibility,
        current_user_id=viewer.id if viewer else None,
    )


@router.get("/{comic_id}", response_model=ComicDetailOut)
async def get_comic(
    comic_id: int,
    db: AsyncSession = Depends(get_async_session),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    comic = await comic_service.get_comic_by_id(db, comic_id, viewer)
    if comic is None:
        raise NotFoundError("Comic not found")
    return comic


@router.post("", response_model=ComicOut, status_code=status.HTTP_201_CREATED)
async def create_comic(
    payload: ComicCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await comic_service.create_comic(
        db,
        author_id=user.id,
        title=payload.title,
        description=payload.description,
        cover_image=payload.cover_image,
        status=payload.status,
        visibility=payload.visibility,
        category_ids=payload.category_ids,
    )


@router.put("/{comic_id}", response_model=ComicOut)
async def update_comic(
    payload: ComicUpdate,
    comic: Comic = Depends(require_comic_author),
    db: AsyncSession = Depends(get_async_session),
):
    return await comic_service.update_comic(db, comic, payload.model_dump(exclude_unset=True))


@router.delete("/{comic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comic(
    comic: Comic = Depends(require_comic_author),
    db: AsyncSession = Depends(get_async_session),
    storage: ObjectStorage = Depends(get_object_storage),
):
    await comic_service.delete_comic(db, comic, storage)
