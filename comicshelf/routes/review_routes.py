from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database import get_async_session
from comicshelf.deps.admin import require_review_owner
from comicshelf.models.review_model import Review
from comicshelf.models.user_model import User
from comicshelf.schemas.review_schemas import ReviewCreate, ReviewOut
from comicshelf.services import review_service
from comicshelf.utils.token_utils import get_current_user

router = APIRouter(prefix="/api", tags=["reviews"])


@router.get("/comics/{comic_id}/reviews", response_model=List[ReviewOut])
async def list_reviews(comic_id: int, db: AsyncSession = Depends(get_async_session)):
    return await review_service.list_reviews_for_comic(db, comic_id)


@router.post("/comics/{comic_id}/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
async def create_review(
    comic_id: int,
    payload: ReviewCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await review_service.create_review(db, comic_id, user.id, payload.rating, payload.comment)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review: Review = Depends(require_review_owner),
    db: AsyncSession = Depends(get_async_session),
):
    await review_service.delete_review(db, review)
