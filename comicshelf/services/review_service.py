from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from comicshelf.errors import NotFoundError
from comicshelf.models.comic_model import Comic
from comicshelf.models.review_model import Review


async def _ensure_comic(session: AsyncSession, comic_id: int) -> None:
    if not await session.get(Comic, comic_id):
        raise NotFoundError("Comic not found")


async def get_review(session: AsyncSession, review_id: int) -> Review:
    review = await session.get(Review, review_id)
    if not review:
        raise NotFoundError("Review not found")
    return review


async def list_reviews_for_comic(session: AsyncSession, comic_id: int) -> List[Review]:
    await _ensure_comic(session, comic_id)
    result = await session.execute(
        select(Review)
        .where(Review.comic_id == comic_id)
        .options(selectinload(Review.user))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(result.scalars().all())


async def create_review(session: AsyncSession, comic_id: int, user_id: int, rating: int, comment: str) -> Review:
    # Multiple reviews per (user, comic) are allowed
    await _ensure_comic(session, comic_id)

    review = Review(comic_id=comic_id, user_id=user_id, rating=rating, comment=comment)
    session.add(review)
    await session.commit()

    result = await session.execute(
        select(Review)
        .where(Review.id == review.id)
        .options(selectinload(Review.user))
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def delete_review(session: AsyncSession, review: Review) -> None:
    await session.delete(review)
    await session.commit()
