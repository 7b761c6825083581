# comicshelf/deps/admin.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database import get_async_session
from comicshelf.errors import ForbiddenError, NotFoundError
from comicshelf.models.comic_model import Comic
from comicshelf.models.review_model import Review
from comicshelf.models.user_model import User
from comicshelf.services import review_service
from comicshelf.utils.token_utils import get_current_user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Requires the authenticated user to have role=ADMIN.
    Raises 403 if not an admin.
    """
    if not user.is_admin:
        raise ForbiddenError("Not authorized as an admin")
    return user


async def require_comic_author(
    comic_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> Comic:
    """Load the comic in the path and check the caller is its author (or an admin)."""
    comic = await session.get(Comic, comic_id)
    if not comic:
        raise NotFoundError("Comic not found")
    if comic.author_id != user.id and not user.is_admin:
        raise ForbiddenError("User is not the author of this comic")
    return comic


async def require_review_owner(
    review_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> Review:
    review = await review_service.get_review(session, review_id)
    if review.user_id != user.id and not user.is_admin:
        raise ForbiddenError("User is not authorized to delete this review")
    return review
