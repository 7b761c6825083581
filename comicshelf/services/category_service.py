from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.errors import ConflictError
from comicshelf.models.category_model import Category


async def list_categories(session: AsyncSession) -> List[Category]:
    result = await session.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def create_category(session: AsyncSession, name: str) -> Category:
    name = name.strip()
    existing = await session.execute(
        select(Category).where(func.lower(Category.name) == name.lower())
    )
    if existing.scalars().first():
        raise ConflictError("Category already exists")

    category = Category(name=name)
    session.add(category)
    try:
        await session.commit()
    except IntegrityError:
        # a concurrent create won the lower(name) index
        await session.rollback()
        raise ConflictError("Category already exists")
    await session.refresh(category)
    return category
