"""Per-user library: favorites, reading status and last-read chapter.

Writes go through the store's native INSERT ... ON CONFLICT DO UPDATE on the
(user_id, comic_id) primary key, so concurrent writers converge on one row.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from comicshelf.database import utcnow
from comicshelf.errors import NotFoundError
from comicshelf.models.chapter_model import Chapter
from comicshelf.models.comic_model import Comic
from comicshelf.models.library_model import LibraryEntry, ReadingStatus

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(session: AsyncSession):
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Library upserts are not supported on {dialect}")


async def _upsert(session: AsyncSession, user_id: int, comic_id: int, values: Dict[str, Any]) -> LibraryEntry:
    now = utcnow()
    insert = _insert_for(session)
    stmt = insert(LibraryEntry).values(user_id=user_id, comic_id=comic_id, updated_at=now, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[LibraryEntry.user_id, LibraryEntry.comic_id],
        set_={**values, "updated_at": now},
    )
    await session.execute(stmt)
    await session.commit()

    result = await session.execute(
        select(LibraryEntry)
        .where(LibraryEntry.user_id == user_id, LibraryEntry.comic_id == comic_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def _ensure_comic(session: AsyncSession, comic_id: int) -> None:
    if not await session.get(Comic, comic_id):
        raise NotFoundError("Comic not found")


async def get_library(
    session: AsyncSession,
    user_id: int,
    status: Optional[ReadingStatus] = None,
    is_favorited: Optional[bool] = None,
) -> List[LibraryEntry]:
    stmt = select(LibraryEntry).where(LibraryEntry.user_id == user_id)
    if status is not None:
        stmt = stmt.where(LibraryEntry.status == status)
    if is_favorited is not None:
        stmt = stmt.where(LibraryEntry.is_favorited == is_favorited)

    stmt = stmt.options(
        selectinload(LibraryEntry.comic).selectinload(Comic.author),
        selectinload(LibraryEntry.comic).selectinload(Comic.categories),
    ).order_by(LibraryEntry.updated_at.desc())

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def upsert_library_entry(
    session: AsyncSession,
    user_id: int,
    comic_id: int,
    is_favorited: Optional[bool] = None,
    status: Optional[ReadingStatus] = None,
) -> LibraryEntry:
    """Create the entry or update it with only the fields that were supplied."""
    await _ensure_comic(session, comic_id)

    values: Dict[str, Any] = {}
    if is_favorited is not None:
        values["is_favorited"] = is_favorited
    if status is not None:
        values["status"] = status
    return await _upsert(session, user_id, comic_id, values)


async def update_reading_progress(
    session: AsyncSession,
    user_id: int,
    comic_id: int,
    last_read_chapter_id: int,
) -> LibraryEntry:
    """Record the last-read chapter; progress always means status READING."""
    await _ensure_comic(session, comic_id)
    chapter = await session.get(Chapter, last_read_chapter_id)
    if not chapter or chapter.comic_id != comic_id:
        raise NotFoundError("Chapter not found")

    return await _upsert(
        session,
        user_id,
        comic_id,
        {"last_read_chapter_id": last_read_chapter_id, "status": ReadingStatus.READING},
    )
