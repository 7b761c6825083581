"""Chapter ingestion: PDF upload to the object store plus the chapter record.

Creation order is upload -> public URL -> one DB transaction that both stamps
the comic's updated_at and inserts the chapter. A failed transaction removes
the uploaded object again (best-effort).
"""
import time
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from comicshelf.database import utcnow
from comicshelf.errors import NotFoundError, ObjectStorageError
from comicshelf.models.chapter_model import Chapter
from comicshelf.models.comic_model import Comic
from comicshelf.s3 import ObjectStorage, sanitize_key_segment
from comicshelf.utils.logging import get_logger

log = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"


def build_chapter_key(comic_id: int, original_name: Optional[str], uploaded_ms: Optional[int] = None) -> str:
    """`{comic_id}/{comic_id}-{upload_ms}.{ext}`"""
    uploaded_ms = uploaded_ms if uploaded_ms is not None else int(time.time() * 1000)
    name = original_name or ""
    ext = name.rsplit(".", 1)[1] if "." in name else "pdf"
    ext = sanitize_key_segment(ext.lower())
    return f"{comic_id}/{comic_id}-{uploaded_ms}.{ext}"


async def get_chapter(session: AsyncSession, comic_id: int, chapter_id: int) -> Chapter:
    chapter = await session.get(Chapter, chapter_id)
    if not chapter or chapter.comic_id != comic_id:
        raise NotFoundError("Chapter not found")
    return chapter


async def create_chapter(
    session: AsyncSession,
    storage: ObjectStorage,
    *,
    comic_id: int,
    title: str,
    chapter_number: float,
    file_bytes: bytes,
    mime_type: str,
    original_name: Optional[str],
) -> Chapter:
    if not await session.get(Comic, comic_id):
        raise NotFoundError("Comic not found")

    key = build_chapter_key(comic_id, original_name)

    # Upload failure aborts before any database write
    await run_in_threadpool(storage.upload, key, file_bytes, mime_type)

    pdf_url = storage.public_url(key)
    if not pdf_url:
        raise ObjectStorageError("Could not get public URL for the uploaded file.")

    chapter = Chapter(
        comic_id=comic_id,
        title=title.strip(),
        chapter_number=chapter_number,
        pdf_url=pdf_url,
    )
    try:
        await session.execute(
            update(Comic).where(Comic.id == comic_id).values(updated_at=utcnow())
        )
        session.add(chapter)
        await session.commit()
    except Exception:
        await session.rollback()
        try:
            await run_in_threadpool(storage.delete, key)
        except Exception as e:
            log.warning("Orphaned chapter object %s left in storage: %s", key, e)
        raise

    await session.refresh(chapter)
    return chapter


async def update_chapter(session: AsyncSession, comic_id: int, chapter_id: int, changes: Dict[str, Any]) -> Chapter:
    chapter = await get_chapter(session, comic_id, chapter_id)

    if changes.get("title") is not None:
        chapter.title = changes["title"].strip()
    if changes.get("chapter_number") is not None:
        chapter.chapter_number = changes["chapter_number"]

    await session.commit()
    await session.refresh(chapter)
    return chapter


async def delete_chapter(session: AsyncSession, storage: ObjectStorage, comic_id: int, chapter_id: int) -> None:
    """Remove the stored PDF (failure is logged only), then the chapter row."""
    chapter = await get_chapter(session, comic_id, chapter_id)

    key = storage.key_from_url(chapter.pdf_url)
    if key:
        try:
            await run_in_threadpool(storage.delete, key)
        except Exception as e:
            log.warning("Failed to delete stored chapter %s: %s", key, e)

    await session.delete(chapter)
    await session.commit()

