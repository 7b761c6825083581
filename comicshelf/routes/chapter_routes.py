from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database import get_async_session
from comicshelf.deps.admin import require_comic_author
from comicshelf.errors import BadRequestError
from comicshelf.models.comic_model import Comic
from comicshelf.s3 import ObjectStorage, get_object_storage
from comicshelf.schemas.chapter_schemas import ChapterOut, ChapterUpdate
from comicshelf.services import chapter_service
from comicshelf.services.chapter_service import PDF_MIME_TYPE

router = APIRouter(prefix="/api/comics/{comic_id}/chapters", tags=["chapters"])


@router.post("", response_model=ChapterOut, status_code=status.HTTP_201_CREATED)
async def create_chapter(
    title: str = Form(...),
    chapter_number: float = Form(..., alias="chapterNumber"),
    chapter_pdf: UploadFile = File(..., alias="chapterPdf"),
    comic: Comic = Depends(require_comic_author),
    db: AsyncSession = Depends(get_async_session),
    storage: ObjectStorage = Depends(get_object_storage),
):
    if chapter_pdf.content_type != PDF_MIME_TYPE:
        raise BadRequestError("Only PDF files are allowed!")
    if not title.strip():
        raise BadRequestError("Title and chapter number are required")

    blob = await chapter_pdf.read()
    if not blob:
        raise BadRequestError("Chapter PDF file is required")

    return await chapter_service.create_chapter(
        db,
        storage,
        comic_id=comic.id,
        title=title,
        chapter_number=chapter_number,
        file_bytes=blob,
        mime_type=chapter_pdf.content_type,
        original_name=chapter_pdf.filename,
    )


@router.put("/{chapter_id}", response_model=ChapterOut)
async def update_chapter(
    chapter_id: int,
    payload: ChapterUpdate,
    comic: Comic = Depends(require_comic_author),
    db: AsyncSession = Depends(get_async_session),
):
    return await chapter_service.update_chapter(db, comic.id, chapter_id, payload.model_dump(exclude_unset=True))


@router.delete("/{chapter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chapter(
    chapter_id: int,
    comic: Comic = Depends(require_comic_author),
    db: AsyncSession = Depends(get_async_session),
    storage: ObjectStorage = Depends(get_object_storage),
):
    await chapter_service.delete_chapter(db, storage, comic.id, chapter_id)
