from datetime import datetime
from typing import Optional

from comicshelf.models.library_model import ReadingStatus
from comicshelf.schemas.base import CamelModel
from comicshelf.schemas.comic_schemas import ComicOut


class LibraryUpsert(CamelModel):
    comic_id: int
    is_favorited: Optional[bool] = None
    status: Optional[ReadingStatus] = None


class ProgressUpdate(CamelModel):
    comic_id: int
    last_read_chapter_id: int


class LibraryEntryOut(CamelModel):
    user_id: int
    comic_id: int
    is_favorited: bool
    status: ReadingStatus
    last_read_chapter_id: Optional[int] = None
    updated_at: datetime


class LibraryItemOut(LibraryEntryOut):
    comic: ComicOut
