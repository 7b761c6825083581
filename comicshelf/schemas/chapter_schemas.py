from datetime import datetime
from typing import Optional

from pydantic import Field

from comicshelf.schemas.base import CamelModel


class ChapterUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    chapter_number: Optional[float] = None


class ChapterOut(CamelModel):
    id: int
    comic_id: int
    title: str
    chapter_number: float
    pdf_url: str
    created_at: datetime
    updated_at: datetime
