from datetime import datetime
from typing import List, Optional

from pydantic import Field

from comicshelf.models.comic_model import ComicStatus, ComicVisibility
from comicshelf.schemas.base import CamelModel
from comicshelf.schemas.category_schemas import CategoryOut
from comicshelf.schemas.chapter_schemas import ChapterOut
from comicshelf.schemas.user_schemas import UserSummary


class ComicCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    cover_image: Optional[str] = None
    status: ComicStatus = ComicStatus.ONGOING
    visibility: ComicVisibility = ComicVisibility.PRIVATE
    category_ids: List[int] = []


class ComicUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    cover_image: Optional[str] = None
    status: Optional[ComicStatus] = None
    visibility: Optional[ComicVisibility] = None
    category_ids: Optional[List[int]] = None


class ComicOut(CamelModel):
    id: int
    title: str
    description: str
    cover_image: Optional[str] = None
    status: ComicStatus
    visibility: ComicVisibility
    author_id: int
    author: UserSummary
    categories: List[CategoryOut] = []
    created_at: datetime
    updated_at: datetime


class ComicDetailOut(ComicOut):
    chapters: List[ChapterOut] = []


class PaginationOut(CamelModel):
    total_comics: int
    total_pages: int
    current_page: int
    limit: int


class ComicPageOut(CamelModel):
    data: List[ComicOut]
    pagination: PaginationOut
