"""Comic catalog: filtered listing, detail lookup and author-side CRUD.

Listing filters are composed by :class:`ComicFilter` out of typed clauses so
the page query and the count query always share one predicate list.
"""
import enum
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement
from starlette.concurrency import run_in_threadpool

from comicshelf.errors import BadRequestError, ForbiddenError
from comicshelf.models.category_model import Category
from comicshelf.models.chapter_model import Chapter
from comicshelf.models.comic_model import Comic, ComicCategory, ComicStatus, ComicVisibility
from comicshelf.models.user_model import User
from comicshelf.s3 import ObjectStorage
from comicshelf.utils.logging import get_logger

log = get_logger(__name__)

MAX_PAGE_SIZE = 100


class ComicSort(str, enum.Enum):
    LATEST = "latest"
    UPDATED = "updated"


# ------------------------------
# Predicate clauses
# ------------------------------
@dataclass(frozen=True)
class Equals:
    column: Any
    value: Any

    def to_sql(self) -> ColumnElement:
        return self.column == self.value


@dataclass(frozen=True)
class ContainsInsensitive:
    column: Any
    term: str

    def to_sql(self) -> ColumnElement:
        # % and _ in the term match literally
        return self.column.icontains(self.term, autoescape=True)


@dataclass(frozen=True)
class MemberOf:
    """The comic is linked to a row of `relationship` matching `condition`."""

    relationship: Any
    condition: ColumnElement

    def to_sql(self) -> ColumnElement:
        return self.relationship.any(self.condition)


Clause = Union[Equals, ContainsInsensitive, MemberOf]


@dataclass
class ComicFilter:
    clauses: List[Clause] = field(default_factory=list)

    def title_contains(self, term: Optional[str]) -> "ComicFilter":
        if term:
            self.clauses.append(ContainsInsensitive(Comic.title, term))
        return self

    def with_status(self, status: Optional[ComicStatus]) -> "ComicFilter":
        if status is not None:
            self.clauses.append(Equals(Comic.status, status))
        return self

    def in_category(self, category_id: Optional[int]) -> "ComicFilter":
        if category_id is not None:
            self.clauses.append(MemberOf(Comic.categories, Category.id == category_id))
        return self

    def by_author(self, author_id: Optional[int]) -> "ComicFilter":
        if author_id is not None:
            self.clauses.append(Equals(Comic.author_id, author_id))
        return self

    def with_visibility(self, visibility: Optional[ComicVisibility]) -> "ComicFilter":
        if visibility is not None:
            self.clauses.append(Equals(Comic.visibility, visibility))
        return self

    def predicates(self) -> List[ColumnElement]:
        return [c.to_sql() for c in self.clauses]


def build_comic_filter(
    *,
    search_term: Optional[str] = None,
    category_id: Optional[int] = None,
    status: Optional[ComicStatus] = None,
    author_id: Optional[int] = None,
    visibility: Optional[ComicVisibility] = None,
    current_user_id: Optional[int] = None,
) -> ComicFilter:
    """Apply the listing visibility policy on top of the user's filters.

    - visibility=PUBLIC: filtered verbatim.
    - visibility=PRIVATE: only the caller's own comics; anonymous callers or
      another author's id are refused.
    - no visibility and author_id == current user: owner sees everything.
    - otherwise: PUBLIC only.
    """
    if visibility == ComicVisibility.PRIVATE:
        if current_user_id is None:
            raise ForbiddenError("Private comics are only listed for their author")
        if author_id is not None and author_id != current_user_id:
            raise ForbiddenError("Private comics are only listed for their author")
        author_id = current_user_id
    elif visibility is None:
        owner_listing = author_id is not None and author_id == current_user_id
        if not owner_listing:
            visibility = ComicVisibility.PUBLIC

    return (
        ComicFilter()
        .title_contains(search_term)
        .with_status(status)
        .in_category(category_id)
        .by_author(author_id)
        .with_visibility(visibility)
    )


def _listing_options():
    return (selectinload(Comic.author), selectinload(Comic.categories))


def _order_by(sort: Optional[ComicSort]):
    if sort == ComicSort.LATEST:
        return (Comic.created_at.desc(), Comic.id.desc())
    return (Comic.updated_at.desc(), Comic.id.desc())


async def list_comics(
    session: AsyncSession,
    *,
    page: int = 1,
    limit: int = 10,
    search_term: Optional[str] = None,
    category_id: Optional[int] = None,
    status: Optional[ComicStatus] = None,
    sort: Optional[ComicSort] = None,
    author_id: Optional[int] = None,
    visibility: Optional[ComicVisibility] = None,
    current_user_id: Optional[int] = None,
) -> Dict[str, Any]:
    if page < 1 or limit < 1 or limit > MAX_PAGE_SIZE:
        raise BadRequestError(f"page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}")

    predicates = build_comic_filter(
        search_term=search_term,
        category_id=category_id,
        status=status,
        author_id=author_id,
        visibility=visibility,
        current_user_id=current_user_id,
    ).predicates()

    stmt = (
        select(Comic)
        .where(*predicates)
        .options(*_listing_options())
        .order_by(*_order_by(sort))
        .offset((page - 1) * limit)
        .limit(limit)
    )
    count_stmt = select(func.count(Comic.id)).where(*predicates)

    comics = (await session.execute(stmt)).scalars().all()
    total = int((await session.execute(count_stmt)).scalar_one() or 0)

    return {
        "data": list(comics),
        "pagination": {
            "total_comics": total,
            "total_pages": math.ceil(total / limit),
            "current_page": page,
            "limit": limit,
        },
    }


async def get_comic_by_id(session: AsyncSession, comic_id: int, viewer: Optional[User] = None) -> Optional[Comic]:
    """Comic with author, categories and ordered chapters; None when absent or hidden."""
    result = await session.execute(
        select(Comic)
        .where(Comic.id == comic_id)
        .options(*_listing_options(), selectinload(Comic.chapters))
        .execution_options(populate_existing=True)
    )
    comic = result.scalars().first()
    if comic is None:
        return None

    if comic.visibility == ComicVisibility.PRIVATE:
        can_see = viewer is not None and (viewer.id == comic.author_id or viewer.is_admin)
        if not can_see:
            return None
    return comic


async def _load_for_output(session: AsyncSession, comic_id: int) -> Comic:
    result = await session.execute(
        select(Comic)
        .where(Comic.id == comic_id)
        .options(*_listing_options())
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def _validate_category_ids(session: AsyncSession, category_ids: Sequence[int]) -> List[int]:
    unique_ids = list(dict.fromkeys(category_ids))
    if not unique_ids:
        return []
    found = await session.execute(select(Category.id).where(Category.id.in_(unique_ids)))
    missing = set(unique_ids) - set(found.scalars().all())
    if missing:
        raise BadRequestError(f"Unknown category id(s): {sorted(missing)}")
    return unique_ids


async def create_comic(
    session: AsyncSession,
    *,
    author_id: int,
    title: str,
    description: str = "",
    cover_image: Optional[str] = None,
    status: ComicStatus = ComicStatus.ONGOING,
    visibility: ComicVisibility = ComicVisibility.PRIVATE,
    category_ids: Sequence[int] = (),
) -> Comic:
    ids = await _validate_category_ids(session, category_ids)
    comic = Comic(
        title=title.strip(),
        description=description,
        cover_image=cover_image,
        status=status,
        visibility=visibility,
        author_id=author_id,
        category_links=[ComicCategory(category_id=cid) for cid in ids],
    )
    session.add(comic)
    await session.commit()
    return await _load_for_output(session, comic.id)


async def update_comic(session: AsyncSession, comic: Comic, changes: Dict[str, Any]) -> Comic:
    """Partial update; a supplied category_ids list replaces the category set."""
    category_ids = changes.pop("category_ids", None)

    for field_name in ("title", "description", "cover_image", "status", "visibility"):
        if field_name in changes and changes[field_name] is not None:
            setattr(comic, field_name, changes[field_name])

    if category_ids is not None:
        ids = await _validate_category_ids(session, category_ids)
        await session.refresh(comic, attribute_names=["category_links"])
        # delete-orphan drops the old links
        comic.category_links = [ComicCategory(category_id=cid) for cid in ids]

    await session.commit()
    return await _load_for_output(session, comic.id)


async def delete_comic(session: AsyncSession, comic: Comic, storage: Optional[ObjectStorage] = None) -> None:
    """Delete the comic; chapters, reviews and library entries cascade in the store.

    Stored chapter PDFs are removed afterwards, best-effort.
    """
    urls = (await session.execute(select(Chapter.pdf_url).where(Chapter.comic_id == comic.id))).scalars().all()

    await session.delete(comic)
    await session.commit()

    if storage is None:
        return
    for url in urls:
        key = storage.key_from_url(url)
        if not key:
            continue
        try:
            await run_in_threadpool(storage.delete, key)
        except Exception as e:
            log.warning("Failed to delete stored chapter %s for comic %s: %s", key, comic.id, e)
