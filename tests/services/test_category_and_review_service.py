"""Tests for categories and reviews at the service layer."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from comicshelf.errors import ConflictError, NotFoundError
from comicshelf.models.category_model import Category
from comicshelf.models.review_model import Review
from comicshelf.services import category_service, review_service


async def test_create_category_trims_name(session):
    category = await category_service.create_category(session, "  Action ")

    assert category.id is not None
    assert category.name == "Action"


async def test_duplicate_category_is_case_insensitive(session):
    await category_service.create_category(session, "Action")

    with pytest.raises(ConflictError):
        await category_service.create_category(session, "action")

    assert [c.name for c in await category_service.list_categories(session)] == ["Action"]


async def test_list_categories_sorted_by_name(session, make_category):
    for name in ("Romance", "Action", "Horror"):
        await make_category(name)

    assert [c.name for c in await category_service.list_categories(session)] == ["Action", "Horror", "Romance"]


async def test_reviews_listed_newest_first_with_reviewer(session, make_user, make_comic):
    reader = await make_user(username="critic")
    comic = await make_comic(await make_user())
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    session.add(Review(comic_id=comic.id, user_id=reader.id, rating=2, comment="Meh", created_at=base))
    session.add(Review(comic_id=comic.id, user_id=reader.id, rating=5, comment="Better now", created_at=base + timedelta(days=1)))
    await session.commit()

    reviews = await review_service.list_reviews_for_comic(session, comic.id)

    assert [r.comment for r in reviews] == ["Better now", "Meh"]
    assert reviews[0].user.username == "critic"


async def test_same_user_may_review_twice(session, make_user, make_comic):
    reader = await make_user()
    comic = await make_comic(await make_user())

    first = await review_service.create_review(session, comic.id, reader.id, 4, "Good")
    second = await review_service.create_review(session, comic.id, reader.id, 5, "Even better")

    assert first.id != second.id
    assert second.user.id == reader.id


async def test_review_for_unknown_comic_is_not_found(session, make_user):
    reader = await make_user()

    with pytest.raises(NotFoundError):
        await review_service.create_review(session, 404, reader.id, 3, "Hmm")


async def test_store_rejects_case_variant_category_names(session, make_category):
    await make_category("Action")
    session.add(Category(name="ACTION"))

    with pytest.raises(IntegrityError):
        await session.commit()
    await session.rollback()
