"""Shared fixtures: temp SQLite database, fake object store and Google verifier."""
from __future__ import annotations

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from typing import Any, Dict, Optional  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from comicshelf.database import Database  # noqa: E402
from comicshelf.errors import ObjectStorageError  # noqa: E402
from comicshelf.main import create_app  # noqa: E402
from comicshelf.models.category_model import Category  # noqa: E402
from comicshelf.models.chapter_model import Chapter  # noqa: E402
from comicshelf.models.comic_model import Comic, ComicCategory, ComicStatus, ComicVisibility  # noqa: E402
from comicshelf.models.user_model import User, UserRole  # noqa: E402
from comicshelf.s3 import ObjectStorage  # noqa: E402
from comicshelf.services.auth_service import hash_password  # noqa: E402
from comicshelf.utils.token_utils import create_access_token  # noqa: E402

PUBLIC_BASE = "https://storage.test/comic-chapters"


class InMemoryStorage(ObjectStorage):
    def __init__(self, public_base: Optional[str] = PUBLIC_BASE):
        self.bucket = "comic-chapters"
        self.public_base = (public_base or "").rstrip("/")
        self.objects: Dict[str, bytes] = {}
        self.deleted = []
        self.fail_uploads = False
        self.fail_deletes = False

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        if self.fail_uploads:
            raise ObjectStorageError("upload refused")
        if key in self.objects:
            raise ObjectStorageError("object already exists")
        self.objects[key] = data

    def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise RuntimeError("storage unavailable")
        self.objects.pop(key, None)
        self.deleted.append(key)


class FakeGoogleVerifier:
    def __init__(self):
        self.tokens: Dict[str, Dict[str, Any]] = {}

    def verify(self, token: str) -> Dict[str, Any]:
        if token not in self.tokens:
            raise ValueError("Token used too late / wrong audience")
        return self.tokens[token]


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'comicshelf-test.db'}", echo=False)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.sessionmaker() as s:
        yield s


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def google_verifier():
    return FakeGoogleVerifier()


@pytest.fixture
async def client(database, storage, google_verifier):
    app = create_app(
        database=database,
        storage=storage,
        google_verifier=google_verifier,
        create_tables=False,
    )
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    async def _make(
        email: Optional[str] = None,
        password: Optional[str] = "secret123",
        username: Optional[str] = None,
        role: UserRole = UserRole.READER,
        **extra,
    ) -> User:
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        user = User(
            email=email,
            password=hash_password(password) if password else None,
            username=username or email.split("@")[0],
            role=role,
            **extra,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_category(session):
    async def _make(name: str) -> Category:
        category = Category(name=name)
        session.add(category)
        await session.commit()
        await session.refresh(category)
        return category

    return _make


@pytest.fixture
def make_comic(session):
    async def _make(
        author: User,
        title: str = "Untitled",
        status: ComicStatus = ComicStatus.ONGOING,
        visibility: ComicVisibility = ComicVisibility.PUBLIC,
        categories=(),
        **extra,
    ) -> Comic:
        comic = Comic(
            title=title,
            description=extra.pop("description", ""),
            status=status,
            visibility=visibility,
            author_id=author.id,
            category_links=[ComicCategory(category_id=c.id) for c in categories],
            **extra,
        )
        session.add(comic)
        await session.commit()
        await session.refresh(comic)
        return comic

    return _make


@pytest.fixture
def make_chapter(session):
    async def _make(comic: Comic, number: float, title: Optional[str] = None) -> Chapter:
        chapter = Chapter(
            comic_id=comic.id,
            title=title or f"Chapter {number}",
            chapter_number=number,
            pdf_url=f"{PUBLIC_BASE}/{comic.id}/{comic.id}-{int(number * 10)}.pdf",
        )
        session.add(chapter)
        await session.commit()
        await session.refresh(chapter)
        return chapter

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
