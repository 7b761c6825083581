"""Tests for registration, password login and Google sign-in."""
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from comicshelf.errors import ConflictError, UnauthorizedError
from comicshelf.models.user_model import User, UserRole
from comicshelf.services import auth_service
from comicshelf.utils.token_utils import decode_access_token


async def test_register_hashes_password_and_defaults_to_reader(session):
    user = await auth_service.register_user(session, "Reader@Example.com", "hunter22", "reader")

    assert user.id is not None
    assert user.email == "reader@example.com"
    assert user.password != "hunter22"
    assert auth_service.verify_password("hunter22", user.password)
    assert user.role == UserRole.READER


async def test_register_duplicate_email_conflicts_and_keeps_first_account(session):
    first = await auth_service.register_user(session, "dup@example.com", "first-pass", "first")

    with pytest.raises(ConflictError):
        await auth_service.register_user(session, "DUP@example.com", "second-pass", "second")

    count = (await session.execute(select(func.count(User.id)))).scalar_one()
    assert count == 1
    stored = await session.get(User, first.id)
    assert stored.username == "first"
    assert auth_service.verify_password("first-pass", stored.password)


async def test_login_with_correct_password_issues_token_for_user(session, make_user):
    user = await make_user(email="login@example.com", password="right-pass")

    logged_in, token = await auth_service.login_user(session, "LOGIN@example.com", "right-pass")

    assert logged_in.id == user.id
    assert decode_access_token(token) == user.id


@pytest.mark.parametrize(
    "email,password",
    [
        ("login@example.com", "wrong-pass"),
        ("nobody@example.com", "right-pass"),
    ],
)
async def test_login_rejects_bad_credentials(session, make_user, email, password):
    await make_user(email="login@example.com", password="right-pass")

    with pytest.raises(UnauthorizedError):
        await auth_service.login_user(session, email, password)


async def test_login_rejects_google_only_account(session, make_user):
    await make_user(email="google-only@example.com", password=None, google_id="g-1")

    with pytest.raises(UnauthorizedError):
        await auth_service.login_user(session, "google-only@example.com", "anything")


async def test_google_login_creates_account_from_email_local_part(session, google_verifier):
    google_verifier.tokens["tok"] = {
        "sub": "google-123",
        "email": "New.Reader@gmail.com",
        "name": "New Reader",
        "picture": "https://img.test/p.png",
    }

    user, token = await auth_service.login_with_google(session, google_verifier, "tok")

    assert user.email == "new.reader@gmail.com"
    assert user.username == "new.reader"
    assert user.google_id == "google-123"
    assert user.avatar == "https://img.test/p.png"
    assert user.password is None
    assert decode_access_token(token) == user.id


async def test_google_login_reuses_account_by_google_id(session, google_verifier):
    google_verifier.tokens["tok"] = {"sub": "google-123", "email": "a@gmail.com"}

    first, _ = await auth_service.login_with_google(session, google_verifier, "tok")
    second, _ = await auth_service.login_with_google(session, google_verifier, "tok")

    assert first.id == second.id
    count = (await session.execute(select(func.count(User.id)))).scalar_one()
    assert count == 1


async def test_google_login_links_existing_email_account_keeping_avatar(session, make_user, google_verifier):
    existing = await make_user(email="linked@example.com", avatar="https://img.test/mine.png")
    google_verifier.tokens["tok"] = {
        "sub": "google-777",
        "email": "linked@example.com",
        "picture": "https://img.test/google.png",
    }

    user, _ = await auth_service.login_with_google(session, google_verifier, "tok")

    assert user.id == existing.id
    assert user.google_id == "google-777"
    assert user.avatar == "https://img.test/mine.png"


async def test_google_login_linking_fills_missing_avatar(session, make_user, google_verifier):
    await make_user(email="bare@example.com")
    google_verifier.tokens["tok"] = {
        "sub": "google-888",
        "email": "bare@example.com",
        "picture": "https://img.test/google.png",
    }

    user, _ = await auth_service.login_with_google(session, google_verifier, "tok")

    assert user.avatar == "https://img.test/google.png"


async def test_google_login_rejects_unverifiable_token(session, google_verifier):
    with pytest.raises(UnauthorizedError):
        await auth_service.login_with_google(session, google_verifier, "forged")


async def test_google_login_rejects_payload_without_email(session, google_verifier):
    google_verifier.tokens["tok"] = {"sub": "google-1"}

    with pytest.raises(UnauthorizedError):
        await auth_service.login_with_google(session, google_verifier, "tok")
