"""HTTP tests for /api/categories."""
from __future__ import annotations

from comicshelf.models.user_model import UserRole


async def test_admin_creates_category_and_duplicates_conflict(client, make_user, auth_headers):
    admin = await make_user(role=UserRole.ADMIN)
    headers = auth_headers(admin)

    created = await client.post("/api/categories", json={"name": "Action"}, headers=headers)
    duplicate = await client.post("/api/categories", json={"name": "action"}, headers=headers)
    listed = await client.get("/api/categories")

    assert created.status_code == 201
    assert created.json()["name"] == "Action"
    assert duplicate.status_code == 409
    assert [c["name"] for c in listed.json()] == ["Action"]


async def test_non_admin_cannot_create_category(client, make_user, auth_headers):
    reader = await make_user()

    resp = await client.post("/api/categories", json={"name": "Horror"}, headers=auth_headers(reader))

    assert resp.status_code == 403
    assert resp.json()["detail"] == "Not authorized as an admin"


async def test_blank_category_name_rejected(client, make_user, auth_headers):
    admin = await make_user(role=UserRole.ADMIN)

    resp = await client.post("/api/categories", json={"name": ""}, headers=auth_headers(admin))

    assert resp.status_code == 400
