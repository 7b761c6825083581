"""HTTP tests for chapter upload and management."""
from __future__ import annotations

from sqlalchemy import func, select

from comicshelf.models.chapter_model import Chapter

PDF = b"%PDF-1.4\n%chapter\n"


def _upload(title="Chapter 1", number="1", content=PDF, mime="application/pdf", filename="ch1.pdf"):
    return {
        "data": {"title": title, "chapterNumber": number},
        "files": {"chapterPdf": (filename, content, mime)},
    }


async def test_author_uploads_chapter(client, storage, make_user, make_comic, auth_headers):
    author = await make_user()
    comic = await make_comic(author)

    resp = await client.post(f"/api/comics/{comic.id}/chapters", headers=auth_headers(author), **_upload(number="2.5"))

    assert resp.status_code == 201
    body = resp.json()
    assert body["comicId"] == comic.id
    assert body["chapterNumber"] == 2.5
    key = storage.key_from_url(body["pdfUrl"])
    assert key.startswith(f"{comic.id}/{comic.id}-")
    assert storage.objects[key] == PDF

    detail = await client.get(f"/api/comics/{comic.id}")
    assert [c["id"] for c in detail.json()["chapters"]] == [body["id"]]


async def test_non_pdf_upload_rejected(client, storage, make_user, make_comic, auth_headers):
    author = await make_user()
    comic = await make_comic(author)

    resp = await client.post(
        f"/api/comics/{comic.id}/chapters",
        headers=auth_headers(author),
        **_upload(content=b"\x89PNG", mime="image/png", filename="page.png"),
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only PDF files are allowed!"
    assert storage.objects == {}


async def test_missing_file_rejected(client, make_user, make_comic, auth_headers):
    author = await make_user()
    comic = await make_comic(author)

    resp = await client.post(
        f"/api/comics/{comic.id}/chapters",
        headers=auth_headers(author),
        data={"title": "No file", "chapterNumber": "1"},
    )

    assert resp.status_code == 400


async def test_stranger_cannot_upload(client, storage, make_user, make_comic, auth_headers):
    author = await make_user()
    stranger = await make_user()
    comic = await make_comic(author)

    resp = await client.post(f"/api/comics/{comic.id}/chapters", headers=auth_headers(stranger), **_upload())

    assert resp.status_code == 403
    assert storage.objects == {}


async def test_storage_failure_is_server_error_and_records_nothing(client, database, storage, make_user, make_comic, auth_headers):
    author = await make_user()
    comic = await make_comic(author)
    storage.fail_uploads = True

    resp = await client.post(f"/api/comics/{comic.id}/chapters", headers=auth_headers(author), **_upload())

    assert resp.status_code == 500
    async with database.sessionmaker() as fresh:
        assert (await fresh.execute(select(func.count(Chapter.id)))).scalar_one() == 0


async def test_update_and_delete_chapter(client, storage, make_user, make_comic, make_chapter, auth_headers):
    author = await make_user()
    comic = await make_comic(author)
    chapter = await make_chapter(comic, 1, title="Draft title")
    storage.objects[storage.key_from_url(chapter.pdf_url)] = PDF

    updated = await client.put(
        f"/api/comics/{comic.id}/chapters/{chapter.id}",
        json={"title": "Final title"},
        headers=auth_headers(author),
    )
    deleted = await client.delete(f"/api/comics/{comic.id}/chapters/{chapter.id}", headers=auth_headers(author))
    again = await client.delete(f"/api/comics/{comic.id}/chapters/{chapter.id}", headers=auth_headers(author))

    assert updated.json()["title"] == "Final title"
    assert updated.json()["chapterNumber"] == 1
    assert deleted.status_code == 204
    assert storage.objects == {}
    assert again.status_code == 404
