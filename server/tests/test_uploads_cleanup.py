"""Tests for image uploads and the unused-file cleanup."""

import io
import os

import pytest

from linkku.errors import ValidationFailed
from linkku.extensions import db
from linkku.models import Article
from linkku.services.storage_service import StorageCleanupService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client, url, headers, payload=PNG_BYTES, filename="pic.png", mimetype="image/png"):
    return client.post(
        url,
        data={"file": (io.BytesIO(payload), filename, mimetype)},
        headers=headers,
        content_type="multipart/form-data",
    )


# =============================================================================
# Uploads
# =============================================================================


def test_upload_article_image(app, client, auth_headers, admin):
    """Images land under the kind's directory with a random name."""
    response = _upload(client, "/api/admin/upload", auth_headers(admin))

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["url"].startswith("/uploads/articles/")
    assert data["url"].endswith(".png")
    assert data["size"] == len(PNG_BYTES)
    assert os.path.isfile(os.path.join(app.config["UPLOAD_FOLDER"], "articles", data["filename"]))


def test_uploaded_file_is_served(client, auth_headers, user):
    """Stored files are readable at their public path."""
    url = _upload(client, "/api/upload/linktree-photo", auth_headers(user)).get_json()["data"]["url"]

    response = client.get(url)

    assert response.status_code == 200
    assert response.data == PNG_BYTES


def test_upload_rejects_wrong_type(client, auth_headers, admin):
    """Only image MIME types are accepted."""
    response = _upload(client, "/api/admin/upload", auth_headers(admin), b"%PDF-1.4", "doc.pdf", "application/pdf")

    assert response.status_code == 400
    assert "file" in response.get_json()["error"]["fields"]


def test_upload_rejects_oversized(app, client, auth_headers, admin):
    """Files over the size ceiling are refused."""
    app.config["MAX_UPLOAD_SIZE"] = 16

    response = _upload(client, "/api/admin/upload", auth_headers(admin))

    assert response.status_code == 400
    assert "too large" in response.get_json()["error"]["message"]


def test_upload_requires_file(client, auth_headers, admin):
    """A missing file part is a validation error."""
    response = client.post("/api/admin/upload", data={}, headers=auth_headers(admin))

    assert response.status_code == 400


def test_user_cannot_upload_category_icon(client, auth_headers, user):
    """Category icons are admin-only."""
    response = _upload(client, "/api/upload/category-icon", auth_headers(user))

    assert response.status_code == 403


# =============================================================================
# Cleanup
# =============================================================================


@pytest.fixture
def stored_files(client, auth_headers, admin):
    headers = auth_headers(admin)
    used = _upload(client, "/api/admin/upload", headers).get_json()["data"]["url"]
    unused = _upload(client, "/api/upload/category-icon", headers).get_json()["data"]["url"]

    db.session.add(Article(author_id=admin.id, title="Pic", slug="pic", content="x", featured_image=used))
    db.session.commit()
    return used, unused


def test_cleanup_stats(client, auth_headers, superadmin, stored_files):
    """Stats split files into referenced and unused."""
    used, unused = stored_files

    response = client.get("/api/admin/system-cleanup/stats", headers=auth_headers(superadmin))

    data = response.get_json()["data"]
    assert data["totalFiles"] == 2
    assert data["usedFiles"] == 1
    assert data["unusedFiles"] == 1
    assert [f["path"] for f in data["unusedFileList"]] == [unused]
    assert data["directories"]["articles"] == {"total": 1, "used": 1, "unused": 0}


def test_cleanup_is_superadmin_only(client, auth_headers, admin, stored_files):
    """Admins cannot see or delete storage."""
    assert client.get("/api/admin/system-cleanup/stats", headers=auth_headers(admin)).status_code == 403


def test_delete_unused_file(app, client, auth_headers, superadmin, stored_files):
    """Unused files are deleted; referenced ones are kept."""
    used, unused = stored_files

    response = client.delete(
        "/api/admin/system-cleanup/unused-files",
        json={"files": [unused, used]},
        headers=auth_headers(superadmin),
    )

    data = response.get_json()["data"]
    assert data["deletedCount"] == 1
    assert data["freedSpace"] == len(PNG_BYTES)
    assert data["errors"] == [{"path": used, "error": "File is still referenced"}]

    root = app.config["UPLOAD_FOLDER"]
    assert not os.path.exists(os.path.join(root, unused[len("/uploads/"):]))
    assert os.path.exists(os.path.join(root, used[len("/uploads/"):]))


@pytest.mark.parametrize("spelling", ["/articles/./", "/articles//", "/icons/../articles/"])
def test_delete_refuses_referenced_file_under_another_spelling(app, stored_files, spelling):
    """Equivalent paths to a referenced file are still refused."""
    used, _unused = stored_files
    alias = used.replace("/articles/", spelling)

    result = StorageCleanupService.delete_files([alias])

    assert result["deletedCount"] == 0
    assert result["errors"] == [{"path": alias, "error": "File is still referenced"}]
    assert os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], used[len("/uploads/"):]))


def test_delete_all_unused(client, auth_headers, superadmin, stored_files):
    """The all flag clears every unreferenced file."""
    response = client.post(
        "/api/admin/system-cleanup/unused-files",
        json={"all": True},
        headers=auth_headers(superadmin),
    )

    assert response.get_json()["data"]["deletedCount"] == 1
    assert StorageCleanupService.get_stats()["unusedFiles"] == 0


def test_delete_refuses_paths_outside_uploads(app, tmp_path):
    """Traversal paths never reach the filesystem."""
    outside = tmp_path / "secret.txt"
    outside.write_text("keep me")

    result = StorageCleanupService.delete_files(["/uploads/../secret.txt"])

    assert result["deletedCount"] == 0
    assert result["errors"][0]["error"] == "Path is outside the upload directory"
    assert outside.exists()


def test_delete_requires_list(app):
    """An empty request is a validation error."""
    with pytest.raises(ValidationFailed):
        StorageCleanupService.delete_files([])
