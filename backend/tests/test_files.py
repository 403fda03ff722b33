"""
Tests for upload storage, project files, post media and project videos
"""
import io
import os
import uuid

import pytest
from starlette.datastructures import Headers, UploadFile

from app.core.errors import BadRequestError, NotFoundError
from app.models.file import FileType
from app.models.post import MediaType
from app.services.file_service import FileService
from app.services.file_storage import (IMAGE_MIME_TYPES, LocalFileStorage,
                                       sanitize_filename)
from app.services.post_media_service import PostMediaService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
PDF_BYTES = b"%PDF-1.4\n%fake\n"


def make_upload(filename, content_type, content=b"data"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestStorage:

    def test_sanitize_filename(self):
        assert sanitize_filename("pitch deck (v2).pdf") == "pitch_deck__v2_.pdf"
        assert sanitize_filename("../../etc/passwd") == "passwd"
        assert sanitize_filename(None) == "file"

    def test_save_names_and_url(self, upload_dir):
        storage = LocalFileStorage("postMedia/images", IMAGE_MIME_TYPES, 1024, kind="post_image")

        stored = storage.save(make_upload("my photo.png", "image/png", PNG_BYTES))

        assert stored.path.parent == upload_dir / "postMedia" / "images"
        prefix, name = stored.file_name.split("-", 1)
        assert prefix.isdigit()
        assert name == "my_photo.png"
        assert stored.url == f"/uploads/postMedia/images/{stored.file_name}"
        assert stored.path.read_bytes() == PNG_BYTES
        assert storage.get_file_stats(stored.url)["size"] == len(PNG_BYTES)

    def test_rejects_type_size_and_empty(self):
        storage = LocalFileStorage("postMedia/images", IMAGE_MIME_TYPES, 8, kind="post_image")
        with pytest.raises(BadRequestError):
            storage.save(make_upload("a.pdf", "application/pdf"))
        with pytest.raises(BadRequestError) as exc:
            storage.save(make_upload("big.png", "image/png", b"x" * 9))
        assert "too large" in exc.value.message
        with pytest.raises(BadRequestError):
            storage.save(make_upload("empty.png", "image/png", b""))

    def test_oversized_body_is_not_buffered(self):
        storage = LocalFileStorage("postMedia/images", IMAGE_MIME_TYPES, 16, kind="post_image")
        body = io.BytesIO(b"x" * 4096)
        upload = UploadFile(file=body, filename="huge.png", headers=Headers({"content-type": "image/png"}))

        with pytest.raises(BadRequestError) as exc:
            storage.save(upload)

        assert "too large" in exc.value.message
        assert body.tell() == 17

    def test_wrong_type_is_rejected_before_reading(self):
        storage = LocalFileStorage("postMedia/images", IMAGE_MIME_TYPES, 16, kind="post_image")
        body = io.BytesIO(b"%PDF" * 8)
        upload = UploadFile(file=body, filename="deck.pdf", headers=Headers({"content-type": "application/pdf"}))

        with pytest.raises(BadRequestError):
            storage.save(upload)

        assert body.tell() == 0

    def test_delete_missing_file_reports_false(self):
        storage = LocalFileStorage("videos", ("video/mp4",), 1024, kind="video")
        assert storage.delete_file("/uploads/videos/nothing.mp4") is False
        assert storage.get_file_stats("/uploads/videos/nothing.mp4") == {"exists": False, "size": None, "mtime": None}


class TestProjectFiles:

    def test_upload_stores_under_project_dir(self, db, make_project, upload_dir):
        project = make_project()
        service = FileService(db)

        project_file = service.upload(project.id, make_upload("Deck.pdf", "application/pdf", PDF_BYTES))

        assert project_file.file_type == FileType.PDF.value
        assert project_file.file_name == "Deck.pdf"
        assert project_file.file_size == len(PDF_BYTES)
        path = upload_dir / "ProjectFiles" / f"project-{project.id}"
        stored = list(path.iterdir())
        assert len(stored) == 1
        assert stored[0].name.endswith("_Deck.pdf")

    def test_declared_type_must_match(self, db, make_project):
        project = make_project()
        with pytest.raises(BadRequestError) as exc:
            FileService(db).upload(project.id, make_upload("logo.png", "image/png", PNG_BYTES), FileType.PDF)
        assert "does not match" in exc.value.message

    def test_unsupported_type(self, db, make_project):
        with pytest.raises(BadRequestError):
            FileService(db).upload(make_project().id, make_upload("notes.txt", "text/plain"))

    def test_unknown_project(self, db):
        with pytest.raises(NotFoundError):
            FileService(db).upload(uuid.uuid4(), make_upload("Deck.pdf", "application/pdf", PDF_BYTES))

    def test_stats_and_remove(self, db, make_project):
        project = make_project()
        service = FileService(db)
        deck = service.upload(project.id, make_upload("Deck.pdf", "application/pdf", PDF_BYTES))
        service.upload(project.id, make_upload("logo.png", "image/png", PNG_BYTES))

        stats = service.get_project_file_stats(project.id)
        assert stats == {
            "total_files": 2,
            "files_by_type": {"PDF": 1, "PNG": 1},
            "total_size_bytes": len(PDF_BYTES) + len(PNG_BYTES),
        }

        path = deck.file_path
        service.remove(deck.id)
        assert len(service.find_by_project(project.id)) == 1
        with pytest.raises(FileNotFoundError):
            open(path, "rb")

    def test_download_missing_on_disk(self, db, make_project):
        service = FileService(db)
        project_file = service.upload(make_project().id, make_upload("Deck.pdf", "application/pdf", PDF_BYTES))
        os.remove(project_file.file_path)

        with pytest.raises(NotFoundError):
            service.download_file(project_file.id)


class TestPostMedia:

    def test_image_and_video_directories(self, db, make_user, make_post, upload_dir):
        post = make_post(make_user())
        service = PostMediaService(db)

        image = service.upload_and_create(post.id, make_upload("shot.png", "image/png", PNG_BYTES))
        video = service.upload_and_create(post.id, make_upload("demo.mp4", "video/mp4", b"\x00" * 64))

        assert image.media_type == MediaType.IMAGE.value
        assert image.media_url.startswith("/uploads/postMedia/images/")
        assert video.media_type == MediaType.VIDEO.value
        assert video.media_url.startswith("/uploads/postMedia/videos/")
        assert service.count_by_post(post.id) == 2
        assert [m.id for m in service.find_by_type(MediaType.VIDEO)] == [video.id]

    def test_rejects_unknown_post_and_type(self, db, make_user, make_post):
        service = PostMediaService(db)
        with pytest.raises(NotFoundError):
            service.upload_and_create(uuid.uuid4(), make_upload("shot.png", "image/png", PNG_BYTES))
        with pytest.raises(BadRequestError):
            service.upload_and_create(make_post(make_user()).id, make_upload("doc.pdf", "application/pdf"))

    def test_integrity_and_remove(self, db, make_user, make_post, upload_dir):
        post = make_post(make_user())
        service = PostMediaService(db)
        kept = service.upload_and_create(post.id, make_upload("a.png", "image/png", PNG_BYTES))
        lost = service.upload_and_create(post.id, make_upload("b.png", "image/png", PNG_BYTES))
        (upload_dir / lost.media_url[len("/uploads/"):]).unlink()

        report = service.check_file_integrity(post.id)
        assert report["valid"] is False
        assert [item["id"] for item in report["missing"]] == [lost.id]

        service.remove_with_file(kept.id)
        assert not (upload_dir / kept.media_url[len("/uploads/"):]).exists()


def test_file_routes(client, make_project, auth_headers):
    project = make_project()
    headers = auth_headers(project.creator)

    response = client.post(
        f"/api/v1/files/upload/{project.id}",
        files={"file": ("Deck.pdf", PDF_BYTES, "application/pdf")},
    )
    assert response.status_code == 401

    response = client.post(
        f"/api/v1/files/upload/{project.id}",
        files={"file": ("Deck.pdf", PDF_BYTES, "application/pdf")},
        data={"file_type": "PDF"},
        headers=headers,
    )
    assert response.status_code == 201
    file_id = response.json()["id"]

    response = client.get(f"/api/v1/files/{file_id}/download")
    assert response.status_code == 200
    assert response.content == PDF_BYTES

    response = client.post(
        f"/api/v1/files/upload/{project.id}",
        files={"file": ("logo.png", PNG_BYTES, "image/png")},
        data={"file_type": "PDF"},
        headers=headers,
    )
    assert response.status_code == 400

    response = client.post(f"/api/v1/files/upload/{project.id}", headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No file uploaded"

    response = client.get(f"/api/v1/files/project/{project.id}/stats")
    assert response.json()["total_files"] == 1

    assert client.delete(f"/api/v1/files/{file_id}").status_code == 401
    assert client.delete(f"/api/v1/files/{file_id}", headers=headers).status_code == 200


def test_post_media_routes(client, make_user, make_post):
    post = make_post(make_user())

    response = client.post(
        f"/api/v1/post-media/upload/{post.id}",
        files={"file": ("shot.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 201
    assert response.json()["media_type"] == "IMAGE"

    response = client.get(f"/api/v1/post-media/post/{post.id}/count")
    assert response.json() == {"count": 1}

    response = client.get(f"/api/v1/post-media/post/{post.id}/integrity")
    assert response.json() == {"valid": True, "missing": []}


def test_video_upload_route(client, make_project, auth_headers):
    project = make_project()

    response = client.post(
        "/api/v1/project-videos/upload",
        data={"project_id": str(project.id), "title": "Demo day"},
        files={"video": ("pitch.mp4", b"\x00" * 64, "video/mp4")},
        headers=auth_headers(project.creator),
    )
    assert response.status_code == 201
    assert response.json()["video_url"].startswith("/uploads/videos/")

    response = client.get(f"/api/v1/project-videos/project/{project.id}/count")
    assert response.json() == {"count": 1}
