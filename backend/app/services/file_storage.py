"""
Local disk storage for uploaded files
"""
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, Optional

from app.core.config import get_settings
from app.core.errors import BadRequestError
from app.core.logging_config import LoggingConfig
from app.core.metrics import upload_bytes_total, upload_rejections_total, uploads_total

logger = LoggingConfig.get_logger(__name__)

UPLOADS_URL_PREFIX = "/uploads"

IMAGE_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
VIDEO_MIME_TYPES = ("video/mp4", "video/mpeg", "video/quicktime", "video/x-msvideo", "video/webm")

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(name: Optional[str]) -> str:
    """Keep letters, digits, dots and dashes; everything else becomes '_'"""
    base = os.path.basename(name or "") or "file"
    return _UNSAFE_CHARS.sub("_", base)


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def read_upload(upload, limit: Optional[int] = None) -> bytes:
    """
    Read the body of an UploadFile (or any object with .file)

    With ``limit`` at most that many bytes are read, so callers can pass
    ``max_size + 1`` and reject oversized bodies without buffering them.
    """
    source: BinaryIO = getattr(upload, "file", upload)
    if hasattr(source, "seek"):
        source.seek(0)
    return source.read() if limit is None else source.read(limit)


@dataclass
class StoredFile:
    """Result of writing an upload to disk"""
    file_name: str
    original_name: str
    path: Path
    url: str
    size: int
    mime_type: str


class LocalFileStorage:
    """
    Stores uploads under a directory of the uploads root.

    Files are named ``{timestamp_ms}{separator}{sanitized original name}`` and
    served from ``/uploads/<subdir>/<name>``.
    """

    def __init__(
        self,
        subdir: str,
        allowed_mime_types: Iterable[str],
        max_size: int,
        kind: str,
        root: Optional[str] = None,
        separator: str = "-",
    ):
        self.root = Path(root or get_settings().upload_directory)
        self.subdir = subdir
        self.allowed_mime_types = tuple(allowed_mime_types)
        self.max_size = max_size
        self.kind = kind
        self.separator = separator

    @property
    def directory(self) -> Path:
        return self.root / self.subdir

    def url_for(self, file_name: str) -> str:
        return f"{UPLOADS_URL_PREFIX}/{self.subdir}/{file_name}"

    def path_for_url(self, url: str) -> Path:
        """Map a public ``/uploads/...`` URL back to a path under the root"""
        relative = url[len(UPLOADS_URL_PREFIX):].lstrip("/") if url.startswith(UPLOADS_URL_PREFIX) else url
        return self.root / relative

    def validate(self, mime_type: Optional[str], size: int) -> None:
        """
        Raises:
            BadRequestError: If the type is not allowed or the file is too large
        """
        if mime_type not in self.allowed_mime_types:
            upload_rejections_total.labels(kind=self.kind, reason="mime_type").inc()
            raise BadRequestError(
                f"Invalid file type '{mime_type}'. Allowed types: {', '.join(self.allowed_mime_types)}"
            )
        if size > self.max_size:
            upload_rejections_total.labels(kind=self.kind, reason="size").inc()
            raise BadRequestError(
                f"File too large. Maximum size is {self.max_size} bytes"
            )
        if size == 0:
            upload_rejections_total.labels(kind=self.kind, reason="empty").inc()
            raise BadRequestError("Uploaded file is empty")

    def save(self, upload) -> StoredFile:
        """Validate and write an upload"""
        if upload is None:
            raise BadRequestError("No file uploaded")

        mime_type = getattr(upload, "content_type", None)
        if mime_type not in self.allowed_mime_types:
            self.validate(mime_type, 0)
        content = read_upload(upload, self.max_size + 1)
        self.validate(mime_type, len(content))

        original_name = getattr(upload, "filename", None) or "file"
        file_name = f"{timestamp_ms()}{self.separator}{sanitize_filename(original_name)}"
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / file_name
        path.write_bytes(content)

        uploads_total.labels(kind=self.kind).inc()
        upload_bytes_total.labels(kind=self.kind).inc(len(content))
        logger.info(f"Stored {self.kind} upload {path} ({len(content)} bytes)")

        return StoredFile(
            file_name=file_name,
            original_name=original_name,
            path=path,
            url=self.url_for(file_name),
            size=len(content),
            mime_type=mime_type,
        )

    def delete_file(self, path_or_url: str) -> bool:
        """Remove a stored file; failures are logged and reported as False"""
        path = self.path_for_url(path_or_url) if path_or_url.startswith(UPLOADS_URL_PREFIX) else Path(path_or_url)
        try:
            path.unlink()
            logger.info(f"Deleted file {path}")
            return True
        except FileNotFoundError:
            logger.warning(f"File already missing: {path}")
        except OSError as e:
            logger.error(f"Failed to delete file {path}: {e}")
        return False

    def get_file_stats(self, path_or_url: str) -> Dict[str, Any]:
        path = self.path_for_url(path_or_url) if path_or_url.startswith(UPLOADS_URL_PREFIX) else Path(path_or_url)
        if not path.is_file():
            return {"exists": False, "size": None, "mtime": None}
        stat = path.stat()
        return {"exists": True, "size": stat.st_size, "mtime": stat.st_mtime}


def profile_image_storage() -> LocalFileStorage:
    settings = get_settings()
    return LocalFileStorage("profileImages", IMAGE_MIME_TYPES, settings.profile_image_max_size, kind="profile_image")


def video_storage() -> LocalFileStorage:
    settings = get_settings()
    return LocalFileStorage("videos", VIDEO_MIME_TYPES, settings.post_media_video_max_size, kind="video")
