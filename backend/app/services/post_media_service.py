"""
Post media: image/video files under uploads/postMedia and their rows
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import BadRequestError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.post import MediaType, Post, PostMedia
from app.services.base_crud import BaseCrudService
from app.services.file_storage import (IMAGE_MIME_TYPES, VIDEO_MIME_TYPES,
                                       LocalFileStorage, StoredFile)

logger = LoggingConfig.get_logger(__name__)


class PostMediaFileStorage:
    """Routes post uploads to the images or videos directory by MIME type"""

    def __init__(self, root: Optional[str] = None):
        settings = get_settings()
        self.images = LocalFileStorage(
            "postMedia/images", IMAGE_MIME_TYPES, settings.post_media_image_max_size, kind="post_image", root=root
        )
        self.videos = LocalFileStorage(
            "postMedia/videos", VIDEO_MIME_TYPES, settings.post_media_video_max_size, kind="post_video", root=root
        )

    def media_type_for(self, mime_type: Optional[str]) -> MediaType:
        if mime_type in IMAGE_MIME_TYPES:
            return MediaType.IMAGE
        if mime_type in VIDEO_MIME_TYPES:
            return MediaType.VIDEO
        raise BadRequestError(
            f"Invalid file type '{mime_type}'. "
            f"Allowed types: {', '.join(IMAGE_MIME_TYPES + VIDEO_MIME_TYPES)}"
        )

    def storage_for(self, media_type: MediaType) -> LocalFileStorage:
        return self.images if MediaType(media_type) == MediaType.IMAGE else self.videos

    def save_file(self, upload) -> tuple:
        """
        Validate and store an upload

        Returns:
            (media_type, stored file)
        """
        if upload is None:
            raise BadRequestError("No file uploaded")
        media_type = self.media_type_for(getattr(upload, "content_type", None))
        return media_type, self.storage_for(media_type).save(upload)

    def delete_file(self, media_url: str) -> bool:
        return self.images.delete_file(media_url)

    def get_file_stats(self, media_url: str) -> Dict[str, Any]:
        return self.images.get_file_stats(media_url)

    def file_exists(self, media_url: str) -> bool:
        return self.get_file_stats(media_url)["exists"]


class PostMediaService(BaseCrudService[PostMedia]):
    """Service for media attached to posts"""

    model = PostMedia
    resource_name = "PostMedia"
    search_fields = ("file_name", "mime_type")

    def __init__(self, db: Session, storage: Optional[PostMediaFileStorage] = None):
        super().__init__(db)
        self.storage = storage or PostMediaFileStorage()

    def upload_and_create(self, post_id: UUID, upload) -> PostMedia:
        """
        Store the file and create its row

        Raises:
            NotFoundError: If the post does not exist
            BadRequestError: If the file type or size is not accepted
        """
        if self.db.get(Post, post_id) is None:
            raise NotFoundError(f"Post with ID {post_id} not found")

        media_type, stored = self.storage.save_file(upload)
        media = self._create_row(post_id, media_type, stored)
        logger.info(f"Attached {media_type.value} {stored.file_name} to post {post_id}")
        return media

    def _create_row(self, post_id: UUID, media_type: MediaType, stored: StoredFile) -> PostMedia:
        media = PostMedia(
            post_id=post_id,
            media_url=stored.url,
            media_type=media_type.value,
            file_name=stored.file_name,
            file_size=stored.size,
            mime_type=stored.mime_type,
        )
        self.db.add(media)
        try:
            self._commit("create")
        except Exception:
            # Row failed, do not leave an orphan file behind
            self.storage.delete_file(stored.url)
            raise
        self.db.refresh(media)
        return media

    def remove_with_file(self, id: UUID) -> PostMedia:
        media = self.remove(id)
        self.storage.delete_file(media.media_url)
        return media

    def find_by_post(self, post_id: UUID) -> List[PostMedia]:
        return (
            self.db.query(PostMedia)
            .filter(PostMedia.post_id == post_id)
            .order_by(PostMedia.created_at.asc())
            .all()
        )

    def find_by_type(self, media_type: MediaType) -> List[PostMedia]:
        return self.find_many_by("media_type", MediaType(media_type).value)

    def count_by_post(self, post_id: UUID) -> int:
        return self.db.query(func.count(PostMedia.id)).filter(PostMedia.post_id == post_id).scalar() or 0

    def check_file_integrity(self, post_id: UUID) -> Dict[str, Any]:
        """Report media rows of a post whose file is gone from disk"""
        missing = [
            {"id": media.id, "media_url": media.media_url}
            for media in self.find_by_post(post_id)
            if not self.storage.file_exists(media.media_url)
        ]
        if missing:
            logger.warning(f"Post {post_id} has {len(missing)} media rows without files")
        return {"valid": not missing, "missing": missing}
