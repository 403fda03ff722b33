"""
Posts, shares and project videos
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.database import atomic
from app.core.errors import BadRequestError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.post import Post, PostShared, Video
from app.models.project import Project
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values
from app.services.counter_service import CounterService, CounterTarget
from app.services.file_storage import LocalFileStorage, video_storage

logger = LoggingConfig.get_logger(__name__)


class PostService(BaseCrudService[Post]):
    """Service for posts; user.nb_posts follows creates and deletes"""

    model = Post
    resource_name = "Post"
    search_fields = ("title", "content")

    def __init__(self, db: Session):
        super().__init__(db)
        self.counters = CounterService(db)

    def create(self, data: Dict[str, Any]) -> Post:
        data = clean_values(data)
        if self.db.get(User, data["user_id"]) is None:
            raise NotFoundError(f"User with ID {data['user_id']} not found")

        with atomic(self.db, "post.create"):
            post = Post(**data)
            self.db.add(post)
            self.db.flush()
            self.counters.adjust(CounterTarget.USER, post.user_id, "nb_posts", 1)

        self.db.refresh(post)
        logger.info(f"Post {post.id} created by user {post.user_id}")
        return post

    def remove(self, id: UUID) -> Post:
        with atomic(self.db, "post.remove"):
            post = self.find_one(id)
            user_id = post.user_id
            self.db.delete(post)
            self.db.flush()
            self.counters.adjust(CounterTarget.USER, user_id, "nb_posts", -1)

        logger.info(f"Deleted post {id}")
        return post

    def find_public_posts(self) -> List[Post]:
        return (
            self.db.query(Post)
            .filter(Post.is_public.is_(True))
            .order_by(Post.created_at.desc())
            .all()
        )


class PostSharedService(BaseCrudService[PostShared]):
    """Shares of posts; post.nb_shares follows creates and deletes"""

    model = PostShared
    resource_name = "PostShared"
    search_fields = ("description",)

    def __init__(self, db: Session):
        super().__init__(db)
        self.counters = CounterService(db)

    def create(self, data: Dict[str, Any]) -> PostShared:
        data = clean_values(data)
        if self.db.get(Post, data["post_id"]) is None:
            raise NotFoundError(f"Post with ID {data['post_id']} not found")

        with atomic(self.db, "post_shared.create"):
            share = PostShared(**data)
            self.db.add(share)
            self.db.flush()
            self.counters.update_share_count(share.post_id, increment=True)

        self.db.refresh(share)
        return share

    def remove(self, id: UUID) -> PostShared:
        with atomic(self.db, "post_shared.remove"):
            share = self.find_one(id)
            post_id = share.post_id
            self.db.delete(share)
            self.db.flush()
            self.counters.update_share_count(post_id, increment=False)
        return share

    def find_by_post(self, post_id: UUID) -> List[PostShared]:
        return self.find_many_by("post_id", post_id)


class VideoService(BaseCrudService[Video]):
    """Project pitch videos stored under uploads/videos"""

    model = Video
    resource_name = "Video"
    search_fields = ("title", "description")

    def __init__(self, db: Session, storage: Optional[LocalFileStorage] = None):
        super().__init__(db)
        self._storage = storage

    @property
    def storage(self) -> LocalFileStorage:
        if self._storage is None:
            self._storage = video_storage()
        return self._storage

    def _check_project(self, project_id: UUID) -> None:
        if self.db.get(Project, project_id) is None:
            raise NotFoundError(f"Project with ID {project_id} not found")

    def create(self, data: Dict[str, Any]) -> Video:
        data = clean_values(data)
        self._check_project(data["project_id"])
        data["video_url"] = data.get("video_url") or ""
        return super().create(data)

    def upload_video(self, upload, data: Dict[str, Any]) -> Video:
        """
        Store a video file and create its row

        Raises:
            NotFoundError: If the project does not exist
            BadRequestError: If no file was sent or it is not an accepted video
        """
        data = clean_values(data)
        self._check_project(data["project_id"])
        if upload is None:
            raise BadRequestError("No video file provided")

        stored = self.storage.save(upload)
        data["video_url"] = stored.url
        try:
            return super().create(data)
        except Exception:
            self.storage.delete_file(stored.url)
            raise

    def remove(self, id: UUID) -> Video:
        video = super().remove(id)
        if video.video_url:
            self.storage.delete_file(video.video_url)
        return video

    def find_by_project(self, project_id: UUID) -> List[Video]:
        return (
            self.db.query(Video)
            .filter(Video.project_id == project_id)
            .order_by(Video.created_at.desc())
            .all()
        )

    def count_by_project(self, project_id: UUID) -> int:
        return self.db.query(func.count(Video.id)).filter(Video.project_id == project_id).scalar() or 0
