"""
Project file attachments stored under PROJECT_FILES_DIR/project-{id}/
"""
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import BadRequestError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.core.metrics import upload_rejections_total
from app.models.file import FILE_TYPE_MIME_TYPES, FileType, ProjectFile
from app.models.project import Project
from app.services.base_crud import BaseCrudService
from app.services.file_storage import LocalFileStorage

logger = LoggingConfig.get_logger(__name__)

ALLOWED_MIME_TYPES = tuple(mime for mimes in FILE_TYPE_MIME_TYPES.values() for mime in mimes)


def file_type_for_mime(mime_type: Optional[str]) -> Optional[FileType]:
    for file_type, mimes in FILE_TYPE_MIME_TYPES.items():
        if mime_type in mimes:
            return file_type
    return None


class FileService(BaseCrudService[ProjectFile]):
    """Service for project documents and images"""

    model = ProjectFile
    resource_name = "File"
    search_fields = ("file_name",)

    def __init__(self, db: Session, base_dir: Optional[str] = None):
        super().__init__(db)
        settings = get_settings()
        self.base_dir = Path(base_dir or settings.project_files_dir)
        self.max_size = settings.project_files_max_size

    def project_dir(self, project_id: UUID) -> Path:
        return self.base_dir / f"project-{project_id}"

    def _storage_for(self, project_id: UUID) -> LocalFileStorage:
        return LocalFileStorage(
            f"project-{project_id}",
            ALLOWED_MIME_TYPES,
            self.max_size,
            kind="project_file",
            root=str(self.base_dir),
            separator="_",
        )

    def upload(self, project_id: UUID, upload, file_type: Optional[FileType] = None) -> ProjectFile:
        """
        Store a file for a project

        Args:
            project_id: Owning project
            upload: Uploaded file
            file_type: Declared type; must agree with the MIME type when given

        Raises:
            NotFoundError: If the project does not exist
            BadRequestError: On a missing file, bad type or size, or a type mismatch
        """
        if self.db.get(Project, project_id) is None:
            raise NotFoundError(f"Project with ID {project_id} not found")
        if upload is None:
            raise BadRequestError("No file uploaded")

        mime_type = getattr(upload, "content_type", None)
        detected = file_type_for_mime(mime_type)
        if detected is None:
            upload_rejections_total.labels(kind="project_file", reason="mime_type").inc()
            raise BadRequestError(
                f"Invalid file type '{mime_type}'. Allowed types: {', '.join(t.value for t in FileType)}"
            )
        if file_type is not None and FileType(file_type) != detected:
            upload_rejections_total.labels(kind="project_file", reason="type_mismatch").inc()
            raise BadRequestError(
                f"Declared file type {FileType(file_type).value} does not match uploaded file ({mime_type})"
            )

        stored = self._storage_for(project_id).save(upload)
        project_file = ProjectFile(
            project_id=project_id,
            file_name=stored.original_name,
            file_path=str(stored.path),
            file_type=detected.value,
            file_size=stored.size,
            mime_type=mime_type,
        )
        self.db.add(project_file)
        try:
            self._commit("create")
        except Exception:
            stored.path.unlink(missing_ok=True)
            raise
        self.db.refresh(project_file)
        logger.info(f"Uploaded {detected.value} file {stored.file_name} for project {project_id}")
        return project_file

    def remove(self, id: UUID) -> ProjectFile:
        """Delete the row, then the file; a failed file delete is only logged"""
        project_file = super().remove(id)
        try:
            Path(project_file.file_path).unlink()
        except OSError as e:
            logger.warning(f"Could not delete file {project_file.file_path}: {e}")
        return project_file

    def download_file(self, id: UUID) -> ProjectFile:
        """
        Raises:
            NotFoundError: If the row or the file on disk is missing
        """
        project_file = self.find_one(id)
        if not Path(project_file.file_path).is_file():
            logger.error(f"File {project_file.file_path} of record {id} is missing on disk")
            raise NotFoundError("File not found on disk")
        return project_file

    def find_by_project(self, project_id: UUID) -> List[ProjectFile]:
        return (
            self.db.query(ProjectFile)
            .filter(ProjectFile.project_id == project_id)
            .order_by(ProjectFile.created_at.desc())
            .all()
        )

    def get_project_file_stats(self, project_id: UUID) -> Dict[str, Any]:
        rows = (
            self.db.query(ProjectFile.file_type, func.count(ProjectFile.id), func.coalesce(func.sum(ProjectFile.file_size), 0))
            .filter(ProjectFile.project_id == project_id)
            .group_by(ProjectFile.file_type)
            .all()
        )
        return {
            "total_files": sum(count for _, count, _ in rows),
            "files_by_type": {file_type: count for file_type, count, _ in rows},
            "total_size_bytes": int(sum(size for _, _, size in rows)),
        }
