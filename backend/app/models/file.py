"""
Project file attachments stored under PROJECT_FILES_DIR
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base


class FileType(str, Enum):
    """Accepted project file types"""
    PDF = "PDF"
    PNG = "PNG"
    JPG = "JPG"
    PPT = "PPT"


FILE_TYPE_MIME_TYPES = {
    FileType.PDF: ("application/pdf",),
    FileType.PNG: ("image/png",),
    FileType.JPG: ("image/jpeg", "image/jpg"),
    FileType.PPT: (
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ),
}


class ProjectFile(Base):
    __tablename__ = "project_files"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(1000), nullable=False)
    file_type = Column(String(10), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(150), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="files")

    def __repr__(self):
        return f"<ProjectFile(id={self.id}, project_id={self.project_id}, file_name={self.file_name})>"
