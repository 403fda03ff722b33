"""
Project file upload and download routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_token
from app.models.file import FileType
from app.schemas.content import ProjectFileResponse, ProjectFileStats
from app.services.file_service import FileService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v1/files", tags=["files"])


@router.post("/upload/{project_id}", response_model=ProjectFileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    project_id: UUID,
    file: Optional[UploadFile] = File(None),
    file_type: Optional[FileType] = Form(None),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    """Attach a PDF, PNG, JPG or PowerPoint file to a project"""
    return FileService(db).upload(project_id, file, file_type)


@router.get("", response_model=List[ProjectFileResponse])
async def list_files(db: Session = Depends(get_db)):
    return FileService(db).find_all()


@router.get("/project/{project_id}", response_model=List[ProjectFileResponse])
async def files_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return FileService(db).find_by_project(project_id)


@router.get("/project/{project_id}/stats", response_model=ProjectFileStats)
async def file_stats(project_id: UUID, db: Session = Depends(get_db)):
    return FileService(db).get_project_file_stats(project_id)


@router.get("/{id}/download")
async def download_file(id: UUID, db: Session = Depends(get_db)):
    project_file = FileService(db).download_file(id)
    return FileResponse(
        project_file.file_path,
        media_type=project_file.mime_type,
        filename=project_file.file_name,
    )


@router.get("/{id}", response_model=ProjectFileResponse)
async def get_file(id: UUID, db: Session = Depends(get_db)):
    return FileService(db).find_one(id)


@router.delete("/{id}", response_model=ProjectFileResponse)
async def delete_file(
    id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    logger.info(f"Project file {id} deleted by {current_user.id}")
    return FileService(db).remove(id)
