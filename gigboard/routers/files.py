from fastapi import APIRouter, HTTPException, Depends, Response, status
from typing import List

from gigboard.models.schemas import FileUpdate, ProjectFile, ProjectFileCreate, Uploader
from gigboard.dependencies import get_store
from gigboard.routers.projects import get_project_or_404
from gigboard.store import ProjectStore

router = APIRouter(prefix="/projects/{project_id}/files", tags=["Project Files"])

@router.get("/", response_model=List[ProjectFile])
async def list_project_files(project_id: str, store: ProjectStore = Depends(get_store)):
    return get_project_or_404(store, project_id).project_files

@router.post("/", response_model=ProjectFile, status_code=status.HTTP_201_CREATED)
async def upload_project_file(
    project_id: str,
    file_in: ProjectFileCreate,
    store: ProjectStore = Depends(get_store),
):
    get_project_or_404(store, project_id)
    return store.add_project_file(project_id, file_in)

@router.get("/updates", response_model=List[FileUpdate])
async def list_file_updates(project_id: str, store: ProjectStore = Depends(get_store)):
    return get_project_or_404(store, project_id).file_updates

@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_file(
    project_id: str,
    file_id: str,
    deleted_by: Uploader,
    store: ProjectStore = Depends(get_store),
):
    project = get_project_or_404(store, project_id)
    if not any(f.id == file_id for f in project.project_files):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    store.delete_project_file(project_id, file_id, deleted_by)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
