from fastapi import APIRouter, HTTPException, Depends, Query, Response, status
from typing import List, Literal, Optional

from gigboard.models.schemas import (
    PaymentStatusUpdate,
    Project,
    ProjectCompletion,
    ProjectCreate,
    ProjectFeedback,
    ProjectStatus,
    ProjectStatusUpdate,
    ProjectUpdate,
    SubmissionRequest,
)
from gigboard.core.actor import get_actor_id
from gigboard.dependencies import get_store
from gigboard.store import ProjectStore

router = APIRouter(prefix="/projects", tags=["Projects"])

def get_project_or_404(store: ProjectStore, project_id: str) -> Project:
    project = store.get_project_by_id(project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project

@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    actor_id: str = Depends(get_actor_id),
    store: ProjectStore = Depends(get_store),
):
    project = Project(
        **project_in.model_dump(exclude={"files"}),
        client_id=actor_id, # owner is always the acting client
    )
    store.add_project(project)

    for file_in in project_in.files:
        store.add_project_file(project.id, file_in)

    return store.get_project_by_id(project.id)

@router.get("/", response_model=List[Project])
async def list_projects(
    search: Optional[str] = None,
    status_filter: Optional[ProjectStatus] = Query(default=None, alias="status"),
    skills: Optional[List[str]] = Query(default=None),
    min_budget: Optional[float] = None,
    max_budget: Optional[float] = None,
    min_timeline: Optional[int] = None,
    max_timeline: Optional[int] = None,
    sort_by: Optional[Literal["budget", "timeline"]] = None,
    store: ProjectStore = Depends(get_store),
):
    return store.search_projects(
        search=search,
        status=status_filter,
        skills=skills,
        min_budget=min_budget,
        max_budget=max_budget,
        min_timeline=min_timeline,
        max_timeline=max_timeline,
        sort_by=sort_by,
    )

@router.get("/mine", response_model=List[Project])
async def list_my_projects(
    actor_id: str = Depends(get_actor_id),
    store: ProjectStore = Depends(get_store),
):
    return store.get_projects_for_client(actor_id)

@router.get("/{project_id}", response_model=Project)
async def get_project_details(project_id: str, store: ProjectStore = Depends(get_store)):
    return get_project_or_404(store, project_id)

@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    store: ProjectStore = Depends(get_store),
):
    get_project_or_404(store, project_id)

    updates = project_update.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No update data provided")

    store.update_project(project_id, updates)
    return store.get_project_by_id(project_id)

@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, store: ProjectStore = Depends(get_store)):
    get_project_or_404(store, project_id)
    store.delete_project(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.put("/{project_id}/status", response_model=Project)
async def update_project_status(
    project_id: str,
    status_update: ProjectStatusUpdate,
    store: ProjectStore = Depends(get_store),
):
    project = get_project_or_404(store, project_id)
    store.update_project_status(project_id, status_update.status)
    return project

@router.put("/{project_id}/payment-status", response_model=Project)
async def update_payment_status(
    project_id: str,
    status_update: PaymentStatusUpdate,
    store: ProjectStore = Depends(get_store),
):
    project = get_project_or_404(store, project_id)
    store.update_payment_status(project_id, status_update.status)
    return project

@router.post("/{project_id}/submit", response_model=Project)
async def submit_project(
    project_id: str,
    submission_in: SubmissionRequest,
    store: ProjectStore = Depends(get_store),
):
    project = get_project_or_404(store, project_id)
    store.submit_project(project_id, submission_in.submission_url)
    return project

@router.post("/{project_id}/approve", response_model=Project)
async def approve_submission(project_id: str, store: ProjectStore = Depends(get_store)):
    project = get_project_or_404(store, project_id)
    store.approve_submission(project_id)
    return project

@router.post("/{project_id}/complete", response_model=Project)
async def complete_project(
    project_id: str,
    completion_in: ProjectCompletion,
    store: ProjectStore = Depends(get_store),
):
    project = get_project_or_404(store, project_id)

    accepted_bid = store.get_accepted_bid(project_id)
    if not accepted_bid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No accepted bid found for this project")

    feedback = ProjectFeedback(
        project_id=project_id,
        freelancer_id=accepted_bid.freelancer_id,
        rating=completion_in.rating,
        comment=completion_in.comment,
    )
    store.complete_project(
        project_id,
        feedback,
        profile_rating=completion_in.profile_rating,
        profile_feedback=completion_in.profile_feedback,
    )
    return project
