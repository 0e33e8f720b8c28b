from fastapi import APIRouter, HTTPException, Depends, status
from typing import List

from gigboard.models.schemas import (
    EarningsUpdate,
    Freelancer,
    FreelancerCreate,
    FreelancerRating,
    Project,
    ProjectFeedback,
    RatingCreate,
)
from gigboard.core.actor import get_actor_id
from gigboard.dependencies import get_store
from gigboard.store import ProjectStore

router = APIRouter(prefix="/freelancers", tags=["Freelancers"])

def _rating_view(store: ProjectStore, freelancer_id: str) -> FreelancerRating:
    record = store.get_rating_record(freelancer_id)
    return FreelancerRating(
        freelancer_id=freelancer_id,
        ratings=record.ratings if record else [],
        average_rating=store.get_freelancer_rating(freelancer_id),
    )

@router.get("/", response_model=List[Freelancer])
async def list_freelancers(store: ProjectStore = Depends(get_store)):
    return store.state.freelancers

@router.post("/", response_model=Freelancer, status_code=status.HTTP_201_CREATED)
async def register_freelancer(
    freelancer_in: FreelancerCreate,
    actor_id: str = Depends(get_actor_id),
    store: ProjectStore = Depends(get_store),
):
    if store.get_freelancer(actor_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Freelancer already registered")

    freelancer = Freelancer(id=actor_id, name=freelancer_in.name)
    store.add_freelancer(freelancer)
    return freelancer

@router.get("/{freelancer_id}", response_model=Freelancer)
async def get_freelancer(freelancer_id: str, store: ProjectStore = Depends(get_store)):
    freelancer = store.get_freelancer(freelancer_id)
    if not freelancer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Freelancer not found")
    return freelancer

@router.get("/{freelancer_id}/rating", response_model=FreelancerRating)
async def get_freelancer_rating(freelancer_id: str, store: ProjectStore = Depends(get_store)):
    return _rating_view(store, freelancer_id)

@router.post("/{freelancer_id}/rating", response_model=FreelancerRating, status_code=status.HTTP_201_CREATED)
async def rate_freelancer(
    freelancer_id: str,
    rating_in: RatingCreate,
    store: ProjectStore = Depends(get_store),
):
    store.update_freelancer_rating(freelancer_id, rating_in.rating, rating_in.feedback)
    return _rating_view(store, freelancer_id)

@router.get("/{freelancer_id}/feedback", response_model=List[ProjectFeedback])
async def get_freelancer_feedback(freelancer_id: str, store: ProjectStore = Depends(get_store)):
    return store.get_project_feedback_for_freelancer(freelancer_id)

@router.get("/{freelancer_id}/completed-projects", response_model=List[Project])
async def get_completed_projects(freelancer_id: str, store: ProjectStore = Depends(get_store)):
    return store.get_completed_projects_for_freelancer(freelancer_id)

@router.post("/{freelancer_id}/earnings", response_model=Freelancer)
async def add_earnings(
    freelancer_id: str,
    earnings_in: EarningsUpdate,
    store: ProjectStore = Depends(get_store),
):
    freelancer = store.get_freelancer(freelancer_id)
    if not freelancer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Freelancer not found")

    store.update_freelancer_earnings(freelancer_id, earnings_in.amount)
    return freelancer
