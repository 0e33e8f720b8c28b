from fastapi import APIRouter, HTTPException, Depends, Response, status
from typing import List

from gigboard.models.schemas import Bid, BidCreate, BidStatusUpdate, BidUpdate
from gigboard.core.actor import get_actor_id
from gigboard.dependencies import get_store
from gigboard.routers.projects import get_project_or_404
from gigboard.store import ProjectStore

router = APIRouter(prefix="/bids", tags=["Bids"])

def get_bid_or_404(store: ProjectStore, bid_id: str) -> Bid:
    bid = store.get_bid_by_id(bid_id)
    if not bid:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bid not found")
    return bid

@router.post("/", response_model=Bid, status_code=status.HTTP_201_CREATED)
async def place_bid(
    bid_in: BidCreate,
    actor_id: str = Depends(get_actor_id),
    store: ProjectStore = Depends(get_store),
):
    project = get_project_or_404(store, bid_in.project_id)
    if project.status != "open":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Project is not open for bidding")

    bid = Bid(**bid_in.model_dump(), freelancer_id=actor_id)
    store.add_bid(bid)
    return bid

@router.get("/mine", response_model=List[Bid])
async def list_my_bids(
    actor_id: str = Depends(get_actor_id),
    store: ProjectStore = Depends(get_store),
):
    return store.get_bids_for_freelancer(actor_id)

@router.get("/project/{project_id}", response_model=List[Bid])
async def list_bids_for_project(project_id: str, store: ProjectStore = Depends(get_store)):
    get_project_or_404(store, project_id)
    return store.get_bids_for_project(project_id)

@router.get("/{bid_id}", response_model=Bid)
async def get_bid_details(bid_id: str, store: ProjectStore = Depends(get_store)):
    return get_bid_or_404(store, bid_id)

@router.patch("/{bid_id}", response_model=Bid)
async def update_bid(
    bid_id: str,
    bid_update: BidUpdate,
    store: ProjectStore = Depends(get_store),
):
    get_bid_or_404(store, bid_id)

    updates = bid_update.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No update data provided")

    store.update_bid(bid_id, updates)
    return store.get_bid_by_id(bid_id)

@router.put("/{bid_id}/status", response_model=Bid)
async def update_bid_status(
    bid_id: str,
    status_update: BidStatusUpdate,
    store: ProjectStore = Depends(get_store),
):
    bid = get_bid_or_404(store, bid_id)
    store.update_bid_status(bid_id, status_update.status)
    return bid

@router.post("/{bid_id}/accept", response_model=Bid)
async def accept_bid(bid_id: str, store: ProjectStore = Depends(get_store)):
    bid = get_bid_or_404(store, bid_id)

    accepted = store.get_accepted_bid(bid.project_id)
    if accepted and accepted.id != bid.id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Another bid has already been accepted for this project")

    store.accept_bid(bid_id)
    return bid

@router.delete("/{bid_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bid(bid_id: str, store: ProjectStore = Depends(get_store)):
    get_bid_or_404(store, bid_id)
    store.delete_bid(bid_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
