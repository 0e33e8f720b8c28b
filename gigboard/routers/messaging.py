from fastapi import APIRouter, Depends, status
from typing import List

from gigboard.models.schemas import ChatMessage, MessageContent
from gigboard.core.actor import get_actor_id
from gigboard.dependencies import get_store
from gigboard.routers.projects import get_project_or_404
from gigboard.store import ProjectStore

router = APIRouter(prefix="/projects/{project_id}/messages", tags=["Messaging"])

@router.get("/", response_model=List[ChatMessage])
async def get_project_messages(project_id: str, store: ProjectStore = Depends(get_store)):
    get_project_or_404(store, project_id)
    return store.get_messages_for_project(project_id)

@router.post("/", response_model=ChatMessage, status_code=status.HTTP_201_CREATED)
async def send_message(
    project_id: str,
    message_in: MessageContent,
    actor_id: str = Depends(get_actor_id),
    store: ProjectStore = Depends(get_store),
):
    get_project_or_404(store, project_id)

    message = ChatMessage(project_id=project_id, sender_id=actor_id, text=message_in.text)
    store.add_message(message)
    return message
