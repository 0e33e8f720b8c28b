from typing import Optional

from fastapi import Header, HTTPException, status

def get_actor_id(x_actor_id: Optional[str] = Header(default=None)) -> str:
    """
    Identity of the user acting on a request, read from the X-Actor-Id header.
    There is no authentication: the id is trusted as given and only used to
    attribute records (project owner, bidder, message sender).
    """
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Actor-Id header is required",
        )
    return x_actor_id
