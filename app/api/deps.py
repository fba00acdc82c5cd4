from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app import crud
from app.core.security import verify_token
from app.db.database import get_db
from app.models.event import Event
from app.models.user import User
from app.services.image_storage import ImageStore

# auto_error=False so a missing header is a 401 rather than FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    verification = verify_token(credentials.credentials)
    if not verification.valid:
        raise credentials_exception

    user = crud.user.get(db, verification.user_id)
    if user is None:
        raise credentials_exception

    return user


def get_owned_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Event:
    """Resolve `event_id` (path or query) to an event owned by the caller."""
    event = crud.event.get_for_owner(db, event_id=event_id, owner_id=current_user.id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store
