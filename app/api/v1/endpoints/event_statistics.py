from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app import schemas
from app.api import deps
from app.db.database import get_db
from app.models.event import Event
from app.services import event_statistics

router = APIRouter()


@router.get("/stats", response_model=schemas.EventStats)
def get_event_stats(
    db: Session = Depends(get_db),
    event: Event = Depends(deps.get_owned_event),
) -> Any:
    """Total, checked-in and remaining participant counts for one event."""
    return event_statistics.get_event_stats(db, event.id)


@router.get("/recent-checkins", response_model=List[schemas.Participant])
def get_recent_checkins(
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    event: Event = Depends(deps.get_owned_event),
) -> Any:
    return event_statistics.get_recent_checkins(db, event.id, limit)
