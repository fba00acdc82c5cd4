from typing import List, Optional

from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.models.participant import Participant
from app.schemas.stats import EventStats


def get_event_stats(db: Session, event_id: int) -> EventStats:
    total = crud.participant.count_for_event(db, event_id=event_id)
    checked_in = crud.participant.count_checked_in(db, event_id=event_id)
    return EventStats(
        event_id=event_id,
        total=total,
        checked_in=checked_in,
        remaining=total - checked_in,
    )


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return settings.RECENT_CHECKINS_DEFAULT_LIMIT
    return max(1, min(limit, settings.RECENT_CHECKINS_MAX_LIMIT))


def get_recent_checkins(db: Session, event_id: int, limit: Optional[int] = None) -> List[Participant]:
    """Most recent check-ins first."""
    return crud.participant.get_recent_checkins(db, event_id=event_id, limit=clamp_limit(limit))
