# File: app/crud/event.py
from typing import List, Optional
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.event import Event
from app.schemas.event import EventCreate


class CRUDEvent(CRUDBase[Event, EventCreate, EventCreate]):

    def get_by_owner(self, db: Session, *, owner_id: int) -> List[Event]:
        return (
            db.query(Event)
            .filter(Event.owner_id == owner_id)
            .order_by(Event.event_start_date.desc(), Event.id.desc())
            .all()
        )

    def get_for_owner(self, db: Session, *, event_id: int, owner_id: int) -> Optional[Event]:
        # Ownership is part of the lookup; another user's event reads as missing
        return (
            db.query(Event)
            .filter(Event.id == event_id, Event.owner_id == owner_id)
            .first()
        )

    def create_with_owner(self, db: Session, *, obj_in: EventCreate, owner_id: int) -> Event:
        event_data = obj_in.model_dump()
        event_data["owner_id"] = owner_id

        db_obj = Event(**event_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


event = CRUDEvent(Event)
