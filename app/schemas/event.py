# File: app/schemas/event.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, date


class EventBase(BaseModel):
    event_name: str
    event_start_date: date


class EventCreate(EventBase):
    pass


class Event(EventBase):
    id: int
    participant_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventCreateResult(BaseModel):
    success: bool
    eventId: int
    message: str
    insertedCount: int = 0
    errors: List[str] = Field(default_factory=list)
