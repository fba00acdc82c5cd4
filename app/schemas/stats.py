from pydantic import BaseModel


class EventStats(BaseModel):
    event_id: int
    total: int
    checked_in: int
    remaining: int
