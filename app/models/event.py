# File: app/models/event.py
from sqlalchemy import Column, String, ForeignKey, Date, Integer
from sqlalchemy.orm import relationship
from app.models.base import BaseModel


class Event(BaseModel):
    __tablename__ = "events"

    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_name = Column(String(255), nullable=False)
    event_start_date = Column(Date, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="events")
    participants = relationship("Participant", back_populates="event", cascade="all, delete-orphan")
