# File: app/models/participant.py
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Text
from sqlalchemy import select, func
from sqlalchemy.orm import relationship, column_property
from app.models.base import BaseModel
import enum


class ImageStorageKind(str, enum.Enum):
    STORED = "stored"  # value is an object-store key
    INLINE = "inline"  # value is the raw base64 payload


class Participant(BaseModel):
    __tablename__ = "participants"

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)

    # Identity
    participant_id = Column(String(100), nullable=False, default="")
    bib_no = Column(String(50), nullable=False, default="", index=True)
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    full_name = Column(String(255), nullable=False, default="")
    name_on_bib = Column(String(255), nullable=False, default="")
    id_card_passport = Column(String(100), nullable=False, default="")
    birthday_year = Column(String(20), nullable=False, default="")
    nationality = Column(String(100), nullable=False, default="")
    tshirt_size = Column(String(20), nullable=False, default="")
    start_time = Column(String(50), nullable=False, default="")

    # Contact
    phone = Column(String(50), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")

    # Medical / emergency
    blood_type = Column(String(20), nullable=False, default="")
    medical_information = Column(Text, nullable=False, default="")
    medicines_using = Column(Text, nullable=False, default="")
    emergency_contact_name = Column(String(255), nullable=False, default="")
    emergency_contact_phone = Column(String(50), nullable=False, default="")

    # Guardian (minors)
    parent_full_name = Column(String(255), nullable=False, default="")
    parent_date_of_birth = Column(String(50), nullable=False, default="")
    parent_email = Column(String(255), nullable=False, default="")
    parent_id_card_passport = Column(String(100), nullable=False, default="")
    parent_relationship = Column(String(100), nullable=False, default="")

    # Check-in state; all of these are set together by a check-in
    signature = Column(Text, nullable=True)
    signature_storage = Column(String(10), nullable=True)
    uploaded_image = Column(Text, nullable=True)
    uploaded_image_storage = Column(String(10), nullable=True)
    checkin_at = Column(DateTime(timezone=True), nullable=True, index=True)
    checkin_by = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)

    # Relationships
    event = relationship("Event", back_populates="participants")


# Derived participant count, computed per query rather than stored
from app.models.event import Event  # noqa: E402

Event.participant_count = column_property(
    select(func.count(Participant.id))
    .where(Participant.event_id == Event.id)
    .correlate_except(Participant)
    .scalar_subquery()
)
