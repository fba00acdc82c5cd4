from pydantic import BaseModel, model_validator
from typing import Any, List, Optional
from datetime import datetime
from app.models.participant import ImageStorageKind, Participant as ParticipantModel

ROSTER_COLUMNS = (
    "participant_id", "start_time", "bib_no", "id_card_passport", "last_name", "first_name",
    "tshirt_size", "birthday_year", "nationality", "phone", "email", "emergency_contact_name",
    "emergency_contact_phone", "blood_type", "medical_information", "medicines_using",
    "parent_full_name", "parent_date_of_birth", "parent_email", "parent_id_card_passport",
    "parent_relationship", "full_name", "name_on_bib",
)


class ParticipantFields(BaseModel):
    participant_id: str = ""
    start_time: str = ""
    bib_no: str = ""
    id_card_passport: str = ""
    last_name: str = ""
    first_name: str = ""
    tshirt_size: str = ""
    birthday_year: str = ""
    nationality: str = ""
    phone: str = ""
    email: str = ""
    emergency_contact_name: str = ""
    emergency_contact_phone: str = ""
    blood_type: str = ""
    medical_information: str = ""
    medicines_using: str = ""
    parent_full_name: str = ""
    parent_date_of_birth: str = ""
    parent_email: str = ""
    parent_id_card_passport: str = ""
    parent_relationship: str = ""
    full_name: str = ""
    name_on_bib: str = ""


class ParticipantRecord(ParticipantFields):
    """One roster row, ready for insertion."""

    @model_validator(mode="after")
    def default_display_names(self):
        display_name = f"{self.first_name} {self.last_name}".strip()
        if not self.full_name:
            self.full_name = display_name
        if not self.name_on_bib:
            self.name_on_bib = display_name
        return self


class ImageReference(BaseModel):
    kind: ImageStorageKind
    key: Optional[str] = None
    data: Optional[str] = None

    @classmethod
    def from_columns(cls, value: Optional[str], storage: Optional[str]) -> Optional["ImageReference"]:
        if not value or not storage:
            return None
        kind = ImageStorageKind(storage)
        if kind == ImageStorageKind.STORED:
            return cls(kind=kind, key=value)
        return cls(kind=kind, data=value)


class SearchResult(BaseModel):
    id: int
    bib_no: str
    first_name: str
    last_name: str
    phone: str
    email: str
    checkin_at: Optional[datetime] = None
    checkin_by: Optional[str] = None

    class Config:
        from_attributes = True


class Participant(ParticipantFields):
    id: int
    event_id: int
    signature: Optional[ImageReference] = None
    uploaded_image: Optional[ImageReference] = None
    checkin_at: Optional[datetime] = None
    checkin_by: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @model_validator(mode="before")
    @classmethod
    def tag_image_columns(cls, data: Any) -> Any:
        if not isinstance(data, ParticipantModel):
            return data
        values = {column.name: getattr(data, column.name) for column in data.__table__.columns}
        values["signature"] = ImageReference.from_columns(
            values.pop("signature"), values.pop("signature_storage")
        )
        values["uploaded_image"] = ImageReference.from_columns(
            values.pop("uploaded_image"), values.pop("uploaded_image_storage")
        )
        return values


class BulkInsertResult(BaseModel):
    success: bool
    inserted: int
    errors: List[str] = []
