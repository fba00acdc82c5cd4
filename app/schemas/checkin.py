from pydantic import BaseModel, field_validator
from typing import Optional


class CheckInRequest(BaseModel):
    participant_id: int
    signature: str  # base64 image data, data-URI prefix allowed
    photo: str
    checkin_by: Optional[str] = ""
    note: Optional[str] = None

    @field_validator("signature", "photo")
    @classmethod
    def must_not_be_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Please capture both photo and signature")
        return value


class CheckInResponse(BaseModel):
    success: bool
