from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class LoginRequest(BaseModel):
    user_name: str
    password: str


class UserPublic(BaseModel):
    id: int
    user_name: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    success: bool
    token: Optional[str] = None
    user: Optional[UserPublic] = None
