# File: app/api/v1/endpoints/checkin.py
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.user import User
from app.services.checkin_service import check_in
from app.services.image_storage import ImageStore
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/checkin", response_model=schemas.CheckInResponse)
def checkin_participant(
    checkin: schemas.CheckInRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    image_store: ImageStore = Depends(deps.get_image_store),
) -> Any:
    """Attach signature, photo, staff and note to a participant and mark them arrived."""
    participant = crud.participant.get_for_owner(db, id=checkin.participant_id, owner_id=current_user.id)
    if not participant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")

    if participant.checkin_at is not None:
        logger.info(f"Participant {participant.id} already checked in; overwriting previous check-in")

    checkin_by = (checkin.checkin_by or "").strip() or current_user.user_name
    success = check_in(
        db,
        image_store,
        participant_id=participant.id,
        signature=checkin.signature,
        photo=checkin.photo,
        checkin_by=checkin_by,
        note=checkin.note,
    )
    return {"success": success}
