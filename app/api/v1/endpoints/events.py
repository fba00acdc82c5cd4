# File: app/api/v1/endpoints/events.py
from datetime import date
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.core.config import settings
from app.core.exceptions import RosterValidationError
from app.db.database import get_db
from app.models.event import Event
from app.models.user import User
from app.services import roster_import
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[schemas.Event])
def list_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Events owned by the caller, latest start date first."""
    return crud.event.get_by_owner(db, owner_id=current_user.id)


@router.post("", response_model=schemas.EventCreateResult)
def create_event(
    event_name: str = Form(...),
    event_start_date: date = Form(...),
    participants_file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Create an event and optionally seed it from a roster file (CSV or XLSX)."""
    if not event_name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="event_name is required")

    # Parse the whole roster before touching the database so an invalid file
    # leaves neither an event nor participants behind.
    rows = []
    has_roster = participants_file is not None and bool(participants_file.filename)
    if has_roster:
        content = participants_file.file.read()
        if len(content) > settings.MAX_ROSTER_FILE_SIZE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Roster file exceeds maximum allowed size of {settings.MAX_ROSTER_FILE_SIZE // (1024 * 1024)}MB",
            )
        try:
            rows = roster_import.parse_roster(content, participants_file.filename)
        except RosterValidationError as e:
            logger.info(f"Rejected roster {participants_file.filename}: {e.message}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Roster validation failed: {e.message}",
            )

    event = crud.event.create_with_owner(
        db,
        obj_in=schemas.EventCreate(event_name=event_name.strip(), event_start_date=event_start_date),
        owner_id=current_user.id,
    )
    logger.info(f"User {current_user.id} created event {event.id}")

    if not has_roster:
        return schemas.EventCreateResult(
            success=True, eventId=event.id, message="Event created successfully"
        )

    result = roster_import.insert_records(db, event_id=event.id, rows=rows)
    message = "Event created with participants imported successfully"
    if result.errors:
        message = f"Event created; {result.insertedCount} participants imported, {len(result.errors)} rows rejected"

    return schemas.EventCreateResult(
        success=True,
        eventId=event.id,
        message=message,
        insertedCount=result.insertedCount,
        errors=result.errors,
    )


@router.get("/{event_id}", response_model=schemas.Event)
def get_event(event: Event = Depends(deps.get_owned_event)) -> Any:
    return event
