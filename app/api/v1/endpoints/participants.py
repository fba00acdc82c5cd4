# File: app/api/v1/endpoints/participants.py
from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.event import Event

router = APIRouter()

# Literal routes are declared before /{participant_id} so "search" and
# "bib" are never captured as ids.


@router.get("/search", response_model=List[schemas.SearchResult])
def search_participants(
    q: str = Query("", description="Bib number, name, phone, email or ID card"),
    event: Event = Depends(deps.get_owned_event),
    db: Session = Depends(get_db),
) -> Any:
    return crud.participant.search(db, event_id=event.id, query=q)


@router.get("/bib/{bib_no}", response_model=schemas.Participant)
def get_participant_by_bib(
    bib_no: str,
    event: Event = Depends(deps.get_owned_event),
    db: Session = Depends(get_db),
) -> Any:
    participant = crud.participant.get_by_bib(db, event_id=event.id, bib_no=bib_no)
    if not participant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")
    return participant


@router.get("/{participant_id}", response_model=schemas.Participant)
def get_participant(
    participant_id: int,
    event: Event = Depends(deps.get_owned_event),
    db: Session = Depends(get_db),
) -> Any:
    # A participant from another event is reported as missing
    participant = crud.participant.get_in_event(db, id=participant_id, event_id=event.id)
    if not participant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")
    return participant
