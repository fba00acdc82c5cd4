from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
import logging

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.crud.base import CRUDBase
from app.models.event import Event
from app.models.participant import ImageStorageKind, Participant
from app.schemas.participant import BulkInsertResult, ParticipantRecord

logger = logging.getLogger(__name__)

SEARCHABLE_COLUMNS = (
    Participant.bib_no,
    Participant.first_name,
    Participant.last_name,
    Participant.phone,
    Participant.email,
    Participant.id_card_passport,
)


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CRUDParticipant(CRUDBase[Participant, ParticipantRecord, ParticipantRecord]):

    def search(
        self, db: Session, *, event_id: int, query: str = "", limit: Optional[int] = None
    ) -> List[Participant]:
        """Case-insensitive substring search inside one event, ordered by name."""
        if limit is None:
            limit = settings.SEARCH_PAGE_SIZE

        q = db.query(Participant).filter(Participant.event_id == event_id)
        query = (query or "").strip()
        if query:
            pattern = _like_pattern(query)
            q = q.filter(or_(*[column.ilike(pattern, escape="\\") for column in SEARCHABLE_COLUMNS]))

        return (
            q.order_by(Participant.last_name, Participant.first_name, Participant.id)
            .limit(limit)
            .all()
        )

    def get_in_event(self, db: Session, *, id: int, event_id: int) -> Optional[Participant]:
        return (
            db.query(Participant)
            .filter(Participant.id == id, Participant.event_id == event_id)
            .first()
        )

    def get_by_bib(self, db: Session, *, event_id: int, bib_no: str) -> Optional[Participant]:
        # Bibs are not unique; the earliest imported row wins
        return (
            db.query(Participant)
            .filter(Participant.event_id == event_id, Participant.bib_no == bib_no)
            .order_by(Participant.id)
            .first()
        )

    def get_for_owner(self, db: Session, *, id: int, owner_id: int) -> Optional[Participant]:
        return (
            db.query(Participant)
            .join(Event, Participant.event_id == Event.id)
            .filter(Participant.id == id, Event.owner_id == owner_id)
            .first()
        )

    def owns_image(self, db: Session, *, key: str, owner_id: int) -> bool:
        """True when a stored signature or photo with this key belongs to one of the owner's events."""
        stored = ImageStorageKind.STORED.value
        match = (
            db.query(Participant.id)
            .join(Event, Participant.event_id == Event.id)
            .filter(
                Event.owner_id == owner_id,
                or_(
                    and_(Participant.signature == key, Participant.signature_storage == stored),
                    and_(Participant.uploaded_image == key, Participant.uploaded_image_storage == stored),
                ),
            )
            .first()
        )
        return match is not None

    def bulk_insert(
        self,
        db: Session,
        *,
        event_id: int,
        records: List[ParticipantRecord],
        row_numbers: Optional[Sequence[int]] = None,
    ) -> BulkInsertResult:
        """Insert roster rows one savepoint at a time, collecting per-row failures.

        `row_numbers` are the source-file lines used in error messages; without
        them rows are numbered from 2, the first line after the header.
        """
        if row_numbers is None:
            row_numbers = range(2, len(records) + 2)

        inserted = 0
        errors: List[str] = []

        for row_number, record in zip(row_numbers, records):
            try:
                with db.begin_nested():
                    db.add(Participant(event_id=event_id, **record.model_dump()))
                inserted += 1
            except SQLAlchemyError as e:
                logger.warning(f"Roster row {row_number} rejected for event {event_id}: {e}")
                errors.append(f"Row {row_number}: could not insert participant with bib_no '{record.bib_no}'")

        db.commit()
        logger.info(f"Inserted {inserted} participants into event {event_id} ({len(errors)} rejected)")
        return BulkInsertResult(success=not errors, inserted=inserted, errors=errors)

    def mark_checked_in(self, db: Session, *, id: int, values: Dict[str, Any]) -> int:
        """Apply the check-in columns in a single UPDATE; returns rows affected."""
        now = datetime.now(timezone.utc)
        update_values = dict(values)
        update_values["checkin_at"] = now
        update_values["updated_at"] = now

        affected = (
            db.query(Participant)
            .filter(Participant.id == id)
            .update(update_values, synchronize_session=False)
        )
        db.commit()
        return affected

    def count_for_event(self, db: Session, *, event_id: int) -> int:
        return db.query(func.count(Participant.id)).filter(
            Participant.event_id == event_id
        ).scalar() or 0

    def count_checked_in(self, db: Session, *, event_id: int) -> int:
        return db.query(func.count(Participant.id)).filter(
            Participant.event_id == event_id,
            Participant.checkin_at.isnot(None),
        ).scalar() or 0

    def get_recent_checkins(self, db: Session, *, event_id: int, limit: int) -> List[Participant]:
        return (
            db.query(Participant)
            .filter(Participant.event_id == event_id, Participant.checkin_at.isnot(None))
            .order_by(Participant.checkin_at.desc(), Participant.id.desc())
            .limit(limit)
            .all()
        )


participant = CRUDParticipant(Participant)
