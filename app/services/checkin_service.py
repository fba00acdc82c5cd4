import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app import crud
from app.models.participant import ImageStorageKind
from app.services.image_storage import ImageStore, upload_image

logger = logging.getLogger(__name__)


def store_or_inline(store: ImageStore, image_data: str, filename: str) -> Tuple[str, ImageStorageKind]:
    """Upload the image; if the store fails for any reason, keep the base64 payload on the row instead."""
    try:
        return upload_image(store, image_data, filename), ImageStorageKind.STORED
    except Exception as e:
        logger.warning(f"Image upload failed for {filename}, storing inline: {e}")
        return image_data, ImageStorageKind.INLINE


def check_in(
    db: Session,
    store: ImageStore,
    *,
    participant_id: int,
    signature: str,
    photo: str,
    checkin_by: str,
    note: Optional[str] = None,
) -> bool:
    """Record a participant's arrival.

    The two uploads are independent; the row itself changes in one UPDATE.
    A repeated check-in overwrites the previous one. Returns True only when
    exactly one row was updated and never raises.
    """
    try:
        logger.info(f"Starting check-in for participant {participant_id}")

        signature_value, signature_kind = store_or_inline(
            store, signature, f"signature-{participant_id}.png"
        )
        photo_value, photo_kind = store_or_inline(store, photo, f"photo-{participant_id}.jpg")

        affected = crud.participant.mark_checked_in(
            db,
            id=participant_id,
            values={
                "signature": signature_value,
                "signature_storage": signature_kind.value,
                "uploaded_image": photo_value,
                "uploaded_image_storage": photo_kind.value,
                "checkin_by": checkin_by,
                "note": note or "",
            },
        )
        if affected != 1:
            logger.warning(f"Check-in for participant {participant_id} updated {affected} rows")
        return affected == 1
    except Exception:
        db.rollback()
        logger.exception(f"Error checking in participant {participant_id}")
        return False
